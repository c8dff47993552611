"""
pytest configuration and fixtures.

Author: HealthScore Team
Version: 1.0.0
"""

import copy

import pytest

from healthscore.schemas.config import ConfigBundle

from fixtures import RAW_BUNDLE, SAMPLE_CONFIGS_ROOT


@pytest.fixture
def raw_bundle():
    """Deep copy of the reference raw bundle, safe to mutate."""
    return copy.deepcopy(RAW_BUNDLE)


@pytest.fixture
def bundle(raw_bundle):
    """Validated reference bundle."""
    return ConfigBundle.from_dict(raw_bundle)


@pytest.fixture
def features_by_name(bundle):
    """Reference feature definitions keyed by name."""
    return {f.name: f for f in bundle.feature_definitions}


@pytest.fixture
def sample_root():
    """Directory holding the shipped sample macroarea bundles."""
    return SAMPLE_CONFIGS_ROOT

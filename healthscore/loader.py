"""
Macroarea Bundle Loader
=======================

Reads a macroarea rule bundle from disk:

    <configs_root>/<macroarea>/
        features.yaml
        scoring.yaml
        actions.yaml        (optional)
        mapping_form.yaml

YAML is read with YAML 1.2 boolean rules: only true/false are booleans,
so answer values such as `no`, `yes`, `on` or `off` stay strings, as rule
authors wrote them.

Author: HealthScore Team
Version: 1.0.0
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from healthscore.config import settings
from healthscore.logging import get_logger
from healthscore.schemas.config import ConfigBundle, ConfigError


logger = get_logger(__name__)


# section -> (file name, required)
BUNDLE_FILES = {
    "features": ("features.yaml", True),
    "scoring": ("scoring.yaml", True),
    "actions": ("actions.yaml", False),
    "mapping": ("mapping_form.yaml", True),
}

_BOOL_TAG = "tag:yaml.org,2002:bool"


class RuleYamlLoader(yaml.SafeLoader):
    """SafeLoader that resolves only true/false as booleans."""


RuleYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
RuleYamlLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def parse_yaml(text: str, section: str = "bundle") -> Any:
    """
    Parse one bundle document.

    Raises:
        ConfigError: If the text is not valid YAML
    """
    try:
        return yaml.load(text, Loader=RuleYamlLoader)
    except yaml.YAMLError as exc:
        raise ConfigError(section, f"invalid YAML: {exc}") from exc


def _resolve_root(root: Optional[Union[str, Path]]) -> Path:
    return Path(root) if root is not None else Path(settings.configs_root)


def list_macroareas(root: Optional[Union[str, Path]] = None) -> List[str]:
    """Names of the bundles available under the configs root."""
    base = _resolve_root(root)
    if not base.is_dir():
        return []
    return sorted(
        entry.name
        for entry in base.iterdir()
        if entry.is_dir() and (entry / BUNDLE_FILES["features"][0]).is_file()
    )


def load_macroarea(
    macroarea: str,
    root: Optional[Union[str, Path]] = None,
) -> ConfigBundle:
    """
    Load and validate the rule bundle of a macroarea.

    Args:
        macroarea: Bundle directory name (e.g. 'genetica_epigenetica_storiafamiliare')
        root: Directory holding the bundles; defaults to settings.configs_root

    Returns:
        Validated ConfigBundle

    Raises:
        ConfigError: If a required file is missing, unreadable or malformed
    """
    directory = _resolve_root(root) / macroarea
    if not directory.is_dir():
        raise ConfigError("bundle", f"macroarea directory not found: {directory}")

    raw: Dict[str, Any] = {}
    for section, (filename, required) in BUNDLE_FILES.items():
        path = directory / filename
        if not path.is_file():
            if required:
                raise ConfigError(section, f"missing file {path}")
            continue
        raw[section] = parse_yaml(path.read_text(encoding="utf-8"), section=section)

    bundle = ConfigBundle.from_dict(raw, macroarea=macroarea)

    logger.info(
        "bundle_loaded",
        macroarea=macroarea,
        features=len(bundle.feature_definitions),
        red_flag_rules=len(bundle.scoring.red_flags),
        mapped_fields=len(bundle.mapping.rules),
    )
    return bundle

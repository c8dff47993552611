"""
HealthScore Schemas Package
===========================

Rule bundle (input) and score result (output) models.

This package provides:
    - ConfigBundle: Validated macroarea rule bundle
    - ScoreResult: Engine output
    - LLMContext: Result reshaped for report generation

Author: HealthScore Team
Version: 1.0.0
"""

from healthscore.schemas.config import (
    ActionsConfig,
    AggregationConfig,
    ClassificationConfig,
    ConfigBundle,
    ConfigError,
    ExplanationsConfig,
    FeatureDefinition,
    FeaturesConfig,
    FeatureType,
    MappingConfig,
    MappingRule,
    RedFlagRule,
    ScoringConfig,
    load_bundle,
)

from healthscore.schemas.results import (
    Driver,
    LLMContext,
    LLMDriver,
    LLMRedFlag,
    RedFlag,
    RedFlagSource,
    RiskClass,
    ScoreResult,
)

__all__ = [
    # Input schema
    "ActionsConfig",
    "AggregationConfig",
    "ClassificationConfig",
    "ConfigBundle",
    "ConfigError",
    "ExplanationsConfig",
    "FeatureDefinition",
    "FeaturesConfig",
    "FeatureType",
    "MappingConfig",
    "MappingRule",
    "RedFlagRule",
    "ScoringConfig",
    "load_bundle",
    # Output schema
    "Driver",
    "LLMContext",
    "LLMDriver",
    "LLMRedFlag",
    "RedFlag",
    "RedFlagSource",
    "RiskClass",
    "ScoreResult",
]

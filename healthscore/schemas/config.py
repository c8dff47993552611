"""
Rule Bundle Schema
==================

Typed, validated representation of a macroarea rule bundle.

A bundle is authored as four documents:
    - features:  feature list with type, scores, caps and red-flag values
    - scoring:   aggregation, classification, red-flag rules, explanations
    - actions:   recommended actions per feature (optional)
    - mapping:   form field -> feature translation table

The shapes are the wire contract shared with rule authors and must not
drift. Validation happens once at load time; a structurally incomplete
bundle raises ConfigError and is never scored.

Author: HealthScore Team
Version: 1.0.0
"""

from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Dict, Mapping, Optional, Tuple

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationError,
    field_validator,
    model_validator,
)


class ConfigError(Exception):
    """A required rule bundle section is missing or malformed."""

    def __init__(self, section: str, message: str):
        self.section = section
        self.message = message
        super().__init__(f"Invalid configuration section '{section}': {message}")


class FeatureType(str, Enum):
    """Feature types understood by the feature scorer."""
    CATEGORICAL = "categorical"
    CATEGORICAL_MULTI = "categorical_multi"
    TEXT = "text"


# Config entities are immutable once loaded. Unknown keys (labels,
# descriptions, UI hints) are tolerated and dropped.
_BUNDLE_MODEL_CONFIG = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)


def _as_text(value: Any) -> str:
    """Render a YAML scalar the way it reads in the source document."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _text_keys(value: Any) -> Any:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return {_as_text(k): v for k, v in value.items()}
    return value


def freeze(value: Any) -> Any:
    """Read-only deep view: mappings become MappingProxyType, lists tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Fresh mutable deep copy of a frozen table (dicts and lists)."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(v) for v in value]
    return value


# Lookup tables are stored read-only once validated and dump as plain dicts.
ScoreTable = Annotated[Dict[str, float], AfterValidator(freeze), PlainSerializer(thaw)]
TextTable = Annotated[Dict[str, str], AfterValidator(freeze), PlainSerializer(thaw)]
ActionTable = Annotated[
    Dict[str, Dict[str, Any]], AfterValidator(freeze), PlainSerializer(thaw)
]


# =============================================================================
# Features
# =============================================================================


class FeatureDefinition(BaseModel):
    """
    One independently scored answer dimension.

    Attributes:
        name: Unique feature key
        type: categorical, categorical_multi or text; any other value
            is accepted and simply never scores
        map_to_score: value -> score, for categorical features
        per_item_score: item -> score, for categorical_multi features
        cap_score: Optional cap; negative acts as a floor, otherwise a ceiling
        red_flag_if_in: Values that raise a clinical red flag
    """

    model_config = _BUNDLE_MODEL_CONFIG

    name: str = Field(..., min_length=1)
    type: str
    map_to_score: ScoreTable = Field(default_factory=dict, validate_default=True)
    per_item_score: ScoreTable = Field(default_factory=dict, validate_default=True)
    cap_score: Optional[float] = None
    red_flag_if_in: Optional[Tuple[str, ...]] = None

    @field_validator("map_to_score", "per_item_score", mode="before")
    @classmethod
    def _normalize_score_keys(cls, value: Any) -> Any:
        return _text_keys(value)

    @field_validator("red_flag_if_in", mode="before")
    @classmethod
    def _normalize_red_flag_values(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, (list, tuple, set, frozenset)):
            return tuple(_as_text(v) for v in value)
        return (_as_text(value),)


class FeaturesConfig(BaseModel):
    """The `features` document: an ordered feature list."""

    model_config = _BUNDLE_MODEL_CONFIG

    features: Tuple[FeatureDefinition, ...]

    @model_validator(mode="after")
    def _check_unique_names(self) -> "FeaturesConfig":
        seen = set()
        for feature in self.features:
            if feature.name in seen:
                raise ValueError(f"duplicate feature name '{feature.name}'")
            seen.add(feature.name)
        return self


# =============================================================================
# Mapping
# =============================================================================


class MappingRule(BaseModel):
    """
    Translation of one form field into a feature value.

    A `feature` ending in "[]" is multi-valued (checkbox groups).
    """

    model_config = _BUNDLE_MODEL_CONFIG

    feature: str = Field(..., min_length=1)
    values: Optional[TextTable] = None
    passthrough: bool = False

    @field_validator("values", mode="before")
    @classmethod
    def _normalize_values(cls, value: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, Mapping):
            # a blank translation falls back to the raw answer
            return {
                _as_text(k): _as_text(v)
                for k, v in value.items()
                if v is not None and v != ""
            }
        return value

    @property
    def is_multi(self) -> bool:
        return self.feature.endswith("[]")

    @property
    def feature_name(self) -> str:
        return self.feature[:-2] if self.is_multi else self.feature


RuleTable = Annotated[
    Dict[str, MappingRule], AfterValidator(MappingProxyType), PlainSerializer(dict)
]


class MappingConfig(BaseModel):
    """The `mapping` document, keyed by form field name."""

    model_config = ConfigDict(
        frozen=True, extra="ignore", populate_by_name=True
    )

    rules: RuleTable = Field(..., alias="map")

    @field_validator("rules", mode="before")
    @classmethod
    def _normalize_field_keys(cls, value: Any) -> Any:
        return _text_keys(value)


# =============================================================================
# Scoring
# =============================================================================


class AggregationConfig(BaseModel):
    """Weighted sum settings."""

    model_config = _BUNDLE_MODEL_CONFIG

    weights: ScoreTable = Field(default_factory=dict, validate_default=True)
    cap_total: float = Field(default=100.0, gt=0)

    @field_validator("weights", mode="before")
    @classmethod
    def _normalize_weight_keys(cls, value: Any) -> Any:
        return _text_keys(value)

    def weight_for(self, feature: str) -> float:
        """Weight of a feature; features without an explicit weight count once."""
        return self.weights.get(feature, 1.0)


class LowBand(BaseModel):
    model_config = _BUNDLE_MODEL_CONFIG

    max: float = 40.0


class HighBand(BaseModel):
    model_config = _BUNDLE_MODEL_CONFIG

    min: float = 70.0


class ClassificationConfig(BaseModel):
    """
    Risk class thresholds on the 0-100 normalized risk.

    The bands may overlap or leave a gap; the classifier always checks
    `low` first.
    """

    model_config = _BUNDLE_MODEL_CONFIG

    low: LowBand = Field(default_factory=LowBand)
    high: HighBand = Field(default_factory=HighBand)


class RedFlagRule(BaseModel):
    """A rule-declared red flag: `<feature> in ['a', 'b']` -> action."""

    model_config = _BUNDLE_MODEL_CONFIG

    condition: str
    action: Optional[str] = None


class ExplanationsConfig(BaseModel):
    """Driver explanation and narrative settings."""

    model_config = _BUNDLE_MODEL_CONFIG

    driver_templates: TextTable = Field(default_factory=dict, validate_default=True)
    min_contribution_pct: float = 5.0
    top_k_drivers: int = Field(default=5, ge=0)
    overall_narratives: TextTable = Field(default_factory=dict, validate_default=True)

    @field_validator("driver_templates", "overall_narratives", mode="before")
    @classmethod
    def _normalize_template_keys(cls, value: Any) -> Any:
        return _text_keys(value)


class ScoringConfig(BaseModel):
    """The `scoring` document."""

    model_config = _BUNDLE_MODEL_CONFIG

    aggregation: AggregationConfig
    classification: ClassificationConfig
    red_flags: Tuple[RedFlagRule, ...]
    explanations: ExplanationsConfig = Field(default_factory=ExplanationsConfig)

    @field_validator("explanations", mode="before")
    @classmethod
    def _empty_explanations(cls, value: Any) -> Any:
        return {} if value is None else value


# =============================================================================
# Actions
# =============================================================================


class ActionsConfig(BaseModel):
    """The `actions` document: feature -> category -> recommended items."""

    model_config = _BUNDLE_MODEL_CONFIG

    actions: ActionTable = Field(default_factory=dict, validate_default=True)

    @field_validator("actions", mode="before")
    @classmethod
    def _normalize_action_keys(cls, value: Any) -> Any:
        return _text_keys(value)


# =============================================================================
# Bundle
# =============================================================================


def _require_mapping(raw: Mapping[str, Any], key: str, section: str) -> Mapping[str, Any]:
    if key not in raw or raw[key] is None:
        raise ConfigError(section, "section is missing")
    value = raw[key]
    if not isinstance(value, Mapping):
        raise ConfigError(section, f"expected a mapping, got {type(value).__name__}")
    return value


def _require_list(raw: Mapping[str, Any], key: str, section: str) -> None:
    if key not in raw or raw[key] is None:
        raise ConfigError(section, "section is missing")
    if not isinstance(raw[key], (list, tuple)):
        raise ConfigError(section, f"expected a list, got {type(raw[key]).__name__}")


def _check_sections(raw: Any) -> None:
    """Reject bundles whose structural sections are absent."""
    if not isinstance(raw, Mapping):
        raise ConfigError("bundle", f"expected a mapping, got {type(raw).__name__}")

    features = _require_mapping(raw, "features", "features")
    _require_list(features, "features", "features.features")

    scoring = _require_mapping(raw, "scoring", "scoring")
    _require_mapping(scoring, "aggregation", "scoring.aggregation")
    _require_mapping(scoring, "classification", "scoring.classification")
    _require_list(scoring, "red_flags", "scoring.red_flags")

    mapping = _require_mapping(raw, "mapping", "mapping")
    _require_mapping(mapping, "map", "mapping.map")

    actions = raw.get("actions")
    if actions is not None and not isinstance(actions, Mapping):
        raise ConfigError(
            "actions", f"expected a mapping, got {type(actions).__name__}"
        )


class ConfigBundle(BaseModel):
    """
    Complete, validated rule bundle for one macroarea.

    Usage:
        bundle = ConfigBundle.from_dict({
            "features": {...},
            "scoring": {...},
            "actions": {...},
            "mapping": {...},
        })
    """

    model_config = _BUNDLE_MODEL_CONFIG

    features: FeaturesConfig
    scoring: ScoringConfig
    actions: ActionsConfig = Field(default_factory=ActionsConfig)
    mapping: MappingConfig
    macroarea: Optional[str] = None

    @property
    def feature_definitions(self) -> Tuple[FeatureDefinition, ...]:
        return self.features.features

    @classmethod
    def from_dict(
        cls,
        raw: Mapping[str, Any],
        macroarea: Optional[str] = None,
    ) -> "ConfigBundle":
        """
        Validate a raw bundle.

        Args:
            raw: Mapping with features, scoring, actions and mapping documents
            macroarea: Optional macroarea name recorded on the bundle

        Returns:
            Immutable ConfigBundle

        Raises:
            ConfigError: If a section is missing or malformed
        """
        _check_sections(raw)

        payload = dict(raw)
        if payload.get("actions") is None:
            payload["actions"] = {}
        if macroarea is not None:
            payload["macroarea"] = macroarea

        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            error = exc.errors()[0]
            section = ".".join(str(part) for part in error["loc"]) or "bundle"
            raise ConfigError(section, error["msg"]) from exc


def load_bundle(raw: Mapping[str, Any], macroarea: Optional[str] = None) -> ConfigBundle:
    """Validate a raw rule bundle; see ConfigBundle.from_dict."""
    return ConfigBundle.from_dict(raw, macroarea=macroarea)

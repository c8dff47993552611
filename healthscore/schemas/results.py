"""
Score Result Schema
===================

Output contract of the scoring engine.

Results are immutable and serialise with camelCase keys
(`healthScore`, `riskClass`, `featureScores`, ...) because that is the
shape downstream collaborators (report generation, persistence, UI)
consume.

Author: HealthScore Team
Version: 1.0.0
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RiskClass(str, Enum):
    """Discretized normalized risk."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RedFlagSource(str, Enum):
    """Where a red flag was declared."""
    FEATURE_DEFINITION = "feature_definition"
    SCORING_RULES = "scoring_rules"


_RESULT_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class _ResultModel(BaseModel):
    model_config = _RESULT_MODEL_CONFIG

    def to_dict(self) -> Dict[str, Any]:
        """Serialise with wire (camelCase) keys."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Driver(_ResultModel):
    """A feature whose weighted contribution is significant."""
    feature: str
    score: float
    weight: float
    contribution: float
    explanation: str


class RedFlag(_ResultModel):
    """
    An answer pattern flagged for clinical escalation.

    Feature-declared flags carry `feature`/`value`; rule-declared flags
    carry `condition`/`action`.
    """
    source: RedFlagSource
    feature: Optional[str] = None
    value: Optional[Union[str, Tuple[str, ...]]] = None
    condition: Optional[str] = None
    action: Optional[str] = None


class ScoreResult(_ResultModel):
    """
    Complete scoring result for one questionnaire submission.

    Attributes:
        health_score: User-facing 0-10 score (10 = healthiest)
        risk_class: low / medium / high
        drivers: Significant contributing features, largest first
        red_flags: Feature-declared flags followed by rule-declared flags
        feature_scores: Score of every declared feature
        actions: Recommended actions for features that scored
        narrative: Overall narrative for the risk class
        total_score: Weighted sum before clamping
        normalized_risk: Clamped total on a 0-100 scale
        macroarea: Bundle the answers were scored against, if known
    """
    health_score: float = Field(..., ge=0.0, le=10.0)
    risk_class: RiskClass
    drivers: Tuple[Driver, ...] = ()
    red_flags: Tuple[RedFlag, ...] = ()
    feature_scores: Dict[str, float] = Field(default_factory=dict)
    actions: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    narrative: str = ""
    total_score: float = 0.0
    normalized_risk: float = Field(default=0.0, ge=0.0, le=100.0)
    macroarea: Optional[str] = None


class LLMDriver(_ResultModel):
    feature: str
    contribution: float
    explanation: str


class LLMRedFlag(_ResultModel):
    condition: str
    action: str


class LLMContext(_ResultModel):
    """Result reshaped for the external report-writing collaborator."""
    score: float
    risk_class: RiskClass
    narrative: str
    top_drivers: Tuple[LLMDriver, ...] = ()
    red_flags: Tuple[LLMRedFlag, ...] = ()
    actions: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    answers_context: Dict[str, Any] = Field(default_factory=dict)

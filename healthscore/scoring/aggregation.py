"""
Score Aggregation
=================

Weighted sum of feature scores, capping, normalization, risk
classification and the user-facing health score.

    total      = sum(score(f) * weight(f))       weight defaults to 1
    clamped    = clamp(total, 0, cap_total)
    risk       = clamped / cap_total * 100       in [0, 100]
    health     = round1(10 - risk / 10)          in [0, 10]

Author: HealthScore Team
Version: 1.0.0
"""

import math
from dataclasses import dataclass
from typing import Mapping

from healthscore.schemas.config import ClassificationConfig, ScoringConfig
from healthscore.schemas.results import RiskClass


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round1(value: float) -> float:
    """Round to one decimal, halves rounding up."""
    return math.floor(value * 10 + 0.5) / 10


@dataclass(frozen=True)
class Aggregate:
    """Aggregated scores for one submission."""
    total_score: float
    clamped_score: float
    normalized_risk: float
    risk_class: RiskClass
    health_score: float
    narrative: str


def classify_risk(normalized_risk: float, classification: ClassificationConfig) -> RiskClass:
    """
    Classify a 0-100 normalized risk.

    The low band is checked first (inclusive), then the high band
    (inclusive); anything else is medium. Overlapping bands resolve to low.
    """
    if normalized_risk <= classification.low.max:
        return RiskClass.LOW
    if normalized_risk >= classification.high.min:
        return RiskClass.HIGH
    return RiskClass.MEDIUM


def weighted_total(feature_scores: Mapping[str, float], scoring: ScoringConfig) -> float:
    """Sum of feature scores times their weights."""
    aggregation = scoring.aggregation
    return sum(
        score * aggregation.weight_for(feature)
        for feature, score in feature_scores.items()
    )


def aggregate(feature_scores: Mapping[str, float], scoring: ScoringConfig) -> Aggregate:
    """
    Aggregate feature scores into the overall risk and health scores.

    Args:
        feature_scores: Score of every declared feature
        scoring: Scoring document

    Returns:
        Aggregate with total, clamped, normalized risk, class and health score
    """
    cap_total = scoring.aggregation.cap_total

    total = weighted_total(feature_scores, scoring)
    clamped = clamp(total, 0.0, cap_total)
    normalized_risk = clamped / cap_total * 100

    risk_class = classify_risk(normalized_risk, scoring.classification)
    health_score = clamp(round1(10 - normalized_risk / 10), 0.0, 10.0)
    narrative = scoring.explanations.overall_narratives.get(risk_class.value, "")

    return Aggregate(
        total_score=total,
        clamped_score=clamped,
        normalized_risk=normalized_risk,
        risk_class=risk_class,
        health_score=health_score,
        narrative=narrative,
    )

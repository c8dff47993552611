"""
Feature Scorer
==============

Computes a numeric score per feature from its definition and the mapped
answer.

Scoring is lenient: unknown feature types, unmapped values and unknown
checkbox items all score 0 rather than failing the computation.

Author: HealthScore Team
Version: 1.0.0
"""

from typing import Any, Dict, Iterable, Mapping

from healthscore.schemas.config import FeatureDefinition, FeatureType
from healthscore.scoring.mapper import as_list, is_absent


# Selecting any of these in a checkbox group cancels every other item
# selected in the same group.
NEGATION_VALUES = frozenset({"nessuna", "nessuno", "nessuna_misura", "no"})


FeatureScoreMap = Dict[str, float]


def _score_multi(feature: FeatureDefinition, value: Any) -> float:
    items = as_list(value)

    if any(item in NEGATION_VALUES for item in items):
        return 0.0

    total = 0.0
    for item in items:
        total += feature.per_item_score.get(item, 0.0)

    if feature.cap_score is None:
        return total
    if feature.cap_score < 0:
        return max(feature.cap_score, total)
    return min(feature.cap_score, total)


def calculate_feature_score(feature: FeatureDefinition, value: Any) -> float:
    """
    Score one feature.

    Args:
        feature: Feature definition from the bundle
        value: Mapped answer (string, list of strings, or None)

    Returns:
        Feature score; 0 when unanswered or not scorable
    """
    if is_absent(value):
        return 0.0

    if feature.type == FeatureType.CATEGORICAL_MULTI:
        return _score_multi(feature, value)

    if feature.type == FeatureType.CATEGORICAL:
        if not isinstance(value, str):
            return 0.0
        return feature.map_to_score.get(value, 0.0)

    # text answers are context only; unknown types never score
    return 0.0


def score_features(
    mapped_answers: Mapping[str, Any],
    features: Iterable[FeatureDefinition],
) -> FeatureScoreMap:
    """
    Score every declared feature, in declaration order.

    Features that were never answered score 0.
    """
    return {
        feature.name: calculate_feature_score(feature, mapped_answers.get(feature.name))
        for feature in features
    }

"""
Driver Ranking
==============

Ranks the features that contribute most to a submission's risk and keeps
only the significant ones.

A driver survives when its share of the total absolute contribution
(taken over every nonzero feature, before filtering) reaches
`min_contribution_pct`; survivors are truncated to `top_k_drivers`.

Author: HealthScore Team
Version: 1.0.0
"""

from typing import List, Mapping, Tuple

from healthscore.schemas.config import AggregationConfig, ExplanationsConfig
from healthscore.schemas.results import Driver


DEFAULT_DRIVER_EXPLANATION = "Contributo da {feature}"


def identify_drivers(
    feature_scores: Mapping[str, float],
    weights: AggregationConfig,
    explanations: ExplanationsConfig,
) -> Tuple[Driver, ...]:
    """
    Identify the top drivers, largest absolute contribution first.

    Args:
        feature_scores: Score of every declared feature
        weights: Aggregation settings providing per-feature weights
        explanations: Explanation settings (templates, filter, top-k)

    Returns:
        At most `top_k_drivers` significant drivers
    """
    candidates: List[Driver] = []

    for feature, score in feature_scores.items():
        if score == 0:
            continue

        weight = weights.weight_for(feature)
        explanation = explanations.driver_templates.get(
            feature, DEFAULT_DRIVER_EXPLANATION.format(feature=feature)
        )
        candidates.append(
            Driver(
                feature=feature,
                score=score,
                weight=weight,
                contribution=score * weight,
                explanation=explanation,
            )
        )

    candidates.sort(key=lambda d: abs(d.contribution), reverse=True)

    total_contribution = sum(abs(d.contribution) for d in candidates)
    if total_contribution == 0:
        return ()

    significant = [
        d for d in candidates
        if abs(d.contribution) / total_contribution * 100 >= explanations.min_contribution_pct
    ]
    return tuple(significant[:explanations.top_k_drivers])

"""
HealthScore Scoring Engine
==========================

Composes the scoring pipeline for one questionnaire submission:

    raw answers --mapper--> mapped answers --scorer--> feature scores
    feature scores --> aggregate (total, clamp, class, health score)
    feature scores --> drivers
    mapped answers --> red flags
    feature scores --> recommended actions

Every call is a pure function of (raw answers, bundle): no I/O, no shared
mutable state, freshly allocated output.

Usage:
    from healthscore.loader import load_macroarea
    from healthscore.scoring.engine import compute_score, prepare_for_llm

    bundle = load_macroarea("genetica_epigenetica_storiafamiliare")
    result = compute_score({"fh_ipertensione": "si_dopo_40"}, bundle)
    print(result.health_score, result.risk_class)

Author: HealthScore Team
Version: 1.0.0
"""

import copy
from typing import Any, Dict, Mapping, Union

from structlog.contextvars import bound_contextvars

from healthscore.logging import get_logger
from healthscore.schemas.config import ActionsConfig, ConfigBundle, thaw
from healthscore.schemas.results import (
    LLMContext,
    LLMDriver,
    LLMRedFlag,
    ScoreResult,
)
from healthscore.scoring.aggregation import aggregate, round1
from healthscore.scoring.drivers import identify_drivers
from healthscore.scoring.features import score_features
from healthscore.scoring.mapper import map_answers_to_features
from healthscore.scoring.red_flags import identify_red_flags


logger = get_logger(__name__)


DEFAULT_RED_FLAG_ACTION = "Valutazione specialistica consigliata"


def resolve_actions(
    feature_scores: Mapping[str, float],
    actions: ActionsConfig,
) -> Dict[str, Dict[str, Any]]:
    """Recommended actions for every feature that scored."""
    return {
        feature: thaw(actions.actions[feature])
        for feature, score in feature_scores.items()
        if score != 0 and feature in actions.actions
    }


def compute_score(
    raw_answers: Mapping[str, Any],
    config: Union[ConfigBundle, Mapping[str, Any]],
) -> ScoreResult:
    """
    Score one questionnaire submission.

    Args:
        raw_answers: Form field -> string or list of strings
        config: Validated ConfigBundle, or a raw bundle dict with
            features, scoring, actions and mapping documents

    Returns:
        Immutable ScoreResult

    Raises:
        ConfigError: If a raw bundle is missing a required section
    """
    bundle = config if isinstance(config, ConfigBundle) else ConfigBundle.from_dict(config)
    raw_answers = raw_answers or {}

    # Warnings raised while scoring (e.g. unparseable red-flag rules) carry
    # the macroarea through merge_contextvars.
    with bound_contextvars(macroarea=bundle.macroarea):
        mapped = map_answers_to_features(raw_answers, bundle.mapping)
        feature_scores = score_features(mapped, bundle.feature_definitions)

        totals = aggregate(feature_scores, bundle.scoring)
        drivers = identify_drivers(
            feature_scores,
            bundle.scoring.aggregation,
            bundle.scoring.explanations,
        )
        red_flags = identify_red_flags(mapped, bundle.feature_definitions, bundle.scoring)
        actions = resolve_actions(feature_scores, bundle.actions)

        logger.debug(
            "score_computed",
            total_score=totals.total_score,
            normalized_risk=totals.normalized_risk,
            risk_class=totals.risk_class.value,
            red_flags=len(red_flags),
        )

    return ScoreResult(
        health_score=totals.health_score,
        risk_class=totals.risk_class,
        drivers=drivers,
        red_flags=red_flags,
        feature_scores=feature_scores,
        actions=actions,
        narrative=totals.narrative,
        total_score=totals.total_score,
        normalized_risk=totals.normalized_risk,
        macroarea=bundle.macroarea,
    )


def prepare_for_llm(result: ScoreResult, raw_answers: Mapping[str, Any]) -> LLMContext:
    """
    Reshape a score result for the external report-writing collaborator.

    Args:
        result: Output of compute_score
        raw_answers: Original form answers, passed along as context

    Returns:
        LLMContext; serialise with `.to_dict()` for the wire shape
    """
    return LLMContext(
        score=result.health_score,
        risk_class=result.risk_class,
        narrative=result.narrative,
        top_drivers=tuple(
            LLMDriver(
                feature=d.feature,
                contribution=round1(d.contribution),
                explanation=d.explanation,
            )
            for d in result.drivers
        ),
        red_flags=tuple(
            LLMRedFlag(
                condition=rf.condition or rf.feature or "",
                action=rf.action or DEFAULT_RED_FLAG_ACTION,
            )
            for rf in result.red_flags
        ),
        actions=copy.deepcopy(result.actions),
        answers_context=copy.deepcopy(dict(raw_answers or {})),
    )

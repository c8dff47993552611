"""
Red Flag Detector
=================

Collects answer patterns that call for clinical escalation from two
independent sources, in this fixed order:

    1. Feature-declared: `red_flag_if_in` on feature definitions
    2. Rule-declared: `scoring.red_flags` membership conditions

Flags are not deduplicated across sources; the same answer may
legitimately surface from both.

Author: HealthScore Team
Version: 1.0.0
"""

from typing import Any, Iterable, List, Mapping, Tuple

from healthscore.logging import get_logger
from healthscore.schemas.config import FeatureDefinition, ScoringConfig
from healthscore.schemas.results import RedFlag, RedFlagSource
from healthscore.scoring.conditions import evaluate_condition
from healthscore.scoring.mapper import as_list, is_absent


logger = get_logger(__name__)


def _feature_flags(
    mapped_answers: Mapping[str, Any],
    features: Iterable[FeatureDefinition],
) -> List[RedFlag]:
    flags: List[RedFlag] = []

    for feature in features:
        if not feature.red_flag_if_in:
            continue

        value = mapped_answers.get(feature.name)
        if is_absent(value):
            continue

        if any(item in feature.red_flag_if_in for item in as_list(value)):
            flags.append(
                RedFlag(
                    source=RedFlagSource.FEATURE_DEFINITION,
                    feature=feature.name,
                    value=tuple(value) if isinstance(value, list) else value,
                )
            )

    return flags


def _rule_flags(
    mapped_answers: Mapping[str, Any],
    scoring: ScoringConfig,
) -> List[RedFlag]:
    flags: List[RedFlag] = []

    for rule in scoring.red_flags:
        try:
            triggered = evaluate_condition(rule.condition, mapped_answers)
        except Exception as e:
            logger.warning(
                "red_flag_rule_failed",
                condition=rule.condition,
                error=str(e),
            )
            continue

        if triggered:
            flags.append(
                RedFlag(
                    source=RedFlagSource.SCORING_RULES,
                    condition=rule.condition,
                    action=rule.action,
                )
            )

    return flags


def identify_red_flags(
    mapped_answers: Mapping[str, Any],
    features: Iterable[FeatureDefinition],
    scoring: ScoringConfig,
) -> Tuple[RedFlag, ...]:
    """
    Identify red flags for a set of mapped answers.

    Args:
        mapped_answers: Feature name -> mapped value
        features: Feature definitions in declaration order
        scoring: Scoring document holding the red-flag rules

    Returns:
        Feature-declared flags followed by rule-declared flags
    """
    flags = _feature_flags(mapped_answers, features)
    flags.extend(_rule_flags(mapped_answers, scoring))
    return tuple(flags)

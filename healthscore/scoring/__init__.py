"""
HealthScore Scoring Package
===========================

Questionnaire scoring engine.

This package provides:
    - mapper: Raw answers -> feature values
    - features: Per-feature scores
    - conditions: Membership condition grammar for red-flag rules
    - red_flags: Feature- and rule-declared red flags
    - aggregation: Weighted total, capping, risk class, health score
    - drivers: Significant contributing features
    - engine: compute_score / prepare_for_llm entry points

Author: HealthScore Team
Version: 1.0.0
"""

from healthscore.scoring.conditions import (
    ConditionSyntaxError,
    evaluate_condition,
    parse_condition,
)
from healthscore.scoring.engine import compute_score, prepare_for_llm

__all__ = [
    "ConditionSyntaxError",
    "compute_score",
    "evaluate_condition",
    "parse_condition",
    "prepare_for_llm",
]

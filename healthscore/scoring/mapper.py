"""
Answer Mapper
=============

Translates raw form answers into canonical per-feature values using the
bundle's `mapping` document.

Only fields declared in the mapping are read; anything else in the raw
answers is ignored.

Author: HealthScore Team
Version: 1.0.0
"""

from typing import Any, Dict, List, Mapping, Union

from healthscore.schemas.config import MappingConfig


MappedAnswers = Dict[str, Union[str, List[str]]]


def is_absent(value: Any) -> bool:
    """True when an answer was not given (missing, None or empty string)."""
    return value is None or value == ""


def as_list(value: Any) -> List[Any]:
    """Coerce a scalar or sequence answer to a list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _strip_multi(key: str) -> str:
    return key[:-2] if key.endswith("[]") else key


def map_answers_to_features(
    raw_answers: Mapping[str, Any],
    mapping: MappingConfig,
) -> MappedAnswers:
    """
    Map raw form answers to feature values.

    Args:
        raw_answers: Form field -> string or list of strings
        mapping: Validated mapping document

    Returns:
        Freshly allocated feature name -> value map. Features whose
        field was not answered are left unset.
    """
    mapped: MappedAnswers = {}

    for form_key, rule in mapping.rules.items():
        feature_name = rule.feature_name
        raw_value = raw_answers.get(_strip_multi(form_key))

        if rule.passthrough:
            # Free text: stored for context, never translated or scored
            if raw_value is not None:
                mapped[feature_name] = raw_value
            continue

        if rule.is_multi:
            if is_absent(raw_value):
                continue
            translations = rule.values or {}
            mapped[feature_name] = [
                translations.get(item, item) for item in as_list(raw_value)
            ]
            continue

        raw_value = raw_answers.get(form_key)
        if is_absent(raw_value):
            continue
        if rule.values is not None and isinstance(raw_value, str):
            mapped[feature_name] = rule.values.get(raw_value, raw_value)
        else:
            mapped[feature_name] = raw_value

    return mapped

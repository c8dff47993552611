"""
Test Fixtures for Rule Bundles
==============================

Provides a compact reference bundle covering every feature type:
    - categorical with value translation (ipertensione)
    - capped categorical_multi (cardio, colesterolo)
    - red-flagged categorical (brca, weight 2)
    - negative-capped categorical_multi (prevenzione)
    - passthrough text (note)

plus a helper that builds flat bundles with given feature scores for
aggregation scenarios.

Author: HealthScore Team
Version: 1.0.0
"""

from pathlib import Path

from healthscore.schemas.config import ConfigBundle


SAMPLE_CONFIGS_ROOT = Path(__file__).resolve().parent.parent / "configs" / "macroaree"
SAMPLE_MACROAREA = "genetica_epigenetica_storiafamiliare"


# =============================================================================
# Reference bundle
# =============================================================================

RAW_BUNDLE = {
    "features": {
        "features": [
            {
                "name": "ipertensione",
                "type": "categorical",
                "map_to_score": {"no": 0, "dopo_40": 4, "prima_40": 8},
            },
            {
                "name": "cardio",
                "type": "categorical_multi",
                "per_item_score": {"infarto": 12, "ictus": 8, "aritmie": 4},
                "cap_score": 16,
            },
            {
                "name": "colesterolo",
                "type": "categorical_multi",
                "per_item_score": {"dopo_40": 1, "prima_40": 3},
                "cap_score": 3,
            },
            {
                "name": "brca",
                "type": "categorical",
                "map_to_score": {"no": 0, "nota": 15},
                "red_flag_if_in": ["nota"],
            },
            {
                "name": "prevenzione",
                "type": "categorical_multi",
                "per_item_score": {"screening": -4, "test_genetico": -3},
                "cap_score": -5,
            },
            {"name": "note", "type": "text"},
        ]
    },
    "scoring": {
        "aggregation": {"weights": {"brca": 2}, "cap_total": 100},
        "classification": {"low": {"max": 40}, "high": {"min": 70}},
        "red_flags": [
            {"condition": "brca in ['nota']", "action": "Consulenza genetica"},
            {"condition": "cardio in ['infarto', 'ictus']", "action": "Visita cardiologica"},
        ],
        "explanations": {
            "driver_templates": {"brca": "Predisposizione genetica"},
            "overall_narratives": {
                "low": "Rischio basso",
                "medium": "Rischio moderato",
                "high": "Rischio alto",
            },
        },
    },
    "actions": {
        "actions": {
            "ipertensione": {"followup": ["Misurare la pressione"]},
            "cardio": {"medical": ["Visita cardiologica"]},
            "colesterolo": {"followup": ["Profilo lipidico"]},
            "brca": {"medical": ["Consulenza genetica"]},
        }
    },
    "mapping": {
        "map": {
            "ipertensione": {
                "feature": "ipertensione",
                "values": {"si_dopo_40": "dopo_40", "si_prima_40": "prima_40"},
            },
            "cardio[]": {"feature": "cardio[]"},
            "colesterolo[]": {"feature": "colesterolo[]"},
            "brca": {"feature": "brca"},
            "prevenzione[]": {"feature": "prevenzione[]"},
            "note": {"feature": "note", "passthrough": True},
        }
    },
}


# =============================================================================
# Flat bundles
# =============================================================================


def make_flat_bundle(scores, scoring=None):
    """
    Build a bundle of categorical features all answered with "x".

    Answering `flat_answers(scores)` yields feature scores equal to
    `scores`, which keeps aggregation scenarios easy to read.
    """
    features = [
        {"name": name, "type": "categorical", "map_to_score": {"x": value}}
        for name, value in scores.items()
    ]
    scoring_doc = {
        "aggregation": {},
        "classification": {},
        "red_flags": [],
    }
    scoring_doc.update(scoring or {})
    return ConfigBundle.from_dict({
        "features": {"features": features},
        "scoring": scoring_doc,
        "mapping": {"map": {name: {"feature": name} for name in scores}},
    })


def flat_answers(scores):
    return {name: "x" for name in scores}

"""
Red Flag Detector Tests
=======================

Author: HealthScore Team
Version: 1.0.0
"""

from unittest.mock import patch

import pytest
from structlog.testing import capture_logs

from healthscore.schemas.config import ConfigBundle
from healthscore.schemas.results import RedFlagSource
from healthscore.scoring.red_flags import identify_red_flags


def detect(bundle, mapped):
    return identify_red_flags(mapped, bundle.feature_definitions, bundle.scoring)


class TestFeatureDeclared:

    def test_scalar_value(self, bundle):
        flags = detect(bundle, {"brca": "nota"})

        assert flags[0].source == RedFlagSource.FEATURE_DEFINITION
        assert flags[0].feature == "brca"
        assert flags[0].value == "nota"
        assert flags[0].condition is None

    def test_list_value_kept_whole(self, raw_bundle):
        raw_bundle["features"]["features"][1]["red_flag_if_in"] = ["infarto"]
        raw_bundle["scoring"]["red_flags"] = []
        bundle = ConfigBundle.from_dict(raw_bundle)

        flags = detect(bundle, {"cardio": ["aritmie", "infarto"]})

        assert len(flags) == 1
        assert flags[0].feature == "cardio"
        assert flags[0].value == ("aritmie", "infarto")

    def test_no_match(self, bundle):
        assert detect(bundle, {"brca": "no"}) == ()

    def test_feature_order(self, raw_bundle):
        raw_bundle["features"]["features"][0]["red_flag_if_in"] = ["prima_40"]
        raw_bundle["scoring"]["red_flags"] = []
        bundle = ConfigBundle.from_dict(raw_bundle)

        flags = detect(bundle, {"brca": "nota", "ipertensione": "prima_40"})

        assert [f.feature for f in flags] == ["ipertensione", "brca"]


class TestRuleDeclared:

    def test_rule_flag(self, bundle):
        flags = detect(bundle, {"cardio": ["ictus"]})

        assert len(flags) == 1
        assert flags[0].source == RedFlagSource.SCORING_RULES
        assert flags[0].condition == "cardio in ['infarto', 'ictus']"
        assert flags[0].action == "Visita cardiologica"
        assert flags[0].feature is None

    def test_rule_order(self, raw_bundle):
        raw_bundle["scoring"]["red_flags"].reverse()
        bundle = ConfigBundle.from_dict(raw_bundle)

        flags = detect(bundle, {"cardio": ["infarto"], "brca": "nota"})

        assert [f.condition for f in flags if f.source == RedFlagSource.SCORING_RULES] == [
            "cardio in ['infarto', 'ictus']",
            "brca in ['nota']",
        ]

    def test_malformed_rule_skipped(self, raw_bundle):
        raw_bundle["scoring"]["red_flags"].insert(
            0, {"condition": "cardio contains infarto", "action": "Mai emesso"}
        )
        bundle = ConfigBundle.from_dict(raw_bundle)

        flags = detect(bundle, {"cardio": ["infarto"]})

        assert [f.action for f in flags] == ["Visita cardiologica"]

    def test_evaluation_failure_skipped_and_logged(self, bundle):
        with patch(
            "healthscore.scoring.red_flags.evaluate_condition",
            side_effect=[RuntimeError("boom"), True],
        ), capture_logs() as logs:
            flags = detect(bundle, {})

        assert len(flags) == 1
        assert flags[0].condition == "cardio in ['infarto', 'ictus']"
        failures = [e for e in logs if e["event"] == "red_flag_rule_failed"]
        assert len(failures) == 1
        assert failures[0]["log_level"] == "warning"
        assert failures[0]["condition"] == "brca in ['nota']"


class TestMerge:

    def test_feature_flags_precede_rule_flags(self, bundle):
        flags = detect(bundle, {"cardio": ["infarto"], "brca": "nota"})

        assert [f.source for f in flags] == [
            RedFlagSource.FEATURE_DEFINITION,
            RedFlagSource.SCORING_RULES,
            RedFlagSource.SCORING_RULES,
        ]

    def test_no_deduplication_across_sources(self, bundle):
        flags = detect(bundle, {"brca": "nota"})

        assert len(flags) == 2
        assert flags[0].feature == "brca"
        assert flags[1].condition == "brca in ['nota']"

    @pytest.mark.parametrize("mapped", [{}, {"brca": ""}, {"note": "nota"}])
    def test_nothing_triggered(self, bundle, mapped):
        assert detect(bundle, mapped) == ()

    def test_serialized_shape(self, bundle):
        flags = detect(bundle, {"brca": "nota"})

        assert flags[0].to_dict() == {
            "source": "feature_definition",
            "feature": "brca",
            "value": "nota",
        }
        assert flags[1].to_dict() == {
            "source": "scoring_rules",
            "condition": "brca in ['nota']",
            "action": "Consulenza genetica",
        }

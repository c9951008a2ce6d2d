"""
Scoring core tests - catalog, aggregator, classifier and completion.
"""
import math

import pytest

from chanakya.exceptions import AmbiguousBandError, ScoreOutOfRangeError
from chanakya.scoring.aggregator import (
    category_score,
    category_scores,
    overall_score,
    overall_score_from_subcriteria,
    raw_value,
)
from chanakya.scoring.classifier import ScoreClassifier, classify, default_classifier
from chanakya.scoring.completion import category_completion, completed_keys, completion_percentage
from chanakya.scoring.criteria import (
    DEFAULT_CRITERIA,
    SCORING_SCALE,
    ScoreBand,
    all_score_keys,
    find_criterion,
    from_ten_point,
    validate_catalog,
    validate_scale,
)


def uniform(value):
    return {key: value for key in all_score_keys()}


# ===================== CATALOG =====================


class TestCatalog:

    def test_category_weights_sum_to_100(self):
        assert sum(c.weight for c in DEFAULT_CRITERIA) == 100

    def test_sub_weights_sum_to_category_weight(self):
        for c in DEFAULT_CRITERIA:
            assert math.isclose(sum(s.weight for s in c.sub_criteria), c.weight)

    def test_five_categories_of_three(self):
        assert [c.category for c in DEFAULT_CRITERIA] == [
            "quality", "cost", "leadTime", "reliability", "sustainability"
        ]
        assert all(len(c.sub_criteria) == 3 for c in DEFAULT_CRITERIA)
        assert len(set(all_score_keys())) == 15

    def test_find_criterion_by_id_tag_or_name(self):
        assert find_criterion("1").category == "quality"
        assert find_criterion("LEADTIME").category == "leadTime"
        assert find_criterion("reliability & trust").category == "reliability"
        assert find_criterion("bogus") is None

    def test_validate_catalog_rejects_bad_weights(self):
        broken = (DEFAULT_CRITERIA[0],)
        with pytest.raises(ValueError, match="sum to 25"):
            validate_catalog(broken)

    def test_from_ten_point(self):
        assert from_ten_point(8.5) == 85
        assert from_ten_point(0) == 0


# ===================== AGGREGATOR =====================


class TestAggregator:

    def test_all_zero_is_zero(self):
        assert overall_score(uniform(0)) == 0

    def test_all_hundred_is_hundred(self):
        assert overall_score(uniform(100)) == pytest.approx(100)

    def test_empty_mapping_is_zero_not_none(self):
        assert overall_score({}) == 0

    def test_missing_sub_criterion_counts_as_zero(self):
        quality = find_criterion("quality")
        raw = {"product_specifications_adherence": 90, "defect_rate_quality_control": 60}
        assert category_score(raw, quality) == pytest.approx(50)

    def test_weighted_overall(self):
        raw = {}
        for c, value in zip(DEFAULT_CRITERIA, [80, 60, 100, 40, 20]):
            raw.update({key: value for key in c.keys})
        # 80*.25 + 60*.2 + 100*.2 + 40*.2 + 20*.15
        assert overall_score(raw) == pytest.approx(63)

    def test_closed_form_agrees(self):
        raw = {key: (i * 7) % 101 for i, key in enumerate(all_score_keys())}
        assert overall_score_from_subcriteria(raw) == pytest.approx(overall_score(raw))

    def test_order_invariant_and_in_range(self):
        raw = {key: (i * 13) % 101 for i, key in enumerate(all_score_keys())}
        reordered = dict(reversed(list(raw.items())))
        assert overall_score(raw) == overall_score(reordered)
        assert 0 <= overall_score(raw) <= 100

    def test_no_clamping_of_out_of_range_input(self):
        assert overall_score(uniform(150)) == pytest.approx(150)

    def test_raw_value_tolerates_junk(self):
        assert raw_value({"a": None}, "a") == 0
        assert raw_value({"a": "abc"}, "a") == 0
        assert raw_value({"a": "42"}, "a") == 42
        assert raw_value({}, "a") == 0

    def test_category_scores_keyed_by_tag(self):
        scores = category_scores(uniform(70))
        assert list(scores) == ["quality", "cost", "leadTime", "reliability", "sustainability"]
        assert all(v == pytest.approx(70) for v in scores.values())


# ===================== CLASSIFIER =====================


class TestClassifier:

    def test_every_integer_matches_exactly_one_band(self):
        for v in range(0, 101):
            assert len(default_classifier.matching_bands(v)) == 1

    @pytest.mark.parametrize("value,code", [
        (89, "GOOD"),
        (90, "EXCELLENT"),
        (59, "UNACCEPTABLE"),
        (60, "NEEDS_IMPROVEMENT"),
        (0, "UNACCEPTABLE"),
        (100, "EXCELLENT"),
        (70, "SATISFACTORY"),
    ])
    def test_boundaries(self, value, code):
        assert classify(value).code == code

    def test_fractional_scores_use_lower_bound(self):
        assert classify(89.5).code == "GOOD"
        assert classify(59.99).code == "UNACCEPTABLE"

    @pytest.mark.parametrize("value", [-0.1, 100.01, float("nan")])
    def test_out_of_range_raises(self, value):
        with pytest.raises(ScoreOutOfRangeError):
            classify(value)

    def test_out_of_range_is_a_value_error(self):
        with pytest.raises(ValueError):
            classify(101)

    def test_overlapping_scale_rejected(self):
        scale = (
            ScoreBand("HIGH", "High", "", 50, 100),
            ScoreBand("LOW", "Low", "", 0, 50),
        )
        with pytest.raises(AmbiguousBandError, match="overlap"):
            ScoreClassifier(scale)

    def test_gapped_scale_rejected(self):
        scale = (
            ScoreBand("HIGH", "High", "", 60, 100),
            ScoreBand("LOW", "Low", "", 0, 50),
        )
        with pytest.raises(AmbiguousBandError, match="Gap"):
            validate_scale(scale)

    def test_scale_must_cover_zero_to_hundred(self):
        with pytest.raises(AmbiguousBandError):
            validate_scale((ScoreBand("ONLY", "Only", "", 10, 100),))
        with pytest.raises(AmbiguousBandError):
            validate_scale(())

    def test_classify_is_stable_under_reaggregation(self):
        raw = {key: 40 + i * 4 for i, key in enumerate(all_score_keys())}
        first = classify(overall_score(raw))
        second = classify(overall_score(dict(raw)))
        assert first == second

    def test_default_scale_order(self):
        assert [b.code for b in SCORING_SCALE] == [
            "EXCELLENT", "GOOD", "SATISFACTORY", "NEEDS_IMPROVEMENT", "UNACCEPTABLE"
        ]


# ===================== COMPLETION =====================


class TestCompletion:

    def test_nothing_scored(self):
        assert completion_percentage(uniform(0)) == 0
        assert completed_keys({}) == []

    def test_everything_scored(self):
        assert completion_percentage(uniform(1)) == 100

    def test_zero_counts_as_not_completed(self):
        raw = uniform(0)
        raw["product_specifications_adherence"] = 80
        raw["total_cost_ownership"] = 0
        raw["environmental_certifications"] = 55
        assert completed_keys(raw) == ["product_specifications_adherence", "environmental_certifications"]
        assert completion_percentage(raw) == pytest.approx(2 / 15 * 100)

    def test_category_completion(self):
        raw = {"ontime_delivery_performance": 70, "lead_time_competitiveness": 80}
        result = category_completion(raw)
        assert result["leadTime"] == pytest.approx(200 / 3)
        assert result["quality"] == 0

"""
Ranker / filter tests over plain in-memory supplier records.
"""
from types import SimpleNamespace

import pytest

from chanakya.scoring.criteria import all_score_keys, find_criterion
from chanakya.scoring.ranking import (
    SortState,
    SupplierFilter,
    filter_suppliers,
    in_tier,
    rank_badge,
    rank_suppliers,
    sort_suppliers,
)


def supplier(name, score, industry="Technology", status="active", **category_overrides):
    raw = {key: score for key in all_score_keys()}
    for tag, value in category_overrides.items():
        raw.update({key: value for key in find_criterion(tag).keys})
    return SimpleNamespace(name=name, industry=industry, status=status, raw_scores=raw)


def names(items):
    return [getattr(i, "supplier", i).name for i in items]


# ===================== SORTING =====================


class TestSorting:

    def test_stable_descending_by_score(self):
        a, b, c = supplier("A", 80), supplier("B", 80), supplier("C", 95)
        assert names(sort_suppliers([a, b, c])) == ["C", "A", "B"]

    def test_stable_ascending_by_score(self):
        a, b, c = supplier("A", 80), supplier("B", 80), supplier("C", 60)
        ordered = sort_suppliers([a, b, c], SortState(key="overall_score", descending=False))
        assert names(ordered) == ["C", "A", "B"]

    def test_sort_by_name_is_case_insensitive(self):
        items = [supplier("beta", 1), supplier("Alpha", 1), supplier("gamma", 1)]
        ordered = sort_suppliers(items, SortState(key="name", descending=False))
        assert names(ordered) == ["Alpha", "beta", "gamma"]

    def test_sort_by_industry(self):
        items = [
            supplier("A", 1, industry="Retail"),
            supplier("B", 1, industry="Energy"),
            supplier("C", 1, industry="Manufacturing"),
        ]
        ordered = sort_suppliers(items, SortState(key="industry", descending=True))
        assert names(ordered) == ["A", "C", "B"]

    def test_sort_by_category_mean(self):
        items = [
            supplier("A", 50, sustainability=40),
            supplier("B", 50, sustainability=90),
            supplier("C", 50, sustainability=70),
        ]
        assert names(sort_suppliers(items, SortState(key="sustainability"))) == ["B", "C", "A"]
        # Criterion id works as well as the tag
        assert names(sort_suppliers(items, SortState(key="5"))) == ["B", "C", "A"]

    def test_unknown_sort_key(self):
        with pytest.raises(ValueError, match="Unknown sort key"):
            sort_suppliers([supplier("A", 1)], SortState(key="shoe_size"))


class TestSortState:

    def test_default_is_overall_descending(self):
        state = SortState()
        assert state.key == "overall_score"
        assert state.descending is True

    def test_same_key_flips_direction(self):
        state = SortState().toggle("overall_score")
        assert state.descending is False
        assert state.toggle("overall_score").descending is True

    def test_new_key_starts_descending(self):
        state = SortState(key="name", descending=False).toggle("industry")
        assert state == SortState(key="industry", descending=True)


# ===================== FILTERING =====================


class TestFiltering:

    def setup_method(self):
        self.items = [
            supplier("Acme Parts", 85, industry="Manufacturing"),
            supplier("Bolt Logistics", 65, industry="Logistics"),
            supplier("Cobalt Tech", 92, industry="Technology", status="pending"),
            supplier("Delta Metals", 70, industry="Manufacturing", status="inactive"),
            supplier("Echo Foods", 100, industry="Food"),
        ]

    def test_empty_search_matches_all(self):
        assert len(filter_suppliers(self.items, SupplierFilter())) == 5
        assert len(filter_suppliers(self.items, None)) == 5

    def test_search_matches_name_or_industry(self):
        result = filter_suppliers(self.items, SupplierFilter(search="TECH"))
        assert names(result) == ["Cobalt Tech"]
        result = filter_suppliers(self.items, SupplierFilter(search="manufact"))
        assert names(result) == ["Acme Parts", "Delta Metals"]

    def test_status_and_range_compose(self):
        result = filter_suppliers(
            self.items, SupplierFilter(status="active", score_min=70, score_max=100)
        )
        assert names(result) == ["Acme Parts", "Echo Foods"]

    def test_range_is_inclusive(self):
        result = filter_suppliers(self.items, SupplierFilter(score_min=70, score_max=85))
        assert names(result) == ["Acme Parts", "Delta Metals"]

    def test_industry_exact_match(self):
        result = filter_suppliers(self.items, SupplierFilter(industry="Manufacturing"))
        assert names(result) == ["Acme Parts", "Delta Metals"]
        assert filter_suppliers(self.items, SupplierFilter(industry="Manufact")) == []

    def test_status_accepts_enum_values(self):
        from chanakya.models.supplier import SupplierStatus
        item = supplier("Enum Co", 50)
        item.status = SupplierStatus.PENDING
        assert filter_suppliers([item], SupplierFilter(status="pending")) == [item]


# ===================== RANKING =====================


class TestRanking:

    @pytest.mark.parametrize("position,badge", [
        (0, "1st"), (1, "2nd"), (2, "3rd"), (3, "top-5"), (4, "top-5"),
        (5, "top-10"), (9, "top-10"), (10, "other"),
    ])
    def test_badges(self, position, badge):
        assert rank_badge(position) == badge

    def test_tiers(self):
        assert in_tier(3, "top3") and not in_tier(4, "top3")
        assert in_tier(10, "top10") and not in_tier(11, "top10")
        assert in_tier(11, "bottom") and not in_tier(10, "bottom")
        with pytest.raises(ValueError):
            in_tier(1, "middle")

    def test_rank_follows_filtered_position(self):
        items = [supplier("Top", 99, status="inactive"), supplier("Second", 90), supplier("Third", 80)]
        ranked = rank_suppliers(items, SupplierFilter(status="active"))
        assert names(ranked) == ["Second", "Third"]
        assert ranked[0].rank == 1
        assert ranked[0].badge == "1st"

    def test_tier_filter_applies_after_ranking(self):
        items = [supplier(f"S{i:02d}", 100 - i) for i in range(12)]
        bottom = rank_suppliers(items, tier="bottom")
        assert names(bottom) == ["S10", "S11"]
        assert [r.rank for r in bottom] == [11, 12]
        assert all(r.badge == "other" for r in bottom)

        top3 = rank_suppliers(items, tier="top3")
        assert [r.rank for r in top3] == [1, 2, 3]

    def test_ranked_entries_carry_scores(self):
        ranked = rank_suppliers([supplier("A", 80, quality=100)])
        entry = ranked[0]
        assert entry.category_scores["quality"] == 100
        assert entry.overall_score == pytest.approx(85)
        assert entry.sort_value == entry.overall_score

    def test_unknown_tier(self):
        with pytest.raises(ValueError, match="Unknown rank tier"):
            rank_suppliers([supplier("A", 1)], tier="top7")

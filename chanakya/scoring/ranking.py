"""
Filtering, sorting and ranking of supplier collections for the comparison matrix.

Works on any object exposing ``name``, ``industry``, ``status`` and a
``raw_scores`` mapping (the ORM ``Supplier`` does). Overall scores are always
recomputed from ``raw_scores`` rather than read from a stored column.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Tuple

from chanakya.scoring.aggregator import category_score, overall_score
from chanakya.scoring.criteria import DEFAULT_CRITERIA, Criterion

ALL = "all"

SORT_OVERALL = "overall_score"
SORT_NAME = "name"
SORT_INDUSTRY = "industry"

RANK_TIERS = ("all", "top3", "top5", "top10", "bottom")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(getattr(value, "value", value))


@dataclass
class SupplierFilter:
    search: str = ""
    score_min: float = 0
    score_max: float = 100
    industry: str = ALL
    status: str = ALL

    def matches(self, supplier, criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA) -> bool:
        term = (self.search or "").strip().lower()
        if term:
            name = _text(supplier.name).lower()
            industry = _text(supplier.industry).lower()
            if term not in name and term not in industry:
                return False

        score = overall_score(supplier.raw_scores, criteria)
        if score < self.score_min or score > self.score_max:
            return False

        if self.industry and self.industry != ALL and _text(supplier.industry) != self.industry:
            return False

        if self.status and self.status != ALL and _text(supplier.status) != self.status:
            return False

        return True


@dataclass(frozen=True)
class SortState:
    """Active sort key and direction; a new key always starts descending"""
    key: str = SORT_OVERALL
    descending: bool = True

    def toggle(self, key: str) -> "SortState":
        if key == self.key:
            return SortState(key=key, descending=not self.descending)
        return SortState(key=key, descending=True)


@dataclass
class RankedSupplier:
    supplier: Any
    rank: int
    badge: str
    overall_score: float
    sort_value: Any = None
    category_scores: dict = field(default_factory=dict)


def sort_key_for(key: str, criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA) -> Callable[[Any], Any]:
    """Resolve a sort key name to a key function; unknown keys raise ValueError"""
    if key == SORT_OVERALL:
        return lambda s: overall_score(s.raw_scores, criteria)
    if key == SORT_NAME:
        return lambda s: _text(s.name).casefold()
    if key == SORT_INDUSTRY:
        return lambda s: _text(s.industry).casefold()

    for c in criteria:
        if key in (c.category, c.id):
            return lambda s, c=c: category_score(s.raw_scores, c)

    raise ValueError(f"Unknown sort key: {key}")


def filter_suppliers(
    suppliers: Iterable[Any],
    supplier_filter: Optional[SupplierFilter] = None,
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> List[Any]:
    if supplier_filter is None:
        return list(suppliers)
    return [s for s in suppliers if supplier_filter.matches(s, criteria)]


def sort_suppliers(
    suppliers: Iterable[Any],
    sort_state: SortState = SortState(),
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> List[Any]:
    # sorted() is stable in both directions, so ties keep input order
    return sorted(suppliers, key=sort_key_for(sort_state.key, criteria), reverse=sort_state.descending)


def rank_badge(position: int) -> str:
    """Badge for a zero-based position in the displayed (filtered, sorted) list"""
    if position == 0:
        return "1st"
    if position == 1:
        return "2nd"
    if position == 2:
        return "3rd"
    if position < 5:
        return "top-5"
    if position < 10:
        return "top-10"
    return "other"


def in_tier(rank: int, tier: str) -> bool:
    if tier == "all":
        return True
    if tier == "top3":
        return rank <= 3
    if tier == "top5":
        return rank <= 5
    if tier == "top10":
        return rank <= 10
    if tier == "bottom":
        return rank > 10
    raise ValueError(f"Unknown rank tier: {tier}")


def rank_suppliers(
    suppliers: Iterable[Any],
    supplier_filter: Optional[SupplierFilter] = None,
    sort_state: SortState = SortState(),
    tier: str = "all",
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> List[RankedSupplier]:
    """
    Filter, sort, assign ranks by displayed position, then apply the rank tier.

    Ranks are fixed before the tier filter runs, so a tier never changes who is #1.
    """
    if tier not in RANK_TIERS:
        raise ValueError(f"Unknown rank tier: {tier}")

    key_fn = sort_key_for(sort_state.key, criteria)
    ordered = sort_suppliers(filter_suppliers(suppliers, supplier_filter, criteria), sort_state, criteria)

    ranked = [
        RankedSupplier(
            supplier=s,
            rank=position + 1,
            badge=rank_badge(position),
            overall_score=overall_score(s.raw_scores, criteria),
            sort_value=key_fn(s),
            category_scores={c.category: category_score(s.raw_scores, c) for c in criteria},
        )
        for position, s in enumerate(ordered)
    ]
    return [entry for entry in ranked if in_tier(entry.rank, tier)]

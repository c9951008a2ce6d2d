"""
Weighted multi-criteria aggregation.

Category score = mean of its three sub-criteria (missing counts as 0).
Overall score = sum of category score x category weight / 100.
No clamping: out-of-range inputs are the caller's responsibility.
"""
from typing import Any, Dict, Mapping, Optional, Tuple

from chanakya.scoring.criteria import DEFAULT_CRITERIA, Criterion


def raw_value(raw_scores: Mapping[str, Any], key: str) -> float:
    """Numeric value of one sub-criterion; None, absent and unparsable read as 0"""
    value = raw_scores.get(key)
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def category_score(raw_scores: Mapping[str, Any], criterion: Criterion) -> float:
    values = [raw_value(raw_scores, key) for key in criterion.keys]
    if not values:
        return 0.0
    return sum(values) / len(values)


def category_scores(
    raw_scores: Mapping[str, Any],
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> Dict[str, float]:
    """Category mean keyed by category tag, in catalog order"""
    return {c.category: category_score(raw_scores, c) for c in criteria}


def overall_score(
    raw_scores: Mapping[str, Any],
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> float:
    return sum(category_score(raw_scores, c) * c.weight / 100 for c in criteria)


def overall_score_from_subcriteria(
    raw_scores: Mapping[str, Any],
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> float:
    """Closed form over sub-criterion weights; agrees with overall_score"""
    return sum(
        raw_value(raw_scores, sub.key) * sub.weight / 100
        for c in criteria
        for sub in c.sub_criteria
    )


def criterion_sort_value(
    raw_scores: Mapping[str, Any],
    category: str,
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> Optional[float]:
    for c in criteria:
        if c.category == category:
            return category_score(raw_scores, c)
    return None

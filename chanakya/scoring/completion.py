"""
Score-presence tracking.

A sub-criterion counts as completed only when its stored value is strictly
greater than 0. A deliberately zero score is indistinguishable from one that
was never recorded; the schema has no per-criterion presence flag.
"""
from typing import Any, Dict, Mapping, Tuple

from chanakya.scoring.aggregator import raw_value
from chanakya.scoring.criteria import DEFAULT_CRITERIA, Criterion, all_score_keys


def completed_keys(
    raw_scores: Mapping[str, Any],
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> list[str]:
    return [key for key in all_score_keys(criteria) if raw_value(raw_scores, key) > 0]


def completion_percentage(
    raw_scores: Mapping[str, Any],
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> float:
    keys = all_score_keys(criteria)
    if not keys:
        return 0.0
    return len(completed_keys(raw_scores, criteria)) / len(keys) * 100


def category_completion(
    raw_scores: Mapping[str, Any],
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> Dict[str, float]:
    """Completion percentage per category tag"""
    result = {}
    for c in criteria:
        done = sum(1 for key in c.keys if raw_value(raw_scores, key) > 0)
        result[c.category] = done / len(c.keys) * 100 if c.keys else 0.0
    return result

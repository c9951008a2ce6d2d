"""
Aggregate analytics over an already-fetched supplier collection
"""
import math
from collections import OrderedDict
from typing import Any, Dict, List, Sequence, Tuple

from chanakya.scoring.aggregator import category_score, overall_score
from chanakya.scoring.classifier import default_classifier
from chanakya.scoring.criteria import DEFAULT_CRITERIA, Criterion, SCORING_SCALE
from chanakya.scoring.ranking import SortState, sort_suppliers
from chanakya.utils.validators import SUPPLIER_STATUSES


def _status(supplier) -> str:
    return str(getattr(supplier.status, "value", supplier.status) or "unknown")


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def score_distribution(suppliers: Sequence[Any]) -> List[Dict[str, Any]]:
    """Supplier count per performance band, highest band first"""
    counts = OrderedDict((band.code, 0) for band in SCORING_SCALE)
    for s in suppliers:
        band = default_classifier.classify(min(max(overall_score(s.raw_scores), 0), 100))
        counts[band.code] += 1

    result = []
    for band in SCORING_SCALE:
        range_name = f"{band.range_min}-{band.range_max}" if band.range_min > 0 else f"<{band.range_max + 1}"
        result.append({
            "band": band.code,
            "label": band.label,
            "range": range_name,
            "count": counts[band.code],
        })
    return result


def industry_breakdown(suppliers: Sequence[Any]) -> List[Dict[str, Any]]:
    """Count, average score and best supplier per industry, largest industry first"""
    groups: Dict[str, List[Any]] = OrderedDict()
    for s in suppliers:
        groups.setdefault(s.industry or "Unknown", []).append(s)

    result = []
    for industry, members in groups.items():
        scores = [overall_score(m.raw_scores) for m in members]
        best = sort_suppliers(members, SortState())[0]
        result.append({
            "industry": industry,
            "count": len(members),
            "average_score": _mean(scores),
            "top_supplier": best.name,
            "top_score": overall_score(best.raw_scores),
        })
    return sorted(result, key=lambda r: r["count"], reverse=True)


def category_averages(
    suppliers: Sequence[Any],
    criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA,
) -> List[Dict[str, Any]]:
    return [
        {
            "category": c.category,
            "name": c.name,
            "weight": c.weight,
            "average_score": _mean([category_score(s.raw_scores, c) for s in suppliers]),
        }
        for c in criteria
    ]


def status_counts(suppliers: Sequence[Any]) -> Dict[str, int]:
    counts = {status: 0 for status in SUPPLIER_STATUSES}
    for s in suppliers:
        status = _status(s)
        counts[status] = counts.get(status, 0) + 1
    return counts


def performance_trend(suppliers: Sequence[Any]) -> List[Dict[str, Any]]:
    """Scored suppliers in order of registration"""
    scored = [s for s in suppliers if overall_score(s.raw_scores) > 0]
    scored.sort(key=lambda s: s.created_at)
    return [
        {
            "supplier_id": s.id,
            "name": s.name,
            "created_at": s.created_at.isoformat() if s.created_at else None,
            "overall_score": overall_score(s.raw_scores),
        }
        for s in scored
    ]


def top_performers(suppliers: Sequence[Any], fraction: float = 0.1) -> List[Any]:
    """
    The best ceil(n * fraction) suppliers among those with a non-zero score.
    """
    count = math.ceil(len(suppliers) * fraction)
    scored = [s for s in suppliers if overall_score(s.raw_scores) > 0]
    return sort_suppliers(scored, SortState())[:count]


def build_summary(suppliers: Sequence[Any], top_fraction: float = 0.1) -> Dict[str, Any]:
    scores = [overall_score(s.raw_scores) for s in suppliers]
    return {
        "total_suppliers": len(suppliers),
        "status_counts": status_counts(suppliers),
        "average_score": _mean(scores),
        "score_distribution": score_distribution(suppliers),
        "industries": industry_breakdown(suppliers),
        "category_averages": category_averages(suppliers),
        "performance_trend": performance_trend(suppliers),
        "top_performers": [
            {"supplier_id": s.id, "name": s.name, "overall_score": overall_score(s.raw_scores)}
            for s in top_performers(suppliers, top_fraction)
        ],
    }

"""
Evaluation criteria catalog and performance scoring scale.

Five weighted categories, each split into three sub-criteria whose keys match
the flat score columns on the ``suppliers`` table. Category weights sum to 100;
sub-criterion weights are an even split of their parent's weight, so the
weighted sum over all fifteen sub-criteria equals the weighted sum of the
category means.

The catalog and the scale are validated when this module is imported.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from chanakya.exceptions import AmbiguousBandError

SCALE_MIN = 0
SCALE_MAX = 100


@dataclass(frozen=True)
class SubCriterion:
    key: str
    name: str
    description: str
    weight: float


@dataclass(frozen=True)
class Criterion:
    id: str
    name: str
    description: str
    weight: float
    category: str
    sub_criteria: Tuple[SubCriterion, ...] = field(default_factory=tuple)

    @property
    def keys(self) -> List[str]:
        return [sub.key for sub in self.sub_criteria]


@dataclass(frozen=True)
class ScoreBand:
    code: str
    label: str
    description: str
    range_min: int
    range_max: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "code": self.code,
            "label": self.label,
            "description": self.description,
            "range_min": self.range_min,
            "range_max": self.range_max,
        }


def _criterion(
    id: str,
    name: str,
    description: str,
    weight: float,
    category: str,
    subs: List[Tuple[str, str, str]],
) -> Criterion:
    share = weight / len(subs)
    return Criterion(
        id=id,
        name=name,
        description=description,
        weight=weight,
        category=category,
        sub_criteria=tuple(SubCriterion(key, label, desc, share) for key, label, desc in subs),
    )


DEFAULT_CRITERIA: Tuple[Criterion, ...] = (
    _criterion("1", "Product Quality", "Quality of products and services delivered", 25, "quality", [
        ("product_specifications_adherence", "Product Specifications Adherence",
         "Compliance with technical specifications"),
        ("defect_rate_quality_control", "Defect Rate & Quality Control",
         "Quality control processes and defect rates"),
        ("quality_certification_score", "Quality Certifications",
         "ISO 9001 and other quality certifications"),
    ]),
    _criterion("2", "Cost Competitiveness", "Pricing and overall cost effectiveness", 20, "cost", [
        ("unit_pricing_competitiveness", "Unit Pricing Competitiveness",
         "Competitive pricing compared to market"),
        ("payment_terms_flexibility", "Payment Terms Flexibility",
         "Flexible payment terms and conditions"),
        ("total_cost_ownership", "Total Cost of Ownership",
         "Complete cost including maintenance and support"),
    ]),
    _criterion("3", "Lead Time Performance", "Ability to meet delivery schedules", 20, "leadTime", [
        ("ontime_delivery_performance", "On-time Delivery Performance",
         "Historical on-time delivery record"),
        ("lead_time_competitiveness", "Lead Time Competitiveness",
         "Competitive delivery timeframes"),
        ("emergency_response_capability", "Emergency Response Capability",
         "Ability to handle urgent requests"),
    ]),
    _criterion("4", "Reliability & Trust", "Consistency and trustworthiness in business dealings", 20, "reliability", [
        ("communication_effectiveness", "Communication Effectiveness",
         "Clear and responsive communication"),
        ("contract_compliance_history", "Contract Compliance History",
         "Track record of meeting contractual obligations"),
        ("business_stability_longevity", "Business Stability & Longevity",
         "Financial stability and business history"),
    ]),
    _criterion("5", "Sustainability Practices", "Environmental and social responsibility", 15, "sustainability", [
        ("environmental_certifications", "Environmental Certifications",
         "ISO 14001 and environmental certifications"),
        ("social_responsibility_programs", "Social Responsibility Programs",
         "CSR initiatives and programs"),
        ("sustainable_sourcing_practices", "Sustainable Sourcing Practices",
         "Sustainable material sourcing"),
    ]),
)

# Ordered highest band first
SCORING_SCALE: Tuple[ScoreBand, ...] = (
    ScoreBand("EXCELLENT", "Excellent", "Exceeds expectations consistently", 90, 100),
    ScoreBand("GOOD", "Good", "Meets expectations with minor gaps", 80, 89),
    ScoreBand("SATISFACTORY", "Satisfactory", "Meets minimum expectations", 70, 79),
    ScoreBand("NEEDS_IMPROVEMENT", "Needs Improvement", "Below expectations, improvement plan required", 60, 69),
    ScoreBand("UNACCEPTABLE", "Unacceptable", "Does not meet requirements", 0, 59),
)


def all_score_keys(criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA) -> List[str]:
    """All sub-criterion keys in catalog order"""
    return [key for criterion in criteria for key in criterion.keys]


def find_criterion(token: str, criteria: Tuple[Criterion, ...] = DEFAULT_CRITERIA) -> Optional[Criterion]:
    """Look up a category by id, category tag or name (case-insensitive)"""
    needle = token.strip().lower()
    for criterion in criteria:
        if needle in (criterion.id, criterion.category.lower(), criterion.name.lower()):
            return criterion
    return None


def from_ten_point(value: float) -> float:
    """Convert a legacy 0-10 sub-criterion score to the canonical 0-100 scale"""
    return value * 10


def validate_catalog(criteria: Tuple[Criterion, ...]) -> None:
    """Check weight closure: categories sum to 100, subs sum to their parent"""
    total = sum(c.weight for c in criteria)
    if not math.isclose(total, 100, abs_tol=1e-9):
        raise ValueError(f"Category weights sum to {total}, expected 100")

    seen = set()
    for criterion in criteria:
        sub_total = sum(sub.weight for sub in criterion.sub_criteria)
        if not math.isclose(sub_total, criterion.weight, abs_tol=1e-9):
            raise ValueError(
                f"Sub-criteria of {criterion.name} sum to {sub_total}, expected {criterion.weight}"
            )
        for key in criterion.keys:
            if key in seen:
                raise ValueError(f"Duplicate sub-criterion key: {key}")
            seen.add(key)


def validate_scale(scale: Tuple[ScoreBand, ...]) -> None:
    """
    Bands must be contiguous integer ranges covering 0-100 with no overlap.
    """
    if not scale:
        raise AmbiguousBandError("Scoring scale has no bands")

    ordered = sorted(scale, key=lambda b: b.range_min)
    if ordered[0].range_min != SCALE_MIN:
        raise AmbiguousBandError(f"Lowest band starts at {ordered[0].range_min}, expected {SCALE_MIN}")
    if ordered[-1].range_max != SCALE_MAX:
        raise AmbiguousBandError(f"Highest band ends at {ordered[-1].range_max}, expected {SCALE_MAX}")

    for band in ordered:
        if band.range_min > band.range_max:
            raise AmbiguousBandError(f"Band {band.code} has min above max")

    for lower, upper in zip(ordered, ordered[1:]):
        if upper.range_min <= lower.range_max:
            raise AmbiguousBandError(f"Bands {lower.code} and {upper.code} overlap")
        if upper.range_min != lower.range_max + 1:
            raise AmbiguousBandError(f"Gap between bands {lower.code} and {upper.code}")


validate_catalog(DEFAULT_CRITERIA)
validate_scale(SCORING_SCALE)

"""
Request and response models shared by the supplier routers
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel


class ScoreFields(BaseModel):
    # Product Quality
    product_specifications_adherence: Optional[float] = None
    defect_rate_quality_control: Optional[float] = None
    quality_certification_score: Optional[float] = None
    # Cost Competitiveness
    unit_pricing_competitiveness: Optional[float] = None
    payment_terms_flexibility: Optional[float] = None
    total_cost_ownership: Optional[float] = None
    # Lead Time Performance
    ontime_delivery_performance: Optional[float] = None
    lead_time_competitiveness: Optional[float] = None
    emergency_response_capability: Optional[float] = None
    # Reliability & Trust
    communication_effectiveness: Optional[float] = None
    contract_compliance_history: Optional[float] = None
    business_stability_longevity: Optional[float] = None
    # Sustainability Practices
    environmental_certifications: Optional[float] = None
    social_responsibility_programs: Optional[float] = None
    sustainable_sourcing_practices: Optional[float] = None


class SupplierCreate(ScoreFields):
    # Required fields default to blank so validation can report them together
    name: str = ""
    contact_person: str = ""
    email: str = ""
    phone: str = ""
    industry: str = ""
    description: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    established_year: Optional[int] = None
    certifications: List[str] = []
    status: Optional[str] = None


class SupplierUpdate(ScoreFields):
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    industry: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    established_year: Optional[int] = None
    certifications: Optional[List[str]] = None
    status: Optional[str] = None


class SupplierResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    contact_person: str
    email: str
    phone: str
    address: Optional[str]
    website: Optional[str]
    industry: str
    established_year: Optional[int]
    certifications: List[str]
    status: str
    overall_score: float
    scores: Dict[str, float]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_model(cls, supplier) -> "SupplierResponse":
        return cls(
            id=supplier.id,
            name=supplier.name,
            description=supplier.description,
            contact_person=supplier.contact_person,
            email=supplier.email,
            phone=supplier.phone,
            address=supplier.address,
            website=supplier.website,
            industry=supplier.industry,
            established_year=supplier.established_year,
            certifications=list(supplier.certifications or []),
            status=getattr(supplier.status, "value", supplier.status),
            overall_score=supplier.overall_score or 0.0,
            scores={key: float(value) for key, value in supplier.raw_scores.items()},
            created_at=supplier.created_at,
            updated_at=supplier.updated_at,
        )


class BandResponse(BaseModel):
    code: str
    label: str
    description: str
    range_min: int
    range_max: int


class MatrixRow(BaseModel):
    rank: int
    badge: str
    overall_score: float
    band: BandResponse
    category_scores: Dict[str, float]
    supplier: SupplierResponse


class EvaluationResponse(BaseModel):
    supplier_id: int
    overall_score: float
    band: BandResponse
    category_scores: Dict[str, float]
    category_bands: Dict[str, BandResponse]
    completion_percentage: float
    category_completion: Dict[str, float]
    completed_criteria: List[str]


class ScoreSubmission(BaseModel):
    scores: Dict[str, float]
    scale: str = "hundred"
    evaluated_by: Optional[str] = None
    comments: Optional[str] = None


class ScoreRecordResponse(BaseModel):
    id: int
    supplier_id: int
    criterion_key: str
    score: float
    comments: Optional[str]
    evaluated_by: Optional[str]
    evaluated_at: Optional[datetime]

    class Config:
        from_attributes = True


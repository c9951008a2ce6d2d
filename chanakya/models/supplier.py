"""
Supplier model
"""
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from chanakya.database import Base
from chanakya.scoring.aggregator import overall_score
from chanakya.scoring.criteria import all_score_keys
from chanakya.utils.helpers import utcnow
from enum import Enum


class SupplierStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    REJECTED = "rejected"


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    contact_person = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=True)
    website = Column(String, nullable=True)
    industry = Column(String, nullable=False, index=True)
    established_year = Column(Integer, nullable=True)
    certifications = Column(JSON, default=list)

    status = Column(
        SQLEnum(SupplierStatus, native_enum=False),
        nullable=False,
        default=SupplierStatus.PENDING,
    )

    # Product Quality (0-100)
    product_specifications_adherence = Column(Float, default=0)
    defect_rate_quality_control = Column(Float, default=0)
    quality_certification_score = Column(Float, default=0)

    # Cost Competitiveness
    unit_pricing_competitiveness = Column(Float, default=0)
    payment_terms_flexibility = Column(Float, default=0)
    total_cost_ownership = Column(Float, default=0)

    # Lead Time Performance
    ontime_delivery_performance = Column(Float, default=0)
    lead_time_competitiveness = Column(Float, default=0)
    emergency_response_capability = Column(Float, default=0)

    # Reliability & Trust
    communication_effectiveness = Column(Float, default=0)
    contract_compliance_history = Column(Float, default=0)
    business_stability_longevity = Column(Float, default=0)

    # Sustainability Practices
    environmental_certifications = Column(Float, default=0)
    social_responsibility_programs = Column(Float, default=0)
    sustainable_sourcing_practices = Column(Float, default=0)

    # Kept in step with the score columns by refresh_overall_score()
    overall_score = Column(Float, default=0, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    score_history = relationship(
        "SupplierScore",
        back_populates="supplier",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def raw_scores(self) -> dict:
        return {key: getattr(self, key) or 0 for key in all_score_keys()}

    def refresh_overall_score(self) -> float:
        self.overall_score = overall_score(self.raw_scores)
        return self.overall_score

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}', status='{self.status}')>"

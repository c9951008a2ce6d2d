"""
Evaluator-attributed score audit trail
"""
from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from chanakya.database import Base


class SupplierScore(Base):
    """One recorded sub-criterion score; the supplier row holds the current value"""
    __tablename__ = "supplier_scores"

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="CASCADE"), nullable=False, index=True)
    criterion_key = Column(String, nullable=False)
    score = Column(Float, nullable=False)
    comments = Column(Text, nullable=True)
    evaluated_by = Column(String, nullable=True)
    evaluated_at = Column(DateTime(timezone=True), server_default=func.now())

    supplier = relationship("Supplier", back_populates="score_history")

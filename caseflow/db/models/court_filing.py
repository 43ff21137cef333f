"""
CourtFiling model
"""
from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.constants import FilingStatus
from caseflow.utils.helpers import generate_uuid


class CourtFiling(BaseModel):
    """A case submission to a court"""
    __tablename__ = "court_filings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    case_id = Column(String(36), ForeignKey("cases.id"), nullable=False, index=True)
    lawyer_id = Column(String(36), nullable=False)
    court_name = Column(String(200), nullable=False)
    court_address = Column(Text)
    court_district = Column(String(50))
    filing_fee = Column(Float, default=0)
    status = Column(String(20), nullable=False, default=FilingStatus.PREPARING.value)
    court_reference = Column(String(50))
    submitted_at = Column(DateTime)
    confirmed_at = Column(DateTime)
    filed_at = Column(DateTime)
    hearing_date = Column(DateTime)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    case = relationship("Case", back_populates="court_filings")

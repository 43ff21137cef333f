"""
CaseDocument model
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.helpers import generate_uuid


class CaseDocument(BaseModel):
    """Documents attached to a case"""
    __tablename__ = "case_documents"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255))
    upload_date = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    case = relationship("Case", back_populates="documents")

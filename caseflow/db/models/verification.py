"""
Verification model
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.constants import VerificationStatus
from caseflow.utils.helpers import generate_uuid


class Verification(BaseModel):
    """One row per verification attempt"""
    __tablename__ = "verifications"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'verified', 'rejected')", name="check_verification_record_status"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=VerificationStatus.PENDING.value)
    verification_date = Column(DateTime)
    verified_by = Column(String(36))
    notes = Column(Text)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Relationships
    case = relationship("Case", back_populates="verifications")
    issues = relationship("VerificationIssue", back_populates="verification", cascade="all, delete-orphan")

    def to_json(self):
        result = super().to_json()
        result["issues"] = [issue.to_json() for issue in self.issues]
        return result

"""
VerificationIssue model
"""
from sqlalchemy import Column, BigInteger, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from caseflow.db.base import BaseModel


class VerificationIssue(BaseModel):
    """Problems found by a verification attempt"""
    __tablename__ = "verification_issues"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    verification_id = Column(String(36), ForeignKey("verifications.id", ondelete="CASCADE"), nullable=False, index=True)
    field = Column(String(50), nullable=False)
    message = Column(String(255), nullable=False)
    resolved = Column(Boolean, nullable=False, default=False)

    # Relationships
    verification = relationship("Verification", back_populates="issues")

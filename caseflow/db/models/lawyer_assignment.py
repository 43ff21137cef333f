"""
LawyerAssignment model
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.constants import AssignmentStatus
from caseflow.utils.helpers import generate_uuid


class LawyerAssignment(BaseModel):
    """Lawyer assignment proposals and their outcome"""
    __tablename__ = "lawyer_assignments"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'accepted', 'rejected', 'withdrawn')", name="check_assignment_status"),
        CheckConstraint("assigned_by IN ('system', 'client', 'admin')", name="check_assigned_by"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    case_id = Column(String(36), ForeignKey("cases.id", ondelete="CASCADE"), nullable=False, index=True)
    lawyer_id = Column(String(36), nullable=False, index=True)
    client_id = Column(String(36))
    assigned_by = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=AssignmentStatus.PENDING.value)
    client_message = Column(Text)
    lawyer_response = Column(Text)
    response_date = Column(DateTime)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    case = relationship("Case", back_populates="assignments")

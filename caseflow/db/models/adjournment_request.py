"""
AdjournmentRequest model
"""
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.constants import AdjournmentRequestStatus, AdjournmentUrgency
from caseflow.utils.helpers import generate_uuid


class AdjournmentRequest(BaseModel):
    """Client request to move a scheduled hearing; at most one pending per case"""
    __tablename__ = "adjournment_requests"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'accepted', 'rejected')", name="check_adjournment_status"),
        CheckConstraint(
            "urgency IN ('low', 'medium', 'high', 'urgent')",
            name="check_adjournment_urgency"
        ),
        Index("ix_adjournment_requests_client_status", "client_id", "status"),
        Index("ix_adjournment_requests_status_submitted", "status", "submitted_at"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    case_id = Column(String(36), ForeignKey("cases.id"), nullable=False, index=True)
    client_id = Column(String(36), nullable=False)
    lawyer_id = Column(String(36))

    # Hearing the client wants moved
    original_hearing_date = Column(Date, nullable=False)
    original_start_time = Column(String(5))
    original_end_time = Column(String(5))

    preferred_date = Column(Date, nullable=False)
    preferred_start_time = Column(String(5))
    preferred_end_time = Column(String(5))
    reason = Column(String(500), nullable=False)
    urgency = Column(String(10), nullable=False, default=AdjournmentUrgency.MEDIUM.value)
    status = Column(String(10), nullable=False, default=AdjournmentRequestStatus.PENDING.value)

    # Set when the court accepts
    new_hearing_date = Column(Date)
    new_start_time = Column(String(5))
    new_end_time = Column(String(5))
    scheduler_notes = Column(Text)

    submitted_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    reviewed_at = Column(DateTime)
    reviewed_by = Column(String(36))

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    case = relationship("Case", back_populates="adjournment_requests")

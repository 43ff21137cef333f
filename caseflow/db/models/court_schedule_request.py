"""
CourtScheduleRequest model
"""
from sqlalchemy import Column, String, Text, Integer, Boolean, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.constants import DEFAULT_COURTROOM, SchedulePriority
from caseflow.utils.helpers import generate_uuid


class CourtScheduleRequest(BaseModel):
    """Request from the lawyer to schedule a filed case; at most one per case"""
    __tablename__ = "court_schedule_requests"
    __table_args__ = (
        CheckConstraint("priority IN ('high', 'medium', 'low')", name="check_schedule_priority"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    case_id = Column(String(36), ForeignKey("cases.id"), nullable=False, unique=True)
    court_filing_id = Column(String(36), ForeignKey("court_filings.id"))
    district = Column(String(50), nullable=False, index=True)
    courtroom = Column(String(100), nullable=False, default=DEFAULT_COURTROOM)
    priority = Column(String(10), nullable=False, default=SchedulePriority.MEDIUM.value)
    is_scheduled = Column(Boolean, nullable=False, default=False)
    scheduled_date = Column(Date)
    scheduled_start_time = Column(String(5))
    scheduled_end_time = Column(String(5))
    scheduled_by = Column(String(36))
    notes = Column(Text)

    # Denormalised case details
    case_number = Column(String(20), nullable=False)
    case_type = Column(String(50))
    plaintiff_name = Column(String(200))
    defendant_name = Column(String(200))
    lawyer_id = Column(String(36))
    lawyer_name = Column(String(200))
    client_id = Column(String(36))
    client_name = Column(String(200))
    filed_date = Column(DateTime)
    estimated_duration = Column(Integer, nullable=False, default=60)  # minutes
    request_message = Column(Text)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    case = relationship("Case", back_populates="schedule_request")
    scheduled_cases = relationship("ScheduledCase", back_populates="schedule_request")

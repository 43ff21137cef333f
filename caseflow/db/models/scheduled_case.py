"""
ScheduledCase model
"""
from sqlalchemy import Column, String, Text, Integer, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.constants import ScheduledCaseStatus
from caseflow.utils.helpers import generate_uuid


class ScheduledCase(BaseModel):
    """A hearing slot given to a case"""
    __tablename__ = "scheduled_cases"
    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'in_progress', 'completed', 'adjourned', 'cancelled')",
            name="check_scheduled_case_status"
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    schedule_request_id = Column(String(36), ForeignKey("court_schedule_requests.id"))
    case_id = Column(String(36), ForeignKey("cases.id"), nullable=False, index=True)
    district = Column(String(50), nullable=False, index=True)
    courtroom = Column(String(100), nullable=False)
    hearing_date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)

    case_number = Column(String(20))
    case_type = Column(String(50))
    plaintiff_name = Column(String(200))
    defendant_name = Column(String(200))
    lawyer_id = Column(String(36))
    client_id = Column(String(36))
    scheduled_by = Column(String(36))
    notes = Column(Text)
    duration = Column(Integer, nullable=False, default=60)  # minutes
    status = Column(String(20), nullable=False, default=ScheduledCaseStatus.SCHEDULED.value)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    case = relationship("Case", back_populates="scheduled_cases")
    schedule_request = relationship("CourtScheduleRequest", back_populates="scheduled_cases")

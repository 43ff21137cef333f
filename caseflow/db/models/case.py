"""
Case model
"""
from sqlalchemy import (
    Column, String, Text, Float, Date, DateTime, Boolean, JSON, CheckConstraint, event, inspect
)
from sqlalchemy.orm import relationship, Session
from datetime import datetime
from caseflow.db.base import BaseModel
from caseflow.utils.constants import (
    CASE_STATUSES, VERIFICATION_STATUSES, FILING_STATUSES, CaseStatus, VerificationStatus, FilingStatus
)
from caseflow.utils.helpers import generate_uuid
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)


def _in_clause(column: str, values) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IN ({quoted})"


class Case(BaseModel):
    """Legal case table"""
    __tablename__ = "cases"
    __table_args__ = (
        CheckConstraint(_in_clause("status", CASE_STATUSES), name="check_case_status"),
        CheckConstraint(_in_clause("verification_status", VERIFICATION_STATUSES), name="check_verification_status"),
        CheckConstraint(_in_clause("filing_status", FILING_STATUSES), name="check_filing_status"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    case_number = Column(String(20), nullable=False, unique=True, index=True)
    owner_id = Column(String(36), nullable=False, index=True)
    case_type = Column(String(50), nullable=False)

    # Parties
    plaintiff_name = Column(String(200), nullable=False)
    plaintiff_nic = Column(String(20))
    plaintiff_address = Column(Text)
    plaintiff_phone = Column(String(30))
    defendant_name = Column(String(200), nullable=False)
    defendant_nic = Column(String(20))
    defendant_address = Column(Text)
    defendant_phone = Column(String(30))
    defendant_email = Column(String(200))

    # Claim
    description = Column(Text)
    relief_sought = Column(Text)
    case_value = Column(Float)
    incident_date = Column(Date)
    district = Column(String(50), nullable=False)

    # Lifecycle
    status = Column(String(30), nullable=False, default=CaseStatus.PENDING.value, index=True)
    verification_status = Column(String(20), nullable=False, default=VerificationStatus.PENDING.value)
    current_lawyer_id = Column(String(36), index=True)

    # Filing request
    filing_requested = Column(Boolean, nullable=False, default=False)
    filing_request_date = Column(DateTime)
    filing_request_message = Column(Text)
    filing_status = Column(String(20), nullable=False, default=FilingStatus.NOT_STARTED.value)

    # Court details (set once, on filing)
    court_name = Column(String(200))
    court_reference = Column(String(50))
    filing_date = Column(DateTime)
    court_hearing_date = Column(DateTime)
    filed_by = Column(String(36))

    # Lawyer workflow
    lawyer_notes = Column(Text)
    document_request = Column(Text)
    document_request_date = Column(DateTime)
    ready_to_file_date = Column(DateTime)

    # Hearing
    hearing_date = Column(Date)
    hearing_start_time = Column(String(5))
    hearing_end_time = Column(String(5))
    courtroom = Column(String(100))
    adjournment_details = Column(JSON)
    completion_details = Column(JSON)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    documents = relationship("CaseDocument", back_populates="case", cascade="all, delete-orphan")
    assignments = relationship("LawyerAssignment", back_populates="case", cascade="all, delete-orphan")
    verifications = relationship("Verification", back_populates="case", cascade="all, delete-orphan")
    schedule_request = relationship("CourtScheduleRequest", back_populates="case", uselist=False)
    scheduled_cases = relationship("ScheduledCase", back_populates="case")
    court_filings = relationship("CourtFiling", back_populates="case")
    adjournment_requests = relationship("AdjournmentRequest", back_populates="case", cascade="all, delete-orphan")

    @property
    def court_details(self) -> dict:
        """Court details stamped when the case was filed"""
        return {
            "court_name": self.court_name,
            "court_reference": self.court_reference,
            "filing_date": self.filing_date.isoformat() if self.filing_date else None,
            "hearing_date": self.court_hearing_date.isoformat() if self.court_hearing_date else None,
            "filed_by": self.filed_by,
        }

    def to_json(self):
        result = super().to_json()
        result["court_details"] = self.court_details
        result["documents"] = [document.to_json() for document in self.documents]
        return result


def _has_schedule(session: Session, case: Case) -> bool:
    """True when a scheduling record exists for the case, flushed or pending"""
    from caseflow.db.models.scheduled_case import ScheduledCase

    for obj in session.new:
        if isinstance(obj, ScheduledCase) and (obj.case_id == case.id or obj.case is case):
            return True

    if case.id is None:
        return False

    with session.no_autoflush:
        return session.query(ScheduledCase.id).filter(ScheduledCase.case_id == case.id).first() is not None


@event.listens_for(Session, "before_flush")
def guard_hearing_scheduled(session, flush_context, instances):
    """
    Downgrade a hearing_scheduled write that no scheduling record backs

    Covers every write path that flushes through the ORM.
    """
    candidates = [obj for obj in session.new if isinstance(obj, Case)]
    for obj in session.dirty:
        if isinstance(obj, Case) and inspect(obj).attrs.status.history.has_changes():
            candidates.append(obj)

    for case in candidates:
        if case.status != CaseStatus.HEARING_SCHEDULED.value:
            continue
        if not _has_schedule(session, case):
            logger.warning(
                f"Case {case.case_number or case.id} has no scheduling record, "
                f"status downgraded to {CaseStatus.LAWYER_ASSIGNED.value}"
            )
            case.status = CaseStatus.LAWYER_ASSIGNED.value

"""
Case lifecycle orchestrator module

Drives a case through its statuses and queues the delayed work that follows
case creation.

Main track:
    pending -> lawyer_requested -> lawyer_assigned -> filing_requested -> filed
    -> scheduling_requested -> hearing_scheduled
Branches:
    under_review (back to lawyer_assigned), adjourned, closed
"""
from datetime import datetime, date
from typing import Optional, Dict, Any, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from config.settings import settings
from caseflow.db.models.case import Case
from caseflow.db.models.case_document import CaseDocument
from caseflow.db.models.court_filing import CourtFiling
from caseflow.db.models.court_schedule_request import CourtScheduleRequest
from caseflow.db.models.scheduled_case import ScheduledCase
from caseflow.services.access import (
    load_case,
    caller_type,
    require_owner,
    require_assigned_lawyer,
    require_court_staff,
    require_case_access,
)
from caseflow.services.case_number import CaseNumberGenerator
from caseflow.services.identity_resolver import IdentityResolver, identity_resolver
from caseflow.services.job_scheduler import (
    JobScheduler, job_scheduler, AUTO_VERIFY_JOB, NOTIFICATION_JOB
)
from caseflow.services.jobs import run_auto_verify, send_notification
from caseflow.services.reconciler import AssignmentReconciler, needs_lawyer
from caseflow.types import CallerIdentity
from caseflow.utils.constants import (
    CaseStatus,
    VerificationStatus,
    FilingStatus,
    ScheduledCaseStatus,
    SchedulePriority,
    UserType,
    NotificationEvent,
    CASE_STATUSES,
    DISTRICTS,
    DEFAULT_COURTROOM,
    POST_FILING_STATUSES,
    STANDARD_TIME_SLOTS,
)
from caseflow.utils.exceptions import (
    NotFoundError,
    InvalidStateError,
    ConflictError,
    AccessDeniedError,
    ValidationFailedError,
)
from caseflow.utils.helpers import format_date, generate_uuid, is_blank, parse_date
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_CASE_FIELDS = ["case_type", "plaintiff_name", "defendant_name", "district"]

EDITABLE_CASE_FIELDS = [
    "case_type",
    "plaintiff_name",
    "plaintiff_nic",
    "plaintiff_address",
    "plaintiff_phone",
    "defendant_name",
    "defendant_nic",
    "defendant_address",
    "defendant_phone",
    "defendant_email",
    "description",
    "relief_sought",
    "case_value",
    "incident_date",
    "district",
]

DOCUMENT_REQUEST_STATUSES = (
    CaseStatus.LAWYER_ASSIGNED.value,
    CaseStatus.FILING_REQUESTED.value,
    CaseStatus.UNDER_REVIEW.value,
)
READY_TO_FILE_STATUSES = (
    CaseStatus.UNDER_REVIEW.value,
    CaseStatus.LAWYER_ASSIGNED.value,
    CaseStatus.FILING_REQUESTED.value,
)
ADJOURNABLE_STATUSES = (
    CaseStatus.HEARING_SCHEDULED.value,
    CaseStatus.RESCHEDULED.value,
)
CLOSABLE_STATUSES = (
    CaseStatus.HEARING_SCHEDULED.value,
    CaseStatus.RESCHEDULED.value,
    CaseStatus.ADJOURNED.value,
)
ACTIVE_HEARING_STATUSES = (
    ScheduledCaseStatus.SCHEDULED.value,
    ScheduledCaseStatus.IN_PROGRESS.value,
)


def court_reference_for(case: Case, filed_at: datetime) -> str:
    """Court reference stamped on filing (CL<year>-<last 6 of case ID>)"""
    return f"CL{filed_at.year}-{case.id[-6:]}"


def to_date(value: Any, field: str) -> Optional[date]:
    """Coerce a date or date string, raising ValidationFailedError on garbage"""
    if value is None or isinstance(value, date):
        return value.date() if isinstance(value, datetime) else value
    parsed = parse_date(str(value))
    if parsed is None:
        raise ValidationFailedError(f"{field} is not a valid date", field)
    return parsed.date()


def _validate_time(value: str, field: str) -> str:
    """HH:MM time string"""
    try:
        datetime.strptime(value or "", "%H:%M")
    except ValueError:
        raise ValidationFailedError(f"{field} must be HH:MM", field)
    return value


def _validate_district(district: str) -> None:
    if district not in DISTRICTS:
        raise ValidationFailedError(f"unknown district: {district}", "district")


def validate_slot(start_time: str, end_time: str) -> None:
    """HH:MM start and end, start before end"""
    _validate_time(start_time, "start_time")
    _validate_time(end_time, "end_time")
    if start_time >= end_time:
        raise ValidationFailedError("start_time must be before end_time", "start_time")


def slots_overlap(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    # HH:MM strings compare in time order
    return start_a < end_b and end_a > start_b


def occupied_slots(
    db: Session,
    district: str,
    hearing_date: date,
    exclude_case_id: Optional[str] = None
) -> List[ScheduledCase]:
    """Active hearings in a district on a date"""
    query = db.query(ScheduledCase).filter(
        ScheduledCase.district == district,
        ScheduledCase.hearing_date == hearing_date,
        ScheduledCase.status.in_(ACTIVE_HEARING_STATUSES),
    )
    if exclude_case_id:
        query = query.filter(ScheduledCase.case_id != exclude_case_id)
    return query.all()


def ensure_slot_free(
    db: Session,
    district: str,
    hearing_date: date,
    start_time: str,
    end_time: str,
    exclude_case_id: Optional[str] = None
) -> None:
    """
    Check a hearing slot against the active hearings of its district

    Args:
        db: database session
        district: district name
        hearing_date: hearing date
        start_time: HH:MM
        end_time: HH:MM
        exclude_case_id: case whose own hearings do not count (a case being moved)

    Raises:
        ConflictError: the slot overlaps an active hearing
    """
    for taken in occupied_slots(db, district, hearing_date, exclude_case_id):
        if slots_overlap(start_time, end_time, taken.start_time, taken.end_time):
            raise ConflictError(
                f"{district} already has a hearing on {format_date(hearing_date)} "
                f"{taken.start_time}-{taken.end_time}"
            )


def latest_hearing(db: Session, case_id: str) -> Optional[ScheduledCase]:
    """Newest active or adjourned hearing of a case"""
    return db.query(ScheduledCase).filter(
        ScheduledCase.case_id == case_id,
        ScheduledCase.status.in_(ACTIVE_HEARING_STATUSES + (ScheduledCaseStatus.ADJOURNED.value,))
    ).order_by(ScheduledCase.created_at.desc()).first()


def adjournment_details_for(
    case: Case,
    new_date: date,
    start_time: str,
    end_time: str,
    reason: str,
    adjourned_by: str,
    request_id: Optional[str] = None
) -> Dict[str, Any]:
    """Adjournment record of a case, taken before its hearing fields move"""
    details = {
        "previous_date": format_date(case.hearing_date) if case.hearing_date else None,
        "previous_start_time": case.hearing_start_time,
        "previous_end_time": case.hearing_end_time,
        "new_date": format_date(new_date),
        "new_start_time": start_time,
        "new_end_time": end_time,
        "reason": reason,
        "adjourned_by": adjourned_by,
        "adjourned_at": datetime.utcnow().isoformat(),
    }
    if request_id:
        details["request_id"] = request_id
    return details


def rebook_hearing(
    db: Session,
    case: Case,
    hearing: Optional[ScheduledCase],
    new_date: date,
    start_time: str,
    end_time: str,
    scheduled_by: str,
    notes: Optional[str] = None
) -> ScheduledCase:
    """
    Move a case's hearing to a new slot

    The earlier hearing is kept as adjourned and a scheduled hearing holds the
    new slot. Nothing is committed.

    Returns:
        new ScheduledCase
    """
    if hearing:
        hearing.status = ScheduledCaseStatus.ADJOURNED.value

    courtroom = (hearing.courtroom if hearing else None) or case.courtroom or DEFAULT_COURTROOM
    moved = ScheduledCase(
        schedule_request_id=hearing.schedule_request_id if hearing else None,
        case_id=case.id,
        district=hearing.district if hearing else case.district,
        courtroom=courtroom,
        hearing_date=new_date,
        start_time=start_time,
        end_time=end_time,
        case_number=case.case_number,
        case_type=case.case_type,
        plaintiff_name=case.plaintiff_name,
        defendant_name=case.defendant_name,
        lawyer_id=case.current_lawyer_id,
        client_id=case.owner_id,
        scheduled_by=scheduled_by,
        notes=notes,
        duration=hearing.duration if hearing else 60,
        status=ScheduledCaseStatus.SCHEDULED.value,
    )
    db.add(moved)

    case.hearing_date = new_date
    case.hearing_start_time = start_time
    case.hearing_end_time = end_time
    case.courtroom = courtroom
    return moved


class LifecycleOrchestrator:
    """Case status transitions and their side effects"""

    def __init__(
        self,
        scheduler: Optional[JobScheduler] = None,
        resolver: Optional[IdentityResolver] = None,
        reconcile_on_read: Optional[bool] = None
    ):
        self.scheduler = scheduler or job_scheduler
        self.resolver = resolver or identity_resolver
        self.reconcile_on_read = settings.reconcile_on_read if reconcile_on_read is None else reconcile_on_read

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _notify(self, event: str, case: Case, extra: Optional[Dict[str, Any]] = None) -> None:
        """Queue a notification; a failure here never affects the transition"""
        payload = {
            "case_id": case.id,
            "case_number": case.case_number,
            "owner_id": case.owner_id,
            "lawyer_id": case.current_lawyer_id,
            "status": case.status,
        }
        if extra:
            payload.update(extra)
        try:
            self.scheduler.schedule(
                NOTIFICATION_JOB,
                f"{event}:{case.id}",
                send_notification,
                delay_seconds=0,
                kwargs={"event": event, "payload": payload},
            )
        except Exception as e:
            logger.error(f"Could not queue {event} notification for {case.case_number}: {str(e)}")

    def _reconcile_quietly(self, db: Session, case: Case) -> None:
        """Repair on read; a failure is logged and the read goes on"""
        try:
            AssignmentReconciler.reconcile_case(db, case)
        except Exception as e:
            db.rollback()
            logger.error(f"Read-time reconciliation failed for case {case.id}: {str(e)}")

    def describe_case(self, db: Session, case: Case) -> Dict[str, Any]:
        """
        Case payload with owner and lawyer identities resolved

        Args:
            db: database session
            case: Case instance

        Returns:
            case dictionary
        """
        result = case.to_json()
        result["owner"] = self.resolver.resolve(db, case.owner_id, UserType.CLIENT.value)
        result["current_lawyer"] = self.resolver.resolve(db, case.current_lawyer_id, UserType.LAWYER.value)
        return result

    # ------------------------------------------------------------------
    # Case records
    # ------------------------------------------------------------------

    def validate_case_data(self, data: Dict[str, Any]) -> None:
        """
        Check the fields a new case needs

        Raises:
            ValidationFailedError: a required field is missing or malformed
        """
        for field in REQUIRED_CASE_FIELDS:
            if is_blank(data.get(field)):
                raise ValidationFailedError(f"{field} is required", field)

        _validate_district(data["district"])

        case_value = data.get("case_value")
        if case_value is not None and case_value < 0:
            raise ValidationFailedError("case_value cannot be negative", "case_value")

    def create_case(self, db: Session, caller: CallerIdentity, data: Dict[str, Any]) -> Case:
        """
        Create a case and queue its verification

        Args:
            db: database session
            caller: client creating the case
            data: case fields, plus an optional "documents" list

        Returns:
            committed Case (status pending)
        """
        if caller_type(caller) not in (UserType.CLIENT.value, UserType.ADMIN.value):
            raise AccessDeniedError("Only clients can create cases")

        self.validate_case_data(data)

        case = Case(
            id=generate_uuid(),
            owner_id=caller["user_id"],
            status=CaseStatus.PENDING.value,
            verification_status=VerificationStatus.PENDING.value,
            filing_status=FilingStatus.NOT_STARTED.value,
            filing_requested=False,
            created_at=datetime.utcnow(),
        )
        for field in EDITABLE_CASE_FIELDS:
            if field in data:
                setattr(case, field, data[field])
        case.incident_date = to_date(data.get("incident_date"), "incident_date")

        for document in data.get("documents") or []:
            case.documents.append(CaseDocument(
                filename=document["filename"],
                original_name=document.get("original_name") or document["filename"],
            ))

        CaseNumberGenerator.insert_with_number(db, case)
        logger.info(f"Case created: {case.case_number} by {case.owner_id}")

        # Queued, not awaited
        try:
            self.scheduler.schedule(
                AUTO_VERIFY_JOB,
                case.id,
                run_auto_verify,
                delay_seconds=settings.auto_verify_delay_seconds,
                kwargs={"case_id": case.id},
            )
        except Exception as e:
            logger.error(f"Could not queue auto-verify for {case.case_number}: {str(e)}")

        return case

    def get_case(self, db: Session, caller: CallerIdentity, case_id: str) -> Case:
        """
        Load a case the caller may see

        Raises:
            NotFoundError: case does not exist
            AccessDeniedError: caller is unrelated to the case
        """
        case = load_case(db, case_id)
        require_case_access(case, caller)
        if self.reconcile_on_read and needs_lawyer(case):
            self._reconcile_quietly(db, case)
        return case

    def list_my_cases(self, db: Session, caller: CallerIdentity) -> List[Case]:
        """
        Cases owned by the caller, newest first

        Lawyer-bound cases missing their lawyer are repaired on the way out.
        """
        cases = db.query(Case).filter(
            Case.owner_id == caller["user_id"]
        ).order_by(Case.created_at.desc()).all()

        if self.reconcile_on_read:
            for case in cases:
                if needs_lawyer(case):
                    self._reconcile_quietly(db, case)
        return cases

    def list_lawyer_cases(self, db: Session, caller: CallerIdentity) -> List[Case]:
        """Cases whose current lawyer is the calling lawyer, newest first"""
        if caller_type(caller) != UserType.LAWYER.value:
            raise AccessDeniedError("Only lawyers have assigned cases")
        return db.query(Case).filter(
            Case.current_lawyer_id == caller["user_id"]
        ).order_by(Case.created_at.desc()).all()

    def update_case_details(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        fields: Dict[str, Any]
    ) -> Case:
        """
        Owner edits case content; locked once the case is filed

        Raises:
            InvalidStateError: case already filed
            ValidationFailedError: unknown or malformed field
        """
        case = load_case(db, case_id)
        require_owner(case, caller)

        if case.filing_date is not None:
            raise InvalidStateError("case details cannot change after filing", case.status)

        unknown = [field for field in fields if field not in EDITABLE_CASE_FIELDS]
        if unknown:
            raise ValidationFailedError(f"fields cannot be edited: {', '.join(unknown)}", unknown[0])
        for field in REQUIRED_CASE_FIELDS:
            if field in fields and is_blank(fields[field]):
                raise ValidationFailedError(f"{field} is required", field)
        if "district" in fields:
            _validate_district(fields["district"])

        for field, value in fields.items():
            if field == "incident_date":
                value = to_date(value, field)
            setattr(case, field, value)
        db.commit()

        logger.info(f"Case {case.case_number} details updated: {', '.join(fields)}")
        return case

    def delete_case(self, db: Session, caller: CallerIdentity, case_id: str) -> None:
        """
        Owner deletes a case that was never filed

        Raises:
            InvalidStateError: case already filed
        """
        case = load_case(db, case_id)
        require_owner(case, caller)

        if case.filing_date is not None or case.status in POST_FILING_STATUSES:
            raise InvalidStateError("filed cases cannot be deleted", case.status)

        case_number = case.case_number
        db.delete(case)
        db.commit()
        logger.info(f"Case deleted: {case_number}")

    # ------------------------------------------------------------------
    # Filing
    # ------------------------------------------------------------------

    def request_filing(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        message: Optional[str] = None
    ) -> Case:
        """
        Client asks the assigned lawyer to file the case

        Raises:
            ConflictError: filing already requested
            InvalidStateError: case is not lawyer_assigned or has no lawyer
        """
        case = load_case(db, case_id)
        require_owner(case, caller)

        if case.filing_requested:
            raise ConflictError("filing has already been requested for this case")
        if case.status != CaseStatus.LAWYER_ASSIGNED.value:
            raise InvalidStateError(
                f"filing can only be requested for a lawyer_assigned case (is {case.status})",
                case.status
            )

        if not case.current_lawyer_id:
            AssignmentReconciler.reconcile_case(db, case)
        if not case.current_lawyer_id or case.status != CaseStatus.LAWYER_ASSIGNED.value:
            raise InvalidStateError("no lawyer is assigned to this case", case.status)

        case.filing_requested = True
        case.filing_request_date = datetime.utcnow()
        case.filing_request_message = message
        case.filing_status = FilingStatus.PREPARING.value
        case.status = CaseStatus.FILING_REQUESTED.value
        db.commit()

        logger.info(f"Filing requested for case {case.case_number}")
        return case

    def file_court_case(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        court: Dict[str, Any]
    ) -> Case:
        """
        Lawyer confirms the case was filed with the court

        Args:
            db: database session
            caller: assigned lawyer
            case_id: case ID
            court: court_name plus optional court_address, court_district,
                filing_fee and hearing_date

        Returns:
            filed Case
        """
        case = load_case(db, case_id)
        require_assigned_lawyer(case, caller)

        if case.filing_date is not None or case.status == CaseStatus.FILED.value:
            raise InvalidStateError("case has already been filed", case.status)
        if not case.filing_requested or case.status != CaseStatus.FILING_REQUESTED.value:
            raise InvalidStateError("the client has not requested filing", case.status)
        if is_blank(court.get("court_name")):
            raise ValidationFailedError("court_name is required", "court_name")

        now = datetime.utcnow()
        reference = court_reference_for(case, now)
        hearing_date = court.get("hearing_date")
        if hearing_date is not None and not isinstance(hearing_date, datetime):
            hearing_date = parse_date(str(hearing_date))

        filing = CourtFiling(
            case_id=case.id,
            lawyer_id=caller["user_id"],
            court_name=court["court_name"],
            court_address=court.get("court_address"),
            court_district=court.get("court_district") or case.district,
            filing_fee=court.get("filing_fee") or 0,
            status=FilingStatus.FILED.value,
            court_reference=reference,
            submitted_at=now,
            confirmed_at=now,
            filed_at=now,
            hearing_date=hearing_date,
        )
        db.add(filing)

        case.court_name = court["court_name"]
        case.court_reference = reference
        case.filing_date = now
        case.court_hearing_date = hearing_date
        case.filed_by = caller["user_id"]
        case.filing_status = FilingStatus.FILED.value
        case.status = CaseStatus.FILED.value
        db.commit()

        logger.info(f"Case {case.case_number} filed with {case.court_name} ({reference})")
        self._notify(NotificationEvent.CASE_FILED.value, case, {
            "court_name": case.court_name,
            "court_reference": reference,
        })
        return case

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def request_scheduling(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        message: Optional[str] = None,
        priority: str = SchedulePriority.MEDIUM.value
    ) -> CourtScheduleRequest:
        """
        Lawyer asks the court to schedule a filed case

        Raises:
            InvalidStateError: case not filed
            ConflictError: a scheduling request already exists
        """
        case = load_case(db, case_id)
        require_assigned_lawyer(case, caller)

        existing = db.query(CourtScheduleRequest).filter(CourtScheduleRequest.case_id == case.id).first()
        if existing:
            raise ConflictError("a scheduling request already exists for this case")
        if case.status != CaseStatus.FILED.value:
            raise InvalidStateError(
                f"scheduling can only be requested for a filed case (is {case.status})", case.status
            )
        if priority not in [p.value for p in SchedulePriority]:
            raise ValidationFailedError(f"unknown priority: {priority}", "priority")

        filing = db.query(CourtFiling).filter(
            CourtFiling.case_id == case.id
        ).order_by(CourtFiling.created_at.desc()).first()

        request = CourtScheduleRequest(
            case_id=case.id,
            court_filing_id=filing.id if filing else None,
            district=case.district,
            courtroom=DEFAULT_COURTROOM,
            priority=priority,
            case_number=case.case_number,
            case_type=case.case_type,
            plaintiff_name=case.plaintiff_name,
            defendant_name=case.defendant_name,
            lawyer_id=case.current_lawyer_id,
            lawyer_name=self.resolver.display_name(db, case.current_lawyer_id, UserType.LAWYER.value),
            client_id=case.owner_id,
            client_name=self.resolver.display_name(db, case.owner_id, UserType.CLIENT.value),
            filed_date=case.filing_date,
            request_message=message,
        )
        db.add(request)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("a scheduling request already exists for this case")

        case.status = CaseStatus.SCHEDULING_REQUESTED.value
        db.commit()

        logger.info(f"Scheduling requested for case {case.case_number} in {request.district}")
        return request

    def list_schedule_requests(
        self,
        db: Session,
        caller: CallerIdentity,
        district: Optional[str] = None,
        scheduled: Optional[bool] = None
    ) -> List[CourtScheduleRequest]:
        """Scheduling requests for court staff, oldest first"""
        require_court_staff(caller)
        query = db.query(CourtScheduleRequest)
        if district:
            query = query.filter(CourtScheduleRequest.district == district)
        if scheduled is not None:
            query = query.filter(CourtScheduleRequest.is_scheduled.is_(scheduled))
        return query.order_by(CourtScheduleRequest.created_at).all()

    def available_time_slots(self, db: Session, district: str, hearing_date: Any) -> List[Dict[str, str]]:
        """
        Standard hearing slots still free in a district on a date

        Args:
            db: database session
            district: district name
            hearing_date: date or date string

        Returns:
            free slots as {start_time, end_time}
        """
        _validate_district(district)
        hearing_date = to_date(hearing_date, "date")
        occupied = occupied_slots(db, district, hearing_date)

        return [
            dict(slot) for slot in STANDARD_TIME_SLOTS
            if not any(
                slots_overlap(slot["start_time"], slot["end_time"], taken.start_time, taken.end_time)
                for taken in occupied
            )
        ]

    def schedule_hearing(
        self,
        db: Session,
        caller: CallerIdentity,
        request_id: str,
        hearing_date: Any,
        start_time: str,
        end_time: str,
        courtroom: Optional[str] = None,
        notes: Optional[str] = None
    ) -> ScheduledCase:
        """
        Court scheduler gives a requested case a hearing slot

        Raises:
            ConflictError: request already scheduled or slot taken
        """
        require_court_staff(caller)

        request = db.query(CourtScheduleRequest).filter(CourtScheduleRequest.id == request_id).first()
        if not request:
            raise NotFoundError("Schedule request", request_id)
        if request.is_scheduled:
            raise ConflictError("this request has already been scheduled")

        hearing_date = to_date(hearing_date, "hearing_date")
        validate_slot(start_time, end_time)

        ensure_slot_free(db, request.district, hearing_date, start_time, end_time)

        case = load_case(db, request.case_id)
        courtroom = courtroom or request.courtroom or DEFAULT_COURTROOM

        scheduled = ScheduledCase(
            schedule_request_id=request.id,
            case_id=case.id,
            district=request.district,
            courtroom=courtroom,
            hearing_date=hearing_date,
            start_time=start_time,
            end_time=end_time,
            case_number=case.case_number,
            case_type=case.case_type,
            plaintiff_name=case.plaintiff_name,
            defendant_name=case.defendant_name,
            lawyer_id=case.current_lawyer_id,
            client_id=case.owner_id,
            scheduled_by=caller["user_id"],
            notes=notes,
            duration=request.estimated_duration,
            status=ScheduledCaseStatus.SCHEDULED.value,
        )
        db.add(scheduled)

        request.is_scheduled = True
        request.scheduled_date = hearing_date
        request.scheduled_start_time = start_time
        request.scheduled_end_time = end_time
        request.scheduled_by = caller["user_id"]
        request.courtroom = courtroom
        request.notes = notes

        case.hearing_date = hearing_date
        case.hearing_start_time = start_time
        case.hearing_end_time = end_time
        case.courtroom = courtroom
        case.status = CaseStatus.HEARING_SCHEDULED.value
        db.commit()

        logger.info(
            f"Hearing scheduled for case {case.case_number}: {hearing_date} {start_time}-{end_time} ({courtroom})"
        )
        return scheduled

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def request_documents(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        message: str,
        notes: Optional[str] = None
    ) -> Case:
        """Lawyer asks the client for more documents; case goes under review"""
        case = load_case(db, case_id)
        require_assigned_lawyer(case, caller)

        if case.status not in DOCUMENT_REQUEST_STATUSES:
            raise InvalidStateError(f"documents cannot be requested for a {case.status} case", case.status)
        if is_blank(message):
            raise ValidationFailedError("message is required", "message")

        case.document_request = message
        case.document_request_date = datetime.utcnow()
        if notes:
            case.lawyer_notes = notes
        case.status = CaseStatus.UNDER_REVIEW.value
        db.commit()

        logger.info(f"Documents requested for case {case.case_number}")
        self._notify(NotificationEvent.DOCUMENT_REQUESTED.value, case, {"message": message})
        return case

    def mark_ready_to_file(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        notes: Optional[str] = None
    ) -> Case:
        """
        Lawyer is satisfied with the documents

        The case goes back to filing_requested when the client already asked
        for filing, otherwise to lawyer_assigned.
        """
        case = load_case(db, case_id)
        require_assigned_lawyer(case, caller)

        if case.status not in READY_TO_FILE_STATUSES:
            raise InvalidStateError(f"a {case.status} case cannot be marked ready to file", case.status)

        case.ready_to_file_date = datetime.utcnow()
        if notes:
            case.lawyer_notes = notes
        if case.filing_requested:
            case.status = CaseStatus.FILING_REQUESTED.value
        else:
            case.status = CaseStatus.LAWYER_ASSIGNED.value
        db.commit()

        logger.info(f"Case {case.case_number} marked ready to file ({case.status})")
        return case

    def adjourn_hearing(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        new_date: Any,
        start_time: str,
        end_time: str,
        reason: str
    ) -> Case:
        """
        Court adjourns a hearing to a new date

        The new slot is checked against the district's other hearings and
        booked; the old hearing is kept as adjourned.

        Returns:
            adjourned Case with adjournment_details recorded

        Raises:
            ConflictError: the new slot is taken
        """
        require_court_staff(caller)
        case = load_case(db, case_id)

        if case.status not in ADJOURNABLE_STATUSES:
            raise InvalidStateError(f"a {case.status} case has no hearing to adjourn", case.status)
        if is_blank(reason):
            raise ValidationFailedError("reason is required", "reason")
        new_date = to_date(new_date, "new_date")
        validate_slot(start_time, end_time)

        hearing = latest_hearing(db, case.id)
        district = hearing.district if hearing else case.district
        ensure_slot_free(db, district, new_date, start_time, end_time, exclude_case_id=case.id)

        case.adjournment_details = adjournment_details_for(
            case, new_date, start_time, end_time, reason, caller["user_id"]
        )
        rebook_hearing(db, case, hearing, new_date, start_time, end_time, caller["user_id"], reason)
        case.status = CaseStatus.ADJOURNED.value
        db.commit()

        logger.info(f"Hearing for case {case.case_number} adjourned to {new_date}: {reason}")
        return case

    def close_case(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        notes: Optional[str] = None,
        outcome: Optional[str] = None
    ) -> Case:
        """
        Court closes a heard case

        Returns:
            closed Case with completion_details recorded
        """
        require_court_staff(caller)
        case = load_case(db, case_id)

        if case.status not in CLOSABLE_STATUSES:
            raise InvalidStateError(f"a {case.status} case cannot be closed", case.status)

        hearing = latest_hearing(db, case.id)
        if hearing:
            hearing.status = ScheduledCaseStatus.COMPLETED.value

        case.completion_details = {
            "outcome": outcome,
            "notes": notes,
            "closed_by": caller["user_id"],
            "closed_at": datetime.utcnow().isoformat(),
        }
        case.status = CaseStatus.CLOSED.value
        db.commit()

        logger.info(f"Case {case.case_number} closed")
        return case

    def update_status(
        self,
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        status: str,
        notes: Optional[str] = None
    ) -> Case:
        """
        Tracking override by court staff

        The write still goes through the hearing_scheduled guard, so the
        persisted status can differ from the one asked for.
        """
        require_court_staff(caller)
        if status not in CASE_STATUSES:
            raise ValidationFailedError(f"unknown status: {status}", "status")

        case = load_case(db, case_id)
        previous = case.status
        case.status = status
        if notes:
            case.lawyer_notes = notes
        db.commit()
        db.refresh(case)

        if case.status != status:
            logger.warning(
                f"Case {case.case_number} status {status} not accepted, stored as {case.status}"
            )
        logger.info(f"Case {case.case_number} status {previous} -> {case.status}")
        return case


# Global orchestrator instance
lifecycle = LifecycleOrchestrator()

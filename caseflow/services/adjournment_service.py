"""
Adjournment request service module

A client whose hearing is scheduled may ask the court to move it. Court staff
accept the request by booking a new slot, or reject it. The case stays
hearing_scheduled either way.
"""
from datetime import datetime
from typing import Any, List, Optional
from sqlalchemy.orm import Session
from caseflow.db.models.adjournment_request import AdjournmentRequest
from caseflow.services.access import (
    load_case, is_court_staff, require_owner, require_court_staff
)
from caseflow.services.lifecycle import (
    ACTIVE_HEARING_STATUSES,
    adjournment_details_for,
    ensure_slot_free,
    latest_hearing,
    rebook_hearing,
    to_date,
    validate_slot,
)
from caseflow.types import CallerIdentity
from caseflow.utils.constants import (
    AdjournmentRequestStatus,
    AdjournmentUrgency,
    CaseStatus,
    ADJOURNMENT_REQUEST_STATUSES,
    ADJOURNMENT_URGENCIES,
)
from caseflow.utils.exceptions import (
    NotFoundError, InvalidStateError, ConflictError, AccessDeniedError, ValidationFailedError
)
from caseflow.utils.helpers import is_blank
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)

MAX_REASON_LENGTH = 500


class AdjournmentService:
    """Client adjournment requests and their review by the court"""

    @staticmethod
    def _load(db: Session, request_id: str) -> AdjournmentRequest:
        request = db.query(AdjournmentRequest).filter(AdjournmentRequest.id == request_id).first()
        if not request:
            raise NotFoundError("Adjournment request", request_id)
        return request

    @staticmethod
    def _require_pending(request: AdjournmentRequest) -> None:
        if request.status != AdjournmentRequestStatus.PENDING.value:
            raise InvalidStateError("this request has already been processed", request.status)

    @staticmethod
    def pending_request(db: Session, case_id: str) -> Optional[AdjournmentRequest]:
        """Pending request of a case, if any"""
        return db.query(AdjournmentRequest).filter(
            AdjournmentRequest.case_id == case_id,
            AdjournmentRequest.status == AdjournmentRequestStatus.PENDING.value
        ).first()

    @staticmethod
    def request_adjournment(
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        preferred_date: Any,
        reason: str,
        urgency: str = AdjournmentUrgency.MEDIUM.value,
        preferred_start_time: Optional[str] = None,
        preferred_end_time: Optional[str] = None
    ) -> AdjournmentRequest:
        """
        Client asks the court to move a scheduled hearing

        Args:
            db: database session
            caller: calling client
            case_id: case ID
            preferred_date: date the client would prefer
            reason: why the hearing should move
            urgency: low, medium, high or urgent
            preferred_start_time: HH:MM (optional, with preferred_end_time)
            preferred_end_time: HH:MM

        Returns:
            pending AdjournmentRequest

        Raises:
            InvalidStateError: the case has no scheduled hearing
            ConflictError: a request for the case is already pending
        """
        preferred_date = to_date(preferred_date, "preferred_date")
        if preferred_date is None:
            raise ValidationFailedError("preferred_date is required", "preferred_date")
        if is_blank(reason):
            raise ValidationFailedError("reason is required", "reason")
        if len(reason) > MAX_REASON_LENGTH:
            raise ValidationFailedError(f"reason is longer than {MAX_REASON_LENGTH} characters", "reason")
        if urgency not in ADJOURNMENT_URGENCIES:
            raise ValidationFailedError(f"unknown urgency: {urgency}", "urgency")
        if preferred_start_time or preferred_end_time:
            validate_slot(preferred_start_time, preferred_end_time)

        case = load_case(db, case_id)
        require_owner(case, caller)

        if case.status != CaseStatus.HEARING_SCHEDULED.value:
            raise InvalidStateError("only a case with a scheduled hearing can be adjourned", case.status)
        if AdjournmentService.pending_request(db, case.id):
            raise ConflictError("an adjournment request for this case is already pending")

        hearing = latest_hearing(db, case.id)
        if not hearing or hearing.status not in ACTIVE_HEARING_STATUSES:
            raise InvalidStateError("no scheduled hearing found for this case", case.status)

        request = AdjournmentRequest(
            case_id=case.id,
            client_id=caller["user_id"],
            lawyer_id=case.current_lawyer_id,
            original_hearing_date=hearing.hearing_date,
            original_start_time=hearing.start_time,
            original_end_time=hearing.end_time,
            preferred_date=preferred_date,
            preferred_start_time=preferred_start_time,
            preferred_end_time=preferred_end_time,
            reason=reason,
            urgency=urgency,
            status=AdjournmentRequestStatus.PENDING.value,
        )
        db.add(request)
        db.commit()

        logger.info(f"Adjournment requested for case {case.case_number} ({urgency})")
        return request

    @staticmethod
    def list_requests(
        db: Session,
        caller: CallerIdentity,
        status: Optional[str] = None
    ) -> List[AdjournmentRequest]:
        """Adjournment requests for court staff, newest first"""
        require_court_staff(caller)

        query = db.query(AdjournmentRequest)
        if status:
            if status not in ADJOURNMENT_REQUEST_STATUSES:
                raise ValidationFailedError(f"unknown status: {status}", "status")
            query = query.filter(AdjournmentRequest.status == status)
        return query.order_by(AdjournmentRequest.submitted_at.desc()).all()

    @staticmethod
    def list_my_requests(db: Session, caller: CallerIdentity) -> List[AdjournmentRequest]:
        """The calling client's requests, newest first"""
        return db.query(AdjournmentRequest).filter(
            AdjournmentRequest.client_id == caller["user_id"]
        ).order_by(AdjournmentRequest.submitted_at.desc()).all()

    @staticmethod
    def get_request(db: Session, caller: CallerIdentity, request_id: str) -> AdjournmentRequest:
        """One request, for court staff or the client who made it"""
        request = AdjournmentService._load(db, request_id)
        if not is_court_staff(caller) and request.client_id != caller.get("user_id"):
            raise AccessDeniedError()
        return request

    @staticmethod
    def accept(
        db: Session,
        caller: CallerIdentity,
        request_id: str,
        new_hearing_date: Any,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        scheduler_notes: Optional[str] = None
    ) -> AdjournmentRequest:
        """
        Court accepts a request and books the new hearing slot

        Times default to the client's preferred times, then to the original
        hearing times. The old hearing is kept as adjourned.

        Args:
            db: database session
            caller: court staff
            request_id: adjournment request ID
            new_hearing_date: date of the new hearing
            start_time: HH:MM
            end_time: HH:MM
            scheduler_notes: note for the client

        Returns:
            accepted AdjournmentRequest

        Raises:
            InvalidStateError: the request was already reviewed, or the case
                no longer has a scheduled hearing
            ConflictError: the new slot is taken
        """
        require_court_staff(caller)
        request = AdjournmentService._load(db, request_id)
        AdjournmentService._require_pending(request)

        new_date = to_date(new_hearing_date, "new_hearing_date")
        if new_date is None:
            raise ValidationFailedError("new_hearing_date is required", "new_hearing_date")
        start_time = start_time or request.preferred_start_time or request.original_start_time
        end_time = end_time or request.preferred_end_time or request.original_end_time
        validate_slot(start_time, end_time)

        case = load_case(db, request.case_id)
        if case.status != CaseStatus.HEARING_SCHEDULED.value:
            raise InvalidStateError(f"a {case.status} case has no hearing to move", case.status)

        hearing = latest_hearing(db, case.id)
        district = hearing.district if hearing else case.district
        ensure_slot_free(db, district, new_date, start_time, end_time, exclude_case_id=case.id)

        now = datetime.utcnow()
        case.adjournment_details = adjournment_details_for(
            case, new_date, start_time, end_time, request.reason, caller["user_id"], request_id=request.id
        )
        rebook_hearing(db, case, hearing, new_date, start_time, end_time, caller["user_id"], scheduler_notes)

        request.status = AdjournmentRequestStatus.ACCEPTED.value
        request.new_hearing_date = new_date
        request.new_start_time = start_time
        request.new_end_time = end_time
        request.scheduler_notes = scheduler_notes
        request.reviewed_at = now
        request.reviewed_by = caller["user_id"]
        db.commit()

        logger.info(
            f"Adjournment accepted for case {case.case_number}: {new_date} {start_time}-{end_time}"
        )
        return request

    @staticmethod
    def reject(
        db: Session,
        caller: CallerIdentity,
        request_id: str,
        scheduler_notes: Optional[str] = None
    ) -> AdjournmentRequest:
        """Court rejects a request; the hearing stays where it is"""
        require_court_staff(caller)
        request = AdjournmentService._load(db, request_id)
        AdjournmentService._require_pending(request)

        request.status = AdjournmentRequestStatus.REJECTED.value
        request.scheduler_notes = scheduler_notes
        request.reviewed_at = datetime.utcnow()
        request.reviewed_by = caller["user_id"]
        db.commit()

        logger.info(f"Adjournment request {request.id} rejected")
        return request

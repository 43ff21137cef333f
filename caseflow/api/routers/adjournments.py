"""
Adjournment request API router
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from caseflow.api.auth import get_caller
from caseflow.db.connection import get_db
from caseflow.services.adjournment_service import AdjournmentService, MAX_REASON_LENGTH
from caseflow.types import CallerIdentity
from caseflow.utils.constants import AdjournmentUrgency, AdjournmentRequestStatus
from caseflow.utils.response import success_response

router = APIRouter(prefix="/adjournments", tags=["adjournments"])

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class AdjournmentCreateRequest(BaseModel):
    case_id: str
    preferred_date: date
    reason: str = Field(max_length=MAX_REASON_LENGTH)
    urgency: AdjournmentUrgency = AdjournmentUrgency.MEDIUM
    preferred_start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    preferred_end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)


class AdjournmentAcceptRequest(BaseModel):
    new_hearing_date: date
    start_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    scheduler_notes: Optional[str] = Field(default=None, max_length=500)


class AdjournmentRejectRequest(BaseModel):
    scheduler_notes: Optional[str] = Field(default=None, max_length=500)


@router.post("")
async def request_adjournment(
    request: AdjournmentCreateRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Client asks for the hearing to be moved"""
    adjournment = AdjournmentService.request_adjournment(
        db,
        caller,
        request.case_id,
        request.preferred_date,
        request.reason,
        request.urgency.value,
        request.preferred_start_time,
        request.preferred_end_time,
    )
    return success_response(adjournment.to_json(), message="Adjournment request submitted")


@router.get("")
async def list_requests(
    status: Optional[AdjournmentRequestStatus] = None,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Adjournment requests (court staff)"""
    requests = AdjournmentService.list_requests(db, caller, status.value if status else None)
    return success_response([adjournment.to_json() for adjournment in requests])


@router.get("/mine")
async def list_my_requests(
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """The calling client's adjournment requests"""
    requests = AdjournmentService.list_my_requests(db, caller)
    return success_response([adjournment.to_json() for adjournment in requests])


@router.get("/{request_id}")
async def get_request(
    request_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    adjournment = AdjournmentService.get_request(db, caller, request_id)
    return success_response(adjournment.to_json())


@router.post("/{request_id}/accept")
async def accept(
    request_id: str,
    request: AdjournmentAcceptRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Court accepts and books the new hearing slot"""
    adjournment = AdjournmentService.accept(
        db, caller, request_id, request.new_hearing_date,
        request.start_time, request.end_time, request.scheduler_notes
    )
    return success_response(adjournment.to_json(), message="Adjournment request accepted")


@router.post("/{request_id}/reject")
async def reject(
    request_id: str,
    request: AdjournmentRejectRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Court rejects the request"""
    adjournment = AdjournmentService.reject(db, caller, request_id, request.scheduler_notes)
    return success_response(adjournment.to_json(), message="Adjournment request rejected")

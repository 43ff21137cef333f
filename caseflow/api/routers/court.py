"""
Court workflow API router

Filing, scheduling, document requests, adjournment and closing.
"""
from datetime import date, datetime
from typing import Optional
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from caseflow.api.auth import get_caller
from caseflow.api.deps import get_lifecycle
from caseflow.db.connection import get_db
from caseflow.services.lifecycle import LifecycleOrchestrator
from caseflow.types import CallerIdentity
from caseflow.utils.constants import SchedulePriority
from caseflow.utils.response import success_response

router = APIRouter(prefix="/court", tags=["court"])

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class FilingRequest(BaseModel):
    message: Optional[str] = None


class CourtFilingRequest(BaseModel):
    court_name: str
    court_address: Optional[str] = None
    court_district: Optional[str] = None
    filing_fee: Optional[float] = Field(default=None, ge=0)
    hearing_date: Optional[datetime] = None


class SchedulingRequest(BaseModel):
    message: Optional[str] = None
    priority: SchedulePriority = SchedulePriority.MEDIUM


class ScheduleHearingRequest(BaseModel):
    hearing_date: date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    courtroom: Optional[str] = None
    notes: Optional[str] = None


class DocumentRequest(BaseModel):
    message: str
    notes: Optional[str] = None


class ReadyToFileRequest(BaseModel):
    notes: Optional[str] = None


class AdjournRequest(BaseModel):
    new_date: date
    start_time: str = Field(pattern=TIME_PATTERN)
    end_time: str = Field(pattern=TIME_PATTERN)
    reason: str


class CloseCaseRequest(BaseModel):
    notes: Optional[str] = None
    outcome: Optional[str] = None


@router.post("/cases/{case_id}/request-filing")
async def request_filing(
    case_id: str,
    request: FilingRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Client asks the assigned lawyer to file"""
    case = orchestrator.request_filing(db, caller, case_id, request.message)
    return success_response(case.to_json(), message="Filing requested")


@router.post("/cases/{case_id}/file")
async def file_court_case(
    case_id: str,
    request: CourtFilingRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Lawyer confirms the court filing"""
    case = orchestrator.file_court_case(db, caller, case_id, request.model_dump())
    return success_response(case.to_json(), message="Case filed")


@router.post("/cases/{case_id}/request-scheduling")
async def request_scheduling(
    case_id: str,
    request: SchedulingRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Lawyer asks the court for a hearing date"""
    schedule_request = orchestrator.request_scheduling(
        db, caller, case_id, request.message, request.priority.value
    )
    return success_response(schedule_request.to_json(), message="Scheduling requested")


@router.get("/schedule-requests")
async def list_schedule_requests(
    district: Optional[str] = None,
    scheduled: Optional[bool] = None,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Scheduling requests (court staff)"""
    requests = orchestrator.list_schedule_requests(db, caller, district, scheduled)
    return success_response([schedule_request.to_json() for schedule_request in requests])


@router.post("/schedule-requests/{request_id}/schedule")
async def schedule_hearing(
    request_id: str,
    request: ScheduleHearingRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Court scheduler assigns a hearing slot"""
    scheduled = orchestrator.schedule_hearing(
        db,
        caller,
        request_id,
        request.hearing_date,
        request.start_time,
        request.end_time,
        request.courtroom,
        request.notes,
    )
    return success_response(scheduled.to_json(), message="Hearing scheduled")


@router.get("/time-slots")
async def available_time_slots(
    district: str,
    hearing_date: date = Query(..., alias="date"),
    _: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Free standard hearing slots for a district and date"""
    slots = orchestrator.available_time_slots(db, district, hearing_date)
    return success_response({
        "district": district,
        "date": hearing_date.isoformat(),
        "slots": slots,
    })


@router.post("/cases/{case_id}/request-documents")
async def request_documents(
    case_id: str,
    request: DocumentRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Lawyer asks the client for more documents"""
    case = orchestrator.request_documents(db, caller, case_id, request.message, request.notes)
    return success_response(case.to_json(), message="Documents requested")


@router.post("/cases/{case_id}/ready-to-file")
async def mark_ready_to_file(
    case_id: str,
    request: ReadyToFileRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Lawyer marks the case ready to file"""
    case = orchestrator.mark_ready_to_file(db, caller, case_id, request.notes)
    return success_response(case.to_json())


@router.post("/cases/{case_id}/adjourn")
async def adjourn_hearing(
    case_id: str,
    request: AdjournRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Court adjourns the hearing"""
    case = orchestrator.adjourn_hearing(
        db, caller, case_id, request.new_date, request.start_time, request.end_time, request.reason
    )
    return success_response(case.to_json(), message="Hearing adjourned")


@router.post("/cases/{case_id}/close")
async def close_case(
    case_id: str,
    request: CloseCaseRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Court closes the case"""
    case = orchestrator.close_case(db, caller, case_id, request.notes, request.outcome)
    return success_response(case.to_json(), message="Case closed")

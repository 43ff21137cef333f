"""
Case API router
"""
from datetime import date
from typing import Optional, List
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from caseflow.api.auth import get_caller
from caseflow.api.deps import get_lifecycle
from caseflow.db.connection import get_db
from caseflow.services.access import load_case, require_case_access, require_court_staff
from caseflow.services.lifecycle import LifecycleOrchestrator
from caseflow.services.verification_engine import VerificationEngine
from caseflow.types import CallerIdentity
from caseflow.utils.response import success_response
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/cases", tags=["cases"])


# Request models
class DocumentIn(BaseModel):
    filename: str
    original_name: Optional[str] = None


class CaseCreateRequest(BaseModel):
    case_type: str
    plaintiff_name: str
    plaintiff_nic: Optional[str] = None
    plaintiff_address: Optional[str] = None
    plaintiff_phone: Optional[str] = None
    defendant_name: str
    defendant_nic: Optional[str] = None
    defendant_address: Optional[str] = None
    defendant_phone: Optional[str] = None
    defendant_email: Optional[str] = None
    description: Optional[str] = None
    relief_sought: Optional[str] = None
    case_value: Optional[float] = Field(default=None, ge=0)
    incident_date: Optional[date] = None
    district: str
    documents: List[DocumentIn] = []


class CaseUpdateRequest(BaseModel):
    case_type: Optional[str] = None
    plaintiff_name: Optional[str] = None
    plaintiff_nic: Optional[str] = None
    plaintiff_address: Optional[str] = None
    plaintiff_phone: Optional[str] = None
    defendant_name: Optional[str] = None
    defendant_nic: Optional[str] = None
    defendant_address: Optional[str] = None
    defendant_phone: Optional[str] = None
    defendant_email: Optional[str] = None
    description: Optional[str] = None
    relief_sought: Optional[str] = None
    case_value: Optional[float] = Field(default=None, ge=0)
    incident_date: Optional[date] = None
    district: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: str
    notes: Optional[str] = None


@router.post("")
async def create_case(
    request: CaseCreateRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Create a case; verification runs in the background"""
    case = orchestrator.create_case(db, caller, request.model_dump())
    return success_response(orchestrator.describe_case(db, case), message="Case created")


@router.get("/my")
async def list_my_cases(
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Cases owned by the caller"""
    cases = orchestrator.list_my_cases(db, caller)
    return success_response([case.to_json() for case in cases])


@router.get("/assigned")
async def list_assigned_cases(
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Cases the calling lawyer is working on"""
    cases = orchestrator.list_lawyer_cases(db, caller)
    return success_response([case.to_json() for case in cases])


@router.get("/{case_id}")
async def get_case(
    case_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Case detail"""
    case = orchestrator.get_case(db, caller, case_id)
    return success_response(orchestrator.describe_case(db, case))


@router.patch("/{case_id}")
async def update_case(
    case_id: str,
    request: CaseUpdateRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Owner edits case content"""
    case = orchestrator.update_case_details(db, caller, case_id, request.model_dump(exclude_unset=True))
    return success_response(case.to_json(), message="Case updated")


@router.delete("/{case_id}")
async def delete_case(
    case_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Owner deletes an unfiled case"""
    orchestrator.delete_case(db, caller, case_id)
    return success_response({"case_id": case_id}, message="Case deleted")


@router.get("/{case_id}/verification")
async def get_verification(
    case_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Latest verification of a case"""
    require_case_access(load_case(db, case_id), caller)
    return success_response(VerificationEngine.latest_verification(db, case_id))


@router.post("/{case_id}/verify")
async def verify_case(
    case_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Run verification now (court staff)"""
    require_court_staff(caller)
    return success_response(VerificationEngine.verify(db, case_id))


@router.post("/{case_id}/status")
async def update_status(
    case_id: str,
    request: StatusUpdateRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db),
    orchestrator: LifecycleOrchestrator = Depends(get_lifecycle)
):
    """Tracking status override (court staff)"""
    case = orchestrator.update_status(db, caller, case_id, request.status, request.notes)
    return success_response(case.to_json())

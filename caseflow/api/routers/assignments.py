"""
Lawyer assignment API router
"""
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session
from caseflow.api.auth import get_caller
from caseflow.db.connection import get_db
from caseflow.services.assignment_service import AssignmentService
from caseflow.services.identity_resolver import LawyerResolver
from caseflow.types import CallerIdentity
from caseflow.utils.response import success_response

router = APIRouter(prefix="/assignments", tags=["assignments"])


class LawyerRequest(BaseModel):
    case_id: str
    lawyer_id: str
    message: Optional[str] = None


class AssignmentResponseRequest(BaseModel):
    accepted: bool
    response: Optional[str] = None


@router.post("")
async def request_lawyer(
    request: LawyerRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Ask a lawyer to take a case"""
    assignment = AssignmentService.request_lawyer(
        db, caller, request.case_id, request.lawyer_id, request.message
    )
    return success_response(assignment.to_json(), message="Lawyer requested")


@router.get("/pending")
async def list_pending(
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Pending assignments addressed to the calling lawyer"""
    assignments = AssignmentService.list_pending_for_lawyer(db, caller)
    return success_response([assignment.to_json() for assignment in assignments])


@router.get("/lawyers/available")
async def list_available_lawyers(
    case_type: Optional[str] = None,
    _: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Available lawyers, best first, optionally for a case type"""
    resolver = LawyerResolver()
    lawyers = AssignmentService.available_lawyers(db, case_type)
    return success_response([resolver.describe(lawyer) for lawyer in lawyers])


@router.get("/case/{case_id}")
async def list_for_case(
    case_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Assignments of a case"""
    assignments = AssignmentService.list_for_case(db, caller, case_id)
    return success_response([assignment.to_json() for assignment in assignments])


@router.post("/{assignment_id}/respond")
async def respond(
    assignment_id: str,
    request: AssignmentResponseRequest,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Lawyer accepts or rejects an assignment"""
    assignment = AssignmentService.respond(
        db, caller, assignment_id, request.accepted, request.response
    )
    return success_response(assignment.to_json())


@router.post("/{assignment_id}/withdraw")
async def withdraw(
    assignment_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Owner withdraws a pending assignment"""
    assignment = AssignmentService.withdraw(db, caller, assignment_id)
    return success_response(assignment.to_json(), message="Assignment withdrawn")

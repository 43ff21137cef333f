"""
Reconciliation API router
"""
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from caseflow.api.auth import get_caller
from caseflow.db.connection import get_db
from caseflow.services.access import load_case, require_case_access, is_court_staff
from caseflow.services.reconciler import AssignmentReconciler
from caseflow.types import CallerIdentity
from caseflow.utils.response import success_response

router = APIRouter(prefix="/reconciliation", tags=["reconciliation"])


@router.post("/cases/{case_id}")
async def reconcile_case(
    case_id: str,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """Reconcile one case with its assignments"""
    require_case_access(load_case(db, case_id), caller)
    return success_response(AssignmentReconciler.reconcile(db, case_id))


@router.post("/sweep")
async def reconcile_all(
    user_id: Optional[str] = None,
    caller: CallerIdentity = Depends(get_caller),
    db: Session = Depends(get_db)
):
    """
    Bulk reconciliation

    Court staff may sweep every case or one owner's cases; anyone else only
    sweeps their own.
    """
    scope = user_id if is_court_staff(caller) else caller["user_id"]
    return success_response(AssignmentReconciler.reconcile_all(db, scope))

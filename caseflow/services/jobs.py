"""
Background job functions

Entry points run by the job scheduler. Each one opens its own session, checks
that its case still exists and is still in a state the job applies to, and
logs and swallows failures: the request that scheduled it has long returned.
"""
from typing import Dict, Any
from caseflow.db.connection import db_manager
from caseflow.db.models.case import Case
from caseflow.services.notifier import notifier
from caseflow.utils.constants import CaseStatus, VerificationStatus
from caseflow.utils.logger import get_logger
from config.settings import settings

logger = get_logger(__name__)


def run_auto_verify(case_id: str) -> None:
    """
    Verify a newly created case, then queue auto-assignment when it passed

    Args:
        case_id: case ID
    """
    from caseflow.services.verification_engine import VerificationEngine
    from caseflow.services.job_scheduler import job_scheduler, AUTO_ASSIGN_JOB

    try:
        with db_manager.get_db_session() as db:
            case = db.query(Case).filter(Case.id == case_id).first()
            if not case:
                logger.info(f"Auto-verify skipped, case no longer exists: {case_id}")
                return

            outcome = VerificationEngine.verify(db, case_id)

        if outcome["status"] == VerificationStatus.VERIFIED.value and settings.auto_assign_enabled:
            job_scheduler.schedule(
                AUTO_ASSIGN_JOB,
                case_id,
                run_auto_assign,
                delay_seconds=settings.auto_assign_delay_seconds,
                kwargs={"case_id": case_id},
            )
    except Exception as e:
        logger.error(f"Auto-verify failed for case {case_id}: {str(e)}")


def run_auto_assign(case_id: str) -> None:
    """
    Propose the best available lawyer for a verified case

    Args:
        case_id: case ID
    """
    from caseflow.services.assignment_service import AssignmentService

    try:
        with db_manager.get_db_session() as db:
            case = db.query(Case).filter(Case.id == case_id).first()
            if not case:
                logger.info(f"Auto-assign skipped, case no longer exists: {case_id}")
                return
            if case.verification_status != VerificationStatus.VERIFIED.value:
                logger.info(f"Auto-assign skipped, case {case.case_number} is not verified")
                return
            if case.status not in (
                CaseStatus.PENDING.value,
                CaseStatus.VERIFIED.value,
                CaseStatus.LAWYER_REQUESTED.value,
            ):
                logger.info(f"Auto-assign skipped, case {case.case_number} is {case.status}")
                return

            AssignmentService.auto_assign(db, case_id)
    except Exception as e:
        logger.error(f"Auto-assign failed for case {case_id}: {str(e)}")


def run_reconcile_sweep() -> None:
    """Periodic reconciliation over every case"""
    from caseflow.services.reconciler import AssignmentReconciler

    try:
        with db_manager.get_db_session() as db:
            AssignmentReconciler.reconcile_all(db)
    except Exception as e:
        logger.error(f"Reconciliation sweep failed: {str(e)}")


def send_notification(event: str, payload: Dict[str, Any]) -> None:
    """
    Deliver a lifecycle notification

    Args:
        event: event name
        payload: event data
    """
    try:
        notifier.send(event, payload)
    except Exception as e:
        logger.error(f"Notification {event} failed: {str(e)}")

"""
Assignment reconciler module

A case and its lawyer assignments are committed separately, so the case's
current lawyer can drift away from the accepted assignment. The reconciler
detects the drift and repairs it from the assignment records.

Repair order for a lawyer-bound case without a current lawyer (first match wins):
    1. most recent accepted assignment
    2. lawyer_assigned case: force-accept the most recent assignment
    3. hearing_scheduled case: accept a pending assignment, downgrade to lawyer_assigned
A set pointer that no accepted assignment backs is moved to the latest accepted
one. The theft guard runs last and restores a human-originated assignment that
an automated one displaced.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from caseflow.db.models.case import Case
from caseflow.db.models.lawyer_assignment import LawyerAssignment
from caseflow.types import RepairResult, SweepResult
from caseflow.utils.constants import (
    AssignmentStatus,
    AssignedBy,
    CaseStatus,
    HUMAN_ASSIGNED_BY,
    LAWYER_BOUND_STATUSES,
    AUTO_ACCEPT_LAWYER_ASSIGNED_RESPONSE,
    AUTO_ACCEPT_HEARING_SCHEDULED_RESPONSE,
)
from caseflow.utils.exceptions import NotFoundError
from caseflow.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)

RULE_ACCEPTED = "accepted_assignment"
RULE_FORCED_ACCEPT = "forced_accept"
RULE_HEARING_DOWNGRADE = "hearing_downgrade"
RULE_STALE_POINTER = "stale_pointer"
RULE_THEFT_GUARD = "theft_guard"


def needs_lawyer(case: Case) -> bool:
    """True when the case status requires a current lawyer that is missing"""
    return case.status in LAWYER_BOUND_STATUSES and not case.current_lawyer_id


class AssignmentReconciler:
    """Case / assignment consistency repair"""

    @staticmethod
    def _assignments(db: Session, case_id: str) -> List[LawyerAssignment]:
        """Assignments of a case, newest first"""
        return db.query(LawyerAssignment).filter(
            LawyerAssignment.case_id == case_id
        ).order_by(LawyerAssignment.created_at.desc()).all()

    @staticmethod
    def _force_accept(db: Session, assignment: LawyerAssignment, response: str) -> None:
        """Accept an assignment on the lawyer's behalf and commit it"""
        assignment.status = AssignmentStatus.ACCEPTED.value
        assignment.response_date = datetime.utcnow()
        assignment.lawyer_response = response
        db.commit()

    @staticmethod
    def _repair_missing_lawyer(
        db: Session,
        case: Case,
        assignments: List[LawyerAssignment]
    ) -> Optional[str]:
        """
        Fill in a missing current lawyer

        Returns:
            name of the rule applied, None when nothing could be done
        """
        accepted = [a for a in assignments if a.status == AssignmentStatus.ACCEPTED.value]
        if accepted:
            case.current_lawyer_id = accepted[0].lawyer_id
            db.commit()
            return RULE_ACCEPTED

        if case.status == CaseStatus.LAWYER_ASSIGNED.value and assignments:
            latest = assignments[0]
            AssignmentReconciler._force_accept(db, latest, AUTO_ACCEPT_LAWYER_ASSIGNED_RESPONSE)
            case.current_lawyer_id = latest.lawyer_id
            db.commit()
            return RULE_FORCED_ACCEPT

        if case.status == CaseStatus.HEARING_SCHEDULED.value:
            pending = [a for a in assignments if a.status == AssignmentStatus.PENDING.value]
            if pending:
                AssignmentReconciler._force_accept(db, pending[0], AUTO_ACCEPT_HEARING_SCHEDULED_RESPONSE)
                case.current_lawyer_id = pending[0].lawyer_id
                # hearing_scheduled also needs a scheduling record this path cannot vouch for
                case.status = CaseStatus.LAWYER_ASSIGNED.value
                db.commit()
                return RULE_HEARING_DOWNGRADE

        return None

    @staticmethod
    def _repair_stale_pointer(
        db: Session,
        case: Case,
        assignments: List[LawyerAssignment]
    ) -> Optional[str]:
        """Move a current lawyer that no accepted assignment backs"""
        if case.status not in LAWYER_BOUND_STATUSES or not case.current_lawyer_id:
            return None

        accepted = [a for a in assignments if a.status == AssignmentStatus.ACCEPTED.value]
        if not accepted:
            return None
        if any(a.lawyer_id == case.current_lawyer_id for a in accepted):
            return None

        case.current_lawyer_id = accepted[0].lawyer_id
        db.commit()
        return RULE_STALE_POINTER

    @staticmethod
    def _theft_guard(
        db: Session,
        case: Case,
        assignments: List[LawyerAssignment]
    ) -> Optional[str]:
        """Restore a human-originated assignment displaced by an automated one"""
        if len(assignments) < 2 or not case.current_lawyer_id:
            return None

        human_accepted = [
            a for a in assignments
            if a.status == AssignmentStatus.ACCEPTED.value and a.assigned_by in HUMAN_ASSIGNED_BY
        ]
        if not human_accepted:
            return None

        rightful = human_accepted[0]
        if rightful.lawyer_id == case.current_lawyer_id:
            return None

        backing = [a for a in assignments if a.lawyer_id == case.current_lawyer_id]
        if any(a.assigned_by != AssignedBy.SYSTEM.value for a in backing):
            return None

        logger.warning(
            f"Case {case.case_number}: lawyer {case.current_lawyer_id} replaced a "
            f"{rightful.assigned_by} assignment, restoring {rightful.lawyer_id}"
        )
        case.current_lawyer_id = rightful.lawyer_id
        db.commit()
        return RULE_THEFT_GUARD

    @staticmethod
    def reconcile_case(db: Session, case: Case) -> RepairResult:
        """
        Reconcile a loaded case with its assignments

        Args:
            db: database session
            case: Case instance

        Returns:
            repair result
        """
        assignments = AssignmentReconciler._assignments(db, case.id)
        applied = None

        if needs_lawyer(case):
            applied = AssignmentReconciler._repair_missing_lawyer(db, case, assignments)
            if applied is None:
                logger.warning(
                    f"Case {case.case_number} is {case.status} without a lawyer "
                    f"and has no assignment to repair from"
                )
        else:
            applied = AssignmentReconciler._repair_stale_pointer(db, case, assignments)

        applied = AssignmentReconciler._theft_guard(db, case, assignments) or applied

        if applied:
            logger.info(
                f"Case {case.case_number} reconciled ({applied}): lawyer={case.current_lawyer_id}, status={case.status}"
            )

        return {
            "case_id": case.id,
            "case_number": case.case_number,
            "fixed": applied is not None,
            "lawyer_id": case.current_lawyer_id,
            "rule": applied,
            "status": case.status,
        }

    @staticmethod
    def reconcile(db: Session, case_id: str) -> RepairResult:
        """
        Reconcile one case

        Args:
            db: database session
            case_id: case ID

        Returns:
            repair result

        Raises:
            NotFoundError: case does not exist
        """
        case = db.query(Case).filter(Case.id == case_id).first()
        if not case:
            raise NotFoundError("Case", case_id)
        return AssignmentReconciler.reconcile_case(db, case)

    @staticmethod
    @log_execution_time()
    def reconcile_all(db: Session, user_id: Optional[str] = None) -> SweepResult:
        """
        Reconcile every case, optionally only the cases of one owner

        A failure on one case is rolled back and counted; the sweep goes on.

        Args:
            db: database session
            user_id: owner ID scope (None: all cases)

        Returns:
            sweep counters
        """
        query = db.query(Case.id)
        if user_id:
            query = query.filter(Case.owner_id == user_id)
        case_ids = [row[0] for row in query.order_by(Case.created_at).all()]

        result: SweepResult = {
            "total_checked": 0,
            "fixed_count": 0,
            "unfixed_count": 0,
            "failed_count": 0,
        }

        for case_id in case_ids:
            result["total_checked"] += 1
            try:
                repair = AssignmentReconciler.reconcile(db, case_id)
                if repair["fixed"]:
                    result["fixed_count"] += 1
                case = db.query(Case).filter(Case.id == case_id).first()
                if case and needs_lawyer(case):
                    result["unfixed_count"] += 1
            except Exception as e:
                db.rollback()
                result["failed_count"] += 1
                logger.error(f"Reconciliation failed for case {case_id}: {str(e)}")

        logger.info(
            f"Reconciliation sweep: checked={result['total_checked']}, fixed={result['fixed_count']}, "
            f"unfixed={result['unfixed_count']}, failed={result['failed_count']}"
        )
        return result

"""
Lawyer assignment service module

Assignments and cases are committed one after the other, never in one
transaction. If the second commit is lost the reconciler repairs the case.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from config.specializations import get_specializations
from caseflow.db.models.case import Case
from caseflow.db.models.lawyer_assignment import LawyerAssignment
from caseflow.db.models.user_account import UserAccount
from caseflow.services.access import (
    load_case, is_owner, is_admin, caller_type, require_case_access
)
from caseflow.types import CallerIdentity
from caseflow.utils.constants import (
    AssignmentStatus,
    AssignedBy,
    CaseStatus,
    UserType,
    LAWYER_REQUESTABLE_STATUSES,
    SYSTEM_ASSIGNMENT_MESSAGE,
    CLIENT_ASSIGNMENT_MESSAGE,
)
from caseflow.utils.exceptions import (
    NotFoundError, InvalidStateError, ConflictError, AccessDeniedError
)
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)

ACTIVE_ASSIGNMENT_STATUSES = (AssignmentStatus.PENDING.value, AssignmentStatus.ACCEPTED.value)


class AssignmentService:
    """Lawyer assignment workflow"""

    @staticmethod
    def active_assignment(db: Session, case_id: str) -> Optional[LawyerAssignment]:
        """Newest pending or accepted assignment of a case"""
        return db.query(LawyerAssignment).filter(
            LawyerAssignment.case_id == case_id,
            LawyerAssignment.status.in_(ACTIVE_ASSIGNMENT_STATUSES)
        ).order_by(LawyerAssignment.created_at.desc()).first()

    @staticmethod
    def available_lawyers(db: Session, case_type: Optional[str] = None) -> List[UserAccount]:
        """
        Lawyers open for new cases, best first

        Args:
            db: database session
            case_type: restrict to lawyers whose specialization fits (None: any)

        Returns:
            lawyers ordered by rating then experience
        """
        query = db.query(UserAccount).filter(
            UserAccount.user_type == UserType.LAWYER.value,
            UserAccount.is_available.is_(True),
            UserAccount.is_active.is_(True),
        )
        if case_type:
            query = query.filter(UserAccount.specialization.in_(get_specializations(case_type)))

        return query.order_by(
            UserAccount.rating.desc(),
            UserAccount.years_experience.desc()
        ).all()

    @staticmethod
    def find_best_lawyer(db: Session, case_type: str) -> Optional[UserAccount]:
        """
        Best available lawyer for a case type

        Falls back to any available lawyer when no specialist is free.
        """
        lawyers = AssignmentService.available_lawyers(db, case_type)
        if not lawyers:
            logger.info(f"No specialist available for {case_type}, using any available lawyer")
            lawyers = AssignmentService.available_lawyers(db)
        return lawyers[0] if lawyers else None

    @staticmethod
    def _propose(
        db: Session,
        case: Case,
        lawyer_id: str,
        assigned_by: str,
        message: Optional[str]
    ) -> LawyerAssignment:
        """Record a pending assignment, then move the case to lawyer_requested"""
        assignment = LawyerAssignment(
            case_id=case.id,
            lawyer_id=lawyer_id,
            client_id=case.owner_id,
            assigned_by=assigned_by,
            status=AssignmentStatus.PENDING.value,
            client_message=message,
        )
        db.add(assignment)
        db.commit()

        case.status = CaseStatus.LAWYER_REQUESTED.value
        case.current_lawyer_id = None
        db.commit()

        logger.info(
            f"Lawyer {lawyer_id} proposed for case {case.case_number} ({assigned_by})"
        )
        return assignment

    @staticmethod
    def request_lawyer(
        db: Session,
        caller: CallerIdentity,
        case_id: str,
        lawyer_id: str,
        message: Optional[str] = None
    ) -> LawyerAssignment:
        """
        Ask a lawyer to take a case

        Args:
            db: database session
            caller: case owner or admin
            case_id: case ID
            lawyer_id: requested lawyer
            message: note for the lawyer

        Returns:
            new pending assignment
        """
        case = load_case(db, case_id)
        if is_owner(case, caller):
            assigned_by = AssignedBy.CLIENT.value
        elif is_admin(caller):
            assigned_by = AssignedBy.ADMIN.value
        else:
            raise AccessDeniedError("Only the case owner or an admin can request a lawyer")

        if case.status not in LAWYER_REQUESTABLE_STATUSES:
            raise InvalidStateError(
                f"a lawyer cannot be requested for a {case.status} case", case.status
            )

        lawyer = db.query(UserAccount).filter(
            UserAccount.id == lawyer_id,
            UserAccount.user_type == UserType.LAWYER.value
        ).first()
        if not lawyer:
            raise NotFoundError("Lawyer", lawyer_id)
        if not (lawyer.is_available and lawyer.is_active):
            raise InvalidStateError(f"lawyer {lawyer.full_name} is not available")

        if AssignmentService.active_assignment(db, case.id):
            raise ConflictError("this case already has a pending or accepted lawyer assignment")

        return AssignmentService._propose(
            db, case, lawyer.id, assigned_by, message or CLIENT_ASSIGNMENT_MESSAGE
        )

    @staticmethod
    def auto_assign(db: Session, case_id: str) -> Optional[LawyerAssignment]:
        """
        Propose the best available lawyer on the system's behalf

        Args:
            db: database session
            case_id: case ID

        Returns:
            new assignment, None when one already exists or no lawyer is free
        """
        case = load_case(db, case_id)

        if AssignmentService.active_assignment(db, case.id):
            logger.info(f"Auto-assign skipped, case {case.case_number} already has an assignment")
            return None

        lawyer = AssignmentService.find_best_lawyer(db, case.case_type)
        if not lawyer:
            logger.warning(f"Auto-assign found no available lawyer for case {case.case_number}")
            return None

        return AssignmentService._propose(
            db, case, lawyer.id, AssignedBy.SYSTEM.value, SYSTEM_ASSIGNMENT_MESSAGE
        )

    @staticmethod
    def _load_assignment(db: Session, assignment_id: str) -> LawyerAssignment:
        assignment = db.query(LawyerAssignment).filter(LawyerAssignment.id == assignment_id).first()
        if not assignment:
            raise NotFoundError("Assignment", assignment_id)
        return assignment

    @staticmethod
    def respond(
        db: Session,
        caller: CallerIdentity,
        assignment_id: str,
        accepted: bool,
        response: Optional[str] = None
    ) -> LawyerAssignment:
        """
        Lawyer accepts or rejects an assignment

        Args:
            db: database session
            caller: the addressed lawyer
            assignment_id: assignment ID
            accepted: True to accept
            response: note from the lawyer

        Returns:
            updated assignment
        """
        assignment = AssignmentService._load_assignment(db, assignment_id)

        if caller_type(caller) != UserType.LAWYER.value or assignment.lawyer_id != caller.get("user_id"):
            raise AccessDeniedError("Only the addressed lawyer can respond to this assignment")
        if assignment.status != AssignmentStatus.PENDING.value:
            raise InvalidStateError(
                f"assignment is already {assignment.status}", assignment.status
            )

        assignment.status = AssignmentStatus.ACCEPTED.value if accepted else AssignmentStatus.REJECTED.value
        assignment.lawyer_response = response
        assignment.response_date = datetime.utcnow()
        db.commit()

        case = load_case(db, assignment.case_id)
        if accepted:
            case.status = CaseStatus.LAWYER_ASSIGNED.value
            case.current_lawyer_id = assignment.lawyer_id
        elif case.status in LAWYER_REQUESTABLE_STATUSES:
            case.status = CaseStatus.VERIFIED.value
            case.current_lawyer_id = None
        db.commit()

        logger.info(
            f"Assignment {assignment.id} {assignment.status} by lawyer {assignment.lawyer_id} "
            f"(case {case.case_number} now {case.status})"
        )
        return assignment

    @staticmethod
    def withdraw(db: Session, caller: CallerIdentity, assignment_id: str) -> LawyerAssignment:
        """
        Owner withdraws a pending assignment

        Args:
            db: database session
            caller: case owner or admin
            assignment_id: assignment ID

        Returns:
            updated assignment
        """
        assignment = AssignmentService._load_assignment(db, assignment_id)
        case = load_case(db, assignment.case_id)

        if not (is_owner(case, caller) or is_admin(caller)):
            raise AccessDeniedError("Only the case owner can withdraw an assignment")
        if assignment.status != AssignmentStatus.PENDING.value:
            raise InvalidStateError(
                f"only pending assignments can be withdrawn (is {assignment.status})", assignment.status
            )

        assignment.status = AssignmentStatus.WITHDRAWN.value
        db.commit()

        if case.status == CaseStatus.LAWYER_REQUESTED.value:
            case.status = CaseStatus.VERIFIED.value
            case.current_lawyer_id = None
            db.commit()

        logger.info(f"Assignment {assignment.id} withdrawn from case {case.case_number}")
        return assignment

    @staticmethod
    def list_for_case(db: Session, caller: CallerIdentity, case_id: str) -> List[LawyerAssignment]:
        """Assignments of a case, newest first"""
        case = load_case(db, case_id)
        require_case_access(case, caller)
        return db.query(LawyerAssignment).filter(
            LawyerAssignment.case_id == case.id
        ).order_by(LawyerAssignment.created_at.desc()).all()

    @staticmethod
    def list_pending_for_lawyer(db: Session, caller: CallerIdentity) -> List[LawyerAssignment]:
        """Pending assignments addressed to the calling lawyer"""
        if caller_type(caller) != UserType.LAWYER.value:
            raise AccessDeniedError("Only lawyers have assignment requests")
        return db.query(LawyerAssignment).filter(
            LawyerAssignment.lawyer_id == caller.get("user_id"),
            LawyerAssignment.status == AssignmentStatus.PENDING.value
        ).order_by(LawyerAssignment.created_at.desc()).all()

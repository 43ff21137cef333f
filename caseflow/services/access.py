"""
Case access rules
"""
from sqlalchemy.orm import Session
from caseflow.db.models.case import Case
from caseflow.types import CallerIdentity
from caseflow.utils.constants import UserType, COURT_STAFF_TYPES, normalize_user_type
from caseflow.utils.exceptions import NotFoundError, AccessDeniedError


def load_case(db: Session, case_id: str) -> Case:
    """
    Load a case or raise

    Args:
        db: database session
        case_id: case ID

    Returns:
        Case instance

    Raises:
        NotFoundError: case does not exist
    """
    case = db.query(Case).filter(Case.id == case_id).first()
    if not case:
        raise NotFoundError("Case", case_id)
    return case


def caller_type(caller: CallerIdentity) -> str:
    return normalize_user_type(caller.get("user_type"))


def is_owner(case: Case, caller: CallerIdentity) -> bool:
    return case.owner_id == caller.get("user_id")


def is_assigned_lawyer(case: Case, caller: CallerIdentity) -> bool:
    return (
        caller_type(caller) == UserType.LAWYER.value
        and case.current_lawyer_id is not None
        and case.current_lawyer_id == caller.get("user_id")
    )


def is_admin(caller: CallerIdentity) -> bool:
    return caller_type(caller) == UserType.ADMIN.value


def is_court_staff(caller: CallerIdentity) -> bool:
    return caller_type(caller) in COURT_STAFF_TYPES


def require_owner(case: Case, caller: CallerIdentity) -> None:
    if not is_owner(case, caller):
        raise AccessDeniedError("Only the case owner can do this")


def require_assigned_lawyer(case: Case, caller: CallerIdentity) -> None:
    if not is_assigned_lawyer(case, caller):
        raise AccessDeniedError("Only the assigned lawyer can do this")


def require_court_staff(caller: CallerIdentity) -> None:
    if not is_court_staff(caller):
        raise AccessDeniedError("Only court schedulers and admins can do this")


def require_case_access(case: Case, caller: CallerIdentity) -> None:
    """Owner, assigned lawyer, admin or court scheduler"""
    if is_owner(case, caller) or is_assigned_lawyer(case, caller) or is_court_staff(caller):
        return
    raise AccessDeniedError()

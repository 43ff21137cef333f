"""
Identity resolver module

Turns a user ID into a display identity. One resolver per role; the composite
resolver picks the right one or tries them all when the role is unknown.
"""
from typing import Optional, Dict, Any, List
from sqlalchemy.orm import Session
from caseflow.db.models.user_account import UserAccount
from caseflow.utils.constants import UserType, normalize_user_type
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)


class RoleResolver:
    """Resolves users of a set of roles"""

    user_types: List[str] = []

    def lookup(self, db: Session, user_id: str) -> Optional[UserAccount]:
        if not user_id:
            return None
        return db.query(UserAccount).filter(
            UserAccount.id == user_id,
            UserAccount.user_type.in_(self.user_types)
        ).first()

    def describe(self, account: UserAccount) -> Dict[str, Any]:
        return {
            "id": account.id,
            "user_type": account.user_type,
            "full_name": account.full_name,
            "email": account.email,
        }

    def resolve(self, db: Session, user_id: str) -> Optional[Dict[str, Any]]:
        account = self.lookup(db, user_id)
        return self.describe(account) if account else None


class ClientResolver(RoleResolver):
    user_types = [UserType.CLIENT.value]


class LawyerResolver(RoleResolver):
    user_types = [UserType.LAWYER.value]

    def describe(self, account: UserAccount) -> Dict[str, Any]:
        identity = super().describe(account)
        identity.update({
            "specialization": account.specialization,
            "rating": account.rating,
            "years_experience": account.years_experience,
        })
        return identity


class StaffResolver(RoleResolver):
    user_types = [UserType.ADMIN.value, UserType.COURT_SCHEDULER.value]


class IdentityResolver:
    """Composite resolver across every role"""

    def __init__(self):
        self.resolvers: Dict[str, RoleResolver] = {
            UserType.CLIENT.value: ClientResolver(),
            UserType.LAWYER.value: LawyerResolver(),
            UserType.ADMIN.value: StaffResolver(),
            UserType.COURT_SCHEDULER.value: StaffResolver(),
        }

    def resolve(self, db: Session, user_id: str, user_type: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        Resolve a user identity

        Args:
            db: database session
            user_id: user ID
            user_type: role, legacy names accepted (None: try every role)

        Returns:
            identity dictionary or None
        """
        if not user_id:
            return None

        if user_type:
            resolver = self.resolvers.get(normalize_user_type(user_type))
            return resolver.resolve(db, user_id) if resolver else None

        for resolver in (self.resolvers[UserType.CLIENT.value],
                         self.resolvers[UserType.LAWYER.value],
                         self.resolvers[UserType.ADMIN.value]):
            identity = resolver.resolve(db, user_id)
            if identity:
                return identity

        logger.debug(f"No identity found for user {user_id}")
        return None

    def display_name(self, db: Session, user_id: str, user_type: Optional[str] = None) -> Optional[str]:
        """Full name of a user, None when unknown"""
        identity = self.resolve(db, user_id, user_type)
        return identity["full_name"] if identity else None


# Global identity resolver instance
identity_resolver = IdentityResolver()

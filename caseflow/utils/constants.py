"""
Constants module
Status vocabularies and lifecycle groupings kept in one place
"""
from enum import Enum
from typing import Dict, FrozenSet, List


# ============================================================================
# Case status
# ============================================================================

class CaseStatus(str, Enum):
    """Case lifecycle status"""
    PENDING = "pending"
    VERIFIED = "verified"
    LAWYER_REQUESTED = "lawyer_requested"
    LAWYER_ASSIGNED = "lawyer_assigned"
    FILING_REQUESTED = "filing_requested"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    FILED = "filed"
    SCHEDULING_REQUESTED = "scheduling_requested"
    HEARING_SCHEDULED = "hearing_scheduled"
    RESCHEDULED = "rescheduled"
    ADJOURNED = "adjourned"
    CLOSED = "closed"


CASE_STATUSES: List[str] = [status.value for status in CaseStatus]

# Statuses in which the case must point at the lawyer of its accepted assignment
LAWYER_BOUND_STATUSES: FrozenSet[str] = frozenset({
    CaseStatus.LAWYER_ASSIGNED.value,
    CaseStatus.FILING_REQUESTED.value,
    CaseStatus.FILED.value,
    CaseStatus.SCHEDULING_REQUESTED.value,
    CaseStatus.HEARING_SCHEDULED.value,
})

# Statuses reached only after the case was filed with a court
POST_FILING_STATUSES: FrozenSet[str] = frozenset({
    CaseStatus.FILED.value,
    CaseStatus.SCHEDULING_REQUESTED.value,
    CaseStatus.HEARING_SCHEDULED.value,
    CaseStatus.RESCHEDULED.value,
    CaseStatus.ADJOURNED.value,
    CaseStatus.CLOSED.value,
})

# Statuses from which a client may ask for a lawyer
LAWYER_REQUESTABLE_STATUSES: FrozenSet[str] = frozenset({
    CaseStatus.PENDING.value,
    CaseStatus.VERIFIED.value,
    CaseStatus.LAWYER_REQUESTED.value,
})


class VerificationStatus(str, Enum):
    """Verification outcome"""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


VERIFICATION_STATUSES: List[str] = [status.value for status in VerificationStatus]


class FilingStatus(str, Enum):
    """Court filing progress on the case"""
    NOT_STARTED = "not_started"
    PREPARING = "preparing"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FILED = "filed"


FILING_STATUSES: List[str] = [status.value for status in FilingStatus]


# ============================================================================
# Lawyer assignment
# ============================================================================

class AssignmentStatus(str, Enum):
    """Lawyer assignment status"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


ASSIGNMENT_STATUSES: List[str] = [status.value for status in AssignmentStatus]


class AssignedBy(str, Enum):
    """Who created the assignment"""
    SYSTEM = "system"
    CLIENT = "client"
    ADMIN = "admin"


ASSIGNED_BY_VALUES: List[str] = [value.value for value in AssignedBy]

# Human-originated provenance, preferred over automated assignments
HUMAN_ASSIGNED_BY: FrozenSet[str] = frozenset({
    AssignedBy.CLIENT.value,
    AssignedBy.ADMIN.value,
})

AUTO_ACCEPT_LAWYER_ASSIGNED_RESPONSE = "Auto-accepted due to lawyer_assigned status mismatch"
AUTO_ACCEPT_HEARING_SCHEDULED_RESPONSE = "Auto-accepted for hearing scheduled case"
SYSTEM_ASSIGNMENT_MESSAGE = "Auto-assignment by system. Please review and accept this case."
CLIENT_ASSIGNMENT_MESSAGE = "Please review and accept this case assignment."


# ============================================================================
# Users
# ============================================================================

class UserType(str, Enum):
    """Caller roles"""
    CLIENT = "client"
    LAWYER = "lawyer"
    ADMIN = "admin"
    COURT_SCHEDULER = "court_scheduler"


USER_TYPES: List[str] = [user_type.value for user_type in UserType]

# Older role names still issued by the auth layer
LEGACY_USER_TYPES: Dict[str, str] = {
    "verified_lawyer": UserType.LAWYER.value,
    "verified_client": UserType.CLIENT.value,
    "user": UserType.CLIENT.value,
    "verifier": UserType.ADMIN.value,
}

COURT_STAFF_TYPES: FrozenSet[str] = frozenset({
    UserType.ADMIN.value,
    UserType.COURT_SCHEDULER.value,
})


def normalize_user_type(user_type: str) -> str:
    """
    Map legacy role names onto the current vocabulary

    Args:
        user_type: role name from the auth layer

    Returns:
        normalized role name
    """
    value = (user_type or "").strip().lower()
    return LEGACY_USER_TYPES.get(value, value)


# ============================================================================
# Court
# ============================================================================

DISTRICTS: List[str] = [
    "Colombo", "Gampaha", "Kalutara", "Kandy", "Matale", "Nuwara Eliya",
    "Galle", "Matara", "Hambantota", "Jaffna", "Kilinochchi", "Mannar",
    "Vavuniya", "Mullaitivu", "Batticaloa", "Ampara", "Trincomalee",
    "Kurunegala", "Puttalam", "Anuradhapura", "Polonnaruwa", "Badulla",
    "Moneragala", "Ratnapura", "Kegalle",
]

DEFAULT_COURTROOM = "Main Court"

# Standard hearing slots (09:00-17:00, lunch break 12:00-14:00)
STANDARD_TIME_SLOTS: List[Dict[str, str]] = [
    {"start_time": "09:00", "end_time": "10:00"},
    {"start_time": "10:00", "end_time": "11:00"},
    {"start_time": "11:00", "end_time": "12:00"},
    {"start_time": "14:00", "end_time": "15:00"},
    {"start_time": "15:00", "end_time": "16:00"},
    {"start_time": "16:00", "end_time": "17:00"},
]


class SchedulePriority(str, Enum):
    """Scheduling request priority"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ScheduledCaseStatus(str, Enum):
    """Scheduled hearing status"""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ADJOURNED = "adjourned"
    CANCELLED = "cancelled"


class AdjournmentRequestStatus(str, Enum):
    """Client adjournment request status"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


ADJOURNMENT_REQUEST_STATUSES: List[str] = [status.value for status in AdjournmentRequestStatus]


class AdjournmentUrgency(str, Enum):
    """How urgently the client needs the hearing moved"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


ADJOURNMENT_URGENCIES: List[str] = [urgency.value for urgency in AdjournmentUrgency]


# ============================================================================
# Notifications
# ============================================================================

class NotificationEvent(str, Enum):
    """Events pushed to the notification service"""
    CASE_FILED = "case_filed"
    DOCUMENT_REQUESTED = "document_requested"

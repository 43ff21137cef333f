"""
Shared type definitions
"""
from typing import TypedDict, Optional, List


class IssueDict(TypedDict):
    """A single verification issue"""
    field: str
    message: str
    resolved: bool


class VerificationOutcome(TypedDict, total=False):
    """Result of a verification run"""
    case_id: str
    verification_id: Optional[str]
    status: str
    issues: List[IssueDict]
    verification_date: Optional[str]


class RepairResult(TypedDict, total=False):
    """Result of reconciling a single case"""
    case_id: str
    case_number: str
    fixed: bool
    lawyer_id: Optional[str]
    rule: Optional[str]
    status: str


class SweepResult(TypedDict):
    """Counters reported by a bulk reconciliation sweep"""
    total_checked: int
    fixed_count: int
    unfixed_count: int
    failed_count: int


class CallerIdentity(TypedDict):
    """Verified caller identity from the auth layer"""
    user_id: str
    user_type: str

"""Database Models module"""

from caseflow.db.models.case import Case
from caseflow.db.models.case_document import CaseDocument
from caseflow.db.models.lawyer_assignment import LawyerAssignment
from caseflow.db.models.verification import Verification
from caseflow.db.models.verification_issue import VerificationIssue
from caseflow.db.models.court_filing import CourtFiling
from caseflow.db.models.court_schedule_request import CourtScheduleRequest
from caseflow.db.models.scheduled_case import ScheduledCase
from caseflow.db.models.user_account import UserAccount
from caseflow.db.models.adjournment_request import AdjournmentRequest

__all__ = [
    "Case",
    "CaseDocument",
    "LawyerAssignment",
    "Verification",
    "VerificationIssue",
    "CourtFiling",
    "CourtScheduleRequest",
    "ScheduledCase",
    "UserAccount",
    "AdjournmentRequest",
]

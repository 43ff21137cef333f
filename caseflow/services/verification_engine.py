"""
Verification engine module

Completeness check run shortly after a case is created. The policy is lenient:
issues are always recorded, but a case is rejected only when documents,
description and plaintiff NIC are all missing.
"""
from datetime import datetime
from typing import List
from sqlalchemy.orm import Session
from caseflow.db.models.case import Case
from caseflow.db.models.verification import Verification
from caseflow.db.models.verification_issue import VerificationIssue
from caseflow.types import IssueDict, VerificationOutcome
from caseflow.utils.constants import VerificationStatus
from caseflow.utils.exceptions import NotFoundError
from caseflow.utils.helpers import is_blank
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)

MIN_DOCUMENTS = 1
MIN_DESCRIPTION_LENGTH = 3
MIN_NIC_LENGTH = 2


class VerificationEngine:
    """Case completeness verification"""

    @staticmethod
    def collect_issues(case: Case) -> List[IssueDict]:
        """
        Issues found on a case

        Args:
            case: Case instance

        Returns:
            list of issues
        """
        issues: List[IssueDict] = []

        if len(case.documents) < MIN_DOCUMENTS:
            issues.append({
                "field": "documents",
                "message": "At least one document is required",
                "resolved": False,
            })

        if len(case.description or "") < MIN_DESCRIPTION_LENGTH:
            issues.append({
                "field": "description",
                "message": "Case description is too brief (minimum 3 characters)",
                "resolved": False,
            })

        if len(case.plaintiff_nic or "") < MIN_NIC_LENGTH:
            issues.append({
                "field": "plaintiffNIC",
                "message": "Plaintiff NIC number is required",
                "resolved": False,
            })

        return issues

    @staticmethod
    def decide(case: Case) -> str:
        """
        Verification verdict for a case

        Args:
            case: Case instance

        Returns:
            "rejected" when every critical field is empty, "verified" otherwise
        """
        if (
            len(case.documents) == 0
            and is_blank(case.description)
            and is_blank(case.plaintiff_nic)
        ):
            return VerificationStatus.REJECTED.value
        return VerificationStatus.VERIFIED.value

    @staticmethod
    def verify(db: Session, case_id: str) -> VerificationOutcome:
        """
        Verify a case and record the attempt

        Args:
            db: database session
            case_id: case ID

        Returns:
            verification outcome

        Raises:
            NotFoundError: case does not exist
        """
        case = db.query(Case).filter(Case.id == case_id).first()
        if not case:
            raise NotFoundError("Case", case_id)

        issues = VerificationEngine.collect_issues(case)
        status = VerificationEngine.decide(case)

        verification = Verification(
            case_id=case.id,
            status=status,
            verification_date=datetime.utcnow() if status == VerificationStatus.VERIFIED.value else None,
        )
        verification.issues = [
            VerificationIssue(field=issue["field"], message=issue["message"], resolved=issue["resolved"])
            for issue in issues
        ]
        db.add(verification)

        # Only the verification status moves; the lifecycle status is left alone
        case.verification_status = status
        db.commit()

        logger.info(
            f"Case {case.case_number} verified: {status} ({len(issues)} issues)"
        )

        return {
            "case_id": case.id,
            "verification_id": verification.id,
            "status": status,
            "issues": issues,
            "verification_date": verification.verification_date.isoformat() if verification.verification_date else None,
        }

    @staticmethod
    def latest_verification(db: Session, case_id: str) -> VerificationOutcome:
        """
        Most recent verification of a case

        Args:
            db: database session
            case_id: case ID

        Returns:
            newest verification, or a pending outcome when none was recorded
        """
        case = db.query(Case).filter(Case.id == case_id).first()
        if not case:
            raise NotFoundError("Case", case_id)

        verification = db.query(Verification).filter(
            Verification.case_id == case_id
        ).order_by(Verification.created_at.desc()).first()

        if not verification:
            return {
                "case_id": case_id,
                "verification_id": None,
                "status": VerificationStatus.PENDING.value,
                "issues": [],
                "verification_date": None,
            }

        return {
            "case_id": case_id,
            "verification_id": verification.id,
            "status": verification.status,
            "issues": [
                {"field": issue.field, "message": issue.message, "resolved": issue.resolved}
                for issue in verification.issues
            ],
            "verification_date": verification.verification_date.isoformat() if verification.verification_date else None,
        }

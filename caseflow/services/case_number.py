"""
Case number generation module

Numbers look like CL<year>-<NNNN> and grow per year. The unique constraint on
cases.case_number is the real guard: a collision at commit time means the
number was taken by a concurrent writer, and the next candidate is tried.
"""
from datetime import datetime
from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from caseflow.db.models.case import Case
from caseflow.utils.exceptions import ConflictError
from caseflow.utils.helpers import timestamp_suffix
from caseflow.utils.logger import get_logger
from config.settings import settings

logger = get_logger(__name__)

CASE_NUMBER_PREFIX = "CL"


def year_prefix(year: int) -> str:
    """Case number prefix for a year (e.g. CL2026-)"""
    return f"{CASE_NUMBER_PREFIX}{year}-"


def format_case_number(year: int, sequence: int) -> str:
    """Case number for a year and sequence (e.g. CL2026-0007)"""
    return f"{year_prefix(year)}{sequence:04d}"


def fallback_case_number(year: int) -> str:
    """Timestamp-derived case number used when every candidate is taken"""
    return f"{year_prefix(year)}{timestamp_suffix(6)}"


def is_case_number_collision(error: IntegrityError) -> bool:
    """True when an integrity error comes from the case_number unique constraint"""
    # SQLite names the column, MySQL and PostgreSQL the ix_cases_case_number index
    return "case_number" in str(error.orig)


class CaseNumberGenerator:
    """Case number generator"""

    @staticmethod
    def latest_sequence(db: Session, year: int) -> int:
        """
        Highest sequence already used in a year

        Args:
            db: database session
            year: case year

        Returns:
            highest sequence, 0 when the year has no cases
        """
        prefix = year_prefix(year)
        latest = db.query(Case.case_number).filter(
            Case.case_number.like(f"{prefix}%")
        ).order_by(
            func.length(Case.case_number).desc(),
            Case.case_number.desc()
        ).first()

        if not latest:
            return 0

        try:
            return int(latest[0][len(prefix):])
        except ValueError:
            logger.warning(f"Unparseable case number ignored: {latest[0]}")
            return 0

    @staticmethod
    def next_case_number(
        db: Session,
        year: Optional[int] = None,
        max_attempts: Optional[int] = None
    ) -> str:
        """
        Next free case number for the year

        Args:
            db: database session
            year: case year (None: current year)
            max_attempts: candidates to check before falling back

        Returns:
            case number
        """
        year = year or datetime.utcnow().year
        max_attempts = max_attempts or settings.case_number_max_attempts
        sequence = CaseNumberGenerator.latest_sequence(db, year) + 1

        for _ in range(max_attempts):
            candidate = format_case_number(year, sequence)
            taken = db.query(Case.id).filter(Case.case_number == candidate).first()
            if not taken:
                return candidate
            sequence += 1

        fallback = fallback_case_number(year)
        logger.warning(f"Case number candidates exhausted, using fallback: {fallback}")
        return fallback

    @staticmethod
    def insert_with_number(db: Session, case: Case, max_attempts: Optional[int] = None) -> Case:
        """
        Commit a new case under a fresh case number

        A unique violation on case_number is treated as a lost race and retried
        with the next candidate. Any other integrity error is rolled back and
        raised.

        Args:
            db: database session
            case: new Case instance (id already assigned)
            max_attempts: commit attempts before giving up

        Returns:
            committed Case

        Raises:
            ConflictError: every attempt collided
            IntegrityError: the case broke a constraint other than case_number
        """
        max_attempts = max_attempts or settings.case_number_max_attempts
        year = (case.created_at or datetime.utcnow()).year

        for attempt in range(1, max_attempts + 1):
            case.case_number = CaseNumberGenerator.next_case_number(db, year)
            db.add(case)
            try:
                db.commit()
                logger.info(f"Case number assigned: {case.case_number} (attempt {attempt})")
                return case
            except IntegrityError as e:
                db.rollback()
                if not is_case_number_collision(e):
                    raise
                logger.warning(
                    f"Case number collision on {case.case_number}, retrying - {str(e.orig)}"
                )

        raise ConflictError(f"could not allocate a unique case number after {max_attempts} attempts")

"""
Verification engine integration tests
"""
import pytest

from caseflow.db.models import Case, Verification
from caseflow.services.verification_engine import VerificationEngine
from caseflow.utils.exceptions import NotFoundError


def test_verify_records_attempt_and_issues(db_session, make_case, client_user):
    case = make_case(client_user.id, documents=[], description="ok")

    outcome = VerificationEngine.verify(db_session, case.id)

    assert outcome["status"] == "verified"
    assert {issue["field"] for issue in outcome["issues"]} == {"documents", "description"}

    db_session.expire_all()
    verification = db_session.query(Verification).filter(Verification.case_id == case.id).one()
    assert verification.status == "verified"
    assert verification.verification_date is not None
    assert len(verification.issues) == 2
    assert all(issue.resolved is False for issue in verification.issues)


def test_verify_rejects_only_when_everything_is_missing(db_session, make_case, client_user):
    case = make_case(client_user.id, documents=[], description="", plaintiff_nic=None)

    outcome = VerificationEngine.verify(db_session, case.id)

    assert outcome["status"] == "rejected"
    assert outcome["verification_date"] is None
    db_session.expire_all()
    assert db_session.get(Case, case.id).verification_status == "rejected"


def test_verify_leaves_lifecycle_status_alone(db_session, make_case, client_user):
    case = make_case(client_user.id, status="lawyer_requested", documents=["deed.pdf"])

    VerificationEngine.verify(db_session, case.id)

    db_session.expire_all()
    stored = db_session.get(Case, case.id)
    assert stored.verification_status == "verified"
    assert stored.status == "lawyer_requested"


def test_repeated_verification_appends_records(db_session, make_case, client_user):
    """Same inputs give the same verdict; every attempt is kept"""
    case = make_case(client_user.id, documents=["deed.pdf"])

    first = VerificationEngine.verify(db_session, case.id)
    second = VerificationEngine.verify(db_session, case.id)

    assert first["status"] == second["status"] == "verified"
    assert first["verification_id"] != second["verification_id"]
    assert db_session.query(Verification).filter(Verification.case_id == case.id).count() == 2


def test_verify_unknown_case(db_session):
    with pytest.raises(NotFoundError):
        VerificationEngine.verify(db_session, "missing")


def test_latest_verification_defaults_to_pending(db_session, make_case, client_user):
    case = make_case(client_user.id)

    outcome = VerificationEngine.latest_verification(db_session, case.id)

    assert outcome["status"] == "pending"
    assert outcome["verification_id"] is None
    assert outcome["issues"] == []


def test_latest_verification_returns_recorded_issues(db_session, make_case, client_user):
    case = make_case(client_user.id, documents=[])
    VerificationEngine.verify(db_session, case.id)

    outcome = VerificationEngine.latest_verification(db_session, case.id)

    assert outcome["status"] == "verified"
    assert [issue["field"] for issue in outcome["issues"]] == ["documents"]

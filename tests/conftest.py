"""
Pytest configuration and fixtures
"""
import os
import tempfile

# Point the settings at a throwaway database before any project import
_test_db_dir = tempfile.mkdtemp(prefix="caseflow-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_test_db_dir, 'caseflow_test.db')}"
os.environ["RATE_LIMIT_PER_MINUTE"] = "100000"
os.environ["RECONCILE_SWEEP_INTERVAL_MINUTES"] = "0"
os.environ["API_SECRET_KEY"] = "test-secret"
os.environ.pop("NOTIFICATION_WEBHOOK_URL", None)
os.environ.pop("JOB_STORE_URL", None)

from datetime import date, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from caseflow.db.connection import db_manager
from caseflow.db.models import Case, CaseDocument, LawyerAssignment, ScheduledCase, UserAccount
from caseflow.services.job_scheduler import job_id
from caseflow.services.lifecycle import LifecycleOrchestrator
from caseflow.utils.helpers import generate_uuid


class RecordingScheduler:
    """Job scheduler stand-in that records jobs and runs them on demand"""

    def __init__(self):
        self.jobs = []
        self.running = False

    def start(self):
        self.running = True

    def shutdown(self):
        self.running = False

    def schedule(self, kind, key, func, delay_seconds=0, kwargs=None):
        identifier = job_id(kind, key)
        # Same ID replaces the earlier job
        self.jobs = [job for job in self.jobs if job["id"] != identifier]
        self.jobs.append({
            "id": identifier,
            "kind": kind,
            "func": func,
            "delay_seconds": delay_seconds,
            "kwargs": kwargs or {},
        })
        return identifier

    def ids(self, kind=None):
        return [job["id"] for job in self.jobs if kind is None or job["kind"] == kind]

    def run(self, kind):
        """Run and drop every queued job of a kind"""
        due = [job for job in self.jobs if job["kind"] == kind]
        self.jobs = [job for job in self.jobs if job["kind"] != kind]
        for job in due:
            job["func"](**job["kwargs"])
        return len(due)


@pytest.fixture(autouse=True)
def setup_database():
    """Fresh schema for every test"""
    db_manager.create_tables()
    yield
    db_manager.SessionLocal.remove()
    db_manager.drop_tables()


@pytest.fixture
def db_session(setup_database):
    """Database session for the test body"""
    session = db_manager.session_factory()
    yield session
    session.close()


@pytest.fixture
def recording_scheduler(monkeypatch):
    """Recording scheduler, also installed as the global job scheduler"""
    scheduler = RecordingScheduler()
    monkeypatch.setattr("caseflow.services.job_scheduler.job_scheduler", scheduler)
    return scheduler


@pytest.fixture
def orchestrator(recording_scheduler):
    """Lifecycle orchestrator wired to the recording scheduler"""
    return LifecycleOrchestrator(scheduler=recording_scheduler, reconcile_on_read=True)


@pytest.fixture
def api_client(orchestrator):
    """Test client using the test orchestrator"""
    from caseflow.api.main import app
    from caseflow.api.deps import get_lifecycle

    app.dependency_overrides[get_lifecycle] = lambda: orchestrator
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory for directory users"""
    def _make_user(user_type="client", **fields):
        user = UserAccount(
            id=fields.pop("id", generate_uuid()),
            user_type=user_type,
            full_name=fields.pop("full_name", f"Test {user_type}"),
            **fields
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make_user


@pytest.fixture
def client_user(make_user):
    return make_user("client", full_name="Nimal Perera", email="nimal@example.com")


@pytest.fixture
def lawyer_user(make_user):
    return make_user(
        "lawyer",
        full_name="Kamala Silva",
        email="kamala@example.com",
        specialization="Property Law",
        rating=4.5,
        years_experience=12,
    )


@pytest.fixture
def scheduler_user(make_user):
    return make_user("court_scheduler", full_name="Court Registrar")


@pytest.fixture
def client_caller(client_user):
    return {"user_id": client_user.id, "user_type": "client"}


@pytest.fixture
def lawyer_caller(lawyer_user):
    return {"user_id": lawyer_user.id, "user_type": "lawyer"}


@pytest.fixture
def scheduler_caller(scheduler_user):
    return {"user_id": scheduler_user.id, "user_type": "court_scheduler"}


@pytest.fixture
def case_data():
    """Valid case creation payload"""
    return {
        "case_type": "landDispute",
        "plaintiff_name": "Nimal Perera",
        "plaintiff_nic": "199012345678",
        "plaintiff_address": "12 Galle Road, Colombo 03",
        "plaintiff_phone": "077-123-4567",
        "defendant_name": "Sunil Fernando",
        "defendant_nic": "198512345678",
        "defendant_address": "5 Temple Road, Kandy",
        "description": "Boundary wall built two metres inside the plaintiff's land.",
        "relief_sought": "Removal of the wall and damages",
        "case_value": 250000,
        "district": "Colombo",
        "documents": [],
    }


_case_counter = {"value": 0}


@pytest.fixture
def make_case(db_session):
    """Factory for cases inserted directly, bypassing the orchestrator"""
    def _make_case(owner_id, with_hearing=False, **fields):
        _case_counter["value"] += 1
        documents = fields.pop("documents", [])
        case = Case(
            id=fields.pop("id", generate_uuid()),
            case_number=fields.pop("case_number", f"CL2000-{_case_counter['value']:04d}"),
            owner_id=owner_id,
            case_type=fields.pop("case_type", "landDispute"),
            plaintiff_name=fields.pop("plaintiff_name", "Nimal Perera"),
            plaintiff_nic=fields.pop("plaintiff_nic", "199012345678"),
            defendant_name=fields.pop("defendant_name", "Sunil Fernando"),
            description=fields.pop("description", "A dispute over a boundary wall."),
            district=fields.pop("district", "Colombo"),
            **fields
        )
        for filename in documents:
            case.documents.append(CaseDocument(filename=filename, original_name=filename))
        if with_hearing:
            # hearing_scheduled is only kept when a scheduling record backs it
            db_session.add(ScheduledCase(
                case_id=case.id,
                district=case.district,
                courtroom="Main Court",
                hearing_date=date(2026, 3, 2),
                start_time="09:00",
                end_time="10:00",
            ))
        db_session.add(case)
        db_session.commit()
        return case
    return _make_case


@pytest.fixture
def make_assignment(db_session):
    """Factory for assignments with controllable creation time"""
    base_time = datetime(2026, 1, 1, 9, 0, 0)

    def _make_assignment(case, lawyer_id, status="pending", assigned_by="system", minutes=0, **fields):
        assignment = LawyerAssignment(
            case_id=case.id,
            lawyer_id=lawyer_id,
            client_id=case.owner_id,
            assigned_by=assigned_by,
            status=status,
            created_at=base_time + timedelta(minutes=minutes),
            **fields
        )
        db_session.add(assignment)
        db_session.commit()
        return assignment
    return _make_assignment

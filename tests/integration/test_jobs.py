"""
Background job integration tests
"""
import requests

from caseflow.db.models import Case, LawyerAssignment
from caseflow.services import jobs
from caseflow.services.job_scheduler import JobScheduler, AUTO_VERIFY_JOB
from caseflow.services.notifier import Notifier
from config.settings import settings


def reload_case(db_session, case_id):
    db_session.expire_all()
    return db_session.get(Case, case_id)


def test_auto_verify_skips_deleted_case(recording_scheduler):
    jobs.run_auto_verify("deleted-case")

    assert recording_scheduler.jobs == []


def test_auto_verify_queues_auto_assign(db_session, recording_scheduler, make_case, client_user):
    case = make_case(client_user.id, documents=["deed.pdf"])

    jobs.run_auto_verify(case.id)

    assert reload_case(db_session, case.id).verification_status == "verified"
    assert recording_scheduler.ids("auto-assign") == [f"auto-assign:{case.id}"]
    assert recording_scheduler.jobs[0]["delay_seconds"] == settings.auto_assign_delay_seconds


def test_rejected_case_is_not_auto_assigned(db_session, recording_scheduler, make_case, client_user):
    case = make_case(client_user.id, documents=[], description="", plaintiff_nic=None)

    jobs.run_auto_verify(case.id)

    assert reload_case(db_session, case.id).verification_status == "rejected"
    assert recording_scheduler.jobs == []


def test_auto_assign_can_be_disabled(db_session, recording_scheduler, make_case, client_user, monkeypatch):
    monkeypatch.setattr(settings, "auto_assign_enabled", False)
    case = make_case(client_user.id)

    jobs.run_auto_verify(case.id)

    assert reload_case(db_session, case.id).verification_status == "verified"
    assert recording_scheduler.jobs == []


def test_auto_assign_job_proposes_lawyer(db_session, make_case, client_user, lawyer_user):
    case = make_case(client_user.id, verification_status="verified")

    jobs.run_auto_assign(case.id)

    db_session.expire_all()
    assignment = db_session.query(LawyerAssignment).filter(LawyerAssignment.case_id == case.id).one()
    assert assignment.lawyer_id == lawyer_user.id
    assert reload_case(db_session, case.id).status == "lawyer_requested"


def test_auto_assign_job_skips_unverified_or_progressed_cases(db_session, make_case, client_user, lawyer_user):
    unverified = make_case(client_user.id, verification_status="pending")
    progressed = make_case(client_user.id, status="lawyer_assigned", current_lawyer_id=lawyer_user.id,
                           verification_status="verified")

    jobs.run_auto_assign(unverified.id)
    jobs.run_auto_assign(progressed.id)
    jobs.run_auto_assign("deleted-case")

    assert db_session.query(LawyerAssignment).count() == 0


def test_reconcile_sweep_job(db_session, make_case, make_assignment, client_user, lawyer_user):
    case = make_case(client_user.id, status="filed")
    make_assignment(case, lawyer_user.id, status="accepted")

    jobs.run_reconcile_sweep()

    assert reload_case(db_session, case.id).current_lawyer_id == lawyer_user.id


def test_send_notification_swallows_failures(monkeypatch):
    def explode(event, payload):
        raise RuntimeError("webhook down")

    monkeypatch.setattr(jobs.notifier, "send", explode)

    jobs.send_notification("case_filed", {"case_number": "CL2026-0001"})


def test_rescheduling_replaces_pending_job():
    scheduler = JobScheduler(job_store_url="")
    try:
        scheduler.schedule(AUTO_VERIFY_JOB, "case-1", jobs.run_auto_verify, delay_seconds=60,
                           kwargs={"case_id": "case-1"})
        scheduler.schedule(AUTO_VERIFY_JOB, "case-1", jobs.run_auto_verify, delay_seconds=60,
                           kwargs={"case_id": "case-1"})

        assert scheduler.running
        pending = scheduler.scheduler.get_jobs()
        assert [job.id for job in pending] == ["auto-verify:case-1"]
    finally:
        scheduler.shutdown()

    assert not scheduler.running


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def test_notifier_posts_event(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse()

    monkeypatch.setattr("caseflow.services.notifier.requests.post", fake_post)
    notifier = Notifier(webhook_url="http://hooks.test/notify", timeout=2)

    assert notifier.case_filed({"case_number": "CL2026-0001"}) is True
    assert calls == [(
        "http://hooks.test/notify",
        {"event": "case_filed", "data": {"case_number": "CL2026-0001"}},
        2,
    )]


def test_notifier_failure_is_reported_not_raised(monkeypatch):
    monkeypatch.setattr(
        "caseflow.services.notifier.requests.post",
        lambda url, json=None, timeout=None: FakeResponse(503)
    )
    notifier = Notifier(webhook_url="http://hooks.test/notify")

    assert notifier.document_requested({"case_number": "CL2026-0001"}) is False


def test_notifier_without_webhook():
    assert Notifier(webhook_url="").send("case_filed", {"case_number": "CL2026-0001"}) is False

"""
Case lifecycle integration tests
"""
from datetime import date

import pytest

from caseflow.db.models import (
    Case, CaseDocument, CourtFiling, CourtScheduleRequest, LawyerAssignment, ScheduledCase
)
from caseflow.utils.exceptions import (
    AccessDeniedError, ConflictError, InvalidStateError, NotFoundError, ValidationFailedError
)

HEARING_DAY = date(2026, 11, 16)


@pytest.fixture
def assigned_case(make_case, make_assignment, client_user, lawyer_user):
    """Case with a consistent accepted lawyer"""
    case = make_case(client_user.id, status="lawyer_assigned", current_lawyer_id=lawyer_user.id,
                     verification_status="verified")
    make_assignment(case, lawyer_user.id, status="accepted", assigned_by="client")
    return case


@pytest.fixture
def filed_case(orchestrator, db_session, assigned_case, client_caller, lawyer_caller):
    orchestrator.request_filing(db_session, client_caller, assigned_case.id)
    return orchestrator.file_court_case(db_session, lawyer_caller, assigned_case.id, {"court_name": "District Court of Colombo"})


def reload_case(db_session, case_id):
    db_session.expire_all()
    return db_session.get(Case, case_id)


def test_case_walks_the_main_track(
    orchestrator, recording_scheduler, db_session, case_data,
    client_caller, lawyer_caller, scheduler_caller, lawyer_user
):
    case = orchestrator.create_case(db_session, client_caller, case_data)
    assert case.status == "pending"
    assert case.verification_status == "pending"
    assert recording_scheduler.ids("auto-verify") == [f"auto-verify:{case.id}"]

    # Delayed verification, then delayed auto-assignment
    assert recording_scheduler.run("auto-verify") == 1
    assert reload_case(db_session, case.id).verification_status == "verified"
    assert recording_scheduler.ids("auto-assign") == [f"auto-assign:{case.id}"]

    recording_scheduler.run("auto-assign")
    case = reload_case(db_session, case.id)
    assert case.status == "lawyer_requested"
    assignment = db_session.query(LawyerAssignment).filter(LawyerAssignment.case_id == case.id).one()
    assert assignment.lawyer_id == lawyer_user.id
    assert assignment.assigned_by == "system"

    from caseflow.services.assignment_service import AssignmentService
    AssignmentService.respond(db_session, lawyer_caller, assignment.id, accepted=True)
    assert reload_case(db_session, case.id).status == "lawyer_assigned"

    case = orchestrator.request_filing(db_session, client_caller, case.id, "Please file this week")
    assert case.status == "filing_requested"
    assert case.filing_status == "preparing"

    case = orchestrator.file_court_case(db_session, lawyer_caller, case.id, {"court_name": "District Court of Colombo"})
    assert case.status == "filed"
    assert case.filing_status == "filed"
    assert case.court_reference.endswith(case.id[-6:])
    assert db_session.query(CourtFiling).filter(CourtFiling.case_id == case.id).count() == 1
    assert recording_scheduler.ids("notify") == [f"notify:case_filed:{case.id}"]

    request = orchestrator.request_scheduling(db_session, lawyer_caller, case.id, priority="high")
    assert reload_case(db_session, case.id).status == "scheduling_requested"
    assert request.lawyer_name == lawyer_user.full_name

    orchestrator.schedule_hearing(db_session, scheduler_caller, request.id, HEARING_DAY, "09:00", "10:00")
    case = reload_case(db_session, case.id)
    assert case.status == "hearing_scheduled"
    assert case.hearing_date == HEARING_DAY
    assert case.courtroom == "Main Court"
    assert case.current_lawyer_id == lawyer_user.id


def test_create_case_validates_required_fields(orchestrator, db_session, client_caller, case_data):
    case_data["defendant_name"] = "  "
    with pytest.raises(ValidationFailedError):
        orchestrator.create_case(db_session, client_caller, case_data)

    case_data["defendant_name"] = "Sunil Fernando"
    case_data["district"] = "Atlantis"
    with pytest.raises(ValidationFailedError):
        orchestrator.create_case(db_session, client_caller, case_data)


def test_create_case_stores_documents(orchestrator, db_session, client_caller, case_data):
    case_data["documents"] = [{"filename": "deed.pdf", "original_name": "Title deed.pdf"}]

    case = orchestrator.create_case(db_session, client_caller, case_data)

    assert [d.original_name for d in case.documents] == ["Title deed.pdf"]


def test_lawyer_cannot_create_case(orchestrator, db_session, lawyer_caller, case_data):
    with pytest.raises(AccessDeniedError):
        orchestrator.create_case(db_session, lawyer_caller, case_data)


def test_get_case_repairs_missing_lawyer(orchestrator, db_session, make_case, make_assignment, client_user, client_caller, lawyer_user):
    case = make_case(client_user.id, status="lawyer_assigned")
    make_assignment(case, lawyer_user.id, status="accepted")

    loaded = orchestrator.get_case(db_session, client_caller, case.id)

    assert loaded.current_lawyer_id == lawyer_user.id


def test_get_case_access(orchestrator, db_session, make_case, make_user, client_user, scheduler_caller):
    case = make_case(client_user.id)
    outsider = make_user("client")

    with pytest.raises(AccessDeniedError):
        orchestrator.get_case(db_session, {"user_id": outsider.id, "user_type": "client"}, case.id)
    with pytest.raises(NotFoundError):
        orchestrator.get_case(db_session, scheduler_caller, "missing")
    assert orchestrator.get_case(db_session, scheduler_caller, case.id).id == case.id


def test_list_my_cases_only_returns_own(orchestrator, db_session, make_case, make_user, client_user, client_caller):
    mine = make_case(client_user.id)
    make_case(make_user("client").id)

    assert [c.id for c in orchestrator.list_my_cases(db_session, client_caller)] == [mine.id]


def test_request_filing_requires_lawyer_assigned(orchestrator, db_session, make_case, client_user, client_caller):
    case = make_case(client_user.id, status="lawyer_requested")

    with pytest.raises(InvalidStateError):
        orchestrator.request_filing(db_session, client_caller, case.id)


def test_request_filing_twice_conflicts(orchestrator, db_session, assigned_case, client_caller):
    orchestrator.request_filing(db_session, client_caller, assigned_case.id)

    with pytest.raises(ConflictError):
        orchestrator.request_filing(db_session, client_caller, assigned_case.id)


def test_request_filing_repairs_lawyer_first(orchestrator, db_session, make_case, make_assignment, client_user, client_caller, lawyer_user):
    case = make_case(client_user.id, status="lawyer_assigned")
    make_assignment(case, lawyer_user.id, status="accepted", assigned_by="client")

    case = orchestrator.request_filing(db_session, client_caller, case.id)

    assert case.status == "filing_requested"
    assert case.current_lawyer_id == lawyer_user.id


def test_request_filing_without_any_lawyer(orchestrator, db_session, make_case, client_user, client_caller):
    case = make_case(client_user.id, status="lawyer_assigned")

    with pytest.raises(InvalidStateError):
        orchestrator.request_filing(db_session, client_caller, case.id)
    assert reload_case(db_session, case.id).filing_requested is False


def test_only_assigned_lawyer_files(orchestrator, db_session, make_user, assigned_case, client_caller):
    orchestrator.request_filing(db_session, client_caller, assigned_case.id)
    other_lawyer = make_user("lawyer")

    with pytest.raises(AccessDeniedError):
        orchestrator.file_court_case(
            db_session, {"user_id": other_lawyer.id, "user_type": "lawyer"},
            assigned_case.id, {"court_name": "District Court of Colombo"}
        )


def test_file_requires_filing_request(orchestrator, db_session, assigned_case, lawyer_caller):
    with pytest.raises(InvalidStateError):
        orchestrator.file_court_case(db_session, lawyer_caller, assigned_case.id, {"court_name": "District Court"})


def test_filed_case_is_locked(orchestrator, db_session, filed_case, client_caller):
    with pytest.raises(InvalidStateError):
        orchestrator.update_case_details(db_session, client_caller, filed_case.id, {"description": "changed"})
    with pytest.raises(InvalidStateError):
        orchestrator.delete_case(db_session, client_caller, filed_case.id)


def test_update_case_details(orchestrator, db_session, make_case, client_user, client_caller):
    case = make_case(client_user.id)

    orchestrator.update_case_details(db_session, client_caller, case.id, {
        "description": "Wall moved again in March.",
        "incident_date": "2026-03-01",
    })

    stored = reload_case(db_session, case.id)
    assert stored.description == "Wall moved again in March."
    assert stored.incident_date == date(2026, 3, 1)

    with pytest.raises(ValidationFailedError):
        orchestrator.update_case_details(db_session, client_caller, case.id, {"status": "closed"})


def test_delete_case_removes_children(orchestrator, db_session, make_case, make_assignment, client_user, client_caller, lawyer_user):
    case = make_case(client_user.id, documents=["deed.pdf"])
    make_assignment(case, lawyer_user.id, status="rejected")

    orchestrator.delete_case(db_session, client_caller, case.id)

    db_session.expire_all()
    assert db_session.get(Case, case.id) is None
    assert db_session.query(CaseDocument).count() == 0
    assert db_session.query(LawyerAssignment).count() == 0


def test_request_scheduling_only_once(orchestrator, db_session, filed_case, lawyer_caller):
    orchestrator.request_scheduling(db_session, lawyer_caller, filed_case.id)

    with pytest.raises(ConflictError):
        orchestrator.request_scheduling(db_session, lawyer_caller, filed_case.id)
    assert db_session.query(CourtScheduleRequest).count() == 1


def test_request_scheduling_requires_filed(orchestrator, db_session, assigned_case, lawyer_caller):
    with pytest.raises(InvalidStateError):
        orchestrator.request_scheduling(db_session, lawyer_caller, assigned_case.id)


def test_overlapping_hearing_conflicts(
    orchestrator, db_session, make_case, make_assignment, client_user, lawyer_user,
    client_caller, lawyer_caller, scheduler_caller
):
    requests = []
    for _ in range(2):
        case = make_case(client_user.id, status="lawyer_assigned", current_lawyer_id=lawyer_user.id)
        make_assignment(case, lawyer_user.id, status="accepted", assigned_by="client")
        orchestrator.request_filing(db_session, client_caller, case.id)
        orchestrator.file_court_case(db_session, lawyer_caller, case.id, {"court_name": "District Court"})
        requests.append(orchestrator.request_scheduling(db_session, lawyer_caller, case.id))

    orchestrator.schedule_hearing(db_session, scheduler_caller, requests[0].id, HEARING_DAY, "09:00", "10:00")

    with pytest.raises(ConflictError):
        orchestrator.schedule_hearing(db_session, scheduler_caller, requests[1].id, HEARING_DAY, "09:30", "10:30")
    with pytest.raises(ConflictError):
        orchestrator.schedule_hearing(db_session, scheduler_caller, requests[0].id, HEARING_DAY, "14:00", "15:00")

    free = orchestrator.available_time_slots(db_session, "Colombo", HEARING_DAY.isoformat())
    assert {"start_time": "09:00", "end_time": "10:00"} not in free
    assert len(free) == 5

    orchestrator.schedule_hearing(db_session, scheduler_caller, requests[1].id, HEARING_DAY, "10:00", "11:00")
    assert db_session.query(ScheduledCase).count() == 2


def test_schedule_hearing_requires_court_staff(orchestrator, db_session, filed_case, lawyer_caller):
    request = orchestrator.request_scheduling(db_session, lawyer_caller, filed_case.id)

    with pytest.raises(AccessDeniedError):
        orchestrator.schedule_hearing(db_session, lawyer_caller, request.id, HEARING_DAY, "09:00", "10:00")


def test_hearing_status_needs_scheduling_record(orchestrator, db_session, assigned_case, scheduler_caller):
    """A hearing_scheduled write without a hearing is stored as lawyer_assigned"""
    case = orchestrator.update_status(db_session, scheduler_caller, assigned_case.id, "hearing_scheduled")
    assert case.status == "lawyer_assigned"

    # Direct ORM writes go through the same guard
    case.status = "hearing_scheduled"
    db_session.commit()
    assert reload_case(db_session, assigned_case.id).status == "lawyer_assigned"


def test_update_status_rejects_unknown_status(orchestrator, db_session, assigned_case, scheduler_caller, client_caller):
    with pytest.raises(ValidationFailedError):
        orchestrator.update_status(db_session, scheduler_caller, assigned_case.id, "archived")
    with pytest.raises(AccessDeniedError):
        orchestrator.update_status(db_session, client_caller, assigned_case.id, "closed")


def test_document_request_and_ready_to_file(orchestrator, recording_scheduler, db_session, assigned_case, lawyer_caller):
    case = orchestrator.request_documents(db_session, lawyer_caller, assigned_case.id, "Please upload the survey plan")

    assert case.status == "under_review"
    assert case.document_request == "Please upload the survey plan"
    assert recording_scheduler.ids("notify") == [f"notify:document_requested:{case.id}"]

    case = orchestrator.mark_ready_to_file(db_session, lawyer_caller, assigned_case.id, notes="Plan received")
    assert case.status == "lawyer_assigned"
    assert case.ready_to_file_date is not None


def test_document_request_after_filing_request_still_files(
    orchestrator, db_session, assigned_case, client_caller, lawyer_caller
):
    orchestrator.request_filing(db_session, client_caller, assigned_case.id)
    orchestrator.request_documents(db_session, lawyer_caller, assigned_case.id, "Need the deed")

    case = orchestrator.mark_ready_to_file(db_session, lawyer_caller, assigned_case.id)
    assert case.status == "filing_requested"
    assert case.filing_requested is True

    case = orchestrator.file_court_case(db_session, lawyer_caller, assigned_case.id, {"court_name": "District Court"})
    assert case.status == "filed"
    assert reload_case(db_session, assigned_case.id).court_reference.startswith("CL")


def test_notification_job_delivers(orchestrator, recording_scheduler, db_session, assigned_case, lawyer_caller, monkeypatch):
    sent = []
    monkeypatch.setattr("caseflow.services.jobs.notifier.send", lambda event, payload: sent.append((event, payload)))

    orchestrator.request_documents(db_session, lawyer_caller, assigned_case.id, "Need the deed")
    recording_scheduler.run("notify")

    assert sent[0][0] == "document_requested"
    assert sent[0][1]["message"] == "Need the deed"


def test_adjourn_and_close(orchestrator, db_session, filed_case, lawyer_caller, scheduler_caller):
    request = orchestrator.request_scheduling(db_session, lawyer_caller, filed_case.id)
    orchestrator.schedule_hearing(db_session, scheduler_caller, request.id, HEARING_DAY, "09:00", "10:00")

    case = orchestrator.adjourn_hearing(
        db_session, scheduler_caller, filed_case.id, "2026-12-01", "11:00", "12:00", "Defendant unwell"
    )
    assert case.status == "adjourned"
    assert case.adjournment_details["previous_date"] == HEARING_DAY.isoformat()
    assert case.adjournment_details["new_date"] == "2026-12-01"
    assert case.adjournment_details["reason"] == "Defendant unwell"
    assert case.hearing_date == date(2026, 12, 1)

    case = orchestrator.close_case(db_session, scheduler_caller, filed_case.id, outcome="settled")
    assert case.status == "closed"
    assert case.completion_details["outcome"] == "settled"
    hearings = db_session.query(ScheduledCase).filter(
        ScheduledCase.case_id == case.id
    ).order_by(ScheduledCase.hearing_date).all()
    assert [h.status for h in hearings] == ["adjourned", "completed"]


def test_adjourned_hearing_holds_its_new_slot(
    orchestrator, db_session, make_case, make_assignment, client_user, lawyer_user,
    client_caller, lawyer_caller, scheduler_caller
):
    requests = []
    for _ in range(2):
        case = make_case(client_user.id, status="lawyer_assigned", current_lawyer_id=lawyer_user.id)
        make_assignment(case, lawyer_user.id, status="accepted", assigned_by="client")
        orchestrator.request_filing(db_session, client_caller, case.id)
        orchestrator.file_court_case(db_session, lawyer_caller, case.id, {"court_name": "District Court"})
        requests.append(orchestrator.request_scheduling(db_session, lawyer_caller, case.id))

    orchestrator.schedule_hearing(db_session, scheduler_caller, requests[0].id, HEARING_DAY, "09:00", "10:00")
    orchestrator.adjourn_hearing(
        db_session, scheduler_caller, requests[0].case_id, "2026-12-01", "11:00", "12:00", "Judge on leave"
    )

    free = orchestrator.available_time_slots(db_session, "Colombo", "2026-12-01")
    assert {"start_time": "11:00", "end_time": "12:00"} not in free
    assert len(free) == 5
    # the adjourned slot is released
    assert {"start_time": "09:00", "end_time": "10:00"} in orchestrator.available_time_slots(
        db_session, "Colombo", HEARING_DAY
    )

    with pytest.raises(ConflictError):
        orchestrator.schedule_hearing(db_session, scheduler_caller, requests[1].id, date(2026, 12, 1), "11:30", "12:30")

    orchestrator.schedule_hearing(db_session, scheduler_caller, requests[1].id, date(2026, 12, 1), "14:00", "15:00")
    with pytest.raises(ConflictError):
        orchestrator.adjourn_hearing(
            db_session, scheduler_caller, requests[1].case_id, "2026-12-01", "11:00", "12:00", "Clash"
        )


def test_adjourn_within_own_slot(orchestrator, db_session, filed_case, lawyer_caller, scheduler_caller):
    request = orchestrator.request_scheduling(db_session, lawyer_caller, filed_case.id)
    orchestrator.schedule_hearing(db_session, scheduler_caller, request.id, HEARING_DAY, "09:00", "10:00")

    case = orchestrator.adjourn_hearing(
        db_session, scheduler_caller, filed_case.id, HEARING_DAY, "09:30", "10:30", "Late start"
    )
    assert case.hearing_start_time == "09:30"


def test_adjourn_requires_hearing(orchestrator, db_session, filed_case, scheduler_caller):
    with pytest.raises(InvalidStateError):
        orchestrator.adjourn_hearing(db_session, scheduler_caller, filed_case.id, "2026-12-01", "11:00", "12:00", "x")

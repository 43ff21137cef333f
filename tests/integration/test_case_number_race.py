"""
Case number allocation under contention
"""
import re
import threading
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from caseflow.db.connection import db_manager
from caseflow.db.models import Case
from caseflow.services.case_number import CaseNumberGenerator, format_case_number, is_case_number_collision
from caseflow.utils.exceptions import ConflictError
from caseflow.utils.helpers import generate_uuid


def new_case(owner_id):
    return Case(
        id=generate_uuid(),
        owner_id=owner_id,
        case_type="landDispute",
        plaintiff_name="Nimal Perera",
        defendant_name="Sunil Fernando",
        district="Colombo",
        created_at=datetime.utcnow(),
    )


def test_collision_on_commit_is_retried(db_session, make_case, client_user, monkeypatch):
    year = datetime.utcnow().year
    taken = format_case_number(year, 1)
    make_case(client_user.id, case_number=taken)

    candidates = iter([taken, format_case_number(year, 2)])
    monkeypatch.setattr(
        CaseNumberGenerator, "next_case_number",
        staticmethod(lambda db, year=None, max_attempts=None: next(candidates))
    )

    case = CaseNumberGenerator.insert_with_number(db_session, new_case(client_user.id))

    assert case.case_number == format_case_number(year, 2)
    assert db_session.query(Case).count() == 2


def test_gives_up_after_max_attempts(db_session, make_case, client_user, monkeypatch):
    taken = format_case_number(datetime.utcnow().year, 1)
    make_case(client_user.id, case_number=taken)
    monkeypatch.setattr(
        CaseNumberGenerator, "next_case_number",
        staticmethod(lambda db, year=None, max_attempts=None: taken)
    )

    with pytest.raises(ConflictError):
        CaseNumberGenerator.insert_with_number(db_session, new_case(client_user.id), max_attempts=3)


def test_other_integrity_errors_are_not_retried(db_session, client_user, monkeypatch):
    calls = []
    original = CaseNumberGenerator.next_case_number

    def counting_next(db, year=None, max_attempts=None):
        calls.append(year)
        return original(db, year, max_attempts)

    monkeypatch.setattr(CaseNumberGenerator, "next_case_number", staticmethod(counting_next))
    case = new_case(client_user.id)
    case.status = "archived"

    with pytest.raises(IntegrityError) as exc_info:
        CaseNumberGenerator.insert_with_number(db_session, case, max_attempts=3)

    assert not is_case_number_collision(exc_info.value)
    assert len(calls) == 1
    assert db_session.query(Case).count() == 0


def test_concurrent_creates_get_distinct_numbers(client_user):
    workers = 4
    per_worker = 3
    numbers = []
    errors = []
    lock = threading.Lock()
    owner_id = client_user.id

    def create_cases():
        session = db_manager.session_factory()
        try:
            for _ in range(per_worker):
                case = CaseNumberGenerator.insert_with_number(session, new_case(owner_id))
                with lock:
                    numbers.append(case.case_number)
        except Exception as e:
            with lock:
                errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=create_cases) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(numbers) == workers * per_worker
    assert len(set(numbers)) == len(numbers)
    assert all(re.match(r"^CL\d{4}-\d{4,}$", number) for number in numbers)

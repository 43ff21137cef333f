"""
Utility function unit tests
"""
import re
from datetime import datetime, date
from caseflow.utils.helpers import (
    parse_date,
    format_date,
    is_blank,
    mask_personal_info,
    generate_uuid,
    timestamp_suffix
)
from caseflow.utils.constants import (
    CaseStatus,
    LAWYER_BOUND_STATUSES,
    POST_FILING_STATUSES,
    normalize_user_type
)


def test_parse_date():
    """Date parsing"""
    assert parse_date("2026-03-15") == datetime(2026, 3, 15)
    assert parse_date("2026/03/15") == datetime(2026, 3, 15)
    assert parse_date("15/03/2026") == datetime(2026, 3, 15)
    assert parse_date("2026-03-15T10:30:00") == datetime(2026, 3, 15, 10, 30)
    assert parse_date("not a date") is None


def test_format_date():
    assert format_date(date(2026, 3, 5)) == "2026-03-05"
    assert format_date(datetime(2026, 3, 5, 9, 0), "%d/%m/%Y") == "05/03/2026"


def test_is_blank():
    assert is_blank(None)
    assert is_blank("")
    assert is_blank("   ")
    assert not is_blank("x")


def test_mask_phone_number():
    """Phone numbers keep their prefix and suffix"""
    assert mask_personal_info("call 077-123-4567") == "call 077-***-4567"


def test_mask_email():
    masked = mask_personal_info("mail nimal@example.com")
    assert "nimal@" not in masked
    assert "@example.com" in masked


def test_mask_nic_numbers():
    """Old (9 digits + V) and new (12 digits) NIC formats"""
    assert mask_personal_info("NIC 901234567V") == "NIC 9012*****V"
    assert mask_personal_info("NIC 199012345678") == "NIC 1990********"


def test_generate_uuid():
    value = generate_uuid()
    assert len(value) == 36
    assert value != generate_uuid()


def test_timestamp_suffix():
    assert re.fullmatch(r"\d{6}", timestamp_suffix())


def test_normalize_user_type():
    """Legacy role names map onto the current ones"""
    assert normalize_user_type("verified_lawyer") == "lawyer"
    assert normalize_user_type("verified_client") == "client"
    assert normalize_user_type("user") == "client"
    assert normalize_user_type("Court_Scheduler") == "court_scheduler"
    assert normalize_user_type(None) == ""


def test_lawyer_bound_statuses():
    assert CaseStatus.LAWYER_ASSIGNED.value in LAWYER_BOUND_STATUSES
    assert CaseStatus.HEARING_SCHEDULED.value in LAWYER_BOUND_STATUSES
    assert CaseStatus.LAWYER_REQUESTED.value not in LAWYER_BOUND_STATUSES
    assert CaseStatus.FILED.value in POST_FILING_STATUSES
    assert CaseStatus.LAWYER_ASSIGNED.value not in POST_FILING_STATUSES

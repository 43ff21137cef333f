"""
Verification rule unit tests (no database)
"""
import pytest
from caseflow.db.models.case import Case
from caseflow.db.models.case_document import CaseDocument
from caseflow.services.verification_engine import VerificationEngine


def build_case(documents=0, description="", nic=""):
    case = Case(description=description, plaintiff_nic=nic)
    for index in range(documents):
        case.documents.append(CaseDocument(filename=f"doc-{index}.pdf"))
    return case


def test_all_three_missing_is_rejected():
    """No documents, empty description, empty NIC -> rejected"""
    case = build_case()
    assert VerificationEngine.decide(case) == "rejected"
    assert [issue["field"] for issue in VerificationEngine.collect_issues(case)] == [
        "documents", "description", "plaintiffNIC"
    ]


def test_whitespace_only_counts_as_empty():
    case = build_case(description="   ", nic=" ")
    assert VerificationEngine.decide(case) == "rejected"


@pytest.mark.parametrize("documents,description,nic", [
    (1, "", ""),
    (0, "x", ""),
    (0, "", "9"),
])
def test_any_single_field_flips_to_verified(documents, description, nic):
    """Filling in any one of the three critical fields is enough"""
    case = build_case(documents, description, nic)
    assert VerificationEngine.decide(case) == "verified"


def test_issues_recorded_even_when_verified():
    """Short description and NIC are reported but do not reject"""
    case = build_case(documents=0, description="ab", nic="1")
    issues = VerificationEngine.collect_issues(case)

    assert VerificationEngine.decide(case) == "verified"
    assert {issue["field"] for issue in issues} == {"documents", "description", "plaintiffNIC"}
    assert all(issue["resolved"] is False for issue in issues)


def test_complete_case_has_no_issues():
    case = build_case(documents=1, description="Boundary dispute", nic="199012345678")
    assert VerificationEngine.collect_issues(case) == []
    assert VerificationEngine.decide(case) == "verified"

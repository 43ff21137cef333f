"""
Lawyer specialization settings
Maps each case type to the lawyer specializations that may take it
"""
from typing import Dict, List


# Used when a case type has no mapping of its own
DEFAULT_SPECIALIZATIONS: List[str] = ["Civil Litigation"]

# Specializations per case type, in order of preference
SPECIALIZATIONS_BY_CASE_TYPE: Dict[str, List[str]] = {
    "smallClaims": ["Civil Litigation", "Commercial Law"],
    "landDispute": ["Property Law", "Civil Litigation"],
    "tenancy": ["Property Law", "Civil Litigation"],
    "family": ["Family Law"],
    "consumer": ["Commercial Law", "Civil Litigation"],
    "criminal": ["Criminal Defense"],
    "corporate": ["Corporate Law", "Commercial Law"],
    "labor": ["Labor Law"],
    "tax": ["Tax Law"],
    "constitutional": ["Constitutional Law"],
    "intellectual": ["Intellectual Property"],
    "other": DEFAULT_SPECIALIZATIONS,
}


def get_specializations(case_type: str) -> List[str]:
    """
    Specializations that can handle a case type

    Args:
        case_type: case type code (e.g. "landDispute")

    Returns:
        list of specialization names
    """
    return SPECIALIZATIONS_BY_CASE_TYPE.get(case_type, DEFAULT_SPECIALIZATIONS)

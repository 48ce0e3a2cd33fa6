"""
State transitions over CaseDetails.
Every function takes the current CaseDetails and a change description and
returns a new CaseDetails; the input is never mutated.
"""
from typing import Any, Dict, List

from judgement_drafter.app.api_models import (
    ROLE_LIST_FIELDS,
    CaseDetails,
    Party,
    PartySection,
)

# only these fields go through update_case_fields; party lists have their own transitions
CASE_FIELDS = ("caseNumber", "courtName", "caseType", "claims", "facts", "evidence", "legalBasis")
PARTY_FIELDS = ("name", "identity", "address", "phone", "legalRep", "agent")

# lists whose seeded empty entry is dropped after an extraction fills them
PLACEHOLDER_ROLES = ("plaintiff", "defendant")


class PartyIndexError(IndexError):
    """Raised when a party index does not exist in the role's list."""

    def __init__(self, role: str, index: int, size: int):
        super().__init__(f"No {role} at index {index} (list has {size} entries)")
        self.role = role
        self.index = index


def empty_party(role: str) -> Party:
    return Party(role=role, name="", identity="", address="", phone="")


def new_case_details() -> CaseDetails:
    """Fresh session state: one blank plaintiff and one blank defendant."""
    return CaseDetails(
        plaintiffs=[empty_party("plaintiff")],
        defendants=[empty_party("defendant")],
    )


def _with_list(details: CaseDetails, role: str, parties: List[Party]) -> CaseDetails:
    return details.model_copy(update={ROLE_LIST_FIELDS[role]: parties})


def _checked_index(details: CaseDetails, role: str, index: int) -> List[Party]:
    parties = list(details.parties_for(role))
    if index < 0 or index >= len(parties):
        raise PartyIndexError(role, index, len(parties))
    return parties


def add_party(details: CaseDetails, role: str) -> CaseDetails:
    parties = list(details.parties_for(role))
    parties.append(empty_party(role))
    return _with_list(details, role, parties)


def remove_party(details: CaseDetails, role: str, index: int) -> CaseDetails:
    parties = _checked_index(details, role, index)
    del parties[index]
    return _with_list(details, role, parties)


def update_party(details: CaseDetails, role: str, index: int, changes: Dict[str, Any]) -> CaseDetails:
    if "role" in changes and changes["role"] != role:
        raise ValueError("A party's role cannot be changed; remove it and add it under the new role.")
    unknown = set(changes) - set(PARTY_FIELDS) - {"role"}
    if unknown:
        raise ValueError(f"Unknown party fields: {sorted(unknown)}")

    parties = _checked_index(details, role, index)
    updates = {k: v for k, v in changes.items() if k != "role"}
    parties[index] = parties[index].model_copy(update=updates)
    return _with_list(details, role, parties)


def update_case_fields(details: CaseDetails, changes: Dict[str, Any]) -> CaseDetails:
    unknown = set(changes) - set(CASE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown case fields: {sorted(unknown)}")
    # round-trip through validation so a bad caseType is rejected
    return CaseDetails.model_validate({**details.model_dump(), **changes})


def merge_extracted_parties(details: CaseDetails, extracted: List[Party]) -> CaseDetails:
    """Append extracted parties by role, then drop the seeded blank plaintiff/defendant."""
    lists = {role: list(details.parties_for(role)) for role in ROLE_LIST_FIELDS}
    for party in extracted:
        lists[party.role].append(party)

    for role in PLACEHOLDER_ROLES:
        parties = lists[role]
        if len(parties) > 1 and not parties[0].name:
            parties.pop(0)

    return details.model_copy(
        update={ROLE_LIST_FIELDS[role]: parties for role, parties in lists.items()}
    )


def party_sections(case_type: str) -> List[PartySection]:
    sections = []
    if case_type == "criminal":
        sections.append(PartySection(role="prosecutor", title="公诉机关"))
    sections.append(
        PartySection(role="plaintiff", title="附带民事原告" if case_type == "criminal" else "原告方")
    )
    sections.append(PartySection(role="defendant", title="被告方"))
    sections.append(PartySection(role="third_party", title="第三人"))
    return sections

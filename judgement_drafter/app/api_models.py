from pydantic import BaseModel, field_validator, model_validator
from typing import Dict, List, Literal, Optional, get_args

PartyRole = Literal["plaintiff", "defendant", "third_party", "prosecutor"]
CaseType = Literal["civil", "criminal", "administrative"]
ViewState = Literal["edit", "preview"]


def _require_every_value(table: Dict[str, str], literal, what: str) -> None:
    missing = set(get_args(literal)) ^ set(table)
    if missing:
        raise RuntimeError(f"{what} does not match the allowed values: {sorted(missing)}")


# role -> CaseDetails attribute holding that role's parties
ROLE_LIST_FIELDS: Dict[str, str] = {
    "plaintiff": "plaintiffs",
    "defendant": "defendants",
    "third_party": "thirdParties",
    "prosecutor": "prosecutors",
}
_require_every_value(ROLE_LIST_FIELDS, PartyRole, "ROLE_LIST_FIELDS")

CASE_TYPE_LABELS: Dict[str, str] = {
    "civil": "民事",
    "criminal": "刑事",
    "administrative": "行政",
}
_require_every_value(CASE_TYPE_LABELS, CaseType, "CASE_TYPE_LABELS")

DEFAULT_COURT_NAME = "某某市中级人民法院"


class Party(BaseModel):
    role: PartyRole
    name: str = ""
    identity: str = ""  # ID number or unified social credit code
    address: str = ""
    phone: Optional[str] = None
    legalRep: Optional[str] = None  # 法定代表人
    agent: Optional[str] = None  # 委托代理人

    @field_validator("identity", "address", mode="before")
    @classmethod
    def _none_as_blank(cls, value):
        return "" if value is None else value


class ExtractedParty(Party):
    """A party as returned by the extraction model; the name is mandatory there."""

    name: str

    def to_party(self) -> Party:
        return Party(**self.model_dump())


class CaseDetails(BaseModel):
    caseNumber: str = ""
    courtName: str = DEFAULT_COURT_NAME
    caseType: CaseType = "civil"
    prosecutors: List[Party] = []
    plaintiffs: List[Party] = []
    defendants: List[Party] = []
    thirdParties: List[Party] = []
    claims: str = ""
    facts: str = ""
    evidence: str = ""
    legalBasis: str = ""

    @model_validator(mode="after")
    def _roles_match_lists(self):
        for role, field in ROLE_LIST_FIELDS.items():
            for party in getattr(self, field):
                if party.role != role:
                    raise ValueError(f"{field} may only hold '{role}' parties, got '{party.role}'")
        return self

    def parties_for(self, role: str) -> List[Party]:
        return getattr(self, ROLE_LIST_FIELDS[role])


class JudgementDraft(BaseModel):
    title: str
    partiesSection: str
    proceedings: str
    claimsAndDefense: str
    courtFindings: str
    courtReasoning: str
    judgment: str
    closing: str


# -----------------------------------------------------------------------------
# Workflow results
# -----------------------------------------------------------------------------
class ExtractionResult(BaseModel):
    ok: bool
    parties: List[Party] = []
    reason: Optional[Literal["empty_input", "busy", "generation_failed"]] = None


class DraftResult(BaseModel):
    ok: bool
    draft: Optional[JudgementDraft] = None
    reason: Optional[Literal["busy", "generation_failed"]] = None


# -----------------------------------------------------------------------------
# HTTP request / response bodies
# -----------------------------------------------------------------------------
class PartySection(BaseModel):
    role: PartyRole
    title: str


class SessionSnapshot(BaseModel):
    sessionId: str
    view: ViewState
    extracting: bool
    drafting: bool
    caseDetails: CaseDetails
    partySections: List[PartySection]
    draft: Optional[JudgementDraft] = None


class UpdateCaseRequest(BaseModel):
    caseNumber: Optional[str] = None
    courtName: Optional[str] = None
    caseType: Optional[CaseType] = None
    claims: Optional[str] = None
    facts: Optional[str] = None
    evidence: Optional[str] = None
    legalBasis: Optional[str] = None


class UpdatePartyRequest(BaseModel):
    name: Optional[str] = None
    identity: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    legalRep: Optional[str] = None
    agent: Optional[str] = None


class ExtractRequest(BaseModel):
    text: str


class ExtractResponse(BaseModel):
    parties: List[Party]
    session: SessionSnapshot

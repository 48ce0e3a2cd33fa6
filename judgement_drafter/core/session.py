"""
Drafting session: one CaseDetails, the edit/preview view toggle, and the
extraction and draft workflows.
"""
import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Optional

from judgement_drafter.app.api_models import (
    CaseDetails,
    DraftResult,
    ExtractionResult,
    JudgementDraft,
    Party,
    SessionSnapshot,
)
from judgement_drafter.core import case_state, gemini_client

logger = logging.getLogger(__name__)

Extractor = Callable[[str], List[Party]]
Drafter = Callable[[CaseDetails], JudgementDraft]


class DraftingSession:
    def __init__(
        self,
        extractor: Optional[Extractor] = None,
        drafter: Optional[Drafter] = None,
        session_id: Optional[str] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.details = case_state.new_case_details()
        self.view = "edit"
        self.draft: Optional[JudgementDraft] = None
        self.extracting = False
        self.drafting = False
        self._extractor = extractor or gemini_client.extract_party_info
        self._drafter = drafter or gemini_client.generate_judgement_draft
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Direct edits
    # -------------------------------------------------------------------------
    def add_party(self, role: str) -> None:
        with self._lock:
            self.details = case_state.add_party(self.details, role)

    def remove_party(self, role: str, index: int) -> None:
        with self._lock:
            self.details = case_state.remove_party(self.details, role, index)

    def update_party(self, role: str, index: int, changes: Dict[str, Any]) -> None:
        with self._lock:
            self.details = case_state.update_party(self.details, role, index, changes)

    def update_case(self, changes: Dict[str, Any]) -> None:
        with self._lock:
            self.details = case_state.update_case_fields(self.details, changes)

    def return_to_edit(self) -> None:
        self.view = "edit"

    # -------------------------------------------------------------------------
    # Workflows
    # -------------------------------------------------------------------------
    def run_extraction(self, text: str) -> ExtractionResult:
        if not text or not text.strip():
            return ExtractionResult(ok=False, reason="empty_input")

        with self._lock:
            if self.extracting:
                return ExtractionResult(ok=False, reason="busy")
            self.extracting = True

        try:
            parties = self._extractor(text)
        except Exception:
            logger.exception("Party extraction failed for session %s", self.session_id)
            return ExtractionResult(ok=False, reason="generation_failed")
        finally:
            with self._lock:
                self.extracting = False

        with self._lock:
            self.details = case_state.merge_extracted_parties(self.details, parties)
        logger.info("Extracted %d parties for session %s", len(parties), self.session_id)
        return ExtractionResult(ok=True, parties=parties)

    def run_draft(self) -> DraftResult:
        with self._lock:
            if self.drafting:
                return DraftResult(ok=False, reason="busy")
            self.drafting = True
            snapshot = self.details.model_copy(deep=True)

        try:
            draft = self._drafter(snapshot)
        except Exception:
            logger.exception("Judgement draft generation failed for session %s", self.session_id)
            return DraftResult(ok=False, reason="generation_failed")
        finally:
            with self._lock:
                self.drafting = False

        with self._lock:
            self.draft = draft
            self.view = "preview"
        return DraftResult(ok=True, draft=draft)

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            sessionId=self.session_id,
            view=self.view,
            extracting=self.extracting,
            drafting=self.drafting,
            caseDetails=self.details,
            partySections=case_state.party_sections(self.details.caseType),
            draft=self.draft,
        )

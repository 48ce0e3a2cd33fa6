"""
Generation client: the two Gemini calls behind party extraction and judgement drafting.
Each call is a single blocking request with a declared JSON response schema.
No caching, retry or timeout handling.
"""
import json
import logging
import os
from typing import List, Optional

from google import genai
from google.genai import types
from pydantic import TypeAdapter, ValidationError

from judgement_drafter.app.api_models import CaseDetails, ExtractedParty, JudgementDraft, Party
from judgement_drafter.prompts.judgement_draft import JUDGEMENT_DRAFT_SCHEMA, build_judgement_prompt
from judgement_drafter.prompts.party_extraction import PARTY_LIST_SCHEMA, build_party_extraction_prompt

logger = logging.getLogger(__name__)

EXTRACTION_MODEL = os.getenv("GEMINI_EXTRACTION_MODEL", "gemini-3-flash-preview")
DRAFT_MODEL = os.getenv("GEMINI_DRAFT_MODEL", "gemini-3-pro-preview")
DRAFT_THINKING_BUDGET = int(os.getenv("GEMINI_DRAFT_THINKING_BUDGET", "4000"))

_PARTY_LIST = TypeAdapter(List[ExtractedParty])

# Module-level singleton, created on first call so a missing key only surfaces then
_client: Optional[genai.Client] = None


class GenerationError(Exception):
    """The remote model call failed or returned something unusable."""


class DraftParseError(GenerationError):
    """The drafting response was not a JSON object with all eight draft sections."""


def get_api_key() -> Optional[str]:
    return os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY")


def _get_client() -> genai.Client:
    global _client
    if _client is None:
        api_key = get_api_key()
        if not api_key:
            raise GenerationError("Missing GEMINI_API_KEY/GOOGLE_API_KEY/API_KEY.")
        _client = genai.Client(api_key=api_key)
    return _client


def _call_gemini(prompt: str, model_name: str, config: types.GenerateContentConfig) -> str:
    """Single Gemini call returning the raw response text."""
    client = _get_client()
    logger.info("Calling Gemini model %s", model_name)
    try:
        response = client.models.generate_content(
            model=model_name,
            contents=prompt,
            config=config,
        )
    except Exception as e:
        raise GenerationError(f"Gemini call to {model_name} failed: {e}") from e
    return response.text or ""


def extract_party_info(text: str) -> List[Party]:
    """
    Extract structured parties from pasted free text.
    A response that is not a JSON array of valid party objects yields an empty
    list; callers cannot tell that apart from "no parties found".
    """
    config = types.GenerateContentConfig(
        response_mime_type="application/json",
        response_schema=PARTY_LIST_SCHEMA,
    )
    raw = _call_gemini(build_party_extraction_prompt(text), EXTRACTION_MODEL, config)

    try:
        extracted = _PARTY_LIST.validate_python(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Party extraction response could not be parsed: %s", e)
        return []
    return [party.to_party() for party in extracted]


def generate_judgement_draft(details: CaseDetails) -> JudgementDraft:
    config = types.GenerateContentConfig(
        thinking_config=types.ThinkingConfig(thinking_budget=DRAFT_THINKING_BUDGET),
        response_mime_type="application/json",
        response_schema=JUDGEMENT_DRAFT_SCHEMA,
    )
    raw = _call_gemini(build_judgement_prompt(details), DRAFT_MODEL, config)

    try:
        return JudgementDraft.model_validate_json(raw)
    except ValidationError as e:
        raise DraftParseError(f"Judgement draft response could not be parsed: {e}") from e

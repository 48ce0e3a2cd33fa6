"""
FastAPI backend for the judgement drafting assistant.
Holds drafting sessions in memory and exposes the case form, the party
extraction helper and the judgement draft workflow.
"""
import logging
import os
from typing import Dict

from dotenv import load_dotenv
from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

load_dotenv()

from judgement_drafter.app.api_models import (
    ExtractRequest,
    ExtractResponse,
    PartyRole,
    SessionSnapshot,
    UpdateCaseRequest,
    UpdatePartyRequest,
)
from judgement_drafter.core.case_state import PartyIndexError
from judgement_drafter.core.gemini_client import get_api_key
from judgement_drafter.core.session import DraftingSession
from judgement_drafter.logic.document_view import render_draft_html

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "信息提取失败"
DRAFT_FAILED_MESSAGE = "生成失败，请检查配置。"

# sessionId -> DraftingSession; lives as long as the process
sessions: Dict[str, DraftingSession] = {}

# -----------------------------------------------------------------------------
# App setup
# -----------------------------------------------------------------------------
app = FastAPI(
    title="法鼎 Judgement Drafting API",
    description="AI-assisted court judgement drafting",
    version="0.1.0",
)

_cors_origins = ["http://localhost:3000"]
_frontend_url = os.getenv("FRONTEND_URL")
if _frontend_url:
    _cors_origins.append(_frontend_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------------------------------------------------------
# Error handling
# -----------------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Handle 422 validation errors with a consistent JSON response."""
    errors = exc.errors()
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "errors": [
                {
                    "loc": list(err.get("loc", [])),
                    "msg": err.get("msg", ""),
                    "type": err.get("type", ""),
                }
                for err in errors
            ],
        },
    )


def _get_session(sessionId: str) -> DraftingSession:
    session = sessions.get(sessionId)
    if session is None:
        raise HTTPException(
            status_code=404,
            detail=f"Session with ID {sessionId} not found.",
        )
    return session


# -----------------------------------------------------------------------------
# Endpoints
# -----------------------------------------------------------------------------
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "api_key_configured": get_api_key() is not None}


@app.post("/api/sessions", response_model=SessionSnapshot, status_code=201)
async def create_session() -> SessionSnapshot:
    """Start a new drafting session seeded with one blank plaintiff and defendant."""
    session = DraftingSession()
    sessions[session.session_id] = session
    logger.info("Created drafting session %s", session.session_id)
    return session.snapshot()


@app.get("/api/sessions/{sessionId}", response_model=SessionSnapshot)
async def get_session(sessionId: str) -> SessionSnapshot:
    return _get_session(sessionId).snapshot()


@app.delete("/api/sessions/{sessionId}", status_code=204)
async def delete_session(sessionId: str) -> None:
    _get_session(sessionId)
    del sessions[sessionId]


@app.patch("/api/sessions/{sessionId}/case", response_model=SessionSnapshot)
async def update_case(sessionId: str, request: UpdateCaseRequest) -> SessionSnapshot:
    """Update court metadata and free-text fields. Omitted fields are left alone."""
    session = _get_session(sessionId)
    session.update_case(request.model_dump(exclude_unset=True, exclude_none=True))
    return session.snapshot()


@app.post("/api/sessions/{sessionId}/parties/{role}", response_model=SessionSnapshot, status_code=201)
async def add_party(sessionId: str, role: PartyRole) -> SessionSnapshot:
    session = _get_session(sessionId)
    session.add_party(role)
    return session.snapshot()


@app.patch("/api/sessions/{sessionId}/parties/{role}/{index}", response_model=SessionSnapshot)
async def update_party(
    sessionId: str,
    role: PartyRole,
    index: int,
    request: UpdatePartyRequest,
) -> SessionSnapshot:
    session = _get_session(sessionId)
    try:
        session.update_party(role, index, request.model_dump(exclude_unset=True, exclude_none=True))
    except PartyIndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session.snapshot()


@app.delete("/api/sessions/{sessionId}/parties/{role}/{index}", response_model=SessionSnapshot)
async def remove_party(sessionId: str, role: PartyRole, index: int) -> SessionSnapshot:
    session = _get_session(sessionId)
    try:
        session.remove_party(role, index)
    except PartyIndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session.snapshot()


# Workflow routes are sync so the blocking Gemini call runs in the threadpool
@app.post("/api/sessions/{sessionId}/extract", response_model=ExtractResponse)
def extract_parties(sessionId: str, request: ExtractRequest) -> ExtractResponse:
    """Extract parties from pasted text and merge them into the case."""
    session = _get_session(sessionId)
    result = session.run_extraction(request.text)

    if result.reason == "empty_input":
        raise HTTPException(status_code=400, detail="Text to extract from must not be empty.")
    if result.reason == "busy":
        raise HTTPException(status_code=409, detail="Extraction already in progress.")
    if not result.ok:
        raise HTTPException(status_code=502, detail=EXTRACTION_FAILED_MESSAGE)

    return ExtractResponse(parties=result.parties, session=session.snapshot())


@app.post("/api/sessions/{sessionId}/draft", response_model=SessionSnapshot)
def generate_draft(sessionId: str) -> SessionSnapshot:
    """Generate the judgement draft and switch the session to preview."""
    session = _get_session(sessionId)
    result = session.run_draft()

    if result.reason == "busy":
        raise HTTPException(status_code=409, detail="Draft generation already in progress.")
    if not result.ok:
        raise HTTPException(status_code=502, detail=DRAFT_FAILED_MESSAGE)

    return session.snapshot()


@app.post("/api/sessions/{sessionId}/edit", response_model=SessionSnapshot)
async def return_to_edit(sessionId: str) -> SessionSnapshot:
    """返回修改: back from the preview to the edit form."""
    session = _get_session(sessionId)
    session.return_to_edit()
    return session.snapshot()


@app.get("/api/sessions/{sessionId}/document", response_class=HTMLResponse)
async def get_document(sessionId: str) -> HTMLResponse:
    """Read-only document view of the generated draft."""
    session = _get_session(sessionId)
    if session.draft is None:
        raise HTTPException(status_code=409, detail="No draft has been generated for this session yet.")
    return HTMLResponse(render_draft_html(session.draft))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("judgement_drafter.app.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")))

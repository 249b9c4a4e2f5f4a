"""Proposal API Routes - generation, editing, locking, regeneration and export."""

import logging
from typing import Dict, NoReturn, Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse, HTMLResponse

from governance_agent.core.errors import (
    GovernanceAgentError,
    InvalidSectionError,
    LangflowError,
    ProposalNotFoundError,
    ProposalNotReadyError,
    SectionLockedError,
)
from governance_agent.models import (
    ExportFormat,
    IdeaRequest,
    LockRequest,
    ProposalData,
    ProposalDraft,
    ProposalSection,
    RawResponseRequest,
    RegenerateRequest,
    SectionUpdateRequest,
)
from governance_agent.services.proposal_service import proposal_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/proposals", tags=["proposals"])


_STATUS_BY_ERROR = (
    (ProposalNotFoundError, 404),
    (SectionLockedError, 409),
    (ProposalNotReadyError, 409),
    (InvalidSectionError, 422),
    (LangflowError, 502),
)


def _raise_http(error: GovernanceAgentError) -> NoReturn:
    """Translate a domain error into an HTTPException."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            raise HTTPException(status_code=status_code, detail=str(error)) from error
    raise HTTPException(status_code=500, detail=str(error)) from error


# ===========================================
# Parsing / Generation
# ===========================================

@router.post(
    "/parse",
    response_model=ProposalData,
    summary="Parse Raw Generator Output"
)
async def parse_response(body: RawResponseRequest) -> ProposalData:
    """Turn raw generator text into a structured proposal. Never fails on bad text."""
    return proposal_service.parse(body.text)


@router.post(
    "",
    response_model=ProposalDraft,
    status_code=201,
    summary="Generate Proposal From Idea"
)
async def create_proposal(body: IdeaRequest) -> ProposalDraft:
    """
    Generate a proposal from a governance idea.

    A failed generation call returns 502 and stores nothing; a response
    that cannot be parsed still produces a draft (the error record).
    """
    if not body.idea.strip():
        raise HTTPException(status_code=400, detail="Idea must not be blank")

    try:
        return await proposal_service.generate(body.idea.strip())
    except GovernanceAgentError as e:
        logger.error(f"Proposal generation failed: {e}")
        _raise_http(e)


# ===========================================
# Drafts
# ===========================================

@router.get("/{draft_id}", response_model=ProposalDraft, summary="Get Draft")
async def get_proposal(draft_id: str) -> ProposalDraft:
    """Fetch a draft with its lock state."""
    try:
        return proposal_service.store.get(draft_id)
    except GovernanceAgentError as e:
        _raise_http(e)


@router.delete("/{draft_id}", status_code=204, summary="Delete Draft")
async def delete_proposal(draft_id: str) -> None:
    """Discard a draft."""
    try:
        proposal_service.store.delete(draft_id)
    except GovernanceAgentError as e:
        _raise_http(e)


@router.put(
    "/{draft_id}/sections/{section}",
    response_model=ProposalDraft,
    summary="Edit Section"
)
async def update_section(
    draft_id: str,
    section: ProposalSection,
    body: SectionUpdateRequest
) -> ProposalDraft:
    """Replace a section's value by hand."""
    try:
        return proposal_service.store.update_section(draft_id, section.value, body.value)
    except GovernanceAgentError as e:
        _raise_http(e)


# ===========================================
# Locks
# ===========================================

@router.post(
    "/{draft_id}/sections/{section}/lock",
    response_model=ProposalDraft,
    summary="Lock Or Unlock Section"
)
async def lock_section(
    draft_id: str,
    section: ProposalSection,
    body: LockRequest
) -> ProposalDraft:
    """Set the lock flag of one section."""
    try:
        return proposal_service.store.set_lock(draft_id, section.value, body.locked)
    except GovernanceAgentError as e:
        _raise_http(e)


@router.post("/{draft_id}/lock", response_model=ProposalDraft, summary="Lock Or Unlock All")
async def lock_all(draft_id: str, body: LockRequest) -> ProposalDraft:
    """Set every section to the same lock state."""
    try:
        return proposal_service.store.set_all_locked(draft_id, body.locked)
    except GovernanceAgentError as e:
        _raise_http(e)


# ===========================================
# Regeneration
# ===========================================

@router.post(
    "/{draft_id}/sections/{section}/regenerate",
    response_model=ProposalDraft,
    summary="Regenerate Section"
)
async def regenerate_section(
    draft_id: str,
    section: ProposalSection,
    body: Optional[RegenerateRequest] = None
) -> ProposalDraft:
    """Rewrite an unlocked section, optionally guided by feedback."""
    try:
        return await proposal_service.regenerate_section(
            draft_id, section.value, body.feedback if body else None
        )
    except GovernanceAgentError as e:
        logger.error(f"Section regeneration failed: {e}")
        _raise_http(e)


@router.post(
    "/{draft_id}/sections/{section}/items/{index}/regenerate",
    response_model=ProposalDraft,
    summary="Regenerate List Item"
)
async def regenerate_item(
    draft_id: str,
    section: ProposalSection,
    index: int,
    body: Optional[RegenerateRequest] = None
) -> ProposalDraft:
    """Rewrite one item of an unlocked list section."""
    try:
        return await proposal_service.regenerate_item(
            draft_id, section.value, index, body.feedback if body else None
        )
    except GovernanceAgentError as e:
        logger.error(f"Item regeneration failed: {e}")
        _raise_http(e)


# ===========================================
# Submission / Export
# ===========================================

@router.post("/{draft_id}/submit", response_model=ProposalDraft, summary="Submit Proposal")
async def submit_proposal(draft_id: str) -> ProposalDraft:
    """Submit a draft; every section must be locked."""
    try:
        return proposal_service.submit(draft_id)
    except GovernanceAgentError as e:
        _raise_http(e)


@router.get("/{draft_id}/export", summary="Export Proposal")
async def export_proposal(
    draft_id: str,
    export_format: ExportFormat = Query(ExportFormat.MARKDOWN, alias="format")
):
    """Render the draft as Markdown (default) or HTML."""
    try:
        content = proposal_service.export(draft_id, export_format)
    except GovernanceAgentError as e:
        _raise_http(e)

    if export_format == ExportFormat.HTML:
        return HTMLResponse(content)
    return PlainTextResponse(content, media_type="text/markdown")


# ===========================================
# Health
# ===========================================

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health_check() -> Dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "governance-proposal-agent"}

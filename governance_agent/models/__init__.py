"""Models package - All Pydantic models organized by domain."""

from governance_agent.models.enums import ProposalSection, ExportFormat
from governance_agent.models.proposal import ProposalData, ProposalDraft
from governance_agent.models.requests import (
    IdeaRequest,
    RawResponseRequest,
    SectionUpdateRequest,
    LockRequest,
    RegenerateRequest,
)

__all__ = [
    # Enums
    "ProposalSection",
    "ExportFormat",
    # Proposal models
    "ProposalData",
    "ProposalDraft",
    # Request models
    "IdeaRequest",
    "RawResponseRequest",
    "SectionUpdateRequest",
    "LockRequest",
    "RegenerateRequest",
]

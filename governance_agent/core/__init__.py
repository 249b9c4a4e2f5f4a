"""Core module - Configuration and error types."""

from governance_agent.core.config import get_settings, Settings
from governance_agent.core.errors import (
    GovernanceAgentError,
    LangflowError,
    ProposalNotFoundError,
    SectionLockedError,
    ProposalNotReadyError,
    InvalidSectionError,
)

__all__ = [
    "get_settings",
    "Settings",
    "GovernanceAgentError",
    "LangflowError",
    "ProposalNotFoundError",
    "SectionLockedError",
    "ProposalNotReadyError",
    "InvalidSectionError",
]

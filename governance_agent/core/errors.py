"""Domain error types."""


class GovernanceAgentError(Exception):
    """Base error for the Governance Proposal Agent."""


class LangflowError(GovernanceAgentError):
    """Raised when the Langflow generation service cannot be reached or refuses a request."""


class ProposalNotFoundError(GovernanceAgentError):
    """Raised when a draft id is unknown to the store."""


class SectionLockedError(GovernanceAgentError):
    """Raised when a locked section is edited or regenerated."""


class ProposalNotReadyError(GovernanceAgentError):
    """Raised when a draft is submitted before every section is locked."""


class InvalidSectionError(GovernanceAgentError):
    """Raised when a section name or item index does not fit the proposal layout."""

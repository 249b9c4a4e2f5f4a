"""Services module - Draft storage and proposal orchestration."""

from governance_agent.services.proposal_store import ProposalStore, proposal_store
from governance_agent.services.proposal_service import ProposalService, proposal_service

__all__ = [
    "ProposalStore",
    "proposal_store",
    "ProposalService",
    "proposal_service",
]

"""Integrations module - External service connectors and exporters."""

from governance_agent.integrations.langflow import LangflowService, langflow_service
from governance_agent.integrations.export import ProposalExporter, proposal_exporter

__all__ = [
    "LangflowService",
    "langflow_service",
    "ProposalExporter",
    "proposal_exporter",
]

"""Enumeration types for governance proposals."""

from enum import Enum


class ProposalSection(str, Enum):
    """Canonical keys of the 13 proposal sections, in display order."""
    TITLE = "proposal_title"
    SUMMARY = "proposal_summary"
    PROBLEM = "problem"
    SOLUTION = "solution"
    MILESTONES = "milestones"
    OUTCOMES = "outcomes"
    STAKEHOLDER_IMPACT = "stakeholder_impact"
    RESOURCES = "resources"
    RISKS = "risks"
    ALTERNATIVES = "alternatives"
    IMPLEMENTATION = "implementation"
    METRICS = "metrics"
    REFERENCES = "references"


class ExportFormat(str, Enum):
    """Output formats for a finished proposal."""
    MARKDOWN = "markdown"
    HTML = "html"

"""Tests for proposal export."""

import pytest

from governance_agent.integrations.export import ProposalExporter
from governance_agent.models import ExportFormat, ProposalData


@pytest.fixture
def proposal() -> ProposalData:
    """A small finished proposal."""
    return ProposalData(
        proposal_title="Community Builder Grants",
        proposal_summary="Fund builders",
        problem="Builders leave",
        solution=["Create a council", "Publish reports"],
        references=["1. [Forum thread]"],
    )


class TestProposalExporter:
    """Tests for ProposalExporter."""

    def test_markdown_layout(self, proposal):
        """Title first, then scalar sections, then list sections as bullets."""
        text = ProposalExporter().to_markdown(proposal)

        assert text.startswith(
            "# Community Builder Grants\n\n"
            "## Proposal Summary\nFund builders\n\n"
            "## Problem Statement\nBuilders leave\n\n"
            "## Proposed Solution\n- Create a council\n- Publish reports\n\n"
        )
        assert text.endswith("## References\n- 1. [Forum thread]\n")

    def test_markdown_section_order(self, proposal):
        """Every section heading appears once, in form order."""
        text = ProposalExporter().to_markdown(proposal)
        headings = [line for line in text.splitlines() if line.startswith("## ")]

        assert headings == [
            "## Proposal Summary",
            "## Problem Statement",
            "## Proposed Solution",
            "## Milestones",
            "## Expected Outcomes",
            "## Stakeholder Impact",
            "## Resources Required",
            "## Risks and Challenges",
            "## Alternatives Considered",
            "## Implementation Plan",
            "## Success Metrics",
            "## References",
        ]

    def test_html(self, proposal):
        """HTML export renders headings and list items."""
        html = ProposalExporter().to_html(proposal)

        assert "<h1>Community Builder Grants</h1>" in html
        assert "<h2>Proposed Solution</h2>" in html
        assert "<li>Create a council</li>" in html

    def test_render_dispatch(self, proposal):
        """render() picks the format."""
        exporter = ProposalExporter()

        assert exporter.render(proposal).startswith("# Community Builder Grants")
        assert exporter.render(proposal, ExportFormat.HTML).startswith("<h1>")

"""Proposal export - render a finished proposal as Markdown or HTML."""

import logging
from typing import List, Tuple

import markdown
from jinja2 import Template

from governance_agent.models.enums import ExportFormat
from governance_agent.models.proposal import ProposalData
from governance_agent.parsing.fields import FIELDS

logger = logging.getLogger(__name__)


PROPOSAL_TEMPLATE = """# {{ title }}

{% for heading, text in scalar_sections -%}
## {{ heading }}
{{ text }}

{% endfor -%}
{% for heading, items in list_sections -%}
## {{ heading }}
{% for item in items -%}
- {{ item }}
{% endfor %}
{% endfor -%}
"""


class ProposalExporter:
    """
    Render proposals for copying or sharing.

    Markdown output follows the section order of the proposal form;
    HTML output is the same Markdown converted with python-markdown.
    """

    def __init__(self, template: str = PROPOSAL_TEMPLATE):
        """Initialize exporter with a Jinja2 template source."""
        self.template = Template(template)

    def _sections(self, proposal: ProposalData) -> Tuple[List[Tuple[str, str]], List[Tuple[str, List[str]]]]:
        scalar_sections = []
        list_sections = []
        for spec in FIELDS:
            if spec.key == "proposal_title":
                continue
            value = getattr(proposal, spec.key)
            if spec.is_list:
                list_sections.append((spec.export_heading, value))
            else:
                scalar_sections.append((spec.export_heading, value))
        return scalar_sections, list_sections

    def to_markdown(self, proposal: ProposalData) -> str:
        """
        Render the proposal as Markdown.

        Args:
            proposal: Proposal to render

        Returns:
            "# Title" followed by one "## Heading" block per section
        """
        scalar_sections, list_sections = self._sections(proposal)
        rendered = self.template.render(
            title=proposal.proposal_title,
            scalar_sections=scalar_sections,
            list_sections=list_sections,
        )
        return rendered.rstrip("\n") + "\n"

    def to_html(self, proposal: ProposalData) -> str:
        """Render the proposal as an HTML fragment."""
        return markdown.markdown(
            self.to_markdown(proposal),
            extensions=["tables", "nl2br"]
        )

    def render(self, proposal: ProposalData, export_format: ExportFormat = ExportFormat.MARKDOWN) -> str:
        """Render in the requested format."""
        logger.info(f"Exporting proposal '{proposal.proposal_title}' as {export_format.value}")
        if export_format == ExportFormat.HTML:
            return self.to_html(proposal)
        return self.to_markdown(proposal)


# Singleton instance
proposal_exporter = ProposalExporter()

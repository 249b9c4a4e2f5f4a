"""Proposal service - glue between Langflow, the parser and the draft store."""

import logging
from typing import Optional

from governance_agent.core.errors import (
    InvalidSectionError,
    ProposalNotReadyError,
    SectionLockedError,
)
from governance_agent.integrations.export import ProposalExporter, proposal_exporter
from governance_agent.integrations.langflow import LangflowService, langflow_service
from governance_agent.models.enums import ExportFormat
from governance_agent.models.proposal import ProposalData, ProposalDraft
from governance_agent.parsing.assembler import build_record
from governance_agent.parsing.fields import format_section_name, is_list_field
from governance_agent.parsing.regeneration import regenerate_field_value, regenerate_item_value
from governance_agent.services.proposal_store import ProposalStore, proposal_store, validate_section

logger = logging.getLogger(__name__)


class ProposalService:
    """
    Orchestrates proposal generation and editing.

    Flow:
    1. Idea -> Langflow generation flow -> raw text
    2. Raw text -> build_record() -> ProposalData stored as a draft
    3. Unlocked sections or items -> Langflow regeneration flow -> re-derived values
    4. All sections locked -> submit -> export
    """

    def __init__(
        self,
        store: Optional[ProposalStore] = None,
        langflow: Optional[LangflowService] = None,
        exporter: Optional[ProposalExporter] = None
    ):
        """Initialize with collaborators (singletons by default)."""
        self.store = store or proposal_store
        self.langflow = langflow or langflow_service
        self.exporter = exporter or proposal_exporter

    # ===========================================
    # Generation
    # ===========================================

    def parse(self, raw_text: str) -> ProposalData:
        """Parse raw generator output without storing it."""
        return build_record(raw_text)

    async def generate(self, idea: str) -> ProposalDraft:
        """
        Generate a proposal from a governance idea and store it.

        Raises:
            LangflowError: If the generation call fails (nothing is parsed or stored)
        """
        logger.info(f"Generating proposal for idea: {idea[:80]}")
        raw_text = await self.langflow.generate_proposal(idea)
        proposal = build_record(raw_text)
        return self.store.create(proposal, idea=idea)

    # ===========================================
    # Regeneration
    # ===========================================

    def _ensure_unlocked(self, draft: ProposalDraft, section: str) -> None:
        if draft.is_locked(section):
            raise SectionLockedError(f"{format_section_name(section)} is locked")

    async def regenerate_section(
        self,
        draft_id: str,
        section: str,
        feedback: Optional[str] = None
    ) -> ProposalDraft:
        """
        Regenerate a whole section.

        List sections are sent one item per line.

        Raises:
            SectionLockedError: If the section is locked
            LangflowError: If the regeneration call fails
        """
        validate_section(section)
        draft = self.store.get(draft_id)
        self._ensure_unlocked(draft, section)

        current = getattr(draft.data, section)
        text = "\n".join(current) if isinstance(current, list) else current

        raw_text = await self.langflow.regenerate_section(text, feedback)
        value = regenerate_field_value(section, current, raw_text)

        logger.info(f"Regenerated section {section} of {draft_id}")
        return self.store.update_section(draft_id, section, value)

    async def regenerate_item(
        self,
        draft_id: str,
        section: str,
        index: int,
        feedback: Optional[str] = None
    ) -> ProposalDraft:
        """
        Regenerate one item of a list section.

        Raises:
            InvalidSectionError: If the section is not a list or index is out of range
            SectionLockedError: If the section is locked
            LangflowError: If the regeneration call fails
        """
        validate_section(section)
        if not is_list_field(section):
            raise InvalidSectionError(f"Section {section} has no items")

        draft = self.store.get(draft_id)
        self._ensure_unlocked(draft, section)

        items = getattr(draft.data, section)
        if index < 0 or index >= len(items):
            raise InvalidSectionError(f"Invalid item index {index} for section {section}")

        raw_text = await self.langflow.regenerate_section(items[index], feedback)
        updated = regenerate_item_value(section, items, index, raw_text)

        logger.info(f"Regenerated item {index} of {section} in {draft_id}")
        return self.store.update_section(draft_id, section, updated)

    # ===========================================
    # Submission / Export
    # ===========================================

    def submit(self, draft_id: str) -> ProposalDraft:
        """
        Submit a draft once every section is locked.

        Raises:
            ProposalNotReadyError: If any section is still unlocked
        """
        draft = self.store.get(draft_id)
        unlocked = [
            format_section_name(key)
            for key in ProposalData.model_fields
            if not draft.is_locked(key)
        ]
        if unlocked:
            raise ProposalNotReadyError(
                f"Lock all sections to submit (unlocked: {', '.join(unlocked)})"
            )

        logger.info(f"Submitted proposal: {draft_id} - {draft.data.proposal_title}")
        return self.store.mark_submitted(draft_id)

    def export(self, draft_id: str, export_format: ExportFormat = ExportFormat.MARKDOWN) -> str:
        """Render a draft for copying or sharing."""
        draft = self.store.get(draft_id)
        return self.exporter.render(draft.data, export_format)


# Singleton instance
proposal_service = ProposalService()

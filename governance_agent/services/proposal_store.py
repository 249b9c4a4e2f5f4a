"""In-memory draft store with per-section locks."""

import logging
import threading
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from governance_agent.core.errors import (
    InvalidSectionError,
    ProposalNotFoundError,
    SectionLockedError,
)
from governance_agent.models.enums import ProposalSection
from governance_agent.models.proposal import ProposalData, ProposalDraft
from governance_agent.parsing.fields import FieldValue, format_section_name, is_list_field

logger = logging.getLogger(__name__)

SECTION_KEYS: List[str] = [section.value for section in ProposalSection]


def validate_section(section: str) -> str:
    """Return the canonical key or raise InvalidSectionError."""
    if section not in SECTION_KEYS:
        raise InvalidSectionError(f"Unknown section: {section}")
    return section


class ProposalStore:
    """
    Key-value store of proposal drafts.

    Holds form data and lock flags only; it never parses anything.
    Drafts are copied on the way in and out so callers cannot mutate
    stored state behind the store's back.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._drafts: Dict[str, ProposalDraft] = {}
        self._lock = threading.Lock()

    # ===========================================
    # Create / Read / Delete
    # ===========================================

    def create(self, data: ProposalData, idea: Optional[str] = None) -> ProposalDraft:
        """Store a freshly generated proposal and return its draft."""
        draft = ProposalDraft(id=f"prop_{uuid.uuid4().hex[:12]}", idea=idea, data=data)
        with self._lock:
            self._drafts[draft.id] = draft
        logger.info(f"Created draft: {draft.id}")
        return draft.model_copy(deep=True)

    def get(self, draft_id: str) -> ProposalDraft:
        """Fetch a draft by id."""
        with self._lock:
            draft = self._drafts.get(draft_id)
            if draft is None:
                raise ProposalNotFoundError(f"Proposal {draft_id} not found")
            return draft.model_copy(deep=True)

    def delete(self, draft_id: str) -> None:
        """Remove a draft."""
        with self._lock:
            if self._drafts.pop(draft_id, None) is None:
                raise ProposalNotFoundError(f"Proposal {draft_id} not found")
        logger.info(f"Deleted draft: {draft_id}")

    def clear(self) -> None:
        """Remove every draft."""
        with self._lock:
            self._drafts.clear()

    # ===========================================
    # Update Operations
    # ===========================================

    def _save(self, draft: ProposalDraft) -> ProposalDraft:
        draft.updated_at = datetime.utcnow()
        self._drafts[draft.id] = draft
        return draft.model_copy(deep=True)

    def _require(self, draft_id: str) -> ProposalDraft:
        draft = self._drafts.get(draft_id)
        if draft is None:
            raise ProposalNotFoundError(f"Proposal {draft_id} not found")
        return draft

    def update_section(self, draft_id: str, section: str, value: FieldValue) -> ProposalDraft:
        """
        Replace a section's value.

        Raises:
            SectionLockedError: If the section is locked
            InvalidSectionError: If the value shape does not match the section
        """
        validate_section(section)
        if is_list_field(section) != isinstance(value, list):
            expected = "a list of items" if is_list_field(section) else "text"
            raise InvalidSectionError(f"Section {section} expects {expected}")

        with self._lock:
            draft = self._require(draft_id)
            if draft.is_locked(section):
                raise SectionLockedError(f"{format_section_name(section)} is locked")

            setattr(draft.data, section, list(value) if isinstance(value, list) else value)
            return self._save(draft)

    def set_lock(self, draft_id: str, section: str, locked: bool) -> ProposalDraft:
        """Lock or unlock one section."""
        validate_section(section)
        with self._lock:
            draft = self._require(draft_id)
            draft.locked[section] = locked
            draft.all_locked = all(draft.locked.get(key) for key in SECTION_KEYS)
            return self._save(draft)

    def set_all_locked(self, draft_id: str, locked: bool) -> ProposalDraft:
        """Set every section to the same lock state."""
        with self._lock:
            draft = self._require(draft_id)
            draft.locked = {key: locked for key in SECTION_KEYS}
            draft.all_locked = locked
            return self._save(draft)

    def mark_submitted(self, draft_id: str) -> ProposalDraft:
        """Flag a draft as submitted."""
        with self._lock:
            draft = self._require(draft_id)
            draft.submitted = True
            return self._save(draft)

    def reset(self, draft_id: str) -> ProposalDraft:
        """Clear form data and locks, keeping the draft id."""
        with self._lock:
            draft = self._require(draft_id)
            draft.data = ProposalData()
            draft.locked = {}
            draft.all_locked = False
            draft.submitted = False
            return self._save(draft)


# Singleton instance
proposal_store = ProposalStore()

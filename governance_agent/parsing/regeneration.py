"""Re-derive a single section or list item from regenerated text."""

import logging
from typing import List

from governance_agent.parsing.arrays import NUMBERED_BRACKET_LINE
from governance_agent.parsing.assembler import placeholder_for
from governance_agent.parsing.fields import REFERENCES_KEY, FieldValue, is_list_field
from governance_agent.parsing.references import canonical_reference, normalize_references

logger = logging.getLogger(__name__)


def regenerate_field_value(section: str, current_value: FieldValue, raw_text: str) -> FieldValue:
    """
    Build the new value of a whole section from regenerated text.

    Args:
        section: Canonical section key
        current_value: Value the section holds now
        raw_text: Text returned by the regeneration service

    Returns:
        Trimmed text for scalar sections (the current value when blank),
        a non-empty item list for list sections
    """
    raw_text = raw_text if isinstance(raw_text, str) else ""

    if not is_list_field(section):
        return raw_text.strip() or current_value

    if section == REFERENCES_KEY:
        logger.debug(f"References regenerated text: {raw_text!r}")
        items = [
            canonical_reference(position, reference)
            for position, reference in enumerate(normalize_references(raw_text), start=1)
        ]
    else:
        items = [line.strip() for line in raw_text.split("\n") if line.strip()]

    return items or [placeholder_for(section)]


def regenerate_item_value(section: str, items: List[str], index: int, raw_text: str) -> List[str]:
    """
    Replace one item of a list section with regenerated text.

    References keep their position: the replacement is numbered index + 1
    whatever number the regenerated text carries.

    Args:
        section: Canonical key of a list section
        items: Current items of the section
        index: Position of the item to replace
        raw_text: Text returned by the regeneration service

    Returns:
        New item list; the input list is not modified

    Raises:
        IndexError: If index is outside the list
    """
    if index < 0 or index >= len(items):
        raise IndexError(f"Invalid item index {index} for section {section}")

    raw_text = raw_text if isinstance(raw_text, str) else ""
    original = items[index]
    updated = list(items)
    position = index + 1

    if section != REFERENCES_KEY:
        updated[index] = raw_text.strip() or original
        return updated

    if NUMBERED_BRACKET_LINE.match(raw_text.strip()):
        updated[index] = canonical_reference(position, raw_text)
        return updated

    parsed = normalize_references(raw_text)
    logger.debug(f"Parsed reference item: {parsed}")
    updated[index] = canonical_reference(position, parsed[0] if parsed else original)
    return updated

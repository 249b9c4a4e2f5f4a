"""Record assembly - turn extracted fields into a complete ProposalData."""

import logging
from typing import Any, Dict, List

from governance_agent.models.proposal import ProposalData
from governance_agent.parsing.arrays import stringify
from governance_agent.parsing.extractor import extract_record
from governance_agent.parsing.fields import LIST_KEYS, SCALAR_KEYS, humanize_key

logger = logging.getLogger(__name__)

ERROR_TITLE = "Error Parsing Response"

# Advisory shown in each list section when the response could not be parsed
ERROR_ADVISORIES: Dict[str, str] = {
    "solution": "Please try again with a more specific governance idea.",
    "milestones": "Review the generation service response format",
    "outcomes": "Improved parsing of generated responses",
    "stakeholder_impact": "Users will get more reliable proposal generation",
    "resources": "Updated parsing logic",
    "risks": "Continued parsing issues if the response format changes significantly",
    "alternatives": "Manual proposal creation",
    "implementation": "Update the parsing logic to handle new response formats",
    "metrics": "Successful proposal generation rate",
    "references": "Check the service logs for detailed error information",
}


def placeholder_for(key: str) -> str:
    """Placeholder item for an empty list section."""
    return f"Please add {humanize_key(key)} details here"


def error_record() -> ProposalData:
    """The fixed record returned when a response cannot be parsed at all."""
    return ProposalData(
        proposal_title=ERROR_TITLE,
        proposal_summary=(
            "There was an error parsing the AI response. "
            "Please try again with a different idea."
        ),
        problem="The response format could not be properly parsed.",
        **{key: [advisory] for key, advisory in ERROR_ADVISORIES.items()},
    )


def _list_value(key: str, value: Any) -> List[str]:
    if not isinstance(value, list):
        logger.error(f"Expected list for {key}, got {type(value).__name__}")
        value = []

    items = [stringify(item).strip() for item in value]
    items = [item for item in items if item]

    if not items:
        logger.debug(f"Added placeholder for empty section: {key}")
        return [placeholder_for(key)]
    return items


def _scalar_value(key: str, value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        logger.warning(f"Expected text for {key}, got {type(value).__name__}")
        return stringify(value)
    return value


def build_record(raw_text: str) -> ProposalData:
    """
    Build a complete proposal from a raw response.

    Every list section ends up with at least one item (a placeholder when
    nothing was extracted). This function never raises: any fault yields
    the fixed error record, which callers render like any other proposal.

    Args:
        raw_text: Raw text returned by the generation service

    Returns:
        ProposalData with all 13 sections
    """
    try:
        extracted = extract_record(raw_text)

        fields: Dict[str, Any] = {}
        for key in SCALAR_KEYS:
            fields[key] = _scalar_value(key, extracted.get(key))
        for key in LIST_KEYS:
            fields[key] = _list_value(key, extracted.get(key))

        return ProposalData(**fields)

    except Exception as e:
        logger.error(f"Error parsing proposal response: {e}", exc_info=True)
        return error_record()

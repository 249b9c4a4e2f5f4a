"""
Reference list normalization.

References are citations such as "[Link to community discussion]". The
canonical shape of an entry is "N. [content]" where N is the entry's
1-based position, whatever number the upstream text used.
"""

import json
import logging
import re
from typing import Any, List

from governance_agent.parsing.arrays import recover_array, stringify

logger = logging.getLogger(__name__)

NUMBERED_PREFIX = re.compile(r"^\d+\.\s*\[")
NUMBERED_REFERENCE = re.compile(r"^\d+\.\s*\[.*\]$")
BRACKETED_REFERENCE = re.compile(r"^\[.*\]$")

_LEADING_NUMBER = re.compile(r"^\d+\.\s*")
_BRACKET_CONTENT = re.compile(r"\[(.*)\]", re.DOTALL)
_ARRAY_OPENERS = ('["[', "['[")
_ARRAY_CLOSERS = (']"]', "]']")


def format_reference(position: int, item: str) -> str:
    """
    Put one reference into canonical shape under the given number.

    - "7. [Link]" keeps its content and takes the new number
    - "[Link]" gets the number prepended
    - anything else is wrapped in brackets and numbered
    """
    item = item.strip()
    if NUMBERED_REFERENCE.match(item):
        return _LEADING_NUMBER.sub(f"{position}. ", item, count=1)
    if BRACKETED_REFERENCE.match(item):
        return f"{position}. {item}"
    return f"{position}. [{item}]"


def canonical_reference(position: int, text: str) -> str:
    """
    Rebuild a reference from the text inside its outermost brackets.

    Used when a regenerated reference must sit at a fixed position; a
    leading number without brackets is dropped before wrapping.
    """
    trimmed = text.strip()
    match = _BRACKET_CONTENT.search(trimmed)
    if match and match.group(1):
        return f"{position}. [{match.group(1)}]"
    return f"{position}. [{_LEADING_NUMBER.sub('', trimmed)}]"


def _number_lines(lines: List[str]) -> List[str]:
    return [format_reference(index, line) for index, line in enumerate(lines, start=1)]


def _parse_bracketed_literals(text: str) -> List[str]:
    """Parse a structured array of bracket-wrapped string literals."""
    parsed = json.loads(text.replace("'", '"'))
    if not isinstance(parsed, list):
        return []
    items = [stringify(item).strip() for item in parsed]
    return _number_lines([item for item in items if item])


def normalize_references(text: Any) -> List[str]:
    """
    Parse references in any of the shapes the generator produces.

    Shapes, most specific first:
    1. Several lines, at least one numbered ("1. [Link]") - renumber all lines
    2. One numbered line - returned as the first entry
    3. Array of bracketed literals (["[Link]", "[Paper]"])
    4. Several lines, at least one bare bracketed item ("[Link]")
    5. One bracketed line
    6. One plain line
    7. Anything else - array recovery, then canonical shape per item

    Args:
        text: Raw references text

    Returns:
        Entries shaped "N. [content]" numbered 1..N
    """
    if not text or not isinstance(text, str) or not text.strip():
        return []

    trimmed = text.strip()
    multiline = "\n" in trimmed
    lines = [line.strip() for line in trimmed.split("\n") if line.strip()]

    if multiline and any(NUMBERED_PREFIX.match(line) for line in lines):
        return _number_lines(lines)

    if not multiline and NUMBERED_PREFIX.match(trimmed):
        return [_LEADING_NUMBER.sub("1. ", trimmed, count=1)]

    if any(marker in text for marker in _ARRAY_OPENERS) and any(
        marker in text for marker in _ARRAY_CLOSERS
    ):
        try:
            items = _parse_bracketed_literals(trimmed)
            if items:
                return items
        except Exception as e:
            logger.debug(f"Bracketed reference array did not parse: {e}")

    if multiline and any(BRACKETED_REFERENCE.match(line) for line in lines):
        return _number_lines(lines)

    if not multiline and BRACKETED_REFERENCE.match(trimmed):
        return [f"1. {trimmed}"]

    if not multiline and "[" not in trimmed and "]" not in trimmed:
        return [f"1. [{trimmed}]"]

    return _number_lines(recover_array(text))

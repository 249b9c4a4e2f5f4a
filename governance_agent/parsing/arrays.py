"""
Array recovery - turn a text fragment into an ordered list of items.

Generated proposals rarely contain valid JSON. Lists show up as numbered
lines, single-quoted pseudo-arrays, bracketed groups whose items contain
their own brackets (links in references), or plain comma/newline runs.
recover_array() tries each convention in turn and never raises.
"""

import json
import logging
import re
from typing import Any, Callable, List, Optional, Sequence

logger = logging.getLogger(__name__)

NUMBERED_BRACKET_LINE = re.compile(r"^\d+\.\s*\[.*\]")

_SURROUNDING_QUOTES = re.compile(r"^['\"]|['\"]$")
_OUTER_BRACKETS = re.compile(r"^\[|\]$")
_TRAILING_COMMA = re.compile(r",\s*\]")
_ADJACENT_QUOTED = re.compile(r'"\s*([^"]+)"\s*"([^"]+)"')


def strip_quotes(item: str) -> str:
    """Remove one leading and one trailing quote character, then whitespace."""
    return _SURROUNDING_QUOTES.sub("", item).strip()


def stringify(item: Any) -> str:
    """Render a structured value as item text."""
    if isinstance(item, str):
        return item
    if item is None:
        return ""
    return json.dumps(item, ensure_ascii=False)


def split_top_level(content: str, separator: str = ",") -> List[str]:
    """
    Split on a separator that sits outside quotes and nested brackets.

    A quote only closes on the same character that opened it, and an
    escaped quote never toggles quote state. Pieces are returned trimmed,
    empty pieces included, so callers decide what to drop.

    Example:
        >>> split_top_level("'[a, b]', 'c'")
        ["'[a, b]'", "'c'"]
    """
    pieces: List[str] = []
    current: List[str] = []
    quote: Optional[str] = None
    depth = 0

    for index, char in enumerate(content):
        escaped = index > 0 and content[index - 1] == "\\"

        if char in ("'", '"') and not escaped:
            if quote is None:
                quote = char
            elif quote == char:
                quote = None
        elif quote is None and char == "[":
            depth += 1
        elif quote is None and char == "]":
            depth -= 1
        elif quote is None and depth == 0 and char == separator:
            pieces.append("".join(current).strip())
            current = []
            continue

        current.append(char)

    pieces.append("".join(current).strip())
    return pieces


def _non_blank_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


# ===========================================
# Strategies
# ===========================================
# Each strategy returns None (or an empty list) when its precondition
# does not hold. Exceptions are treated the same way by recover_array().

def _numbered_bracket_lines(text: str) -> Optional[List[str]]:
    """Lines like '1. [Link]' are already well-formed."""
    lines = _non_blank_lines(text)
    if any(NUMBERED_BRACKET_LINE.match(line) for line in lines):
        return lines
    return None


def _quoted_array(text: str) -> Optional[List[str]]:
    """Coerce a single-quoted pseudo-array into JSON and parse it."""
    cleaned = text.replace("'", '"')
    cleaned = _TRAILING_COMMA.sub("]", cleaned)
    cleaned = _ADJACENT_QUOTED.sub(r'"\1", "\2"', cleaned)

    parsed = json.loads(cleaned)
    if isinstance(parsed, list):
        return [stringify(item) for item in parsed]
    return None


def parse_bracketed_array(text: str) -> List[str]:
    """
    Split a bracketed array whose items may contain brackets themselves.

    Handles inputs like:
        ['[Link to community discussion, part 1]', '[Research paper]']

    Text not wrapped in brackets is split on newlines when it has any,
    otherwise on commas.

    Args:
        text: The text to split

    Returns:
        Items with surrounding quotes removed, blanks dropped
    """
    if not text or not isinstance(text, str):
        return []

    trimmed = text.strip()
    if NUMBERED_BRACKET_LINE.match(trimmed):
        return _non_blank_lines(trimmed)

    if not (trimmed.startswith("[") and trimmed.endswith("]")):
        separator = "\n" if "\n" in trimmed else ","
        return [item.strip() for item in trimmed.split(separator) if item.strip()]

    inner = trimmed[1:-1]
    items = [strip_quotes(piece) for piece in split_top_level(inner)]
    return [item for item in items if item]


def _newline_split(text: str) -> Optional[List[str]]:
    if "\n" not in text:
        return None
    stripped = _OUTER_BRACKETS.sub("", text.strip())
    return [strip_quotes(item) for item in stripped.split("\n") if strip_quotes(item)]


def _comma_split(text: str) -> Optional[List[str]]:
    stripped = _OUTER_BRACKETS.sub("", text.strip())
    return [strip_quotes(item) for item in stripped.split(",") if strip_quotes(item)]


_STRATEGIES: Sequence[Callable[[str], Optional[List[str]]]] = (
    _numbered_bracket_lines,
    _quoted_array,
    parse_bracketed_array,
    _newline_split,
    _comma_split,
)


def recover_array(text: Any) -> List[str]:
    """
    Recover an ordered list of items from arbitrary text.

    Strategies, first one producing at least one item wins:
    1. Numbered bracket lines ("1. [Link]") returned as-is
    2. Quoted pseudo-array coerced to JSON
    3. Bracket-aware manual split
    4. Newline split with outer brackets stripped
    5. Comma split with outer brackets stripped

    Args:
        text: Text fragment from a raw response

    Returns:
        List of items; the trimmed input as a single item when nothing
        else matched; empty for empty brackets or empty or non-string input
    """
    if not text or not isinstance(text, str):
        return []

    for strategy in _STRATEGIES:
        try:
            items = strategy(text)
        except Exception as e:
            logger.debug(f"Array strategy {strategy.__name__} failed: {e}")
            continue

        if items:
            return items

    trimmed = text.strip()
    if not _OUTER_BRACKETS.sub("", trimmed).strip():
        return []
    return [trimmed]

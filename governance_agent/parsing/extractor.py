"""
Field extraction - locate the 13 proposal sections in a raw response.

Strategies run in order. Each returns a partial record; the extractor
copies a value into the result only while that section is still empty,
so an earlier strategy is never overwritten by a later one. The direct
quoted-key strategy ends extraction early when it finds a title or
summary.
"""

import json
import logging
import re
from typing import Callable, Dict, List, Optional, Sequence

from governance_agent.parsing.arrays import recover_array, split_top_level, stringify
from governance_agent.parsing.fields import (
    FIELDS,
    FIELDS_BY_KEY,
    HEADING_ALTERNATION,
    LIST_KEYS,
    REFERENCES_KEY,
    FieldValue,
    empty_record,
    match_heading,
    normalize_key,
)
from governance_agent.parsing.references import format_reference, normalize_references

logger = logging.getLogger(__name__)

PartialRecord = Dict[str, FieldValue]


# ===========================================
# Shared helpers
# ===========================================

def _is_empty(value: Optional[FieldValue]) -> bool:
    if isinstance(value, list):
        return len(value) == 0
    return not value


def _non_blank(items: List[str]) -> List[str]:
    return [item.strip() for item in items if item and item.strip()]


def bracket_group(text: str, start: int) -> Optional[str]:
    """
    Return the balanced [...] group opening at text[start].

    Quotes are honoured so a ']' inside a quoted item does not close
    the group. Returns None when the group never closes.
    """
    if start >= len(text) or text[start] != "[":
        return None

    depth = 0
    quote: Optional[str] = None
    for index in range(start, len(text)):
        char = text[index]
        escaped = index > 0 and text[index - 1] == "\\"

        if char in ("'", '"') and not escaped:
            if quote is None:
                quote = char
            elif quote == char:
                quote = None
        elif quote is None and char == "[":
            depth += 1
        elif quote is None and char == "]":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


def _group_after(pattern: "re.Pattern[str]", text: str) -> Optional[str]:
    """Find pattern (which ends just before a '[') and return the bracket group."""
    match = pattern.search(text)
    if not match:
        return None
    return bracket_group(text, match.end())


def _split_bullets(block: str) -> List[str]:
    """Split a run of '- item' lines into items."""
    items = re.split(r"(?:^|\s)-[ \t]+", block.strip())
    return _non_blank(items)


def _is_empty_group(group: str) -> bool:
    return not group[1:-1].strip()


# ===========================================
# Strategy 1: direct quoted-key extraction
# ===========================================
# Targets the most common generator output:
#   'proposal_title':'...','proposal_summary':'...','solution':['a','b'],...

_SCALAR_QUOTED = "'{key}'\\s*:\\s*'([^']+)'"


def _locate_array(text: str, key: str) -> List[str]:
    """Try every list shape that can follow a key and recover its items."""
    name = re.escape(key)

    group = _group_after(re.compile(rf"'{name}'\s*:\s*(?=\[)"), text)
    if group is None:
        group = _group_after(re.compile(rf"\b{name}\s*:\s*(?=\[)"), text)
    if group is not None:
        if _is_empty_group(group):
            return []
        return _non_blank(recover_array(group))

    bullets = re.search(rf"{name}\s*:[ \t]*\n*((?:[ \t]*-[ \t]*[^\n]+\n*)+)", text)
    if bullets:
        return _split_bullets(bullets.group(1))

    fallback = re.search(rf"{name}\s*:\s*([^\n]*)", text, re.IGNORECASE)
    if fallback and fallback.group(1).strip():
        value = fallback.group(1).strip()
        if value.startswith("[") and value.endswith("]"):
            return _non_blank(recover_array(value))
        return [value]

    return []


_REFERENCE_QUOTED = re.compile(r"'references'\s*:\s*(?=\[)")
_REFERENCE_BARE = re.compile(r"\breferences\s*:\s*(?=\[)")
_REFERENCE_NUMBERED = re.compile(
    r"references\s*:\s*(\d+\.\s*\[.*?\].*?)(?:\n\n|\n[a-z]|\Z)",
    re.IGNORECASE | re.DOTALL,
)


def _locate_references(text: str) -> List[str]:
    """References get the same shapes, but always through the normalizer."""
    for pattern in (_REFERENCE_QUOTED, _REFERENCE_BARE):
        group = _group_after(pattern, text)
        if group is not None:
            return [] if _is_empty_group(group) else normalize_references(group)

    numbered = _REFERENCE_NUMBERED.search(text)
    if numbered:
        return normalize_references(numbered.group(1))

    items = _locate_array(text, REFERENCES_KEY)
    return normalize_references("\n".join(items)) if items else []


def direct_quoted_keys(text: str) -> PartialRecord:
    """Pull single-quoted keys and their values straight out of the text."""
    if "'proposal_title'" not in text or text.startswith("{"):
        return {}

    logger.debug("Using direct field extraction strategy")
    found: PartialRecord = {}

    for spec in FIELDS:
        if spec.is_list:
            continue
        match = re.search(_SCALAR_QUOTED.format(key=re.escape(spec.key)), text)
        if match:
            found[spec.key] = match.group(1)

    for key in LIST_KEYS:
        if key == REFERENCES_KEY:
            found[key] = _locate_references(text)
        else:
            found[key] = _locate_array(text, key)

    return found


# ===========================================
# Strategy 2: loose structured object
# ===========================================

_BAREWORD_KEY = re.compile(r"(^|[{,]|\n)(\s*)([A-Za-z_][\w]*)\s*:(?!//)")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_INNER_GROUP = re.compile(r"\[([^\[\]]*)\]")
_ADJACENT_STRINGS = re.compile(r'"(\s+)"(?=[^\s,\]])')
_CODE_FENCE = re.compile(r"```[a-zA-Z]*\n?|```\n?")


def _rejoin_group(match: "re.Match[str]") -> str:
    pieces = [piece for piece in split_top_level(match.group(1)) if piece]
    fixed = [_ADJACENT_STRINGS.sub('", "', piece) for piece in pieces]
    return "[" + ", ".join(fixed) + "]"


def coerce_loose_object(text: str) -> str:
    """
    Rewrite loosely structured text toward strict JSON.

    - single quotes become double quotes
    - bareword keys are quoted
    - trailing commas are removed
    - adjacent strings inside bracket groups get their missing comma
    - the whole text is wrapped in {} unless it already starts with {
    """
    cleaned = text.strip().replace("'", '"')
    cleaned = _BAREWORD_KEY.sub(r'\1\2"\3":', cleaned)
    cleaned = _TRAILING_COMMA.sub(r"\1", cleaned)
    cleaned = _INNER_GROUP.sub(_rejoin_group, cleaned)
    return cleaned if cleaned.startswith("{") else "{" + cleaned + "}"


def _as_list(value) -> List[str]:
    if isinstance(value, list):
        return _non_blank([stringify(item) for item in value])
    return _non_blank([stringify(value)])


def _number_references(items: List[str]) -> List[str]:
    return [format_reference(position, item) for position, item in enumerate(items, start=1)]


def _as_references(value) -> List[str]:
    if isinstance(value, list):
        return _number_references(_non_blank([stringify(item) for item in value]))
    if isinstance(value, str):
        return normalize_references(value)
    return _number_references(_non_blank([stringify(value)]))


def loose_structured_object(text: str) -> PartialRecord:
    """Parse the whole response as a (repaired) JSON object."""
    text = _CODE_FENCE.sub("", text).strip()
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = json.loads(coerce_loose_object(text))

    if not isinstance(parsed, dict):
        return {}

    found: PartialRecord = {}
    for raw_key, value in parsed.items():
        key = normalize_key(raw_key)
        spec = FIELDS_BY_KEY.get(key)
        if spec is None:
            continue

        if not spec.is_list:
            found[key] = stringify(value)
        elif key == REFERENCES_KEY:
            found[key] = _as_references(value)
        else:
            found[key] = _as_list(value)

    logger.debug(f"Parsed response as structured object: {sorted(found)}")
    return found


# ===========================================
# Strategy 3: labeled-line regex scan
# ===========================================

def _label_pattern(labels: str, is_list: bool) -> "re.Pattern[str]":
    if not is_list:
        return re.compile(rf"(?:{labels}):[ \t]*([^\n]+)", re.IGNORECASE)
    return re.compile(
        rf"(?:{labels}):\s*\[([^\]]+)\]|(?:{labels}):\s*\n((?:[ \t]*-[^\n]+(?:\n|\Z))+)",
        re.IGNORECASE,
    )


_LABEL_PATTERNS = {spec.key: _label_pattern(spec.labels, spec.is_list) for spec in FIELDS}


def legacy_array_parse(value: str) -> List[str]:
    """Comma, JSON and bracket heuristics for a labeled list value."""
    trimmed = value.strip()
    if not trimmed.startswith("["):
        trimmed = f"[{trimmed}]"
    return _non_blank(recover_array(trimmed))


def labeled_lines(text: str) -> PartialRecord:
    """Look for 'Label: value' lines using each section's label alternation."""
    found: PartialRecord = {}

    for spec in FIELDS:
        match = _LABEL_PATTERNS[spec.key].search(text)
        if not match:
            continue

        value = next((group for group in match.groups() if group), "")
        if not spec.is_list:
            found[spec.key] = value.strip()
            continue

        if "- " in value:
            items = _split_bullets(value)
        else:
            try:
                items = legacy_array_parse(value)
            except Exception as e:
                logger.debug(f"Legacy array parse failed for {spec.key}: {e}")
                items = []
            items = items or _non_blank(value.split(","))

        if spec.key == REFERENCES_KEY:
            items = _number_references(items)
        found[spec.key] = items

    return found


# ===========================================
# Strategy 4: "Heading: content" blocks
# ===========================================

_HEADING_COLON_BLOCK = re.compile(
    rf"\b({HEADING_ALTERNATION})\s*:\s*(.*?)(?=\b(?:{HEADING_ALTERNATION})\s*:|\Z)",
    re.IGNORECASE | re.DOTALL,
)


def _fill_block(found: PartialRecord, key: str, value: FieldValue) -> None:
    if _is_empty(found.get(key)) and not _is_empty(value):
        found[key] = value


def _reference_block(content: str) -> List[str]:
    """Drop bullet markers, then normalize what is left line by line."""
    lines = _non_blank([re.sub(r"^\s*-\s*", "", line) for line in content.split("\n")])
    return normalize_references("\n".join(lines))


def heading_colon_blocks(text: str) -> PartialRecord:
    """Read 'Heading: content' blocks that run until the next heading."""
    found: PartialRecord = {}

    for match in _HEADING_COLON_BLOCK.finditer(text):
        key = match_heading(match.group(1))
        content = match.group(2).strip()
        if key is None or not content:
            continue

        if not FIELDS_BY_KEY[key].is_list:
            _fill_block(found, key, content)
            continue

        if key == REFERENCES_KEY:
            _fill_block(found, key, _reference_block(content))
            continue

        items = _non_blank([re.sub(r"^-\s*", "", line) for line in content.split("\n")])
        _fill_block(found, key, items or [content])

    return found


# ===========================================
# Strategy 5: markdown heading blocks
# ===========================================

_MARKDOWN_BLOCK = re.compile(
    r"^#+[ \t]*([^\n]+?)[ \t]*\n(.*?)(?=^#+[ \t]|\Z)",
    re.MULTILINE | re.DOTALL,
)
_PURE_NUMBER = re.compile(r"^\d+$")


def _sentences(content: str) -> List[str]:
    """Split prose into sentences or paragraphs, each ending with a period."""
    fragments = _non_blank(re.split(r"\.\s+|\n{2,}", content))
    fragments = [fragment for fragment in fragments if not _PURE_NUMBER.match(fragment)]
    return [fragment if fragment.endswith(".") else f"{fragment}." for fragment in fragments]


def markdown_blocks(text: str) -> PartialRecord:
    """Read '## Heading' sections."""
    found: PartialRecord = {}

    for match in _MARKDOWN_BLOCK.finditer(text):
        key = match_heading(match.group(1))
        content = match.group(2).strip()
        if key is None or not content:
            continue

        if not FIELDS_BY_KEY[key].is_list:
            _fill_block(found, key, content)
        elif key == REFERENCES_KEY:
            _fill_block(found, key, _reference_block(content))
        elif "- " in content:
            items = [re.sub(r"^-\s*", "", item) for item in re.split(r"\n\s*-\s*", content)]
            _fill_block(found, key, _non_blank(items))
        else:
            _fill_block(found, key, _sentences(content) or [content])

    return found


# ===========================================
# Extractor
# ===========================================

STRATEGIES: Sequence[Callable[[str], PartialRecord]] = (
    direct_quoted_keys,
    loose_structured_object,
    labeled_lines,
    heading_colon_blocks,
    markdown_blocks,
)


def _merge(record: PartialRecord, found: PartialRecord) -> None:
    for key, value in found.items():
        if key in record and _is_empty(record[key]) and not _is_empty(value):
            record[key] = value


def extract_record(raw_text: str) -> PartialRecord:
    """
    Extract every section it can find from a raw response.

    Args:
        raw_text: Raw text returned by the generation service

    Returns:
        Record with all 13 keys; sections nothing matched stay empty

    Raises:
        TypeError: If raw_text is not a string
    """
    if not isinstance(raw_text, str):
        raise TypeError(f"Expected response text, got {type(raw_text).__name__}")

    record = empty_record()
    if not raw_text.strip():
        return record

    for strategy in STRATEGIES:
        try:
            found = strategy(raw_text)
        except Exception as e:
            logger.debug(f"Strategy {strategy.__name__} failed: {e}")
            continue

        _merge(record, found)

        if strategy is direct_quoted_keys and (
            record["proposal_title"] or record["proposal_summary"]
        ):
            logger.info("Direct field extraction succeeded")
            return record

    return record

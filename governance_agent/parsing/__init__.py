"""Parsing package - raw generator text to structured proposals."""

from governance_agent.parsing.arrays import recover_array, parse_bracketed_array
from governance_agent.parsing.references import normalize_references, format_reference
from governance_agent.parsing.extractor import extract_record
from governance_agent.parsing.assembler import build_record, error_record, placeholder_for
from governance_agent.parsing.regeneration import regenerate_field_value, regenerate_item_value
from governance_agent.parsing.fields import FIELDS, format_section_name

__all__ = [
    "recover_array",
    "parse_bracketed_array",
    "normalize_references",
    "format_reference",
    "extract_record",
    "build_record",
    "error_record",
    "placeholder_for",
    "regenerate_field_value",
    "regenerate_item_value",
    "FIELDS",
    "format_section_name",
]

"""Field vocabulary shared by every parsing strategy."""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from governance_agent.models.enums import ProposalSection

FieldValue = Union[str, List[str]]


@dataclass(frozen=True)
class FieldSpec:
    """
    One proposal section as the parsers see it.

    Attributes:
        key: Canonical section key
        is_list: Whether the section holds an ordered list of items
        labels: Human-readable labels accepted before a colon (regex alternation)
        heading: Heading word(s) recognised in "Heading:" and "## Heading" blocks
        markers: Substrings that map a free heading back to this section
        export_heading: Heading used when exporting the proposal
    """
    key: str
    is_list: bool
    labels: str
    heading: str
    markers: Tuple[str, ...]
    export_heading: str


# ===========================================
# Section Table
# ===========================================
# Order matters: heading lookup takes the first section whose marker
# appears in the heading text.

FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec(
        key=ProposalSection.TITLE.value,
        is_list=False,
        labels="title|proposal title",
        heading="Title",
        markers=("title",),
        export_heading="Title",
    ),
    FieldSpec(
        key=ProposalSection.SUMMARY.value,
        is_list=False,
        labels="summary|proposal summary|executive summary",
        heading="Summary",
        markers=("summary",),
        export_heading="Proposal Summary",
    ),
    FieldSpec(
        key=ProposalSection.PROBLEM.value,
        is_list=False,
        labels="problem statement|problem|issue",
        heading="Problem Statement|Problem",
        markers=("problem",),
        export_heading="Problem Statement",
    ),
    FieldSpec(
        key=ProposalSection.SOLUTION.value,
        is_list=True,
        labels="solution|solutions|proposed solution",
        heading="Solutions?",
        markers=("solution",),
        export_heading="Proposed Solution",
    ),
    FieldSpec(
        key=ProposalSection.MILESTONES.value,
        is_list=True,
        labels="milestones|timeline",
        heading="Milestones",
        markers=("milestone",),
        export_heading="Milestones",
    ),
    FieldSpec(
        key=ProposalSection.OUTCOMES.value,
        is_list=True,
        labels="outcomes|expected outcomes|results",
        heading="Outcomes",
        markers=("outcome",),
        export_heading="Expected Outcomes",
    ),
    FieldSpec(
        key=ProposalSection.STAKEHOLDER_IMPACT.value,
        is_list=True,
        labels="stakeholder impact|stakeholders|impact",
        heading="Stakeholder Impact",
        markers=("stakeholder", "impact"),
        export_heading="Stakeholder Impact",
    ),
    FieldSpec(
        key=ProposalSection.RESOURCES.value,
        is_list=True,
        labels="resources|required resources",
        heading="Resources",
        markers=("resource",),
        export_heading="Resources Required",
    ),
    FieldSpec(
        key=ProposalSection.RISKS.value,
        is_list=True,
        labels="risks|challenges|potential risks",
        heading="Risks",
        markers=("risk",),
        export_heading="Risks and Challenges",
    ),
    FieldSpec(
        key=ProposalSection.ALTERNATIVES.value,
        is_list=True,
        labels="alternatives|alternative solutions|other approaches",
        heading="Alternatives",
        markers=("alternative",),
        export_heading="Alternatives Considered",
    ),
    FieldSpec(
        key=ProposalSection.IMPLEMENTATION.value,
        is_list=True,
        labels="implementation|implementation plan|execution",
        heading="Implementation",
        markers=("implementation",),
        export_heading="Implementation Plan",
    ),
    FieldSpec(
        key=ProposalSection.METRICS.value,
        is_list=True,
        labels="metrics|success metrics|kpis",
        heading="Metrics",
        markers=("metric",),
        export_heading="Success Metrics",
    ),
    FieldSpec(
        key=ProposalSection.REFERENCES.value,
        is_list=True,
        labels="references|sources|citations",
        heading="References",
        markers=("reference",),
        export_heading="References",
    ),
)

FIELDS_BY_KEY: Dict[str, FieldSpec] = {spec.key: spec for spec in FIELDS}

SCALAR_KEYS: Tuple[str, ...] = tuple(spec.key for spec in FIELDS if not spec.is_list)
LIST_KEYS: Tuple[str, ...] = tuple(spec.key for spec in FIELDS if spec.is_list)

REFERENCES_KEY = ProposalSection.REFERENCES.value

# Alternation of every heading word, used by the heading block scanners
HEADING_ALTERNATION = "|".join(spec.heading for spec in FIELDS)


def is_list_field(key: str) -> bool:
    """Whether a canonical key names a list section."""
    spec = FIELDS_BY_KEY.get(key)
    return bool(spec and spec.is_list)


def match_heading(heading: str) -> Optional[str]:
    """
    Map a free-form heading to a canonical key.

    Args:
        heading: Heading text such as "Expected Outcomes" or "Risk Analysis"

    Returns:
        Canonical key or None when no section marker appears in the heading
    """
    lowered = heading.lower()
    for spec in FIELDS:
        if any(marker in lowered for marker in spec.markers):
            return spec.key
    return None


def normalize_key(raw_key: str) -> str:
    """Lowercase a structured key and turn spaces into underscores."""
    return re.sub(r"\s+", "_", str(raw_key).strip().lower())


def humanize_key(key: str) -> str:
    """Turn a canonical key into words, keeping its casing."""
    return key.replace("_", " ")


def format_section_name(key: str) -> str:
    """
    Format a section key for display.

    Example:
        >>> format_section_name("stakeholder_impact")
        'Stakeholder Impact'
    """
    return " ".join(word[:1].upper() + word[1:] for word in key.split("_"))


def empty_record() -> Dict[str, FieldValue]:
    """A record with every section present and empty."""
    return {spec.key: ([] if spec.is_list else "") for spec in FIELDS}

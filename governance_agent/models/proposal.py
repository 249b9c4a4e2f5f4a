"""Proposal-related models."""

from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ProposalData(BaseModel):
    """Structured governance proposal recovered from a raw response."""
    proposal_title: str = Field(default="", description="Proposal title")
    proposal_summary: str = Field(default="", description="Short executive summary")
    problem: str = Field(default="", description="Problem statement")
    solution: List[str] = Field(default_factory=list, description="Proposed solution steps")
    milestones: List[str] = Field(default_factory=list, description="Delivery milestones")
    outcomes: List[str] = Field(default_factory=list, description="Expected outcomes")
    stakeholder_impact: List[str] = Field(
        default_factory=list,
        description="Impact on each stakeholder group"
    )
    resources: List[str] = Field(default_factory=list, description="Required resources")
    risks: List[str] = Field(default_factory=list, description="Risks and challenges")
    alternatives: List[str] = Field(default_factory=list, description="Alternatives considered")
    implementation: List[str] = Field(default_factory=list, description="Implementation steps")
    metrics: List[str] = Field(default_factory=list, description="Success metrics")
    references: List[str] = Field(
        default_factory=list,
        description="Citations in canonical 'N. [content]' form"
    )


class ProposalDraft(BaseModel):
    """A proposal being edited, with its per-section lock state."""
    id: str = Field(..., description="Draft identifier")
    idea: Optional[str] = Field(None, description="Governance idea the draft was generated from")
    data: ProposalData = Field(default_factory=ProposalData)
    locked: Dict[str, bool] = Field(default_factory=dict, description="Lock flag per section")
    all_locked: bool = False
    submitted: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    def is_locked(self, section: str) -> bool:
        """Whether a section refuses edits."""
        return bool(self.locked.get(section))

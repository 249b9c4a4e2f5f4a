"""Request and response bodies for the proposal API."""

from typing import List, Optional, Union
from pydantic import BaseModel, Field


class IdeaRequest(BaseModel):
    """A governance idea to turn into a proposal."""
    idea: str = Field(..., min_length=1, description="Free-text governance idea")


class RawResponseRequest(BaseModel):
    """Raw generation output to parse without calling Langflow."""
    text: str = Field(..., description="Raw response text")


class SectionUpdateRequest(BaseModel):
    """Manual edit of one section."""
    value: Union[str, List[str]]


class LockRequest(BaseModel):
    """Lock or unlock a section or the whole draft."""
    locked: bool = True


class RegenerateRequest(BaseModel):
    """Optional guidance for a regeneration call."""
    feedback: Optional[str] = Field(None, description="User feedback for the rewrite")

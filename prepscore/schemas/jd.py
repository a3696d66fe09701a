from __future__ import annotations

from pydantic import Field

from .base import ClosedModel
from .match import Proficiency


class JobDescription(ClosedModel):
    raw_text: str = ""
    title: str | None = None
    required_skills: list[str] = Field(default_factory=list)
    preferred_skills: list[str] = Field(default_factory=list)
    role: str | None = None
    keyword_frequencies: dict[str, int] = Field(default_factory=dict)
    keyword_labels: dict[str, str] = Field(default_factory=dict)
    skill_levels: dict[str, Proficiency] = Field(default_factory=dict)

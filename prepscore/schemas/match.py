from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import ClosedModel

RoleSource = Literal["hint", "title", "content", "default"]
Verdict = Literal["exact", "transferable", "missing"]
Proficiency = Literal["beginner", "intermediate", "advanced", "expert"]


class ATSComponents(ClosedModel):
    skills: int = Field(default=0, ge=0, le=100)
    experience: int = Field(default=0, ge=0, le=100)
    education: int = Field(default=0, ge=0, le=100)
    projects: int = Field(default=0, ge=0, le=100)
    structure: int = Field(default=0, ge=0, le=100)
    keywords: int = Field(default=0, ge=0, le=100)


class KeywordScore(ClosedModel):
    term: str
    label: str
    jd_frequency: int = Field(ge=1)
    resume_occurrences: int = Field(ge=0)
    importance: float = Field(ge=0)
    credit: float = Field(ge=0)
    score: float = Field(ge=0)


class AchievementHit(ClosedModel):
    kind: str
    text: str
    points: int


class Explanation(ClosedModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class ATSReport(ClosedModel):
    total: int = Field(ge=0, le=100)
    components: ATSComponents
    weights: dict[str, float]
    role: str
    role_source: RoleSource
    achievement_bonus: float = Field(ge=0, le=10)
    ordering_penalty: int = Field(ge=0, le=5)
    keywords: list[KeywordScore] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    achievements: list[AchievementHit] = Field(default_factory=list)
    explanation: Explanation = Field(default_factory=Explanation)
    warnings: list[str] = Field(default_factory=list)
    failed_sections: list[str] = Field(default_factory=list)


class SkillVerdict(ClosedModel):
    skill: str
    canonical: str
    required: bool
    verdict: Verdict
    credit: float = Field(ge=0, le=1)
    via: str | None = None
    coefficient: float | None = None
    via_synonym: bool = False
    required_level: Proficiency = "intermediate"
    candidate_level: Proficiency | None = None
    proficiency_match: bool = False


class SkillMatchReport(ClosedModel):
    items: list[SkillVerdict] = Field(default_factory=list)
    match_score: int = Field(default=0, ge=0, le=100)
    match_ratio: float = Field(default=0.0, ge=0, le=1)
    preferred_weight: float
    learning_paths: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

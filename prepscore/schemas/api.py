from __future__ import annotations

from pydantic import BaseModel, Field

from .interview import InterviewQuestion
from .resume import ParsedResume


class ATSScoreRequest(BaseModel):
    parsed: ParsedResume
    job_description_text: str = Field(default="", max_length=50000)
    role_hint: str | None = None


class SkillMatchRequest(BaseModel):
    required: list[str] = Field(default_factory=list, max_length=200)
    preferred: list[str] = Field(default_factory=list, max_length=200)
    candidate_skills: list[str] | None = Field(default=None, max_length=500)
    parsed: ParsedResume | None = None
    preferred_weight: float | None = None
    required_levels: dict[str, str] | None = None
    candidate_levels: dict[str, str] | None = None


class EvaluateAnswerRequest(BaseModel):
    question: InterviewQuestion
    answer_text: str = Field(default="", max_length=20000)
    interview_type: str = "technical"

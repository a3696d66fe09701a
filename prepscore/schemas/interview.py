from __future__ import annotations

from typing import Literal

from pydantic import Field

from prepscore.core.tables import InterviewType

from .base import ClosedModel
from .match import Explanation

GapKind = Literal["knowledge", "explanation", "depth"]


class InterviewQuestion(ClosedModel):
    text: str = ""
    expected_key_points: list[str] = Field(default_factory=list)
    topic: str | None = None
    is_follow_up: bool = False


class AnswerGap(ClosedModel):
    kind: GapKind
    subject: str
    severity: Literal["high", "medium"]
    evidence: str


class AnswerEvaluation(ClosedModel):
    interview_type: InterviewType
    dimensions: dict[str, int]
    weights: dict[str, float]
    turn_score: int = Field(ge=0, le=100)
    needs_follow_up: bool
    follow_up_reason: str | None = None
    covered_points: list[str] = Field(default_factory=list)
    missed_points: list[str] = Field(default_factory=list)
    gaps: list[AnswerGap] = Field(default_factory=list)
    feedback: Explanation = Field(default_factory=Explanation)
    notes: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

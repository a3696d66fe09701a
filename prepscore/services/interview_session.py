from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from prepscore.core.config.scoring import get_scoring_value
from prepscore.core.numbers import round_cents
from prepscore.core.tables import validate_interview_type
from prepscore.schemas.interview import AnswerEvaluation, InterviewQuestion

logger = logging.getLogger(__name__)

Difficulty = Literal["easy", "medium", "hard"]
DEFAULT_TOPIC = "general"


class SessionTurn(BaseModel):
    question: str
    topic: str
    turn_score: int
    needs_follow_up: bool


class SessionSummary(BaseModel):
    interview_type: str
    turns: int
    average_score: float
    performance_trend: list[int] = Field(default_factory=list)
    struggling_topics: list[str] = Field(default_factory=list)
    strong_topics: list[str] = Field(default_factory=list)
    difficulty: Difficulty


@dataclass
class InterviewSession:
    """Mutable interview state kept by the caller; evaluations never touch it."""

    interview_type: str
    turns: list[SessionTurn] = field(default_factory=list)
    performance_trend: list[int] = field(default_factory=list)
    _struggling: set[str] = field(default_factory=set)
    _strong: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.interview_type = validate_interview_type(self.interview_type)

    def record(self, question: InterviewQuestion, evaluation: AnswerEvaluation) -> SessionTurn:
        topic = (question.topic or DEFAULT_TOPIC).strip().lower() or DEFAULT_TOPIC
        score = evaluation.turn_score
        struggling_below = int(get_scoring_value("interview.session.struggling_below", 60))
        strong_at = int(get_scoring_value("interview.session.strong_at", 80))
        window = int(get_scoring_value("interview.session.trend_window", 10))

        if score < struggling_below:
            self._struggling.add(topic)
        elif score >= strong_at:
            self._strong.add(topic)
            self._struggling.discard(topic)

        self.performance_trend.append(score)
        if len(self.performance_trend) > window:
            self.performance_trend = self.performance_trend[-window:]

        turn = SessionTurn(
            question=question.text,
            topic=topic,
            turn_score=score,
            needs_follow_up=evaluation.needs_follow_up,
        )
        self.turns.append(turn)
        logger.debug("session_turn_recorded topic=%s score=%s turns=%s", topic, score, len(self.turns))
        return turn

    @property
    def struggling_topics(self) -> list[str]:
        return sorted(self._struggling)

    @property
    def strong_topics(self) -> list[str]:
        return sorted(self._strong)

    @property
    def difficulty(self) -> Difficulty:
        window = int(get_scoring_value("interview.session.difficulty_window", 3))
        recent = [turn.turn_score for turn in self.turns[-window:]]
        if not recent:
            return "medium"
        average = Decimal(sum(recent)) / Decimal(len(recent))
        if average >= 80:
            return "hard"
        if average >= 60:
            return "medium"
        return "easy"

    def summary(self) -> SessionSummary:
        scores = [turn.turn_score for turn in self.turns]
        average = Decimal(sum(scores)) / Decimal(len(scores)) if scores else Decimal(0)
        return SessionSummary(
            interview_type=self.interview_type,
            turns=len(self.turns),
            average_score=round_cents(average),
            performance_trend=list(self.performance_trend),
            struggling_topics=self.struggling_topics,
            strong_topics=self.strong_topics,
            difficulty=self.difficulty,
        )

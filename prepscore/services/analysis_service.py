from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from prepscore.features.answer_evaluator import evaluate_answer as evaluate_answer_turn
from prepscore.features.ats_scorer import score_resume
from prepscore.features.format_detector import detect_format as detect_resume_format
from prepscore.normalize.jd import parse_job_description
from prepscore.normalize.strategies import extract_resume
from prepscore.normalize.text import NormalizedText, normalize, normalize_text
from prepscore.parsing import Document
from prepscore.schemas.interview import AnswerEvaluation, InterviewQuestion
from prepscore.schemas.match import ATSReport, SkillMatchReport
from prepscore.schemas.resume import ParsedResume, ResumeFormat
from prepscore.semantic.skill_matcher import match_skills
from prepscore.taxonomy import get_ontology

logger = logging.getLogger(__name__)


def _normalized_document(content: bytes, mime_type: str) -> tuple[Document, NormalizedText]:
    document = Document(content=content, mime_type=mime_type)
    return document, normalize(document)


def detect_format(content: bytes, mime_type: str) -> ResumeFormat:
    document, normalized = _normalized_document(content, mime_type)
    return detect_resume_format(document.content, normalized)


def extract(content: bytes, mime_type: str, *, as_of: date | None = None) -> ParsedResume:
    document, normalized = _normalized_document(content, mime_type)
    fmt = detect_resume_format(document.content, normalized)
    parsed = extract_resume(normalized, fmt, ontology=get_ontology(), as_of=as_of)
    logger.info(
        "resume_extracted format=%s confidence=%s quality=%s",
        fmt.kind,
        fmt.confidence,
        parsed.quality.overall,
    )
    return parsed


def extract_text(text: str, *, raw: bytes = b"", as_of: date | None = None) -> ParsedResume:
    """Run detection and extraction over already-decoded resume text."""
    normalized = normalize_text(text)
    fmt = detect_resume_format(raw, normalized)
    return extract_resume(normalized, fmt, ontology=get_ontology(), as_of=as_of)


def ats_score(parsed: ParsedResume, jd_text: str, role_hint: str | None = None) -> ATSReport:
    jd = parse_job_description(jd_text, get_ontology())
    return score_resume(parsed, jd, role_hint)


def skill_match(
    required: list[str],
    preferred: list[str] | None,
    parsed: ParsedResume | list[str],
    preferred_weight: float | Decimal | None = None,
    *,
    required_levels: dict[str, str] | None = None,
    candidate_levels: dict[str, str] | None = None,
) -> SkillMatchReport:
    if isinstance(parsed, ParsedResume):
        candidates = parsed.skills.all()
        if candidate_levels is None:
            candidate_levels = parsed.skill_levels
    else:
        candidates = list(parsed)
    return match_skills(
        required,
        preferred,
        candidates,
        preferred_weight,
        ontology=get_ontology(),
        required_levels=required_levels,
        candidate_levels=candidate_levels,
    )


def evaluate_answer(
    question: InterviewQuestion,
    answer_text: str,
    interview_type: str,
) -> AnswerEvaluation:
    return evaluate_answer_turn(question, answer_text, interview_type, ontology=get_ontology())

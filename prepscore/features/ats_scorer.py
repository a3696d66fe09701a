from __future__ import annotations

import logging
import math
import re
from decimal import Decimal

from prepscore.core.config import settings
from prepscore.core.config.scoring import get_scoring_value
from prepscore.core.numbers import clamp_decimal, round_cents, round_half_up, to_decimal
from prepscore.core.tables import ATS_WEIGHT_KEYS, role_weights
from prepscore.normalize.jd import parse_job_description
from prepscore.schemas.jd import JobDescription
from prepscore.schemas.match import (
    AchievementHit,
    ATSComponents,
    ATSReport,
    Explanation,
    KeywordScore,
)
from prepscore.schemas.resume import ParsedResume

from .roles import resolve_role

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)
_ACHIEVEMENT_PATTERNS: dict[str, re.Pattern[str]] = {
    "percentage": re.compile(r"(\d+)%\s*(increase|improvement|reduction|growth|decrease)", re.IGNORECASE),
    "monetary": re.compile(
        r"\$\d+(?:,\d{3})*(?:\.\d{2})?\s*(million|billion|k|saved|revenue|budget)", re.IGNORECASE
    ),
    "multiplier": re.compile(r"\d+x\s*(faster|improvement|increase|growth)", re.IGNORECASE),
    "quantified_action": re.compile(r"\b(led|managed|built|created|designed|implemented)\s+\d+", re.IGNORECASE),
    "scale": re.compile(r"\d+(?:,\d{3})*\s*(users|customers|clients|requests|transactions)", re.IGNORECASE),
}
CANONICAL_ORDER = ("summary", "experience", "education", "skills", "projects")
_STRUCTURE_SECTIONS = ("experience", "education", "skills")
_SECTION_SUGGESTIONS = {
    "email": "Add a contact email address.",
    "experience": "Add a work experience section with dated roles.",
    "education": "Add an education section with degree and institution.",
    "skills": "Add a dedicated skills section.",
    "projects": "Add a projects section describing what you built.",
}


def _saturating(value: Decimal, saturation: Decimal) -> Decimal:
    if saturation <= 0:
        return _HUNDRED
    return _HUNDRED * min(Decimal(1), value / saturation)


def skills_component(parsed: ParsedResume) -> int:
    saturation = to_decimal(get_scoring_value("ats.skills.saturation_count", 20))
    return round_half_up(_saturating(Decimal(parsed.skills.distinct_count), saturation))


def experience_component(parsed: ParsedResume) -> int:
    saturation = to_decimal(get_scoring_value("ats.experience.saturation_years", 5))
    years = Decimal(parsed.total_experience_months) / Decimal(12)
    return round_half_up(_saturating(years, saturation))


def education_component(parsed: ParsedResume) -> int:
    if any(entry.is_complete for entry in parsed.education):
        return int(get_scoring_value("ats.education.complete", 100))
    if parsed.education:
        return int(get_scoring_value("ats.education.partial", 60))
    return 0


def projects_component(parsed: ParsedResume) -> int:
    if not parsed.projects:
        return 0
    base = int(get_scoring_value("ats.projects.base", 40))
    per_project = int(get_scoring_value("ats.projects.per_project", 30))
    return min(100, base + per_project * len(parsed.projects))


def _present_sections(parsed: ParsedResume) -> dict[str, bool]:
    order = set(parsed.section_order)
    return {
        "email": parsed.contact.email is not None,
        "experience": bool(parsed.experience) or "experience" in order,
        "education": bool(parsed.education) or "education" in order,
        "skills": parsed.skills.distinct_count > 0 or "skills" in order,
        "other": bool(order - set(_STRUCTURE_SECTIONS)),
        "projects": bool(parsed.projects) or "projects" in order,
    }


def structure_component(parsed: ParsedResume) -> int:
    points = int(get_scoring_value("ats.structure.points_per_section", 20))
    present = _present_sections(parsed)
    counted = ("email", "experience", "education", "skills", "other")
    return min(100, points * sum(1 for key in counted if present[key]))


def keyword_credit(occurrences: int) -> Decimal:
    """Cumulative credit: each further occurrence adds less, nothing past the curve."""
    curve = [to_decimal(value) for value in get_scoring_value("ats.keywords.credit_curve", [1.0, 0.75, 0.5, 0.25])]
    return sum(curve[: max(0, occurrences)], Decimal(0))


def keyword_importance(jd_frequency: int) -> Decimal:
    scale = to_decimal(get_scoring_value("ats.keywords.importance_scale", 10))
    return to_decimal(math.log2(jd_frequency + 1)) * scale


def score_keywords(parsed: ParsedResume, jd: JobDescription) -> tuple[int, list[KeywordScore]]:
    scores: list[KeywordScore] = []
    raw = Decimal(0)
    max_possible = Decimal(0)
    for term, frequency in sorted(jd.keyword_frequencies.items()):
        importance = keyword_importance(frequency)
        occurrences = parsed.token_counts.get(term, 0)
        credit = keyword_credit(occurrences)
        term_score = credit * importance
        raw += term_score
        max_possible += importance
        scores.append(
            KeywordScore(
                term=term,
                label=jd.keyword_labels.get(term, term),
                jd_frequency=frequency,
                resume_occurrences=occurrences,
                importance=round_cents(importance),
                credit=round_cents(credit),
                score=round_cents(term_score),
            )
        )
    if max_possible <= 0:
        return 0, scores
    return round_half_up(clamp_decimal(_HUNDRED * raw / max_possible)), scores


def detect_achievements(text: str) -> tuple[float, list[AchievementHit]]:
    hits: list[AchievementHit] = []
    for kind, pattern in _ACHIEVEMENT_PATTERNS.items():
        points = int(get_scoring_value(f"ats.achievements.points.{kind}", 0))
        for match in pattern.finditer(text or ""):
            hits.append(AchievementHit(kind=kind, text=match.group(0), points=points))
    cap = to_decimal(get_scoring_value("ats.achievements.cap", 100))
    max_bonus = to_decimal(get_scoring_value("ats.achievements.max_bonus", 10))
    total = min(cap, Decimal(sum(hit.points for hit in hits)))
    bonus = total * max_bonus / cap if cap > 0 else Decimal(0)
    return round_cents(bonus), hits


def ordering_penalty(section_order: list[str]) -> int:
    ranked = [CANONICAL_ORDER.index(name) for name in section_order if name in CANONICAL_ORDER]
    inversions = sum(1 for left, right in zip(ranked, ranked[1:]) if left > right)
    return min(int(get_scoring_value("ats.ordering.max_penalty", 5)), inversions)


def combine_total(
    components: ATSComponents,
    weights: dict[str, Decimal],
    bonus: float,
    penalty: int,
) -> int:
    """Total reproduced from the reported components, weights, bonus and penalty."""
    weighted = sum((Decimal(getattr(components, key)) * weights[key] for key in ATS_WEIGHT_KEYS), Decimal(0))
    return round_half_up(clamp_decimal(weighted + to_decimal(bonus) - Decimal(penalty)))


def _explain(
    components: ATSComponents,
    parsed: ParsedResume,
    keywords: list[KeywordScore],
) -> Explanation:
    weakness_below = int(get_scoring_value("ats.explanation.weakness_below", 60))
    strength_at = int(get_scoring_value("ats.explanation.strength_at", 80))
    limit = int(get_scoring_value("ats.explanation.max_keyword_suggestions", 5))

    strengths: list[tuple[str, int, str, str]] = []
    weaknesses: list[tuple[str, int, str, str]] = []
    suggestions: list[tuple[str, float, str, str]] = []

    for name, score in components.model_dump().items():
        if score >= strength_at:
            strengths.append((name, -score, "", f"{name} scored {score}/100"))
        elif score < weakness_below:
            weaknesses.append((name, -score, "", f"{name} scored {score}/100, below {weakness_below}"))

    for section, present in _present_sections(parsed).items():
        if not present and section in _SECTION_SUGGESTIONS:
            suggestions.append(("structure", 0.0, section, _SECTION_SUGGESTIONS[section]))

    missing = sorted(
        (keyword for keyword in keywords if keyword.resume_occurrences == 0),
        key=lambda keyword: (-keyword.importance, keyword.term),
    )
    for keyword in missing[:limit]:
        suggestions.append(
            ("keywords", -keyword.importance, keyword.term, f"Mention the job keyword '{keyword.label}'.")
        )

    return Explanation(
        strengths=[item[-1] for item in sorted(strengths)],
        weaknesses=[item[-1] for item in sorted(weaknesses)],
        suggestions=[item[-1] for item in sorted(suggestions)],
    )


def _role_content(parsed: ParsedResume, jd: JobDescription) -> str:
    parts = [jd.raw_text]
    parts.extend(parsed.skills.all())
    parts.extend(entry.title for entry in parsed.experience if entry.title)
    return "\n".join(parts)


def score_resume(
    parsed: ParsedResume,
    job_description: JobDescription | str,
    role_hint: str | None = None,
) -> ATSReport:
    """Role-weighted ATS score of a parsed resume against a job description."""
    jd = (
        job_description
        if isinstance(job_description, JobDescription)
        else parse_job_description(job_description)
    )
    role, role_source = resolve_role(role_hint, jd.title, _role_content(parsed, jd))
    weights = role_weights(role)
    warnings = list(parsed.warnings)

    resume_empty = parsed.token_count < settings.min_document_tokens
    jd_empty = not jd.keyword_frequencies
    if resume_empty:
        warnings.append("resume is empty or too short; all components are zero")
    if jd_empty:
        warnings.append("job description is empty; all components are zero")

    if resume_empty or jd_empty:
        components = ATSComponents()
        keywords: list[KeywordScore] = []
        bonus, achievements, penalty = 0.0, [], 0
    else:
        keyword_score, keywords = score_keywords(parsed, jd)
        components = ATSComponents(
            skills=skills_component(parsed),
            experience=experience_component(parsed),
            education=education_component(parsed),
            projects=projects_component(parsed),
            structure=structure_component(parsed),
            keywords=keyword_score,
        )
        bonus, achievements = detect_achievements(parsed.impact_text())
        penalty = ordering_penalty(parsed.section_order)

    total = combine_total(components, weights, bonus, penalty)
    missing_keywords = [
        keyword.label
        for keyword in sorted(keywords, key=lambda item: (-item.importance, item.term))
        if keyword.resume_occurrences == 0
    ]
    logger.info("ats_scored role=%s source=%s total=%s", role, role_source, total)
    return ATSReport(
        total=total,
        components=components,
        weights={key: round_cents(value) for key, value in weights.items()},
        role=role,
        role_source=role_source,
        achievement_bonus=bonus,
        ordering_penalty=penalty,
        keywords=keywords,
        missing_keywords=missing_keywords,
        achievements=achievements,
        explanation=_explain(components, parsed, keywords) if not (resume_empty or jd_empty) else Explanation(),
        warnings=warnings,
        failed_sections=list(parsed.failed_sections),
    )

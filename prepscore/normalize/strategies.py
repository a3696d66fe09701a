from __future__ import annotations

import logging
import re
from datetime import date

from prepscore.core.config import normalization_clock, settings
from prepscore.core.config.scoring import get_scoring_value
from prepscore.core.numbers import round_half_up
from prepscore.schemas.resume import ExtractionQuality, ParsedResume, ResumeFormat
from prepscore.semantic.proficiency import skill_levels
from prepscore.taxonomy import LocalOntology, get_ontology

from .headers import section_patterns
from .resume import (
    extract_certifications,
    extract_contact,
    extract_education,
    extract_experience,
    extract_projects,
    extract_skills,
    extract_summary,
    section_lines,
)
from .text import NormalizedText, normalize_text, strip_declaration

logger = logging.getLogger(__name__)

UNKNOWN_FORMAT_WARNING = "format unknown; results may be incomplete"
CORE_SECTIONS = ("contact", "education", "experience", "skills")
OPTIONAL_SECTIONS = ("projects", "certifications")

_EUROPASS_HEADERS: dict[str, list[re.Pattern[str]]] = {
    "experience": [re.compile(r"work\s+experience", re.IGNORECASE)],
    "education": [re.compile(r"education\s+and\s+training", re.IGNORECASE)],
    "skills": [re.compile(r"(?:personal\s+)?skills(?:\s+and\s+competences)?", re.IGNORECASE)],
}


class WesternStrategy:
    """Generic section-slice extraction; the other families adjust it."""

    name = "western"

    def prepare(self, normalized: NormalizedText) -> NormalizedText:
        return normalized

    def headers_for(self, section: str) -> tuple[list, bool]:
        return section_patterns(section), False

    def section_bonus(self, section: str, header_found: bool, strict: bool) -> int:
        return 0

    def warnings(self) -> list[str]:
        return []

    def extract(
        self,
        normalized: NormalizedText,
        fmt: ResumeFormat,
        *,
        ontology: LocalOntology,
        as_of: date,
    ) -> ParsedResume:
        scope = self.prepare(normalized)
        qualities: dict[str, int] = {}
        found: dict[str, bool] = {}

        def lines_for(section: str):
            patterns, strict = self.headers_for(section)
            lines = section_lines(scope, patterns)
            if lines is None and strict:
                lines = section_lines(scope, section_patterns(section))
                strict = False
            found[section] = lines is not None
            return lines, strict

        def record(section: str, quality: int, strict: bool = False) -> None:
            bonus = self.section_bonus(section, found.get(section, False), strict) if quality else 0
            qualities[section] = min(100, quality + bonus)

        contact, contact_quality = extract_contact(scope)
        record("contact", contact_quality)

        education_lines, strict = lines_for("education")
        education, quality = extract_education(education_lines)
        record("education", quality, strict)

        experience_lines, strict = lines_for("experience")
        experience, quality = extract_experience(experience_lines, as_of)
        record("experience", quality, strict)

        skill_lines, strict = lines_for("skills")
        skill_scope = "\n".join(line for _index, line in skill_lines) if skill_lines is not None else scope.text
        skills, quality = extract_skills(skill_scope, ontology)
        record("skills", quality, strict)
        held = set(skills.all())
        levels = {skill: level for skill, level in skill_levels(scope.text, ontology).items() if skill in held}

        project_lines, _ = lines_for("projects")
        projects, quality = extract_projects(project_lines, ontology)
        if found["projects"]:
            record("projects", quality)

        certification_lines, _ = lines_for("certifications")
        certifications, quality = extract_certifications(certification_lines)
        if found["certifications"]:
            record("certifications", quality)

        summary_lines, _ = lines_for("summary")

        warnings = list(self.warnings())
        failed_sections: list[str] = []
        threshold = int(get_scoring_value("extraction.low_quality_threshold", 60))
        for section, quality in qualities.items():
            if quality < threshold:
                warnings.append(f"low extraction quality for {section} ({quality})")
            if quality == 0:
                failed_sections.append(section)

        overall = round_half_up(sum(qualities.values()) / len(qualities)) if qualities else 0
        logger.debug(
            "resume_extracted strategy=%s overall=%s failed=%s", self.name, overall, ",".join(failed_sections)
        )
        return ParsedResume(
            resume_format=fmt,
            contact=contact,
            summary=extract_summary(summary_lines),
            education=education,
            experience=experience,
            skills=skills,
            skill_levels=levels,
            projects=projects,
            certifications=certifications,
            section_order=_section_order(scope),
            token_counts=scope.token_counts(),
            token_count=scope.token_count,
            quality=ExtractionQuality(overall=overall, sections=qualities),
            warnings=warnings,
            failed_sections=failed_sections,
        )


class EuropassStrategy(WesternStrategy):
    name = "europass"

    def headers_for(self, section: str) -> tuple[list, bool]:
        strict = _EUROPASS_HEADERS.get(section)
        if strict is None:
            return super().headers_for(section)
        return strict, True

    def section_bonus(self, section: str, header_found: bool, strict: bool) -> int:
        return int(get_scoring_value("extraction.europass_section_bonus", 5)) if strict else 0


class IndianStrategy(WesternStrategy):
    name = "indian"

    def prepare(self, normalized: NormalizedText) -> NormalizedText:
        # the declaration only ever trails the resume, so line indices survive the cut
        return normalize_text(strip_declaration(normalized.text))


class TemplateStrategy(WesternStrategy):
    name = "template"

    def section_bonus(self, section: str, header_found: bool, strict: bool) -> int:
        return int(get_scoring_value("extraction.template_section_prior", 10)) if header_found else 0


class UnknownStrategy(WesternStrategy):
    name = "unknown"

    def warnings(self) -> list[str]:
        return [UNKNOWN_FORMAT_WARNING]


STRATEGIES: dict[str, WesternStrategy] = {
    "western": WesternStrategy(),
    "europass": EuropassStrategy(),
    "indian": IndianStrategy(),
    "template": TemplateStrategy(),
    "unknown": UnknownStrategy(),
}


def _section_order(normalized: NormalizedText) -> list[str]:
    order: list[str] = []
    for header in normalized.section_headers():
        if header.section not in order:
            order.append(header.section)
    return order


def empty_resume(normalized: NormalizedText, fmt: ResumeFormat, reason: str) -> ParsedResume:
    sections = {section: 0 for section in CORE_SECTIONS}
    warnings = [reason]
    if fmt.kind == "unknown":
        warnings.append(UNKNOWN_FORMAT_WARNING)
    return ParsedResume(
        resume_format=fmt,
        token_counts=normalized.token_counts(),
        token_count=normalized.token_count,
        quality=ExtractionQuality(overall=0, sections=sections),
        warnings=warnings,
        failed_sections=list(CORE_SECTIONS),
    )


def extract_resume(
    normalized: NormalizedText,
    fmt: ResumeFormat,
    *,
    ontology: LocalOntology | None = None,
    as_of: date | None = None,
    min_tokens: int | None = None,
) -> ParsedResume:
    minimum = settings.min_document_tokens if min_tokens is None else min_tokens
    if normalized.token_count < minimum:
        reason = f"document too short: {normalized.token_count} tokens (minimum {minimum})"
        logger.info("resume_extraction_skipped tokens=%s minimum=%s", normalized.token_count, minimum)
        return empty_resume(normalized, fmt, reason)

    strategy = STRATEGIES[fmt.kind]
    return strategy.extract(
        normalized,
        fmt,
        ontology=ontology or get_ontology(),
        as_of=as_of or normalization_clock(),
    )

from __future__ import annotations

from collections import Counter

from prepscore.features.roles import role_from_content, role_from_title
from prepscore.schemas.jd import JobDescription
from prepscore.semantic.proficiency import skill_levels
from prepscore.taxonomy import LocalOntology, get_ontology

from .headers import header_text
from .text import normalize_text, token_pairs
from .utils import contains_any, strip_bullet_prefix

_NICE_MARKERS = ("nice to have", "nice-to-have", "preferred", "a plus", "bonus", "desirable", "good to have")
_PREFERRED_HEADERS = ("nice to have", "preferred", "bonus", "good to have", "desirable")
_REQUIRED_HEADERS = ("requirements", "required", "qualifications", "must have", "responsibilities", "what you")


def _is_keyword(lemma: str) -> bool:
    return len(lemma) >= 2 and not lemma.endswith("%") and not lemma.replace(".", "").isdigit()


def keyword_histogram(text: str) -> tuple[dict[str, int], dict[str, str]]:
    frequencies: Counter[str] = Counter()
    labels: dict[str, str] = {}
    for surface, lemma in token_pairs(text):
        if not _is_keyword(lemma):
            continue
        frequencies[lemma] += 1
        labels.setdefault(lemma, surface)
    return dict(sorted(frequencies.items())), dict(sorted(labels.items()))


def parse_job_description(text: str, ontology: LocalOntology | None = None) -> JobDescription:
    ontology = ontology or get_ontology()
    normalized = normalize_text(text)

    title: str | None = None
    required: list[str] = []
    preferred: list[str] = []
    in_preferred_section = False

    for line in normalized.lines:
        if not line:
            continue
        if title is None:
            title = line

        header, _inline = header_text(line)
        if len(header) <= 60 and line.rstrip().endswith(":"):
            if any(header.startswith(item) for item in _PREFERRED_HEADERS):
                in_preferred_section = True
            elif any(header.startswith(item) for item in _REQUIRED_HEADERS):
                in_preferred_section = False

        cleaned = strip_bullet_prefix(line)
        bucket = preferred if in_preferred_section or contains_any(cleaned, _NICE_MARKERS) else required
        for canonical in ontology.find_in_text(cleaned):
            if canonical not in bucket:
                bucket.append(canonical)

    preferred = [skill for skill in preferred if skill not in required]
    frequencies, labels = keyword_histogram(normalized.text)
    role = role_from_title(title) or role_from_content(normalized.text)
    levels = skill_levels(normalized.text, ontology)

    return JobDescription(
        raw_text=text or "",
        title=title,
        required_skills=required,
        preferred_skills=preferred,
        role=role,
        keyword_frequencies=frequencies,
        keyword_labels=labels,
        skill_levels={skill: levels[skill] for skill in required + preferred if skill in levels},
    )

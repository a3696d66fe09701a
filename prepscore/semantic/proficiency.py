from __future__ import annotations

import re
from functools import lru_cache

from prepscore.core.config.scoring import get_scoring_value
from prepscore.core.errors import ConfigError
from prepscore.taxonomy import LocalOntology

PROFICIENCY_LEVELS = ("beginner", "intermediate", "advanced", "expert")

_YEARS_RE = re.compile(r"(\d+)\s*\+?\s*years?", re.IGNORECASE)


@lru_cache(maxsize=256)
def _phrase_re(phrase: str) -> re.Pattern[str]:
    return re.compile(rf"(?<!\w){re.escape(phrase)}(?!\w)", re.IGNORECASE)


def default_proficiency() -> str:
    return str(get_scoring_value("skill_matching.proficiency.default", "intermediate"))


def validate_proficiency(value: str) -> str:
    level = (value or "").strip().lower()
    if level not in PROFICIENCY_LEVELS:
        raise ConfigError(f"Unknown proficiency '{value}'. Expected one of: {', '.join(PROFICIENCY_LEVELS)}")
    return level


def infer_proficiency(context: str) -> str:
    """Level from explicit phrases first, then from a stated number of years."""
    keywords = get_scoring_value("skill_matching.proficiency.keywords", {}) or {}
    for level, phrases in keywords.items():
        if level not in PROFICIENCY_LEVELS:
            raise RuntimeError(f"Unknown proficiency level '{level}' in skill_matching.proficiency.keywords.")
        if any(_phrase_re(str(phrase)).search(context) for phrase in phrases):
            return level

    match = _YEARS_RE.search(context)
    if match is None:
        return default_proficiency()
    years = int(match.group(1))
    min_years = get_scoring_value("skill_matching.proficiency.min_years", {}) or {}
    for level in ("expert", "advanced", "intermediate"):
        if years >= int(min_years.get(level, 0)):
            return level
    return "beginner"


def mention_context(text: str, start: int, end: int) -> str:
    """Characters around a mention, kept inside the mention's own line."""
    window = int(get_scoring_value("skill_matching.proficiency.context_chars", 100))
    line_start = text.rfind("\n", 0, start) + 1
    line_end = text.find("\n", end)
    if line_end == -1:
        line_end = len(text)
    return text[max(line_start, start - window) : min(line_end, end + window)]


def skill_levels(text: str, ontology: LocalOntology) -> dict[str, str]:
    """Proficiency per canonical skill, read around its first mention."""
    return {
        canonical: infer_proficiency(mention_context(text, start, end))
        for canonical, start, end in ontology.first_mentions(text or "")
    }


def meets_proficiency(candidate: str, required: str) -> bool:
    return PROFICIENCY_LEVELS.index(candidate) >= PROFICIENCY_LEVELS.index(required)

from __future__ import annotations

import logging
import re
from collections import Counter

from prepscore.core.config.scoring import get_scoring_value
from prepscore.core.numbers import clamp_int
from prepscore.normalize.headers import LANGUAGES, HeaderMatch
from prepscore.normalize.text import NormalizedText, declaration_index
from prepscore.normalize.utils import bullet_glyph
from prepscore.schemas.resume import FORMAT_PRIORITY, FormatIndicators, ResumeFormat

logger = logging.getLogger(__name__)

_IMAGE_MARKERS = (
    re.compile(rb"/Subtype\s*/Image\b"),
    re.compile(rb"JFIF"),
    re.compile(rb"\x89PNG"),
    re.compile(rb"word/media/"),
)
_EUROPASS_MARKERS: dict[str, re.Pattern[str]] = {
    "curriculum vitae": re.compile(r"curriculum\s+vitae", re.IGNORECASE),
    "personal information": re.compile(r"personal\s+information", re.IGNORECASE),
    "date of birth": re.compile(r"date\s+of\s+birth", re.IGNORECASE),
    "nationality": re.compile(r"\bnationality\b", re.IGNORECASE),
}
_INDIAN_MARKERS: dict[str, re.Pattern[str]] = {
    "father's name": re.compile(r"father(?:['’]s|s)?\s+name", re.IGNORECASE),
    "marital status": re.compile(r"marital\s+status", re.IGNORECASE),
    "permanent address": re.compile(r"permanent\s+address", re.IGNORECASE),
    "languages known": re.compile(r"languages?\s+known", re.IGNORECASE),
}
_EUROPASS_LANGUAGES = {"spanish", "french", "german"}
_INDIAN_LANGUAGES = {"hindi"}
_STANDARD_SEQUENCE = ("experience", "education", "skills")
_SCORED_FORMATS = FORMAT_PRIORITY[:-1]


def has_image_marker(raw: bytes) -> bool:
    return any(pattern.search(raw or b"") for pattern in _IMAGE_MARKERS)


def _detect_language(headers: list[HeaderMatch]) -> tuple[str, dict[str, int]]:
    hits = Counter(header.language for header in headers)
    language_hits = {language: hits[language] for language in LANGUAGES if hits[language]}
    if not language_hits:
        return "english", {}
    # ties resolve to the earlier language in LANGUAGES
    best = max(LANGUAGES, key=lambda language: (hits[language], -LANGUAGES.index(language)))
    return best, language_hits


def _summary_near_top(normalized: NormalizedText, headers: list[HeaderMatch]) -> bool:
    fraction = float(get_scoring_value("detection.summary_top_fraction", 0.2))
    limit = len(normalized.text) * fraction
    offsets: list[int] = []
    position = 0
    for line in normalized.lines:
        offsets.append(position)
        position += len(line) + 1
    return any(header.section == "summary" and offsets[header.line_index] <= limit for header in headers)


def _follows_standard_sequence(section_order: list[str], language: str) -> bool:
    if language != "english":
        return False
    positions = [section_order.index(name) for name in _STANDARD_SEQUENCE if name in section_order]
    return len(positions) >= 2 and positions == sorted(positions)


def _longest_blank_run(lines: tuple[str, ...]) -> int:
    longest = current = 0
    for line in lines:
        current = current + 1 if not line else 0
        longest = max(longest, current)
    return longest


def _uniform_bullet_count(lines: tuple[str, ...]) -> int:
    glyphs = Counter(glyph for glyph in (bullet_glyph(line) for line in lines) if glyph)
    return max(glyphs.values(), default=0)


def _has_template_spacing(normalized: NormalizedText) -> bool:
    min_blank_run = int(get_scoring_value("detection.template_min_blank_run", 3))
    min_bullets = int(get_scoring_value("detection.template_min_bullets", 5))
    return (
        _longest_blank_run(normalized.lines) >= min_blank_run
        and _uniform_bullet_count(normalized.lines) >= min_bullets
    )


def _uppercase_headers(normalized: NormalizedText, headers: list[HeaderMatch]) -> bool:
    minimum = int(get_scoring_value("detection.uppercase_headers_min", 3))
    if len(headers) < minimum:
        return False
    return all(normalized.lines[header.line_index].isupper() for header in headers)


def _ordered_sections(headers: list[HeaderMatch]) -> list[str]:
    order: list[str] = []
    for header in headers:
        if header.section not in order:
            order.append(header.section)
    return order


def detect_format(raw: bytes, normalized: NormalizedText) -> ResumeFormat:
    """Classify the resume family from byte and text signals."""
    scores = {name: 0 for name in _SCORED_FORMATS}
    headers = normalized.section_headers()
    section_order = _ordered_sections(headers)
    text = normalized.text

    has_photo = has_image_marker(raw)
    if has_photo:
        bonus = int(get_scoring_value("detection.image_marker_bonus", 25))
        scores["europass"] += bonus
        scores["indian"] += bonus
        scores["western"] -= int(get_scoring_value("detection.image_marker_western_penalty", 10))

    language, language_hits = _detect_language(headers)
    language_bias = int(get_scoring_value("detection.language_bias", 15))
    if language in _EUROPASS_LANGUAGES:
        scores["europass"] += language_bias
    elif language in _INDIAN_LANGUAGES:
        scores["indian"] += language_bias

    has_summary = _summary_near_top(normalized, headers)
    if has_summary:
        scores["western"] += int(get_scoring_value("detection.summary_bonus", 20))
    if _follows_standard_sequence(section_order, language):
        scores["western"] += int(get_scoring_value("detection.standard_order_bonus", 15))

    has_declaration = declaration_index(normalized.lines) is not None
    if has_declaration:
        scores["indian"] += int(get_scoring_value("detection.declaration_bonus", 30))

    europass_markers = [name for name, pattern in _EUROPASS_MARKERS.items() if pattern.search(text)]
    scores["europass"] += len(europass_markers) * int(get_scoring_value("detection.europass_marker_points", 20))

    indian_markers = [name for name, pattern in _INDIAN_MARKERS.items() if pattern.search(text)]
    scores["indian"] += len(indian_markers) * int(get_scoring_value("detection.indian_marker_points", 15))

    template_spacing = _has_template_spacing(normalized)
    if template_spacing:
        scores["template"] += int(get_scoring_value("detection.template_bonus", 20))
    uppercase_headers = _uppercase_headers(normalized, headers)
    if uppercase_headers:
        scores["template"] += int(get_scoring_value("detection.uppercase_headers_bonus", 15))

    threshold = int(get_scoring_value("detection.threshold", 30))
    best_kind = max(_SCORED_FORMATS, key=lambda name: (scores[name], -_SCORED_FORMATS.index(name)))
    best_score = scores[best_kind]
    kind = best_kind if best_score > threshold else "unknown"

    logger.debug("format_detected kind=%s score=%s language=%s", kind, best_score, language)
    return ResumeFormat(
        kind=kind,
        confidence=clamp_int(best_score),
        indicators=FormatIndicators(
            has_photo=has_photo,
            has_summary=has_summary,
            has_declaration=has_declaration,
            template_spacing=template_spacing,
            language=language,
            language_hits=language_hits,
            section_order=section_order,
            europass_markers=europass_markers,
            indian_markers=indian_markers,
        ),
        scores=scores,
    )

from __future__ import annotations

import re

_BULLET_CHARS = "•◦▪▫●○■□◆◇▶►➢✓✔-–—*·"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]|(?:\d+[\.\)]))\s+")
_GLYPH_PATTERN = re.compile(rf"^\s*([{re.escape(_BULLET_CHARS)}])\s+")
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(
    r"(?<![\w+])(?:"
    r"\+\d{1,3}[\s.-]?\d{4,5}[\s.-]?\d{5,6}"
    r"|(?:\+\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}"
    r")(?!\d)"
)
_URL_RE = re.compile(r"(?:https?://|www\.|linkedin\.com|github\.com)", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_line(line: str) -> str:
    return _WHITESPACE_RE.sub(" ", line).strip()


def is_bullet_like(line: str) -> bool:
    return bool(_BULLET_PATTERN.match(line))


def bullet_glyph(line: str) -> str | None:
    match = _GLYPH_PATTERN.match(line)
    return match.group(1) if match else None


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line).strip()


def contains_any(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def is_email(text: str) -> bool:
    return bool(EMAIL_RE.fullmatch(text.strip()))


def is_phone(text: str) -> bool:
    return bool(PHONE_RE.fullmatch(text.strip()))


def is_contact_or_url(line: str) -> bool:
    stripped = normalize_line(line)
    if not stripped:
        return False
    return bool(EMAIL_RE.search(stripped) or PHONE_RE.search(stripped) or _URL_RE.search(stripped))

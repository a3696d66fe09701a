from __future__ import annotations

import re

from prepscore.core.tables import validate_role_tag

# priority order; earlier roles win ties
_TITLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "frontend": ("frontend", "front-end", "front end", "ui developer", "ui engineer"),
    "backend": ("backend", "back-end", "back end", "server-side"),
    "devops": ("devops", "sre", "site reliability", "platform engineer", "infrastructure engineer", "cloud engineer"),
    "data-science": ("data scientist", "data science", "machine learning", "ml engineer", "data analyst"),
    "product-mgmt": ("product manager", "product owner", "product management"),
    "design": ("designer", "ux", "ui/ux", "user experience"),
    "software": ("software engineer", "software developer", "developer", "programmer", "full stack", "full-stack", "engineer"),
}
_CONTENT_KEYWORDS: dict[str, tuple[str, ...]] = {
    "frontend": ("frontend", "front-end", "react", "angular", "vue", "css", "html", "ui components"),
    "backend": ("backend", "back-end", "api", "apis", "microservices", "database", "server"),
    "devops": ("devops", "kubernetes", "docker", "terraform", "ci/cd", "infrastructure", "monitoring"),
    "data-science": ("data science", "machine learning", "statistics", "pandas", "model", "models", "analytics"),
    "product-mgmt": ("product manager", "roadmap", "stakeholder", "stakeholders", "prioritization", "user stories"),
    "design": ("design", "figma", "wireframes", "prototypes", "ux", "usability"),
    "software": ("software", "developer", "engineering", "programming", "code"),
}
ROLE_PRIORITY: tuple[str, ...] = tuple(_TITLE_KEYWORDS)


def _compile(table: dict[str, tuple[str, ...]]) -> dict[str, re.Pattern[str]]:
    return {
        role: re.compile(r"(?<![\w])(?:" + "|".join(re.escape(k) for k in keywords) + r")(?![\w])", re.IGNORECASE)
        for role, keywords in table.items()
    }


_TITLE_PATTERNS = _compile(_TITLE_KEYWORDS)
_CONTENT_PATTERNS = _compile(_CONTENT_KEYWORDS)


def role_from_title(title: str | None) -> str | None:
    if not title:
        return None
    for role in ROLE_PRIORITY:
        if _TITLE_PATTERNS[role].search(title):
            return role
    return None


def role_from_content(text: str) -> str | None:
    hits = {role: len(pattern.findall(text or "")) for role, pattern in _CONTENT_PATTERNS.items()}
    best = max(ROLE_PRIORITY, key=lambda role: (hits[role], -ROLE_PRIORITY.index(role)))
    return best if hits[best] > 0 else None


def resolve_role(role_hint: str | None, title: str | None, content: str) -> tuple[str, str]:
    """Return (role, source) where source is hint, title, content or default."""
    if role_hint is not None and role_hint.strip():
        return validate_role_tag(role_hint), "hint"
    role = role_from_title(title)
    if role is not None:
        return role, "title"
    role = role_from_content(content)
    if role is not None:
        return role, "content"
    return "generic", "default"

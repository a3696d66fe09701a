from __future__ import annotations

from decimal import Decimal
from typing import Literal, get_args

from prepscore.core.config.scoring import get_derived, get_scoring_value
from prepscore.core.errors import ConfigError
from prepscore.core.numbers import to_decimal

RoleTag = Literal[
    "software",
    "data-science",
    "product-mgmt",
    "frontend",
    "backend",
    "devops",
    "design",
    "generic",
]
InterviewType = Literal["technical", "behavioral", "system-design", "coding"]

ROLE_TAGS: tuple[str, ...] = get_args(RoleTag)
INTERVIEW_TYPES: tuple[str, ...] = get_args(InterviewType)

ATS_WEIGHT_KEYS = ("skills", "experience", "education", "projects", "keywords")
INTERVIEW_WEIGHT_KEYS = ("clarity", "accuracy", "depth", "structure", "relevance")

_ONE = Decimal("1")


def _load_table(path: str, tags: tuple[str, ...], keys: tuple[str, ...]) -> dict[str, dict[str, Decimal]]:
    raw = get_scoring_value(path)
    if not isinstance(raw, dict):
        raise RuntimeError(f"Scoring config is missing the '{path}' table.")

    unknown = sorted(set(raw) - set(tags))
    if unknown:
        raise RuntimeError(f"Unknown tags in '{path}': {', '.join(unknown)}")

    table: dict[str, dict[str, Decimal]] = {}
    for tag in tags:
        row = raw.get(tag)
        if not isinstance(row, dict) or set(row) != set(keys):
            raise RuntimeError(f"'{path}.{tag}' must define exactly: {', '.join(keys)}")
        weights = {key: to_decimal(row[key]) for key in keys}
        if any(value < 0 for value in weights.values()):
            raise RuntimeError(f"'{path}.{tag}' contains a negative weight.")
        if sum(weights.values()) != _ONE:
            raise RuntimeError(f"'{path}.{tag}' weights must sum to 1.0.")
        table[tag] = weights
    return table


def role_weight_table() -> dict[str, dict[str, Decimal]]:
    return get_derived("ats.role_weights", lambda: _load_table("ats.role_weights", ROLE_TAGS, ATS_WEIGHT_KEYS))


def interview_weight_table() -> dict[str, dict[str, Decimal]]:
    return get_derived(
        "interview.weights", lambda: _load_table("interview.weights", INTERVIEW_TYPES, INTERVIEW_WEIGHT_KEYS)
    )


def validate_role_tag(value: str) -> str:
    tag = (value or "").strip().lower()
    if tag not in ROLE_TAGS:
        raise ConfigError(f"Unknown role_hint '{value}'. Expected one of: {', '.join(ROLE_TAGS)}")
    return tag


def validate_interview_type(value: str) -> str:
    tag = (value or "").strip().lower()
    if tag not in INTERVIEW_TYPES:
        raise ConfigError(
            f"Unknown interview_type '{value}'. Expected one of: {', '.join(INTERVIEW_TYPES)}"
        )
    return tag


def role_weights(role: str) -> dict[str, Decimal]:
    return dict(role_weight_table()[validate_role_tag(role)])


def interview_weights(interview_type: str) -> dict[str, Decimal]:
    return dict(interview_weight_table()[validate_interview_type(interview_type)])

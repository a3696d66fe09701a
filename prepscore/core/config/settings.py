from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_date(name: str) -> date | None:
    raw = _get_env(name, None)
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class Settings:
    log_level: str
    ontology_path: str | None
    scoring_config_path: str | None
    min_document_tokens: int
    reference_date: date | None
    max_upload_bytes: int


settings = Settings(
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    ontology_path=_get_env("ONTOLOGY_PATH"),
    scoring_config_path=_get_env("SCORING_CONFIG_PATH"),
    min_document_tokens=max(0, _get_env_int("MIN_DOCUMENT_TOKENS", 20)),
    reference_date=_get_env_date("REFERENCE_DATE"),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
)


def normalization_clock() -> date:
    """Date that "Present"/"Current" resolves to in experience ranges."""
    return settings.reference_date or date.today()

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable

import yaml

from .settings import settings

logger = logging.getLogger(__name__)

BUNDLED_SCORING_PATH = Path(__file__).resolve().with_name("scoring.yaml")
REQUIRED_SECTIONS = ("detection", "extraction", "ats", "skill_matching", "interview")
SUPPORTED_MAJOR_VERSION = 1

_lock = threading.Lock()
_scoring_config: dict[str, Any] | None = None
_derived: dict[str, tuple[dict[str, Any], Any]] = {}


def _configured_path() -> Path:
    return Path(settings.scoring_config_path) if settings.scoring_config_path else BUNDLED_SCORING_PATH


def load_scoring_config(path: Path | str) -> dict[str, Any]:
    """Read and validate one scoring file without touching the cache."""
    path = Path(path)
    if not path.exists():
        raise RuntimeError(f"Scoring config not found at '{path}'.")

    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise RuntimeError(f"Failed to read scoring config '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise RuntimeError(f"Invalid YAML in scoring config '{path}': {exc}") from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(f"Invalid scoring config '{path}': expected a top-level mapping.")

    version = str(parsed.get("version", ""))
    if version.split(".")[0] != str(SUPPORTED_MAJOR_VERSION):
        raise RuntimeError(
            f"Scoring config '{path}' has version '{version}'; expected {SUPPORTED_MAJOR_VERSION}.x."
        )
    missing = [name for name in REQUIRED_SECTIONS if not isinstance(parsed.get(name), dict)]
    if missing:
        raise RuntimeError(f"Scoring config '{path}' is missing sections: {', '.join(missing)}.")
    return parsed


def get_scoring_config() -> dict[str, Any]:
    global _scoring_config

    if _scoring_config is not None:
        return _scoring_config
    with _lock:
        if _scoring_config is None:
            path = _configured_path()
            _scoring_config = load_scoring_config(path)
            logger.info("scoring_config_loaded path=%s version=%s", path, _scoring_config["version"])
    return _scoring_config


def reset_scoring_config() -> None:
    """Drop the cached config and everything built from it."""
    global _scoring_config
    with _lock:
        _scoring_config = None
        _derived.clear()


def get_derived(name: str, build: Callable[[], Any]) -> Any:
    """Value built from the current config, rebuilt once the config changes."""
    config = get_scoring_config()
    with _lock:
        cached = _derived.get(name)
    if cached is not None and cached[0] is config:
        return cached[1]
    value = build()
    with _lock:
        _derived[name] = (config, value)
    return value


def get_scoring_value(path: str, default: Any = None) -> Any:
    """Nested lookup by dot path, e.g. 'ats.skills.saturation_count'."""
    if not path:
        return default

    current: Any = get_scoring_config()
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current

from __future__ import annotations

import logging
import threading
from pathlib import Path

from prepscore.core.config import settings

from .local_ontology import SKILL_GROUPS, LocalOntology

logger = logging.getLogger(__name__)

_publish_lock = threading.Lock()
_current: LocalOntology | None = None


def get_ontology() -> LocalOntology:
    """Return the current snapshot, loading the configured ontology on first use."""
    snapshot = _current
    if snapshot is not None:
        return snapshot
    with _publish_lock:
        if _current is None:
            _publish(LocalOntology(settings.ontology_path))
        return _current


def _publish(ontology: LocalOntology) -> None:
    global _current
    _current = ontology


def publish_ontology(ontology: LocalOntology) -> None:
    with _publish_lock:
        previous = _current
        _publish(ontology)
    logger.info(
        "ontology_published version=%s previous=%s",
        ontology.version,
        previous.version if previous else None,
    )


def reload_ontology(path: str | Path | None = None) -> LocalOntology:
    ontology = LocalOntology(path or settings.ontology_path)
    publish_ontology(ontology)
    return ontology


__all__ = [
    "SKILL_GROUPS",
    "LocalOntology",
    "get_ontology",
    "publish_ontology",
    "reload_ontology",
]

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SUPPORTED_MAJOR_VERSION = 1
SKILL_GROUPS = ("programming", "frameworks", "databases", "tools", "cloud", "soft", "other")
MIN_COEFFICIENT = 0.5
MAX_COEFFICIENT = 0.8

_LEFT_BOUNDARY = r"(?<![A-Za-z0-9+#.])"
_RIGHT_BOUNDARY = r"(?![A-Za-z0-9+#])"
_DEFAULT_PATH = Path(__file__).with_name("ontology.json")


class LocalOntology:
    """Skill ontology loaded from a versioned JSON snapshot; read-only after init."""

    def __init__(self, ontology_path: str | Path | None = None) -> None:
        path = Path(ontology_path) if ontology_path else _DEFAULT_PATH
        raw = self._load_raw(path)
        self.path = path
        self.version = self._check_version(raw.get("version"))
        self._categories = self._load_categories(raw.get("categories"))
        self._skills, self._aliases, scan_forms = self._load_skills(raw.get("skills"))
        self._scan_pattern = self._compile_scan_pattern(scan_forms)
        logger.info(
            "ontology_loaded version=%s skills=%s categories=%s",
            self.version,
            len(self._skills),
            len(self._categories),
        )

    @staticmethod
    def _load_raw(path: Path) -> dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except FileNotFoundError as exc:
            raise RuntimeError(f"Ontology file not found at '{path}'.") from exc
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Invalid ontology JSON at '{path}': {exc}") from exc
        if not isinstance(raw, dict):
            raise RuntimeError("Ontology root must be an object.")
        return raw

    @staticmethod
    def _check_version(value: Any) -> str:
        version = str(value or "").strip()
        major, _, minor = version.partition(".")
        if not major.isdigit() or not minor.isdigit():
            raise RuntimeError(f"Ontology version must be 'major.minor', got '{version}'.")
        if int(major) != SUPPORTED_MAJOR_VERSION:
            raise RuntimeError(
                f"Unsupported ontology major version {major}; expected {SUPPORTED_MAJOR_VERSION}."
            )
        return version

    @staticmethod
    def _load_categories(raw: Any) -> dict[str, dict[str, Any]]:
        if not isinstance(raw, dict) or not raw:
            raise RuntimeError("Ontology must define a non-empty 'categories' object.")
        categories: dict[str, dict[str, Any]] = {}
        for category_id, definition in raw.items():
            group = str(definition.get("group", "")).strip()
            if group not in SKILL_GROUPS:
                raise RuntimeError(f"Category '{category_id}' has unknown group '{group}'.")
            coefficient = round(float(definition.get("transferability", -1)), 2)
            if not MIN_COEFFICIENT <= coefficient <= MAX_COEFFICIENT:
                raise RuntimeError(
                    f"Category '{category_id}' transferability {coefficient} is outside "
                    f"[{MIN_COEFFICIENT}, {MAX_COEFFICIENT}]."
                )
            categories[str(category_id)] = {"group": group, "transferability": coefficient}
        return categories

    def _load_skills(self, raw: Any) -> tuple[dict[str, str], dict[str, str], list[str]]:
        if not isinstance(raw, dict) or not raw:
            raise RuntimeError("Ontology must define a non-empty 'skills' object.")
        skills: dict[str, str] = {}
        aliases: dict[str, str] = {}
        scan_forms: list[str] = []
        for canonical, definition in raw.items():
            category = str(definition.get("category", ""))
            if category not in self._categories:
                raise RuntimeError(f"Skill '{canonical}' references unknown category '{category}'.")
            skills[canonical] = category
            lookup_only = {str(item).strip().lower() for item in definition.get("lookup_only", [])}
            forms = [canonical, *definition.get("synonyms", [])]
            for form in forms:
                key = str(form).strip().lower()
                if not key:
                    continue
                existing = aliases.get(key)
                if existing is not None and existing != canonical:
                    raise RuntimeError(f"Alias '{key}' maps to both '{existing}' and '{canonical}'.")
                aliases[key] = canonical
                if key not in lookup_only and key not in scan_forms:
                    scan_forms.append(key)
        return skills, aliases, scan_forms

    @staticmethod
    def _compile_scan_pattern(forms: list[str]) -> re.Pattern[str]:
        ordered = sorted(forms, key=lambda form: (-len(form), form))
        alternation = "|".join(re.escape(form).replace(r"\ ", r"\s+") for form in ordered)
        return re.compile(f"{_LEFT_BOUNDARY}(?:{alternation}){_RIGHT_BOUNDARY}", re.IGNORECASE)

    def lookup(self, raw: str) -> str | None:
        key = re.sub(r"\s+", " ", (raw or "").strip().lower())
        return self._aliases.get(key)

    def canonical_or_raw(self, raw: str) -> str:
        return self.lookup(raw) or (raw or "").strip().lower()

    def is_canonical_form(self, raw: str) -> bool:
        canonical = self.lookup(raw)
        return canonical is not None and canonical.lower() == (raw or "").strip().lower()

    def category(self, canonical: str) -> str | None:
        resolved = self.lookup(canonical) or canonical
        return self._skills.get(resolved)

    def group(self, canonical: str) -> str:
        category = self.category(canonical)
        if category is None:
            return "other"
        return self._categories[category]["group"]

    def category_coefficient(self, category: str) -> float:
        return self._categories[category]["transferability"]

    def transferability(self, source: str, target: str) -> float:
        left = self.canonical_or_raw(source)
        right = self.canonical_or_raw(target)
        if left == right:
            return 1.0
        left_category = self._skills.get(left)
        if left_category is not None and left_category == self._skills.get(right):
            return self.category_coefficient(left_category)
        return 0.0

    def first_mentions(self, text: str) -> list[tuple[str, int, int]]:
        """(canonical, start, end) of each skill's first mention, in text order."""
        mentions: list[tuple[str, int, int]] = []
        seen: set[str] = set()
        for match in self._scan_pattern.finditer(text or ""):
            canonical = self.lookup(match.group(0))
            if canonical is not None and canonical not in seen:
                seen.add(canonical)
                mentions.append((canonical, match.start(), match.end()))
        return mentions

    def find_in_text(self, text: str) -> list[str]:
        """Canonical skills mentioned in text, in order of first appearance."""
        return [canonical for canonical, _start, _end in self.first_mentions(text)]

    def count_in_text(self, text: str) -> dict[str, int]:
        counts: dict[str, int] = {}
        for match in self._scan_pattern.finditer(text or ""):
            canonical = self.lookup(match.group(0))
            if canonical is not None:
                counts[canonical] = counts.get(canonical, 0) + 1
        return counts

    @property
    def canonical_skills(self) -> list[str]:
        return sorted(self._skills)

    @property
    def categories(self) -> list[str]:
        return sorted(self._categories)

from __future__ import annotations

import logging
from decimal import Decimal

from prepscore.core.config.scoring import get_scoring_value
from prepscore.core.errors import ConfigError
from prepscore.core.numbers import round_cents, round_half_up, to_decimal
from prepscore.schemas.match import SkillMatchReport, SkillVerdict
from prepscore.semantic.proficiency import default_proficiency, meets_proficiency, validate_proficiency
from prepscore.taxonomy import LocalOntology, get_ontology

logger = logging.getLogger(__name__)


def validate_preferred_weight(value: float | Decimal | None) -> Decimal:
    if value is None:
        value = get_scoring_value("skill_matching.default_preferred_weight", 0.5)
    try:
        weight = to_decimal(value)
    except (ArithmeticError, ValueError) as exc:
        raise ConfigError(f"preferred_weight must be a decimal in (0, 1], got '{value}'.") from exc
    if not Decimal(0) < weight <= Decimal(1):
        raise ConfigError(f"preferred_weight must be in (0, 1], got {value}.")
    return weight


def _written_as_canonical(raw: str, canonical: str) -> bool:
    return raw.strip().lower() == canonical.lower()


def _candidate_index(candidate_skills: list[str], ontology: LocalOntology) -> dict[str, str]:
    """canonical -> first raw spelling the candidate used"""
    index: dict[str, str] = {}
    for raw in candidate_skills:
        if not raw or not raw.strip():
            continue
        index.setdefault(ontology.canonical_or_raw(raw), raw)
    return index


def _verdict(
    raw: str,
    *,
    required: bool,
    candidates: dict[str, str],
    ontology: LocalOntology,
) -> SkillVerdict:
    canonical = ontology.canonical_or_raw(raw)

    if canonical in candidates:
        via_synonym = not (
            _written_as_canonical(raw, canonical) and _written_as_canonical(candidates[canonical], canonical)
        )
        return SkillVerdict(
            skill=raw,
            canonical=canonical,
            required=required,
            verdict="exact",
            credit=1.0,
            via_synonym=via_synonym,
        )

    category = ontology.category(canonical)
    if category is not None:
        best: tuple[float, str] | None = None
        for candidate in sorted(candidates):
            coefficient = ontology.transferability(canonical, candidate)
            if coefficient <= 0:
                continue
            # strict comparison keeps the lexicographically first candidate on ties
            if best is None or coefficient > best[0]:
                best = (coefficient, candidate)
        if best is not None:
            coefficient = round_cents(best[0])
            return SkillVerdict(
                skill=raw,
                canonical=canonical,
                required=required,
                verdict="transferable",
                credit=coefficient,
                via=best[1],
                coefficient=coefficient,
            )

    return SkillVerdict(skill=raw, canonical=canonical, required=required, verdict="missing", credit=0.0)


def _levels(levels: dict[str, str] | None, ontology: LocalOntology) -> dict[str, str]:
    return {ontology.canonical_or_raw(skill): validate_proficiency(level) for skill, level in (levels or {}).items()}


def _with_proficiency(
    verdict: SkillVerdict,
    required_levels: dict[str, str],
    candidate_levels: dict[str, str],
) -> SkillVerdict:
    required_level = required_levels.get(verdict.canonical, default_proficiency())
    if verdict.verdict == "missing":
        return verdict.model_copy(update={"required_level": required_level})
    held = verdict.canonical if verdict.verdict == "exact" else verdict.via
    candidate_level = candidate_levels.get(held, default_proficiency())
    return verdict.model_copy(
        update={
            "required_level": required_level,
            "candidate_level": candidate_level,
            "proficiency_match": meets_proficiency(candidate_level, required_level),
        }
    )


def _learning_path(verdict: SkillVerdict, ontology: LocalOntology) -> str:
    category = ontology.category(verdict.canonical) or "uncategorized"
    return (
        f"{verdict.via} -> {verdict.canonical}: same {category} category, "
        f"{verdict.coefficient:.2f} transferability"
    )


def match_skills(
    required: list[str],
    preferred: list[str] | None,
    candidate_skills: list[str],
    preferred_weight: float | Decimal | None = None,
    *,
    ontology: LocalOntology | None = None,
    required_levels: dict[str, str] | None = None,
    candidate_levels: dict[str, str] | None = None,
) -> SkillMatchReport:
    """Match required and preferred skills against a candidate's skills through the ontology."""
    ontology = ontology or get_ontology()
    weight_preferred = validate_preferred_weight(preferred_weight)
    candidates = _candidate_index(candidate_skills, ontology)
    wanted_levels = _levels(required_levels, ontology)
    held_levels = _levels(candidate_levels, ontology)

    items: list[SkillVerdict] = []
    seen: set[str] = set()
    for raw_list, is_required in ((required, True), (preferred or [], False)):
        for raw in raw_list:
            if not raw or not raw.strip():
                continue
            canonical = ontology.canonical_or_raw(raw)
            if canonical in seen:
                continue
            seen.add(canonical)
            verdict = _verdict(raw, required=is_required, candidates=candidates, ontology=ontology)
            items.append(_with_proficiency(verdict, wanted_levels, held_levels))

    warnings: list[str] = []
    if not items:
        warnings.append("no required or preferred skills to match")
    if not candidates:
        warnings.append("candidate has no skills")

    numerator = Decimal(0)
    denominator = Decimal(0)
    for item in items:
        weight = Decimal(1) if item.required else weight_preferred
        numerator += to_decimal(item.credit) * weight
        denominator += weight
    ratio = numerator / denominator if denominator > 0 else Decimal(0)

    learning_paths = sorted(
        _learning_path(item, ontology) for item in items if item.verdict == "transferable"
    )
    logger.debug("skills_matched items=%s ratio=%s", len(items), ratio)
    return SkillMatchReport(
        items=items,
        match_score=round_half_up(ratio * 100),
        match_ratio=round_cents(ratio),
        preferred_weight=round_cents(weight_preferred),
        learning_paths=learning_paths,
        warnings=warnings,
    )

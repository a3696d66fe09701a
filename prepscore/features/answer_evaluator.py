from __future__ import annotations

import logging
import re
from decimal import Decimal

from prepscore.core.config.scoring import get_scoring_value
from prepscore.core.numbers import clamp_int, round_cents, round_half_up
from prepscore.core.tables import INTERVIEW_WEIGHT_KEYS, interview_weights, validate_interview_type
from prepscore.normalize.text import tokenize
from prepscore.schemas.interview import AnswerEvaluation, AnswerGap, InterviewQuestion
from prepscore.schemas.match import Explanation
from prepscore.semantic.similarity import token_cosine
from prepscore.taxonomy import LocalOntology, get_ontology

logger = logging.getLogger(__name__)

FILLER_WORDS = frozenset({"um", "uh", "er", "erm", "hmm", "basically", "literally", "actually", "kinda", "sorta"})
FILLER_PHRASES = ("you know",)
EXAMPLE_MARKERS = ("for example", "for instance", "such as")
REASONING_MARKERS = ("because", "this is why")
INTRO_MARKERS = (
    "first",
    "firstly",
    "to begin",
    "to start",
    "let me start",
    "let me explain",
    "at a high level",
    "the situation",
)
CONCLUSION_MARKERS = (
    "in summary",
    "in conclusion",
    "to summarize",
    "to sum up",
    "overall",
    "as a result",
    "finally",
    "ultimately",
)
HEDGE_WORDS = (
    "i think",
    "i guess",
    "i believe",
    "not sure",
    "sort of",
    "kind of",
    "maybe",
    "perhaps",
    "probably",
    "possibly",
    "might",
)

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_WORD_STRIP = ".,;:!?\"'()[]"
_CONFIDENCE_TYPES = {"behavioral"}


def _phrase_pattern(phrases: tuple[str, ...]) -> re.Pattern[str]:
    ordered = sorted(phrases, key=lambda phrase: (-len(phrase), phrase))
    return re.compile(r"\b(?:" + "|".join(re.escape(phrase) for phrase in ordered) + r")\b", re.IGNORECASE)


_FILLER_PHRASE_RE = _phrase_pattern(FILLER_PHRASES)
_EXAMPLE_RE = _phrase_pattern(EXAMPLE_MARKERS)
_REASONING_RE = _phrase_pattern(REASONING_MARKERS)
_INTRO_RE = _phrase_pattern(INTRO_MARKERS)
_CONCLUSION_RE = _phrase_pattern(CONCLUSION_MARKERS)
_HEDGE_RE = _phrase_pattern(HEDGE_WORDS)


def split_sentences(text: str) -> list[str]:
    return [sentence.strip() for sentence in _SENTENCE_SPLIT.split(text.strip()) if sentence.strip()]


def count_fillers(words: list[str], text: str) -> int:
    single = sum(1 for word in words if word.strip(_WORD_STRIP).lower() in FILLER_WORDS)
    return single + len(_FILLER_PHRASE_RE.findall(text))


def score_clarity(word_count: int, fillers: int, interview_type: str) -> tuple[int, list[str]]:
    band = get_scoring_value(f"interview.clarity_bands.{interview_type}", {}) or {}
    min_words = int(band.get("min_words", 20))
    max_words = int(band.get("max_words", 200))
    notes: list[str] = []

    if word_count < min_words:
        base = int(get_scoring_value("interview.clarity.too_short", 40))
        notes.append(f"answer is short ({word_count} words; aim for {min_words}-{max_words})")
    elif word_count > max_words:
        base = int(get_scoring_value("interview.clarity.too_long", 60))
        notes.append(f"answer is verbose ({word_count} words; aim for {min_words}-{max_words})")
    else:
        base = int(get_scoring_value("interview.clarity.optimal", 100))

    if fillers:
        notes.append(f"{fillers} filler word(s) detected")
    penalty = int(get_scoring_value("interview.clarity.filler_penalty", 15)) * fillers
    return max(0, base - penalty), notes


def _point_covered(point: str, answer_tokens: set[str], answer_skills: set[str], ontology: LocalOntology) -> bool:
    point_tokens = tokenize(point)
    if point_tokens and all(token in answer_tokens for token in point_tokens):
        return True
    canonical = ontology.lookup(point)
    return canonical is not None and canonical in answer_skills


def score_accuracy(
    expected_points: list[str],
    answer: str,
    ontology: LocalOntology,
) -> tuple[int, list[str], list[str]]:
    points = [point for point in expected_points if point and point.strip()]
    if not points:
        return int(get_scoring_value("interview.accuracy.no_expectations", 70)), [], []

    answer_tokens = set(tokenize(answer))
    answer_skills = set(ontology.find_in_text(answer))
    covered: list[str] = []
    missed: list[str] = []
    for point in points:
        if _point_covered(point, answer_tokens, answer_skills, ontology):
            covered.append(point)
        else:
            missed.append(point)
    return round_half_up(Decimal(100 * len(covered)) / Decimal(len(points))), covered, missed


def score_depth(answer: str, word_count: int) -> int:
    score = int(get_scoring_value("interview.depth.baseline", 50))
    if _EXAMPLE_RE.search(answer):
        score += int(get_scoring_value("interview.depth.example_bonus", 20))
    if _REASONING_RE.search(answer):
        score += int(get_scoring_value("interview.depth.reasoning_bonus", 20))
    if word_count > int(get_scoring_value("interview.depth.length_bonus_min_words", 50)):
        score += int(get_scoring_value("interview.depth.length_bonus", 10))
    return min(100, score)


def score_structure(sentences: list[str]) -> int:
    score = int(get_scoring_value("interview.structure.baseline", 50))
    if len(sentences) >= int(get_scoring_value("interview.structure.min_sentences", 3)):
        score += int(get_scoring_value("interview.structure.sentence_bonus", 25))
    if sentences and _INTRO_RE.search(sentences[0]):
        score += int(get_scoring_value("interview.structure.intro_bonus", 12))
    if sentences and _CONCLUSION_RE.search(sentences[-1]):
        score += int(get_scoring_value("interview.structure.conclusion_bonus", 13))
    return min(100, score)


def score_relevance(question: str, answer: str) -> int:
    return clamp_int(round_half_up(Decimal(str(token_cosine(tokenize(question), tokenize(answer)))) * 100))


def score_confidence(answer: str) -> int:
    penalty = int(get_scoring_value("interview.confidence.hedge_penalty", 15))
    return max(0, 100 - penalty * len(_HEDGE_RE.findall(answer)))


def follow_up_reason(accuracy: int, depth: int, is_follow_up: bool) -> str | None:
    accuracy_below = int(get_scoring_value("interview.follow_up.accuracy_below", 50))
    depth_below = int(get_scoring_value("interview.follow_up.depth_below", 60))
    if accuracy < accuracy_below:
        return f"accuracy {accuracy} is below {accuracy_below}"
    if depth < depth_below and not is_follow_up:
        return f"depth {depth} is below {depth_below}"
    return None


_FEEDBACK_TEXT = {
    "clarity": (
        "Clear and concise communication",
        "Answer lacks clarity",
        'Use short, complete sentences and drop filler words such as "um" and "basically".',
    ),
    "accuracy": (
        "Technically accurate explanation",
        "Expected points were missing or inaccurate",
        "Review the core concepts and use their terminology precisely.",
    ),
    "depth": (
        "Demonstrated deep understanding with examples",
        "Explanation lacked depth",
        "Include a specific example, use case or real-world application.",
    ),
    "structure": (
        "Well-organized answer with logical flow",
        "Answer was disorganized",
        "Introduce the concept, explain it with an example, then conclude with the key takeaway.",
    ),
    "relevance": (
        "Directly addressed the question",
        "Answer did not fully address the question",
        "Make sure to cover: {points}",
    ),
    "confidence": (
        "Answered with confidence",
        "Answer hedged frequently",
        'State conclusions directly and limit hedges such as "I think" or "maybe".',
    ),
}
_GAP_ORDER = {"knowledge": 0, "explanation": 1, "depth": 2}


def detect_gaps(dimensions: dict[str, int], missed_points: list[str]) -> list[AnswerGap]:
    """Missing knowledge versus weak explanation of what was said."""
    gaps = [
        AnswerGap(kind="knowledge", subject=point, severity="high", evidence="expected point not mentioned")
        for point in missed_points
    ]
    depth = dimensions["depth"]
    depth_below = int(get_scoring_value("interview.gaps.depth_below", 60))
    if depth < depth_below:
        relevance = dimensions.get("relevance")
        relevance_at = int(get_scoring_value("interview.gaps.explanation_relevance_at", 60))
        if relevance is not None and relevance >= relevance_at:
            gaps.append(
                AnswerGap(
                    kind="explanation",
                    subject="articulation",
                    severity="medium",
                    evidence=f"relevance {relevance} but depth {depth} is below {depth_below}",
                )
            )
        structure = dimensions["structure"]
        if structure >= int(get_scoring_value("interview.gaps.depth_structure_at", 70)):
            gaps.append(
                AnswerGap(
                    kind="depth",
                    subject="detailed understanding",
                    severity="medium",
                    evidence=f"structure {structure} but depth {depth} is below {depth_below}",
                )
            )
    return sorted(gaps, key=lambda gap: (_GAP_ORDER[gap.kind], gap.subject.lower()))


def build_feedback(dimensions: dict[str, int], gaps: list[AnswerGap], missed_points: list[str]) -> Explanation:
    strength_at = int(get_scoring_value("interview.feedback.strength_at", 80))
    weakness_below = int(get_scoring_value("interview.feedback.weakness_below", 60))
    strengths: list[str] = []
    weaknesses: list[str] = []
    suggestions: list[str] = []

    for key, score in dimensions.items():
        strength, weakness, suggestion = _FEEDBACK_TEXT[key]
        if score >= strength_at:
            strengths.append(f"{strength} ({key} {score})")
        elif score < weakness_below:
            weaknesses.append(f"{weakness} ({key} {score})")
            suggestions.append(suggestion.format(points=", ".join(missed_points) or "the key concepts"))

    for gap in gaps:
        if gap.kind == "knowledge":
            suggestions.append(f"Study the concept: {gap.subject}")
        elif gap.kind == "explanation":
            suggestions.append("Practice explaining concepts out loud before the interview.")
    return Explanation(strengths=strengths, weaknesses=weaknesses, suggestions=suggestions)


def evaluate_answer(
    question: InterviewQuestion,
    answer: str,
    interview_type: str,
    *,
    ontology: LocalOntology | None = None,
) -> AnswerEvaluation:
    """Score one interview answer on five dimensions and decide whether to follow up."""
    interview_type = validate_interview_type(interview_type)
    weights = interview_weights(interview_type)
    fifth = "confidence" if interview_type in _CONFIDENCE_TYPES else "relevance"
    labelled_weights = {(fifth if key == "relevance" else key): weights[key] for key in INTERVIEW_WEIGHT_KEYS}

    answer = answer or ""
    words = answer.split()
    warnings: list[str] = []

    if not words:
        warnings.append("answer is empty; all dimensions are zero")
        dimensions = {key: 0 for key in labelled_weights}
        covered: list[str] = []
        missed = [point for point in question.expected_key_points if point and point.strip()]
        notes: list[str] = []
    else:
        ontology = ontology or get_ontology()
        clarity, notes = score_clarity(len(words), count_fillers(words, answer), interview_type)
        accuracy, covered, missed = score_accuracy(question.expected_key_points, answer, ontology)
        sentences = split_sentences(answer)
        fifth_score = score_confidence(answer) if fifth == "confidence" else score_relevance(question.text, answer)
        dimensions = {
            "clarity": clarity,
            "accuracy": accuracy,
            "depth": score_depth(answer, len(words)),
            "structure": score_structure(sentences),
            fifth: fifth_score,
        }

    turn_score = clamp_int(
        round_half_up(sum((Decimal(dimensions[key]) * weight for key, weight in labelled_weights.items()), Decimal(0)))
    )
    reason = follow_up_reason(dimensions["accuracy"], dimensions["depth"], question.is_follow_up)
    gaps = detect_gaps(dimensions, missed)

    logger.debug("answer_evaluated type=%s turn_score=%s follow_up=%s", interview_type, turn_score, bool(reason))
    return AnswerEvaluation(
        interview_type=interview_type,
        dimensions=dimensions,
        weights={key: round_cents(value) for key, value in labelled_weights.items()},
        turn_score=turn_score,
        needs_follow_up=reason is not None,
        follow_up_reason=reason,
        covered_points=covered,
        missed_points=missed,
        gaps=gaps,
        feedback=build_feedback(dimensions, gaps, missed),
        notes=notes,
        warnings=warnings,
    )

from __future__ import annotations

import re
import unicodedata
from collections import Counter
from typing import Iterable

from pydantic import BaseModel, ConfigDict

from prepscore.parsing import Document, decode_document

from .headers import HeaderMatch, classify_header, matches_header
from .utils import normalize_line

_TOKEN_RE = re.compile(r"\d+(?:\.\d+)?%|[^\W_]+|%")
_DECLARATION_MARKERS = ("i hereby declare", "i do hereby declare")
_UNDOUBLE_EXEMPT = set("aeiouls")

STOPWORDS = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "also", "am", "an",
        "and", "any", "are", "as", "at", "be", "because", "been", "before", "being",
        "below", "between", "both", "but", "by", "can", "could", "did", "do", "does",
        "doing", "down", "during", "each", "either", "etc", "few", "for", "from",
        "further", "had", "has", "have", "having", "he", "her", "here", "hers",
        "herself", "him", "himself", "his", "how", "i", "if", "in", "into", "is",
        "it", "its", "itself", "just", "me", "more", "most", "must", "my", "myself",
        "no", "nor", "not", "now", "of", "off", "on", "once", "only", "or", "other",
        "our", "ours", "ourselves", "out", "over", "own", "same", "shall", "she",
        "should", "so", "some", "such", "than", "that", "the", "their", "theirs",
        "them", "themselves", "then", "there", "these", "they", "this", "those",
        "through", "to", "too", "under", "until", "up", "upon", "us", "very", "was",
        "we", "were", "what", "when", "where", "which", "while", "who", "whom",
        "why", "will", "with", "within", "would", "you", "your", "yours",
        "yourself", "yourselves",
    }
)


class SectionSlice(BaseModel):
    model_config = ConfigDict(frozen=True)

    header_line: int
    start: int
    end: int
    text: str


class NormalizedText(BaseModel):
    """Decoded document text, its line view and its token stream."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    lines: tuple[str, ...] = ()
    tokens: tuple[str, ...] = ()

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def is_empty(self) -> bool:
        return not self.text.strip()

    def section_headers(self) -> list[HeaderMatch]:
        found: list[HeaderMatch] = []
        for index, line in enumerate(self.lines):
            match = classify_header(line, index)
            if match is not None:
                found.append(match)
        return found

    def find_section(self, headers: Iterable) -> SectionSlice | None:
        patterns = list(headers)
        for index, line in enumerate(self.lines):
            inline = matches_header(line, patterns)
            if inline is None:
                continue
            end = len(self.lines)
            for offset in range(index + 1, len(self.lines)):
                if classify_header(self.lines[offset], offset) is not None:
                    end = offset
                    break
            body = [inline] if inline else []
            body.extend(self.lines[index + 1 : end])
            return SectionSlice(
                header_line=index,
                start=index + 1,
                end=end,
                text="\n".join(body).strip(),
            )
        return None

    def slice(self, headers: Iterable) -> str | None:
        """Text between the first matching header and the next recognized header."""
        section = self.find_section(headers)
        return section.text if section is not None else None

    def token_counts(self) -> dict[str, int]:
        return dict(sorted(Counter(self.tokens).items()))


def _undouble(stem: str) -> str:
    if len(stem) >= 3 and stem[-1] == stem[-2] and stem[-1] not in _UNDOUBLE_EXEMPT:
        return stem[:-1]
    return stem


def lemmatize(word: str) -> str:
    if len(word) < 4 or not word.isalpha():
        return word
    if word.endswith("ies") and len(word) > 4:
        return word[:-3] + "y"
    if word.endswith("ing") and len(word) - 3 >= 3:
        return _undouble(word[:-3])
    if word.endswith("ed") and len(word) - 2 >= 3:
        return _undouble(word[:-2])
    if word.endswith("s") and not word.endswith(("ss", "us", "is")):
        return word[:-1]
    return word


def token_pairs(text: str) -> list[tuple[str, str]]:
    """Return (surface, lemma) pairs for every non-stopword token."""
    pairs: list[tuple[str, str]] = []
    for match in _TOKEN_RE.finditer(text.lower()):
        surface = match.group(0)
        if surface in STOPWORDS:
            continue
        pairs.append((surface, lemmatize(surface)))
    return pairs


def tokenize(text: str) -> list[str]:
    return [lemma for _surface, lemma in token_pairs(text)]


def normalize_text(text: str | None) -> NormalizedText:
    if not text:
        return NormalizedText()

    folded = unicodedata.normalize("NFKC", text)
    lines = [normalize_line(line) for line in folded.splitlines()]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()

    joined = "\n".join(lines)
    return NormalizedText(text=joined, lines=tuple(lines), tokens=tuple(tokenize(joined)))


def is_declaration_line(line: str) -> bool:
    match = classify_header(line)
    if match is not None and match.section == "declaration":
        return True
    lowered = line.lower()
    return any(marker in lowered for marker in _DECLARATION_MARKERS)


def declaration_index(lines: Iterable[str]) -> int | None:
    for index, line in enumerate(lines):
        if is_declaration_line(line):
            return index
    return None


def strip_declaration(text: str) -> str:
    lines = text.splitlines()
    cut = declaration_index(lines)
    if cut is None:
        return text
    return "\n".join(lines[:cut]).rstrip()


def normalize(document: Document) -> NormalizedText:
    return normalize_text(decode_document(document))

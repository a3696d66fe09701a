from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, Protocol


class TermVectorizer(Protocol):
    def vectorize(self, tokens: Iterable[str]) -> dict[str, float]:
        """Return a sparse term vector for a token stream."""


class TermFrequencyVectorizer(TermVectorizer):
    def vectorize(self, tokens: Iterable[str]) -> dict[str, float]:
        return {term: float(count) for term, count in sorted(Counter(tokens).items())}


def cosine_similarity(left: dict[str, float], right: dict[str, float]) -> float:
    if not left or not right:
        return 0.0
    dot = sum(weight * right.get(term, 0.0) for term, weight in sorted(left.items()))
    left_norm = math.sqrt(sum(value * value for value in left.values()))
    right_norm = math.sqrt(sum(value * value for value in right.values()))
    if left_norm <= 0 or right_norm <= 0:
        return 0.0
    return dot / (left_norm * right_norm)


def token_cosine(left: Iterable[str], right: Iterable[str], vectorizer: TermVectorizer | None = None) -> float:
    vectorizer = vectorizer or TermFrequencyVectorizer()
    return cosine_similarity(vectorizer.vectorize(left), vectorizer.vectorize(right))

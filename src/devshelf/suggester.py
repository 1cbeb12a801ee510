from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from loguru import logger
from rapidfuzz.distance import Levenshtein

from .models import BookRecord
from .normalizer import STOPWORDS, normalize_query, tokenize


class Suggester:
    """Did-you-mean lookups over corpus titles and significant index terms."""

    def __init__(
        self,
        titles: Iterable[str],
        terms: Iterable[str],
        max_distance_ratio: float = 0.34,
    ) -> None:
        self.titles = tuple(sorted(set(titles)))
        self.terms = tuple(sorted(set(terms)))
        self.vocabulary = tuple(sorted(set(self.titles) | set(self.terms)))
        self._known_terms = frozenset(self.terms)
        self.max_distance_ratio = max_distance_ratio

    @classmethod
    def build(
        cls,
        books: Sequence[BookRecord],
        terms: Iterable[str],
        max_distance_ratio: float = 0.34,
        min_term_length: int = 3,
    ) -> "Suggester":
        titles = [normalize_query(book.title) for book in books if book.title]
        significant = [t for t in terms if len(t) >= min_term_length and t not in STOPWORDS and not t.isdigit()]
        suggester = cls([t for t in titles if t], significant, max_distance_ratio=max_distance_ratio)
        logger.info("Suggester vocabulary: {titles} titles, {terms} terms", titles=len(suggester.titles), terms=len(suggester.terms))
        return suggester

    def suggest_similar(self, query: str) -> Optional[str]:
        needle = normalize_query(query)
        if not needle:
            return None
        match = self._closest(needle, self.vocabulary)
        if match is not None:
            return match

        tokens = tokenize(needle)
        if len(tokens) < 2:
            return None
        corrected: list[str] = []
        changed = False
        for token in tokens:
            if token in self._known_terms or token in STOPWORDS:
                corrected.append(token)
                continue
            replacement = self._closest(token, self.terms)
            if replacement is None:
                return None
            corrected.append(replacement)
            changed = True
        if not changed:
            return None
        return " ".join(corrected)

    def max_distance(self, text: str) -> int:
        return max(1, math.floor(len(text) * self.max_distance_ratio))

    def _closest(self, needle: str, candidates: Sequence[str]) -> Optional[str]:
        limit = self.max_distance(needle)
        best: Optional[tuple[int, str]] = None
        for entry in candidates:
            if entry == needle or abs(len(entry) - len(needle)) > limit:
                continue
            distance = Levenshtein.distance(needle, entry, score_cutoff=limit)
            if distance > limit:
                continue
            if best is None or (distance, entry) < best:
                best = (distance, entry)
        if best is None:
            return None
        logger.debug("Closest to {needle!r}: {entry!r} (distance {distance})", needle=needle, entry=best[1], distance=best[0])
        return best[1]

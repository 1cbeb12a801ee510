from __future__ import annotations

import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping

from loguru import logger

from .clicks import ClickLog
from .models import BookRecord, SearchResult
from .normalizer import normalize_query


@dataclass
class RerankWeights:
    exact_match_boost: float = 2.0
    partial_match_boost: float = 1.0
    popularity_weight: float = 0.3


class ReRanker:
    def __init__(
        self,
        books: Mapping[int, BookRecord],
        click_log: ClickLog,
        weights: RerankWeights | None = None,
    ) -> None:
        self.books = books
        self.click_log = click_log
        self.weights = weights or RerankWeights()
        self._lock = threading.Lock()
        self._popularity: tuple[int, Mapping[int, float]] = (-1, MappingProxyType({}))

    def rerank(self, results: Iterable[SearchResult], query: str) -> List[SearchResult]:
        popularity = self.popularity_map()
        needle = normalize_query(query)
        w = self.weights.popularity_weight
        fused: List[SearchResult] = []
        for result in results:
            relevance = result.score + self._title_boost(needle, result.doc_id)
            score = (1.0 - w) * relevance + w * popularity.get(result.doc_id, 0.0)
            fused.append(SearchResult(doc_id=result.doc_id, score=score))
        fused.sort(key=lambda r: (-r.score, r.doc_id))
        return fused

    def popularity_map(self) -> Mapping[int, float]:
        """Read-only ``doc_id -> popularity`` in [0, 1], rebuilt only after new clicks.

        Clicks on ids outside the corpus are ignored.
        """
        version, popularity = self._popularity
        if version == self.click_log.version:
            return popularity
        with self._lock:
            version, popularity = self._popularity
            current, counts = self.click_log.snapshot()
            if version != current:
                known = {doc_id: count for doc_id, count in counts.items() if doc_id in self.books}
                top = max(known.values(), default=0)
                snapshot = {doc_id: count / top for doc_id, count in known.items()} if top else {}
                popularity = MappingProxyType(snapshot)
                # version and mapping are swapped in together
                self._popularity = (current, popularity)
                logger.debug("Popularity recomputed for {count} books (version {version})", count=len(snapshot), version=current)
            return popularity

    def invalidate(self) -> None:
        with self._lock:
            self._popularity = (-1, self._popularity[1])

    def _title_boost(self, needle: str, doc_id: int) -> float:
        if not needle:
            return 0.0
        book = self.books.get(doc_id)
        if book is None or not book.title:
            return 0.0
        title = normalize_query(book.title)
        if needle == title:
            return self.weights.exact_match_boost
        if needle in title:
            return self.weights.partial_match_boost
        return 0.0

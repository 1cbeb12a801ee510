from __future__ import annotations

import math
from collections import Counter, defaultdict
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Sequence

from loguru import logger

from .models import BookRecord, SearchResult
from .normalizer import index_terms


def _document_text(book: BookRecord) -> list[str]:
    fields = [book.title, book.author, book.description, book.category, book.prog_lang]
    fields.extend(sorted(book.tags))
    return [text for text in fields if text]


class InvertedIndex:
    """Term -> postings index with TF-IDF scoring.

    score(d) = sum over unique query terms t of
        (1 + ln tf(t, d)) * ln(1 + N / df(t)) / sqrt(len(d))
    """

    def __init__(
        self,
        postings: Mapping[str, Mapping[int, int]],
        doc_lengths: Mapping[int, int],
    ) -> None:
        self._postings = postings
        self._doc_lengths = doc_lengths

    @classmethod
    def build(cls, books: Sequence[BookRecord]) -> "InvertedIndex":
        term_to_postings: Dict[str, Dict[int, int]] = defaultdict(dict)
        doc_lengths: Dict[int, int] = {}
        for book in books:
            counts: Counter[str] = Counter()
            for text in _document_text(book):
                counts.update(index_terms(text))
            doc_lengths[book.book_id] = sum(counts.values())
            for term, tf in counts.items():
                term_to_postings[term][book.book_id] = tf

        frozen = {
            term: MappingProxyType(dict(sorted(postings.items())))
            for term, postings in sorted(term_to_postings.items())
        }
        index = cls(MappingProxyType(frozen), MappingProxyType(doc_lengths))
        logger.info("Indexed {docs} books, {terms} terms", docs=len(doc_lengths), terms=len(frozen))
        return index

    @property
    def document_count(self) -> int:
        return len(self._doc_lengths)

    def __len__(self) -> int:
        return len(self._postings)

    def __contains__(self, term: str) -> bool:
        return term in self._postings

    def terms(self) -> Iterator[str]:
        return iter(self._postings)

    def postings(self, term: str) -> Mapping[int, int]:
        return self._postings.get(term, MappingProxyType({}))

    def document_frequency(self, term: str) -> int:
        return len(self.postings(term))

    def document_length(self, doc_id: int) -> int:
        return self._doc_lengths.get(doc_id, 0)

    def idf(self, term: str) -> float:
        df = self.document_frequency(term)
        if df == 0:
            return 0.0
        return math.log(1.0 + self.document_count / df)

    def search(self, query: str) -> List[SearchResult]:
        terms = list(dict.fromkeys(index_terms(query)))
        if not terms:
            return []
        scores: Dict[int, float] = {}
        for term in terms:
            postings = self._postings.get(term)
            if not postings:
                continue
            idf = self.idf(term)
            for doc_id, tf in postings.items():
                weight = (1.0 + math.log(tf)) * idf / math.sqrt(self._doc_lengths.get(doc_id) or 1)
                scores[doc_id] = scores.get(doc_id, 0.0) + weight
        ranked = sorted(scores.items(), key=lambda x: (-x[1], x[0]))
        return [SearchResult(doc_id=doc_id, score=score) for doc_id, score in ranked]

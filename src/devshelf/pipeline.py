from __future__ import annotations

from typing import Optional, Sequence

from loguru import logger

from .clicks import ClickLog
from .config import PipelineConfig
from .graph import RecommendationGraph
from .indexers import InvertedIndex
from .loader import load_books
from .models import BookRecord, SearchOutcome, SearchResponse, SearchResult
from .normalizer import normalize
from .reranker import ReRanker, RerankWeights
from .suggester import Suggester


class DiscoveryPipeline:
    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self.config = config or PipelineConfig()
        self.click_log = ClickLog(self.config.click_log_file)
        self.books: dict[int, BookRecord] = {}
        self.index: Optional[InvertedIndex] = None
        self.suggester: Optional[Suggester] = None
        self.graph: Optional[RecommendationGraph] = None
        self.reranker: Optional[ReRanker] = None

    @classmethod
    def from_books(
        cls,
        books: Sequence[BookRecord],
        config: Optional[PipelineConfig] = None,
    ) -> "DiscoveryPipeline":
        pipeline = cls(config)
        pipeline.build(books)
        return pipeline

    def load(self) -> None:
        if self.config.corpus_file is None:
            raise RuntimeError("corpus_file is not configured")
        self.build(load_books(self.config.corpus_file))

    def build(self, books: Sequence[BookRecord]) -> None:
        if self.index is not None:
            raise RuntimeError("Pipeline is already built")
        books = list(books)
        self.books = {book.book_id: book for book in books}
        index = InvertedIndex.build(books)
        self.suggester = Suggester.build(
            books,
            index.terms(),
            max_distance_ratio=self.config.suggester.max_distance_ratio,
            min_term_length=self.config.suggester.min_term_length,
        )
        self.graph = RecommendationGraph.build(books, relevance_weight=self.config.graph.relevance_weight)
        scoring = self.config.scoring
        self.reranker = ReRanker(
            self.books,
            self.click_log,
            RerankWeights(
                exact_match_boost=scoring.exact_match_boost,
                partial_match_boost=scoring.partial_match_boost,
                popularity_weight=scoring.popularity_weight,
            ),
        )
        self.index = index

    def search(self, query: str) -> SearchResponse:
        index, reranker, suggester, _ = self._require_built()
        results = index.search(query)
        if results:
            return self._respond(query, query, reranker.rerank(results, query))

        suggestion = suggester.suggest_similar(query)
        if suggestion is None:
            logger.debug("No results and no suggestion for {query!r}", query=query)
            return SearchResponse(original_query=query, used_query=query, outcome=SearchOutcome.NO_SUGGESTION)

        results = index.search(suggestion)
        if not results:
            logger.debug("Suggestion {suggestion!r} for {query!r} also empty", suggestion=suggestion, query=query)
            return SearchResponse(
                original_query=query,
                used_query=query,
                suggestion=suggestion,
                outcome=SearchOutcome.SUGGESTION_EMPTY,
            )
        logger.info("Showing results for {suggestion!r} instead of {query!r}", suggestion=suggestion, query=query)
        return self._respond(query, suggestion, reranker.rerank(results, suggestion), suggestion=suggestion)

    def related(self, title: str, limit: Optional[int] = None) -> list[str]:
        _, reranker, _, graph = self._require_built()
        if limit is None:
            limit = self.config.graph.default_limit
        return graph.recommend(title, limit, reranker.popularity_map())

    def related_books(self, title: str, limit: Optional[int] = None) -> list[BookRecord]:
        graph = self._require_built()[3]
        books: list[BookRecord] = []
        for related_title in self.related(title, limit):
            doc_id = graph.title_to_id.get(normalize(related_title))
            if doc_id is not None and doc_id in self.books:
                books.append(self.books[doc_id])
        return books

    def log_click(self, query: str, book_id: int) -> None:
        self.click_log.log_click(query, book_id)
        logger.debug("Click logged: book {book_id} for {query!r}", book_id=book_id, query=query)

    def _respond(
        self,
        original: str,
        used: str,
        ranked: list[SearchResult],
        suggestion: Optional[str] = None,
    ) -> SearchResponse:
        books = [self.books[r.doc_id] for r in ranked if r.doc_id in self.books]
        return SearchResponse(
            original_query=original,
            used_query=used,
            used_suggestion=suggestion is not None,
            suggestion=suggestion,
            results=ranked,
            books=books,
        )

    def _require_built(self) -> tuple[InvertedIndex, ReRanker, Suggester, RecommendationGraph]:
        if self.index is None or self.reranker is None or self.suggester is None or self.graph is None:
            raise RuntimeError("Call load() or build() before querying")
        return self.index, self.reranker, self.suggester, self.graph

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from loguru import logger

from .models import BookRecord
from .normalizer import jaccard, normalize, normalize_tags, same_text


@dataclass(frozen=True)
class SimilarityWeights:
    author: float = 1.0
    language: float = 0.9
    tags: float = 0.5
    category: float = 0.2
    category_ceiling: float = 0.9
    min_edge: float = 0.3


DEFAULT_WEIGHTS = SimilarityWeights()


def similarity(a: BookRecord, b: BookRecord, weights: SimilarityWeights = DEFAULT_WEIGHTS) -> float:
    score = 0.0
    if same_text(a.author, b.author):
        score += weights.author
    if same_text(a.prog_lang, b.prog_lang):
        score += weights.language
    score += jaccard(normalize_tags(a.tags), normalize_tags(b.tags)) * weights.tags
    # category only counts for pairs not already linked by author or language
    if same_text(a.category, b.category) and score < weights.category_ceiling:
        score += weights.category
    return score if score >= weights.min_edge else 0.0


class RecommendationGraph:
    """Undirected weighted graph of related books keyed by normalized title."""

    def __init__(
        self,
        adjacency: Mapping[str, Mapping[str, float]],
        title_to_id: Mapping[str, int],
        display_titles: Mapping[str, str],
        relevance_weight: float = 0.7,
    ) -> None:
        self.adjacency = adjacency
        self.title_to_id = title_to_id
        self.display_titles = display_titles
        self.relevance_weight = relevance_weight

    @classmethod
    def build(
        cls,
        books: Sequence[BookRecord],
        weights: SimilarityWeights = DEFAULT_WEIGHTS,
        relevance_weight: float = 0.7,
    ) -> "RecommendationGraph":
        adjacency: Dict[str, Dict[str, float]] = {}
        title_to_id: Dict[str, int] = {}
        display_titles: Dict[str, str] = {}
        nodes: List[tuple[str, BookRecord]] = []
        for book in books:
            key = normalize(book.title)
            if not key:
                continue
            adjacency.setdefault(key, {})
            title_to_id[key] = book.book_id
            display_titles[key] = book.title or key
            nodes.append((key, book))

        edges = 0
        for i, (key_a, book_a) in enumerate(nodes):
            for key_b, book_b in nodes[i + 1 :]:
                if key_a == key_b:
                    continue
                score = similarity(book_a, book_b, weights)
                if score <= 0.0:
                    continue
                if key_b not in adjacency[key_a]:
                    edges += 1
                adjacency[key_a][key_b] = max(score, adjacency[key_a].get(key_b, 0.0))
                adjacency[key_b][key_a] = max(score, adjacency[key_b].get(key_a, 0.0))

        frozen = {key: MappingProxyType(dict(sorted(neighbors.items()))) for key, neighbors in sorted(adjacency.items())}
        graph = cls(
            MappingProxyType(frozen),
            MappingProxyType(title_to_id),
            MappingProxyType(display_titles),
            relevance_weight=relevance_weight,
        )
        logger.info("Similarity graph built: {nodes} titles, {edges} edges", nodes=len(frozen), edges=edges)
        return graph

    @property
    def node_count(self) -> int:
        return len(self.adjacency)

    @property
    def edge_count(self) -> int:
        return sum(len(neighbors) for neighbors in self.adjacency.values()) // 2

    def neighbors(self, title: str) -> Mapping[str, float]:
        return self.adjacency.get(normalize(title), MappingProxyType({}))

    def recommend(
        self,
        title: str,
        limit: int,
        popularity: Optional[Mapping[int, float]] = None,
    ) -> List[str]:
        """Related titles ranked by ``0.7 * edge weight + 0.3 * popularity``.

        Ties are broken by normalized title. Unknown titles give ``[]``.
        """
        if limit <= 0:
            return []
        key = normalize(title)
        related = self.adjacency.get(key)
        if not related:
            return []
        popularity = popularity or {}
        alpha = self.relevance_weight

        def blended(neighbor: str) -> float:
            doc_id = self.title_to_id.get(neighbor)
            pop = popularity.get(doc_id, 0.0) if doc_id is not None else 0.0
            return alpha * related[neighbor] + (1.0 - alpha) * pop

        ranked = sorted((n for n in related if n != key), key=lambda n: (-blended(n), n))
        return [self.display_titles.get(n, n) for n in ranked[:limit]]

from __future__ import annotations

import re
from typing import Iterable, Optional

from .models import TAG_SEPARATORS

SYNONYMS = {
    "js": "javascript",
    "c#": "csharp",
    "cpp": "c++",
    "ai": "artificial intelligence",
    "dsa": "data structure",
    "ml": "machine learning",
    "py": "python",
}

STOPWORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "in", "into", "is", "it", "of", "on", "or", "the", "to", "with",
    }
)

TOKEN_PATTERN = re.compile(r"[^\W_]+")
WHITESPACE = re.compile(r"\s+")


def tokenize(text: Optional[str]) -> list[str]:
    """Lower-case ``text`` and split it on non-alphanumeric boundaries."""
    if not text:
        return []
    return TOKEN_PATTERN.findall(text.lower())


def index_terms(text: Optional[str]) -> list[str]:
    return [token for token in tokenize(text) if token not in STOPWORDS]


def normalize(text: Optional[str]) -> str:
    """Trim, lower-case and expand a whole value through ``SYNONYMS``."""
    if text is None:
        return ""
    cleaned = text.strip().lower()
    return SYNONYMS.get(cleaned, cleaned)


def normalize_query(text: Optional[str]) -> str:
    if not text:
        return ""
    return WHITESPACE.sub(" ", text.strip().lower())


def normalize_tags(tags: Optional[Iterable[Optional[str]]]) -> frozenset[str]:
    if not tags:
        return frozenset()
    result: set[str] = set()
    for tag in tags:
        if tag is None:
            continue
        for part in TAG_SEPARATORS.split(tag):
            clean = normalize(part)
            if clean:
                result.add(clean)
    return frozenset(result)


def same_text(a: Optional[str], b: Optional[str]) -> bool:
    # missing values never match, not even each other
    if not a or not b:
        return False
    a, b = a.strip(), b.strip()
    if not a or not b:
        return False
    return a.lower() == b.lower()


def jaccard(left: frozenset[str], right: frozenset[str]) -> float:
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)

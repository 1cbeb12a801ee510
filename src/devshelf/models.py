from __future__ import annotations

import re
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

TAG_SEPARATORS = re.compile(r"[,;/]")


class BookRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    book_id: int = Field(alias="bookId")
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    prog_lang: Optional[str] = Field(default=None, alias="progLang")
    tags: frozenset[str] = Field(default_factory=frozenset, alias="tag")
    rating: float = 0.0
    download_link: Optional[str] = Field(default=None, alias="downloadLink")
    cover_url: Optional[str] = Field(default=None, alias="coverUrl")

    @field_validator("title", "author", "description", "category", "prog_lang", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: Any) -> frozenset[str]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        cleaned: set[str] = set()
        for entry in value:
            if entry is None:
                continue
            for part in TAG_SEPARATORS.split(str(entry)):
                part = part.strip()
                if part:
                    cleaned.add(part)
        return frozenset(cleaned)

    @field_validator("rating", mode="before")
    @classmethod
    def missing_rating(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class SearchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    doc_id: int
    score: float = Field(ge=0.0)


class SearchOutcome(str, Enum):
    RESULTS = "results"
    NO_SUGGESTION = "no_suggestion"
    SUGGESTION_EMPTY = "suggestion_empty"


class SearchResponse(BaseModel):
    original_query: str
    used_query: str
    used_suggestion: bool = False
    suggestion: Optional[str] = None
    outcome: SearchOutcome = SearchOutcome.RESULTS
    results: list[SearchResult] = Field(default_factory=list)
    books: list[BookRecord] = Field(default_factory=list)

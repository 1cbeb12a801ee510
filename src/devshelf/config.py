from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator


class SearchConfig(BaseModel):
    top_k: int = 10


class ScoringConfig(BaseModel):
    exact_match_boost: float = 2.0
    partial_match_boost: float = 1.0
    popularity_weight: float = Field(default=0.3, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_boost_order(self) -> "ScoringConfig":
        if not self.exact_match_boost >= self.partial_match_boost >= 0.0:
            raise ValueError("exact_match_boost >= partial_match_boost >= 0 is required")
        return self


class SuggesterConfig(BaseModel):
    max_distance_ratio: float = Field(default=0.34, gt=0.0, le=1.0)
    min_term_length: int = 3


class GraphConfig(BaseModel):
    relevance_weight: float = Field(default=0.7, ge=0.0, le=1.0)
    default_limit: int = 5


class RuntimeConfig(BaseModel):
    log_level: str = "INFO"


class PipelineConfig(BaseModel):
    corpus_file: Optional[Path] = None
    click_log_file: Optional[Path] = None

    search: SearchConfig = Field(default_factory=SearchConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    suggester: SuggesterConfig = Field(default_factory=SuggesterConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)


def load_config(path: str | Path) -> PipelineConfig:
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    config = PipelineConfig(**data)
    base = Path(path).resolve().parent
    if config.corpus_file is not None and not config.corpus_file.is_absolute():
        config.corpus_file = base / config.corpus_file
    if config.click_log_file is not None and not config.click_log_file.is_absolute():
        config.click_log_file = base / config.click_log_file
    return config

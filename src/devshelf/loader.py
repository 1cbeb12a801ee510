from __future__ import annotations

import math
from pathlib import Path
from typing import Any

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from .models import BookRecord


def read_table(path: Path) -> pd.DataFrame:
    ext = path.suffix.lower()
    if ext == ".json":
        return pd.read_json(path, orient="records", dtype=False)
    if ext in {".csv", ".txt"}:
        return pd.read_csv(path, encoding="utf-8-sig", dtype=str, keep_default_na=False, na_values=[""])
    raise ValueError(f"Unsupported corpus format: {path.suffix}")


def _clean_cell(value: Any) -> Any:
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def load_books(path: str | Path) -> list[BookRecord]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Corpus file not found: {path}")
    df = read_table(path)
    books: list[BookRecord] = []
    skipped = 0
    for row_number, row in enumerate(df.to_dict(orient="records"), start=1):
        data = {key: _clean_cell(value) for key, value in row.items()}
        try:
            books.append(BookRecord.model_validate(data))
        except ValidationError as exc:
            skipped += 1
            logger.warning("Skipping corpus row {row}: {err}", row=row_number, err=exc.errors()[0]["msg"])
    logger.info("Loaded {count} books from {path}", count=len(books), path=path)
    if skipped:
        logger.warning("Skipped {count} malformed corpus rows", count=skipped)
    return books

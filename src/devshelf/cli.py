from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from .config import load_config
from .models import SearchOutcome
from .pipeline import DiscoveryPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devshelf",
        description="Search a programming book catalogue and list related titles",
    )
    parser.add_argument("config", type=Path, help="Path to the YAML config file")
    parser.add_argument("query", help="Free-text search query")
    parser.add_argument(
        "--related",
        action="store_true",
        help="Also list titles related to the top result",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Number of related titles to list (default from config)",
    )
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    try:
        config = load_config(args.config)
    except (OSError, TypeError, ValidationError, yaml.YAMLError) as exc:
        logger.error("Invalid config {path}: {err}", path=args.config, err=exc)
        raise SystemExit(1)

    logger.remove()
    logger.add(sys.stderr, level=config.runtime.log_level)

    pipeline = DiscoveryPipeline(config)
    try:
        pipeline.load()
    except (FileNotFoundError, RuntimeError, ValueError) as exc:
        logger.error(str(exc))
        raise SystemExit(1)

    response = pipeline.search(args.query)
    if response.outcome is SearchOutcome.NO_SUGGESTION:
        print(f"No results for '{args.query}' and no similar titles found.")
        return
    if response.outcome is SearchOutcome.SUGGESTION_EMPTY:
        print(f"No results for '{args.query}'. Did you mean '{response.suggestion}'? It returned nothing either.")
        return
    if response.used_suggestion:
        print(f"Showing results for '{response.used_query}' instead of '{args.query}'.")

    top_k = config.search.top_k
    for rank, (book, result) in enumerate(zip(response.books[:top_k], response.results), start=1):
        rating = f"{book.rating:.1f}" if book.rating else "-"
        print(f"{rank:2d}. [{book.book_id}] {book.title or '<untitled>'} - {book.author or 'unknown'} ({rating})  score={result.score:.4f}")

    if args.related and response.books:
        top = response.books[0]
        related = pipeline.related(top.title or "", args.limit)
        print(f"\nRelated to '{top.title}':")
        if not related:
            print("  (none)")
        for title in related:
            print(f"  - {title}")


if __name__ == "__main__":
    main()

from __future__ import annotations

import json
import threading
import time
from collections import Counter, deque
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

RECENT_EVENTS = 1000


@dataclass(frozen=True)
class ClickEvent:
    query: str
    book_id: int
    timestamp: float


class ClickLog:
    """Append-only click store; ``version`` bumps on every logged click.

    Only per-book counts are kept for the whole process; raw events are
    bounded to the most recent ``max_events``.
    """

    def __init__(self, sink_path: Optional[Path] = None, max_events: int = RECENT_EVENTS) -> None:
        self.sink_path = Path(sink_path) if sink_path else None
        self._lock = threading.Lock()
        self._events: deque[ClickEvent] = deque(maxlen=max_events)
        self._counts: Counter[int] = Counter()
        self._version = 0
        if self.sink_path is not None and self.sink_path.exists():
            self._replay(self.sink_path)

    @property
    def version(self) -> int:
        return self._version

    def __len__(self) -> int:
        return self._version

    def log_click(self, query: str, book_id: int) -> ClickEvent:
        event = ClickEvent(query=query, book_id=int(book_id), timestamp=time.time())
        with self._lock:
            self._record(event)
        self._append_to_sink(event)
        return event

    def counts(self) -> dict[int, int]:
        with self._lock:
            return dict(self._counts)

    def snapshot(self) -> tuple[int, dict[int, int]]:
        """``(version, counts)`` read together."""
        with self._lock:
            return self._version, dict(self._counts)

    def events(self) -> list[ClickEvent]:
        with self._lock:
            return list(self._events)

    def _record(self, event: ClickEvent) -> None:
        self._events.append(event)
        self._counts[event.book_id] += 1
        self._version += 1

    def _append_to_sink(self, event: ClickEvent) -> None:
        if self.sink_path is None:
            return
        try:
            self.sink_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.sink_path, "a", encoding="utf-8") as fh:
                fh.write(json.dumps(asdict(event), ensure_ascii=False) + "\n")
        except OSError as exc:
            logger.warning("Could not append click to {path}: {err}", path=self.sink_path, err=exc)

    def _replay(self, path: Path) -> None:
        replayed = 0
        skipped = 0
        try:
            # undecodable bytes become U+FFFD and the line then fails json parsing
            with open(path, "r", encoding="utf-8", errors="replace") as fh:
                for line in fh:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        obj = json.loads(line)
                        event = ClickEvent(
                            query=str(obj.get("query", "")),
                            book_id=int(obj["book_id"]),
                            timestamp=float(obj.get("timestamp", 0.0)),
                        )
                    except (ValueError, KeyError, TypeError, AttributeError):
                        skipped += 1
                        continue
                    self._record(event)
                    replayed += 1
        except OSError as exc:
            logger.warning("Could not replay clicks from {path}: {err}", path=path, err=exc)
            return
        logger.info("Replayed {count} clicks from {path}", count=replayed, path=path)
        if skipped:
            logger.warning("Skipped {count} malformed click lines", count=skipped)

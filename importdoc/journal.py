"""JSON Lines journal of import runs.

One journal file accumulates every run; each line is an event
``{"ts_utc", "event_type", "run_id", "details"}``.
"""

from __future__ import annotations

import json
import uuid
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO


class ImportJournal:
    """Append-only journal for a single run, holding the file open until close()."""

    def __init__(self, file: TextIO, path: Optional[Path] = None, run_id: Optional[str] = None) -> None:
        self._file = file
        self.path = path
        self.run_id = run_id or uuid.uuid4().hex

    @classmethod
    def open(cls, path: Path, run_id: Optional[str] = None) -> "ImportJournal":
        """Raises OSError when the journal cannot be created."""

        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(path.open("a", encoding="utf-8"), path=path, run_id=run_id)

    def __enter__(self) -> "ImportJournal":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def record(self, event_type: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        event = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            "run_id": self.run_id,
            "details": details or {},
        }
        self._file.write(json.dumps(event, ensure_ascii=False) + "\n")
        # keep the journal readable while a long upload is in flight
        self._file.flush()
        return event


def iter_import_events(path: Path) -> Iterator[Dict[str, Any]]:
    """Yield well-formed events; blank and malformed lines are skipped."""

    with path.open("r", encoding="utf-8") as file:
        for line in file:
            line = line.strip()
            if not line:
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(event, dict):
                yield event


def tail_import_events(path: Path, n: int = 50, run_id: Optional[str] = None) -> List[Dict[str, Any]]:
    if n <= 0 or not path.exists():
        return []
    events = (
        event for event in iter_import_events(path)
        if run_id is None or event.get("run_id") == run_id
    )
    return list(deque(events, maxlen=n))

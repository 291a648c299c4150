"""Line-delimited JSON persistence for verse records."""

from __future__ import annotations

import threading
from pathlib import Path
from types import TracebackType
from typing import IO, Iterator, Optional

from bible_import.core.models import VerseRecord


class JsonlVerseWriter:
    """Append VerseRecords to a ``.jsonl`` file, one JSON object per line.

    Usable directly as a parser sink. The output file is truncated on open.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self.count = 0
        self._handle: Optional[IO[str]] = None
        self._lock = threading.Lock()

    def open(self) -> "JsonlVerseWriter":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.path.open("w", encoding="utf-8", newline="\n")
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> "JsonlVerseWriter":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __call__(self, record: VerseRecord) -> None:
        self.write(record)

    def write(self, record: VerseRecord) -> None:
        """Write one record; raises RuntimeError if the writer is not open."""
        if self._handle is None:
            raise RuntimeError(f"JSONL writer for {self.path} is not open")
        with self._lock:
            self._handle.write(record.to_json_line())
            self._handle.write("\n")
            self.count += 1


def iter_verse_records(path: Path | str) -> Iterator[VerseRecord]:
    """Yield records back from a ``.jsonl`` file, skipping blank lines."""
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            if not line.strip():
                continue
            yield VerseRecord.from_json_line(line)


__all__ = ["JsonlVerseWriter", "iter_verse_records"]

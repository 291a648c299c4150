"""Protocol definitions for the parser's collaborators."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Protocol

from bible_import.core.models import VerseRecord


class VerseSink(Protocol):
    """Consumer invoked synchronously once per emitted verse."""

    def __call__(self, record: VerseRecord) -> None:
        """Persist or forward ``record``; the parser waits for this to return."""
        ...


class LineSource(Protocol):
    """Produces the text lines of one source file."""

    def __call__(self, path: Path) -> Iterator[str]:
        """Yield the lines of ``path`` without trailing newlines."""
        ...


__all__ = ["VerseSink", "LineSource"]

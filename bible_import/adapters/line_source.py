"""Read USFM source files as a lazy stream of lines."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from bible_import.core.exceptions import SourceUnreadableError


def read_lines(path: Path | str) -> Iterator[str]:
    """Yield the lines of a UTF-8 file without line terminators.

    A leading byte-order mark is dropped. Failure to open or decode the file
    raises SourceUnreadableError; a caller that stops iterating early simply
    closes the file.
    """
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8-sig", newline=None) as handle:
            for line in handle:
                yield line.rstrip("\r\n")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnreadableError(f"Cannot read USFM source {p}: {exc}") from exc


__all__ = ["read_lines"]

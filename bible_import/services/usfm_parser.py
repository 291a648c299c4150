"""Streaming USFM parser that emits one VerseRecord per completed verse.

The parser walks a file line by line with a small per-file cursor:

- ``\\id CODE`` selects the current book (or none when the code is unknown or
  outside the active canon; content is then skipped until the next ``\\id``);
- ``\\c N`` sets the chapter;
- ``\\v N text`` opens a verse seeded with the rest of the line;
- any other line extends the open verse, minus one leading marker
  (``\\p``, ``\\q1`` ...).

``\\id``, ``\\c``, ``\\v`` and end of file flush the open verse: its text is
cleaned and, when anything remains, assembled and handed to the sink.
"""

from __future__ import annotations

import re
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

from bible_import.adapters.line_source import read_lines
from bible_import.core.config import settings
from bible_import.core.exceptions import (
    MalformedDirectiveError,
    SourceUnreadableError,
    UnresolvableBookError,
)
from bible_import.core.logging import get_logger, source_file_context, translation_context
from bible_import.core.models import (
    CanonMode,
    ImportSummary,
    ParserCursor,
    ParseStats,
    PartialVerse,
    VerseRecord,
)
from bible_import.core.ports import LineSource, VerseSink
from bible_import.services.assembler import assemble
from bible_import.services.canon import CanonRegistry, coerce_canon_mode, get_registry
from bible_import.services.text_cleaner import clean

logger = get_logger(__name__)

_DIRECTIVE_RE = re.compile(r"^\\(id|c|v)(?:\s+(.*))?$", re.DOTALL)
# Footnote and cross-reference openers stay so the cleaner drops the whole span
_LEADING_TAG_RE = re.compile(r"^\\(?![fx]\s)[A-Za-z0-9+]+\*?\s*")
_CHAPTER_ARG_RE = re.compile(r"^([0-9]+)(?:\s.*)?$", re.DOTALL)
# A bridge such as "3-4" is recorded under its first verse number.
_VERSE_ARG_RE = re.compile(r"^([0-9]+)(?:[-–][0-9]+)?(?=\s|\\|$)\s*(.*)$", re.DOTALL)


def parse_chapter_number(argument: Optional[str]) -> int:
    """Return the chapter number of a ``\\c`` directive argument."""
    match = _CHAPTER_ARG_RE.match(argument or "")
    if not match or int(match.group(1)) < 1:
        raise MalformedDirectiveError("c", argument)
    return int(match.group(1))


def parse_verse_directive(argument: Optional[str]) -> tuple[int, str]:
    """Split a ``\\v`` directive argument into (verse number, seed text)."""
    match = _VERSE_ARG_RE.match(argument or "")
    if not match or int(match.group(1)) < 1:
        raise MalformedDirectiveError("v", argument)
    return int(match.group(1)), match.group(2).strip()


def strip_leading_tag(line: str) -> str:
    """Drop one leading marker token (not its content) from a trimmed line.

    A leading ``\\f`` or ``\\x`` span opener is kept for the cleaner.
    """
    return _LEADING_TAG_RE.sub("", line, count=1).strip()


class UsfmStreamParser:
    """Parse USFM line streams for one translation and canon.

    The parser object only holds read-only configuration; all mutable state
    lives in a ParserCursor created per file, so one instance may serve
    several worker threads.
    """

    def __init__(
        self,
        version: str,
        canon_mode: CanonMode | str | None = None,
        registry: CanonRegistry | None = None,
        line_source: LineSource = read_lines,
    ) -> None:
        if not version or not version.strip():
            raise ValueError("Translation version tag cannot be empty")
        self.version = version.strip()
        self.canon_mode = coerce_canon_mode(canon_mode or settings.CANON_MODE)
        self._registry = registry or get_registry()
        self._book_ids = self._registry.book_ids(self.canon_mode)
        self._line_source = line_source

    def iter_records(
        self, lines: Iterable[str], stats: ParseStats | None = None
    ) -> Iterator[VerseRecord]:
        """Lazily yield the records of one file's lines in file order."""
        stats = stats if stats is not None else ParseStats()
        cursor = ParserCursor()

        for raw_line in lines:
            line = raw_line.strip()
            if not line:
                continue

            directive = _DIRECTIVE_RE.match(line)
            marker = directive.group(1) if directive else None
            argument = directive.group(2) if directive else None

            if marker == "id":
                yield from self._flush(cursor, stats)
                self._open_book(cursor, argument, stats)
                continue

            if cursor.current_book_id is None:
                continue

            if marker == "c":
                yield from self._flush(cursor, stats)
                try:
                    cursor.current_chapter = parse_chapter_number(argument)
                except MalformedDirectiveError as exc:
                    self._record_malformed(exc, cursor, stats)
                continue

            if marker == "v":
                yield from self._flush(cursor, stats)
                try:
                    cursor.pending_verse = self._open_verse(cursor, argument)
                except MalformedDirectiveError as exc:
                    self._record_malformed(exc, cursor, stats)
                continue

            if cursor.pending_verse is not None:
                cursor.pending_verse.append(strip_leading_tag(line))

        yield from self._flush(cursor, stats)

    def parse_lines(
        self,
        lines: Iterable[str],
        sink: VerseSink,
        source: str = "<lines>",
        stats: ParseStats | None = None,
    ) -> ParseStats:
        """Feed every record of ``lines`` to ``sink``, waiting on each call.

        Counters accumulate on ``stats`` as records are emitted, so a caller
        that passes its own instance still sees them if iteration fails.
        """
        stats = stats if stats is not None else ParseStats()
        stats.source = source
        for record in self.iter_records(lines, stats):
            sink(record)
        return stats

    def parse_file(
        self, path: Path | str, sink: VerseSink, stats: ParseStats | None = None
    ) -> ParseStats:
        """Parse one file; SourceUnreadableError propagates to the caller."""
        source = str(path)
        with source_file_context(source), translation_context(self.version):
            logger.info("Parsing USFM source %s", source)
            stats = self.parse_lines(
                self._line_source(Path(path)), sink, source=source, stats=stats
            )
            logger.info(
                "Parsed %s: %d verses emitted, %d empty dropped, %d malformed directives",
                source,
                stats.verses_emitted,
                stats.empty_verses_dropped,
                stats.malformed_directives,
            )
        return stats

    def parse_files(
        self,
        paths: Sequence[Path | str],
        sink: VerseSink,
        max_workers: int | None = None,
    ) -> ImportSummary:
        """Parse many files, continuing past files that cannot be read.

        With ``max_workers > 1`` files are parsed concurrently; sink calls are
        serialized so each file's records still arrive in file order. A file
        that fails part way keeps its stats (marked ``failed``) in
        ``summary.files`` since its earlier records already reached the sink.
        """
        workers = max(1, max_workers or settings.PARSE_MAX_WORKERS)
        summary = ImportSummary(version=self.version)

        lock = threading.Lock()

        def emit(record: VerseRecord) -> None:
            with lock:
                sink(record)

        def work(path: Path | str) -> ParseStats:
            stats = ParseStats(source=str(path))
            try:
                self.parse_file(path, emit, stats)
            except SourceUnreadableError:
                stats.failed = True
                logger.error(
                    "Skipping unreadable USFM source %s after %d verses",
                    path,
                    stats.verses_emitted,
                    exc_info=True,
                )
            return stats

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(work, paths))
        else:
            results = [work(path) for path in paths]

        for stats in results:
            summary.files.append(stats)
            if stats.failed:
                summary.failed_files.append(stats.source)
        return summary

    def _open_book(self, cursor: ParserCursor, argument: Optional[str], stats: ParseStats) -> None:
        code = argument.split()[0] if argument and argument.split() else None
        cursor.current_chapter = 0
        try:
            book = self._registry.require(code)
        except UnresolvableBookError:
            logger.warning("Unrecognized book code %r; skipping until next \\id", code)
            cursor.current_book_id = None
            stats.books_skipped += 1
            return

        if book.id not in self._book_ids:
            logger.info("Book %s is not in the %s canon; skipping", book.id, self.canon_mode.value)
            cursor.current_book_id = None
            stats.books_skipped += 1
            return

        cursor.current_book_id = book.id
        stats.book_ids.append(book.id)

    def _open_verse(self, cursor: ParserCursor, argument: Optional[str]) -> PartialVerse:
        number, seed_text = parse_verse_directive(argument)
        if cursor.current_chapter < 1:
            raise MalformedDirectiveError("v", argument)
        return PartialVerse(
            book_id=cursor.current_book_id or "",
            chapter=cursor.current_chapter,
            verse_number=number,
            accumulated_text=seed_text,
        )

    def _record_malformed(
        self, exc: MalformedDirectiveError, cursor: ParserCursor, stats: ParseStats
    ) -> None:
        stats.malformed_directives += 1
        logger.warning(
            "%s in %s chapter %d; directive ignored",
            exc,
            cursor.current_book_id,
            cursor.current_chapter,
        )

    def _flush(self, cursor: ParserCursor, stats: ParseStats) -> Iterator[VerseRecord]:
        pending = cursor.pending_verse
        cursor.pending_verse = None
        if pending is None:
            return

        text = clean(pending.accumulated_text)
        if not text:
            stats.empty_verses_dropped += 1
            logger.debug(
                "Dropping empty verse %s %d:%d",
                pending.book_id,
                pending.chapter,
                pending.verse_number,
            )
            return

        stats.verses_emitted += 1
        yield assemble(self.version, pending, text, self._registry)


def parse_usfm_lines(
    lines: Iterable[str],
    version: str,
    sink: VerseSink,
    canon_mode: CanonMode | str | None = None,
) -> ParseStats:
    """Parse one file's lines with a throwaway parser; see UsfmStreamParser."""
    return UsfmStreamParser(version, canon_mode).parse_lines(lines, sink)


__all__ = [
    "UsfmStreamParser",
    "parse_chapter_number",
    "parse_usfm_lines",
    "parse_verse_directive",
    "strip_leading_tag",
]

"""Import a whole translation directory of USFM files into a JSONL file."""

from __future__ import annotations

from pathlib import Path
from typing import List

from bible_import.adapters.jsonl import JsonlVerseWriter
from bible_import.core.config import settings
from bible_import.core.logging import get_logger, translation_context
from bible_import.core.models import CanonMode, ImportSummary, VerseRecord
from bible_import.services.usfm_parser import UsfmStreamParser

logger = get_logger(__name__)

USFM_SUFFIXES = (".usfm", ".sfm")


def discover_usfm_files(directory: Path | str) -> List[Path]:
    """Return the USFM files directly under ``directory``, sorted by name."""
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"USFM input directory not found: {root}")
    return sorted(p for p in root.iterdir() if p.is_file() and p.suffix.lower() in USFM_SUFFIXES)


def default_output_file(version: str) -> Path:
    """Return ``OUTPUT_DIR/<version>.jsonl`` (lowercased)."""
    return Path(settings.OUTPUT_DIR) / f"{version.lower()}.jsonl"


class _ProgressSink:
    """Write records through ``writer`` and log progress periodically."""

    def __init__(self, writer: JsonlVerseWriter, every: int) -> None:
        self._writer = writer
        self._every = every

    def __call__(self, record: VerseRecord) -> None:
        self._writer.write(record)
        if self._writer.count % self._every == 0:
            logger.info("%d verses parsed...", self._writer.count)


def import_translation(
    version: str,
    input_dir: Path | str,
    output_file: Path | str | None = None,
    canon_mode: CanonMode | str | None = None,
    max_workers: int | None = None,
) -> ImportSummary:
    """Parse every USFM file in ``input_dir`` and write one JSON line per verse.

    The output file is recreated on every run. Unreadable files are reported
    in ``ImportSummary.failed_files`` and do not abort the run.
    """
    files = discover_usfm_files(input_dir)
    output = Path(output_file) if output_file is not None else default_output_file(version)
    parser = UsfmStreamParser(version, canon_mode)

    with translation_context(parser.version):
        logger.info("Parsing %s from %d files...", parser.version, len(files))
        with JsonlVerseWriter(output) as writer:
            summary = parser.parse_files(
                files,
                _ProgressSink(writer, settings.PROGRESS_LOG_EVERY),
                max_workers=max_workers,
            )
        summary.output_file = output
        logger.info(
            "Done. %d verses written to %s (%d files, %d failed)",
            summary.total_verses,
            output,
            len(summary.files),
            len(summary.failed_files),
        )
    return summary


__all__ = ["USFM_SUFFIXES", "default_output_file", "discover_usfm_files", "import_translation"]

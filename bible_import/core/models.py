"""Core data objects shared across the ingestion layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Testament(str, Enum):
    """Old or New Testament."""

    OT = "OT"
    NT = "NT"


class CanonMode(str, Enum):
    """Supported canon variants."""

    PROTESTANT_66 = "protestant66"
    CATHOLIC_73 = "catholic73"


@dataclass(frozen=True, slots=True)
class BookDefinition:
    """One canonical book: stable lowercase id, display name, testament, aliases."""

    id: str
    name: str
    testament: Testament
    aliases: tuple[str, ...] = ()

    def spellings(self) -> tuple[str, ...]:
        """Every lookup key this book owns, in registration order."""
        keys = [self.id, self.id.upper(), self.name, self.name.lower()]
        for alias in self.aliases:
            keys.append(alias)
            keys.append(alias.lower())
        return tuple(dict.fromkeys(keys))


@dataclass(slots=True)
class PartialVerse:
    """A verse whose text may still continue on following lines."""

    book_id: str
    chapter: int
    verse_number: int
    accumulated_text: str = ""

    def append(self, fragment: str) -> None:
        """Append a continuation fragment with a single space separator."""
        if fragment:
            self.accumulated_text = f"{self.accumulated_text} {fragment}"


@dataclass(slots=True)
class ParserCursor:
    """Per-file parse state; a fresh cursor is created for every file."""

    current_book_id: Optional[str] = None
    current_chapter: int = 0
    pending_verse: Optional[PartialVerse] = None


class VerseRecord(BaseModel):
    """Normalized, immutable verse emitted by the parser.

    Attributes use snake_case; serialized names are the stable camelCase
    field names consumed downstream (``bookId``, ``bookName``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    version: str = Field(..., min_length=1, description="Translation tag, e.g. KJV")
    testament: Testament
    book_id: str = Field(..., alias="bookId", description="Canonical book id, e.g. gen")
    book_name: str = Field(..., alias="bookName", description="Display name, e.g. Genesis")
    chapter: int = Field(..., ge=1)
    verse: int = Field(..., ge=1)
    reference: str = Field(..., description='"<bookName> <chapter>:<verse>"')
    text: str = Field(..., min_length=1)
    key: str = Field(..., description='"<version>:<bookId>:<chapter>:<verse>"')

    def to_json_line(self) -> str:
        """Serialize as a single JSON object using the stable field names."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json_line(cls, line: str) -> "VerseRecord":
        """Parse one line produced by :meth:`to_json_line`."""
        return cls.model_validate_json(line)


@dataclass(slots=True)
class ParseStats:
    """Counters describing the outcome of parsing one source file."""

    source: str = "<lines>"
    book_ids: list[str] = field(default_factory=list)
    verses_emitted: int = 0
    empty_verses_dropped: int = 0
    malformed_directives: int = 0
    books_skipped: int = 0
    # Set when the source became unreadable part way; counters cover what was read before
    failed: bool = False


@dataclass(slots=True)
class ImportSummary:
    """Result of importing a whole translation directory."""

    version: str
    output_file: Optional[Path] = None
    files: list[ParseStats] = field(default_factory=list)
    failed_files: list[str] = field(default_factory=list)

    @property
    def total_verses(self) -> int:
        """Verses handed to the sink, including those from files that later failed."""
        return sum(stats.verses_emitted for stats in self.files)


__all__ = [
    "Testament",
    "CanonMode",
    "BookDefinition",
    "PartialVerse",
    "ParserCursor",
    "VerseRecord",
    "ParseStats",
    "ImportSummary",
]

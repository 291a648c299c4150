"""Canonical book registry and spelling lookup.

Provides:
- `CANON_66` / `CANON_73_ADDITIONS`: the fixed, ordered book tables.
- `CanonRegistry`: immutable lookup index over every known spelling.
- `get_registry()`: lazily built, shared read-only registry.
"""

from __future__ import annotations

from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping

from bible_import.core.exceptions import (
    DuplicateLookupKeyError,
    UnknownCanonModeError,
    UnresolvableBookError,
)
from bible_import.core.models import BookDefinition, CanonMode, Testament

OT = Testament.OT
NT = Testament.NT


CANON_66: tuple[BookDefinition, ...] = (
    # OT
    BookDefinition("gen", "Genesis", OT),
    BookDefinition("exo", "Exodus", OT),
    BookDefinition("lev", "Leviticus", OT),
    BookDefinition("num", "Numbers", OT),
    BookDefinition("deu", "Deuteronomy", OT),
    BookDefinition("jos", "Joshua", OT),
    BookDefinition("jdg", "Judges", OT),
    BookDefinition("rut", "Ruth", OT),
    BookDefinition("1sa", "1 Samuel", OT),
    BookDefinition("2sa", "2 Samuel", OT),
    BookDefinition("1ki", "1 Kings", OT),
    BookDefinition("2ki", "2 Kings", OT),
    BookDefinition("1ch", "1 Chronicles", OT),
    BookDefinition("2ch", "2 Chronicles", OT),
    BookDefinition("ezr", "Ezra", OT),
    BookDefinition("neh", "Nehemiah", OT),
    BookDefinition("est", "Esther", OT),
    BookDefinition("job", "Job", OT),
    BookDefinition("psa", "Psalms", OT),
    BookDefinition("pro", "Proverbs", OT),
    BookDefinition("ecc", "Ecclesiastes", OT),
    BookDefinition("sng", "Song of Solomon", OT, ("Song of Songs", "Canticles")),
    BookDefinition("isa", "Isaiah", OT),
    BookDefinition("jer", "Jeremiah", OT),
    BookDefinition("lam", "Lamentations", OT),
    BookDefinition("ezk", "Ezekiel", OT),
    BookDefinition("dan", "Daniel", OT),
    BookDefinition("hos", "Hosea", OT),
    BookDefinition("jol", "Joel", OT),
    BookDefinition("amo", "Amos", OT),
    BookDefinition("oba", "Obadiah", OT),
    BookDefinition("jon", "Jonah", OT),
    BookDefinition("mic", "Micah", OT),
    BookDefinition("nam", "Nahum", OT),
    BookDefinition("hab", "Habakkuk", OT),
    BookDefinition("zep", "Zephaniah", OT),
    BookDefinition("hag", "Haggai", OT),
    BookDefinition("zec", "Zechariah", OT),
    BookDefinition("mal", "Malachi", OT),
    # NT
    BookDefinition("mat", "Matthew", NT),
    BookDefinition("mrk", "Mark", NT),
    BookDefinition("luk", "Luke", NT),
    BookDefinition("jhn", "John", NT),
    BookDefinition("act", "Acts", NT),
    BookDefinition("rom", "Romans", NT),
    BookDefinition("1co", "1 Corinthians", NT),
    BookDefinition("2co", "2 Corinthians", NT),
    BookDefinition("gal", "Galatians", NT),
    BookDefinition("eph", "Ephesians", NT),
    BookDefinition("php", "Philippians", NT),
    BookDefinition("col", "Colossians", NT),
    BookDefinition("1th", "1 Thessalonians", NT),
    BookDefinition("2th", "2 Thessalonians", NT),
    BookDefinition("1ti", "1 Timothy", NT),
    BookDefinition("2ti", "2 Timothy", NT),
    BookDefinition("tit", "Titus", NT),
    BookDefinition("phm", "Philemon", NT),
    BookDefinition("heb", "Hebrews", NT),
    BookDefinition("jas", "James", NT),
    BookDefinition("1pe", "1 Peter", NT),
    BookDefinition("2pe", "2 Peter", NT),
    BookDefinition("1jn", "1 John", NT),
    BookDefinition("2jn", "2 John", NT),
    BookDefinition("3jn", "3 John", NT),
    BookDefinition("jud", "Jude", NT),
    BookDefinition("rev", "Revelation", NT),
)

# Deuterocanonical books, appended after the 66 in catholic73 mode.
CANON_73_ADDITIONS: tuple[BookDefinition, ...] = (
    BookDefinition("tob", "Tobit", OT),
    BookDefinition("jdt", "Judith", OT),
    BookDefinition("wis", "Wisdom", OT, ("Wisdom of Solomon",)),
    BookDefinition("sir", "Sirach", OT, ("Ecclesiasticus",)),
    BookDefinition("bar", "Baruch", OT),
    BookDefinition("1ma", "1 Maccabees", OT),
    BookDefinition("2ma", "2 Maccabees", OT),
)


def coerce_canon_mode(mode: CanonMode | str | None) -> CanonMode:
    """Normalize a canon mode given as enum, string, or None (protestant66)."""
    if mode is None:
        return CanonMode.PROTESTANT_66
    if isinstance(mode, CanonMode):
        return mode
    try:
        return CanonMode(str(mode).strip().lower())
    except ValueError as exc:
        raise UnknownCanonModeError(f"Unknown canon mode: {mode!r}") from exc


def build_lookup_index(books: Iterable[BookDefinition]) -> Mapping[str, BookDefinition]:
    """Map every spelling variant to its owning book.

    Raises DuplicateLookupKeyError if two distinct books claim one key.
    """
    index: dict[str, BookDefinition] = {}
    for book in books:
        for key in book.spellings():
            owner = index.get(key)
            if owner is not None and owner.id != book.id:
                raise DuplicateLookupKeyError(
                    f"Spelling {key!r} claimed by both {owner.id!r} and {book.id!r}"
                )
            index[key] = book
    return MappingProxyType(index)


class CanonRegistry:
    """Read-only canon tables plus the spelling lookup index."""

    def __init__(
        self,
        protestant: Iterable[BookDefinition] = CANON_66,
        additions: Iterable[BookDefinition] = CANON_73_ADDITIONS,
    ) -> None:
        self._canons: dict[CanonMode, tuple[BookDefinition, ...]] = {}
        self._canons[CanonMode.PROTESTANT_66] = tuple(protestant)
        self._canons[CanonMode.CATHOLIC_73] = self._canons[CanonMode.PROTESTANT_66] + tuple(
            additions
        )
        self._ids = {
            mode: frozenset(book.id for book in books) for mode, books in self._canons.items()
        }
        for mode, books in self._canons.items():
            if len(self._ids[mode]) != len(books):
                raise DuplicateLookupKeyError(f"Duplicate book id in {mode.value} canon")
        self._index = build_lookup_index(self._canons[CanonMode.CATHOLIC_73])

    @property
    def books(self) -> tuple[BookDefinition, ...]:
        """Every registered book, protestant order first then additions."""
        return self._canons[CanonMode.CATHOLIC_73]

    @property
    def index(self) -> Mapping[str, BookDefinition]:
        return self._index

    def get_canon(
        self, mode: CanonMode | str | None = CanonMode.PROTESTANT_66
    ) -> tuple[BookDefinition, ...]:
        """Return the ordered book list for ``mode``."""
        return self._canons[coerce_canon_mode(mode)]

    def book_ids(self, mode: CanonMode | str | None = CanonMode.PROTESTANT_66) -> frozenset[str]:
        """Return the ids of the books in ``mode`` for membership checks."""
        return self._ids[coerce_canon_mode(mode)]

    def lookup(self, token: str | None) -> BookDefinition | None:
        """Resolve a spelling (id, name, or alias in any case) to its book.

        The exact spelling is tried first, then its lowercase form; tokens
        that match neither resolve to None.
        """
        if not token:
            return None
        key = token.strip()
        book = self._index.get(key)
        if book is None:
            book = self._index.get(key.lower())
        return book

    def require(self, token: str | None) -> BookDefinition:
        """Like :meth:`lookup` but raise UnresolvableBookError when not found."""
        book = self.lookup(token)
        if book is None:
            raise UnresolvableBookError(token or "")
        return book


@lru_cache(maxsize=1)
def get_registry() -> CanonRegistry:
    """Return the shared default registry (built once, never mutated)."""
    return CanonRegistry()


def get_canon(mode: CanonMode | str | None = CanonMode.PROTESTANT_66) -> tuple[BookDefinition, ...]:
    """Return the ordered book list for ``mode`` from the default registry."""
    return get_registry().get_canon(mode)


def lookup(token: str | None) -> BookDefinition | None:
    """Resolve ``token`` against the default registry."""
    return get_registry().lookup(token)


__all__ = [
    "CANON_66",
    "CANON_73_ADDITIONS",
    "CanonRegistry",
    "build_lookup_index",
    "coerce_canon_mode",
    "get_canon",
    "get_registry",
    "lookup",
]

"""Turn a completed PartialVerse into the normalized VerseRecord."""

from __future__ import annotations

from bible_import.core.models import PartialVerse, Testament, VerseRecord
from bible_import.services.canon import CanonRegistry, get_registry
from bible_import.services.text_cleaner import clean


def format_reference(book_name: str, chapter: int, verse: int) -> str:
    """Format a display reference, e.g. "Genesis 1:1"."""
    return f"{book_name} {chapter}:{verse}"


def format_key(version: str, book_id: str, chapter: int, verse: int) -> str:
    """Format the stable record key, e.g. "KJV:gen:1:1"."""
    return f"{version}:{book_id}:{chapter}:{verse}"


def assemble(
    version: str,
    partial: PartialVerse,
    cleaned_text: str | None = None,
    registry: CanonRegistry | None = None,
) -> VerseRecord:
    """Build the record for ``partial``.

    ``cleaned_text`` is the verse text after cleaning; when omitted the
    accumulated text is cleaned here. The book is looked up again for its
    display name and testament; an id the registry does not know falls back
    to the raw id and the Old Testament.
    """
    if cleaned_text is None:
        cleaned_text = clean(partial.accumulated_text)
    book = (registry or get_registry()).lookup(partial.book_id)
    book_name = book.name if book else partial.book_id
    testament = book.testament if book else Testament.OT
    return VerseRecord(
        version=version,
        testament=testament,
        book_id=partial.book_id,
        book_name=book_name,
        chapter=partial.chapter,
        verse=partial.verse_number,
        reference=format_reference(book_name, partial.chapter, partial.verse_number),
        text=cleaned_text,
        key=format_key(version, partial.book_id, partial.chapter, partial.verse_number),
    )


__all__ = ["assemble", "format_key", "format_reference"]

"""Strip USFM markup from raw verse text.

Cleaning is an ordered list of independent rules (see ``CLEANING_STEPS``):

1. footnote spans ``\\f ... \\f*`` are removed with their content;
2. cross-reference spans ``\\x ... \\x*`` likewise;
3. any remaining ``\\tag`` / ``\\tag*`` marker is removed, keeping wrapped text;
4. word attributes (``|strong="H1234" x-morph="..."``) are removed;
5. decorative symbols (pilcrow and friends) are removed;
6. whitespace is collapsed and trimmed.
"""

from __future__ import annotations

import re
from typing import Callable

_FOOTNOTE_RE = re.compile(r"\\f\s.*?\\f\*", re.DOTALL)
_CROSS_REFERENCE_RE = re.compile(r"\\x\s.*?\\x\*", re.DOTALL)
# `+` covers nested character markers such as \+wj
_TAG_RE = re.compile(r"\\[A-Za-z0-9+]+\*?")
_KEYED_ATTRIBUTES_RE = re.compile(r'\|(?:\s*[\w:-]+="[^"]*")+')
_DEFAULT_ATTRIBUTE_RE = re.compile(r'\|[^\s|"\\]+')
_SYMBOLS_RE = re.compile(r"[¶‡†¦]")
_WHITESPACE_RE = re.compile(r"\s+")


def strip_footnotes(text: str) -> str:
    """Remove footnote spans including everything between the markers."""
    return _FOOTNOTE_RE.sub("", text)


def strip_cross_references(text: str) -> str:
    """Remove cross-reference spans including their content."""
    return _CROSS_REFERENCE_RE.sub("", text)


def strip_tags(text: str) -> str:
    """Remove opening and closing markers but keep the text they wrap."""
    return _TAG_RE.sub("", text)


def strip_word_attributes(text: str) -> str:
    """Remove ``|key="value"`` metadata (and bare ``|lemma`` defaults) after a word."""
    text = _KEYED_ATTRIBUTES_RE.sub("", text)
    return _DEFAULT_ATTRIBUTE_RE.sub("", text)


def strip_symbols(text: str) -> str:
    """Remove typographic marks that carry no textual meaning."""
    return _SYMBOLS_RE.sub("", text)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to one space and trim the ends."""
    return _WHITESPACE_RE.sub(" ", text).strip()


CLEANING_STEPS: tuple[Callable[[str], str], ...] = (
    strip_footnotes,
    strip_cross_references,
    strip_tags,
    strip_word_attributes,
    strip_symbols,
    normalize_whitespace,
)


def _apply_steps(text: str) -> str:
    for step in CLEANING_STEPS:
        text = step(text)
    return text


def clean(raw_text: str | None) -> str:
    """Return verse text with all USFM markup removed.

    Total: never raises, returns "" for empty input. Removing one marker can
    expose another (``\\¶wj`` becomes ``\\wj``), so the rules are re-run until
    the text stops changing; this keeps ``clean(clean(x)) == clean(x)``.
    """
    if not raw_text:
        return ""
    text = raw_text
    while True:
        cleaned = _apply_steps(text)
        if cleaned == text:
            return cleaned
        text = cleaned


__all__ = [
    "CLEANING_STEPS",
    "clean",
    "normalize_whitespace",
    "strip_cross_references",
    "strip_footnotes",
    "strip_symbols",
    "strip_tags",
    "strip_word_attributes",
]

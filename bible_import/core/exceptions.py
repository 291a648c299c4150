"""Core exception types shared across layers."""


class BibleImportError(Exception):
    """Base class for errors raised while ingesting scripture sources."""


class UnknownCanonModeError(BibleImportError, ValueError):
    """Raised when a canon mode other than protestant66/catholic73 is requested."""


class DuplicateLookupKeyError(BibleImportError, ValueError):
    """Raised when two distinct books claim the same lookup spelling."""


class UnresolvableBookError(BibleImportError):
    """Raised when a book code or name matches no canon entry."""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unrecognized book: {token!r}")
        self.token = token


class MalformedDirectiveError(BibleImportError):
    """Raised when a \\c or \\v directive carries an unusable number."""

    def __init__(self, marker: str, argument: str | None) -> None:
        super().__init__(f"Malformed \\{marker} directive argument: {argument!r}")
        self.marker = marker
        self.argument = argument


class SourceUnreadableError(BibleImportError):
    """Raised when a USFM source cannot be opened or decoded."""


class SourceDownloadError(BibleImportError):
    """Raised when a translation archive cannot be fetched or unpacked."""


__all__ = [
    "BibleImportError",
    "UnknownCanonModeError",
    "DuplicateLookupKeyError",
    "UnresolvableBookError",
    "MalformedDirectiveError",
    "SourceUnreadableError",
    "SourceDownloadError",
]

"""Catalogue of public-domain USFM translations and their downloader.

Each source is fetched as a zip archive, unpacked into
``DOWNLOADS_DIR/<code>/`` and described by ``SOURCES_DIR/<code>.source.json``.
"""

from __future__ import annotations

import json
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import httpx

from bible_import.core.config import settings
from bible_import.core.exceptions import SourceDownloadError
from bible_import.core.logging import get_logger
from bible_import.core.models import CanonMode
from bible_import.services.pipeline import USFM_SUFFIXES

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TranslationSource:
    """Where one translation's USFM archive lives and how to import it."""

    code: str
    version: str
    url: str
    name: str
    license: str
    canon_mode: CanonMode = CanonMode.PROTESTANT_66


SOURCES: tuple[TranslationSource, ...] = (
    TranslationSource(
        code="kjv",
        version="KJV",
        url="https://ebible.org/Scriptures/eng-kjv_usfm.zip",
        name="King James Version",
        license="Public Domain",
    ),
    TranslationSource(
        code="web",
        version="WEB",
        url="https://ebible.org/Scriptures/eng-web_usfm.zip",
        name="World English Bible",
        license="Public Domain",
    ),
    TranslationSource(
        code="asv",
        version="ASV",
        url="https://ebible.org/Scriptures/eng-asv_usfm.zip",
        name="American Standard Version",
        license="Public Domain",
    ),
    TranslationSource(
        code="douay_rheims",
        version="DRA",
        url="https://ebible.org/Scriptures/engDRA_usfm.zip",
        name="Douay-Rheims 1899 American Edition",
        license="Public Domain",
        canon_mode=CanonMode.CATHOLIC_73,
    ),
)

SOURCES_BY_CODE: Dict[str, TranslationSource] = {source.code: source for source in SOURCES}


def get_source(code: str) -> TranslationSource:
    """Return the catalogue entry for ``code`` (case-insensitive)."""
    try:
        return SOURCES_BY_CODE[code.strip().lower()]
    except KeyError as exc:
        raise KeyError(f"Unknown translation source: {code!r}") from exc


def find_source(token: str) -> Optional[TranslationSource]:
    """Match ``token`` against catalogue codes, then versions (case-insensitive)."""
    needle = token.strip().lower()
    if needle in SOURCES_BY_CODE:
        return SOURCES_BY_CODE[needle]
    for source in SOURCES:
        if source.version.lower() == needle:
            return source
    return None


def metadata_path(source: TranslationSource, sources_dir: Path | str) -> Path:
    return Path(sources_dir) / f"{source.code}.source.json"


def _fetch_archive(client: httpx.Client, url: str, dest: Path) -> None:
    with client.stream("GET", url) as response:
        response.raise_for_status()
        with dest.open("wb") as handle:
            for chunk in response.iter_bytes():
                handle.write(chunk)


def download_source(
    source: TranslationSource,
    downloads_dir: Path | str | None = None,
    sources_dir: Path | str | None = None,
    client: Optional[httpx.Client] = None,
) -> Dict[str, Any]:
    """Download, unpack, and describe one translation; return its metadata."""
    download_dir = Path(downloads_dir or settings.DOWNLOADS_DIR) / source.code
    meta_dir = Path(sources_dir or settings.SOURCES_DIR)
    download_dir.mkdir(parents=True, exist_ok=True)
    meta_dir.mkdir(parents=True, exist_ok=True)
    zip_path = download_dir / f"{source.code}.zip"

    owns_client = client is None
    http = client or httpx.Client(
        timeout=settings.DOWNLOAD_TIMEOUT_SECONDS, follow_redirects=True
    )
    try:
        logger.info("Downloading %s from %s", source.code, source.url)
        _fetch_archive(http, source.url, zip_path)
    except httpx.HTTPError as exc:
        raise SourceDownloadError(f"Failed to download {source.code}: {exc}") from exc
    finally:
        if owns_client:
            http.close()

    try:
        with zipfile.ZipFile(zip_path) as archive:
            archive.extractall(download_dir)
    except zipfile.BadZipFile as exc:
        raise SourceDownloadError(f"Failed to unzip {source.code}: {exc}") from exc

    usfm_files = sorted(
        p.name for p in download_dir.iterdir() if p.is_file() and p.suffix.lower() in USFM_SUFFIXES
    )
    logger.info("Found %d USFM files for %s", len(usfm_files), source.code)

    metadata = {
        "version": source.version,
        "source_name": source.name,
        "source_url": source.url,
        "license_note": source.license,
        "downloaded_files": usfm_files,
        "downloaded_at": datetime.now(timezone.utc).isoformat(),
    }
    metadata_path(source, meta_dir).write_text(
        json.dumps(metadata, ensure_ascii=False, indent=2) + "\n", encoding="utf-8"
    )
    return metadata


def download_all(
    sources: Iterable[TranslationSource] = SOURCES,
    downloads_dir: Path | str | None = None,
    sources_dir: Path | str | None = None,
    client: Optional[httpx.Client] = None,
) -> List[Dict[str, Any]]:
    """Download each source in turn, logging and skipping failures."""
    written: List[Dict[str, Any]] = []
    for source in sources:
        try:
            written.append(download_source(source, downloads_dir, sources_dir, client))
        except SourceDownloadError:
            logger.error("Download failed for %s", source.code, exc_info=True)
    return written


def load_source_metadata(path: Path | str) -> Dict[str, Any]:
    """Read a ``<code>.source.json`` file written by :func:`download_source`."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


__all__ = [
    "SOURCES",
    "SOURCES_BY_CODE",
    "TranslationSource",
    "download_all",
    "download_source",
    "find_source",
    "get_source",
    "load_source_metadata",
    "metadata_path",
]

"""Structured JSON logging with per-file parse context."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, Optional

from pythonjsonlogger import jsonlogger

from bible_import.core.config import settings

_source_file: ContextVar[Optional[str]] = ContextVar("source_file", default=None)
_translation: ContextVar[Optional[str]] = ContextVar("translation", default=None)

LEVEL_NAME = str(getattr(settings, "BIBLE_IMPORT_LOG_LEVEL", "info")).upper()
LOG_LEVEL = getattr(logging, LEVEL_NAME, logging.INFO)

BASE_DIR = Path(__file__).resolve().parent.parent
ROOT_DIR = BASE_DIR.parent


def _resolve_logs_dir() -> Path:
    """Select a writable logs directory honoring configuration overrides."""

    configured_dir = getattr(settings, "BIBLE_IMPORT_LOG_DIR", None)
    candidates = []
    if configured_dir:
        candidates.append(Path(configured_dir))

    data_dir = Path(getattr(settings, "DATA_DIR", Path("data")))
    # Precedence: explicit override → repo root logs → DATA_DIR/logs → package-local logs
    candidates.append(ROOT_DIR / "logs")
    candidates.append(data_dir / "logs")
    candidates.append(BASE_DIR / "logs")

    for candidate in candidates:
        try:
            candidate.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            continue
        return candidate

    raise PermissionError("Unable to create a writable logs directory")


LOGS_DIR = _resolve_logs_dir()
LOG_SCHEMA_VERSION = str(getattr(settings, "BIBLE_IMPORT_LOG_SCHEMA_VERSION", "1.0.0"))
LOG_FILE_PATH = LOGS_DIR / "bible_import.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

_STREAM_HANDLER_NAME = "bible_import.stream"
_FILE_HANDLER_NAME = "bible_import.file"


class VersionedJsonFormatter(jsonlogger.JsonFormatter):
    """Inject a schema version into each structured log entry."""

    def __init__(self, *args, schema_version: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._schema_version = schema_version

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("schema_version", self._schema_version)


class ParseContextFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Attach the source file and translation being parsed to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.source_file = get_source_file() or "-"
        record.version = get_translation() or "-"
        return True


def bind_source_file(value: Optional[str]) -> Token[Optional[str]]:
    """Bind ``value`` as the file currently being parsed."""

    return _source_file.set(value)


def reset_source_file(token: Token[Optional[str]]) -> None:
    """Reset the source file context variable to a previous state."""

    _source_file.reset(token)


def get_source_file() -> Optional[str]:
    """Return the source file bound to the current context, if any."""

    return _source_file.get()


def bind_translation(value: Optional[str]) -> Token[Optional[str]]:
    """Bind the translation tag (e.g. ``KJV``) for downstream logging."""

    return _translation.set(value)


def reset_translation(token: Token[Optional[str]]) -> None:
    """Reset the translation context variable."""

    _translation.reset(token)


def get_translation() -> Optional[str]:
    """Return the translation tag bound to the current context, if any."""

    return _translation.get()


@contextmanager
def source_file_context(value: Optional[str]) -> Iterator[None]:
    """Context manager that temporarily binds the file being parsed."""

    token = bind_source_file(value)
    try:
        yield
    finally:
        reset_source_file(token)


@contextmanager
def translation_context(value: Optional[str]) -> Iterator[None]:
    """Context manager that temporarily binds a translation tag."""

    token = bind_translation(value)
    try:
        yield
    finally:
        reset_translation(token)


def _ensure_handlers() -> None:
    root_logger = logging.getLogger()
    installed = {handler.get_name() for handler in root_logger.handlers}
    if _STREAM_HANDLER_NAME in installed and _FILE_HANDLER_NAME in installed:
        return

    formatter = VersionedJsonFormatter(
        " ".join(
            [
                "%(asctime)s",
                "%(levelname)s",
                "%(name)s",
                "%(message)s",
                "%(source_file)s",
                "%(version)s",
            ]
        ),
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
            "source_file": "file",
        },
        datefmt="%Y-%m-%d %H:%M:%S",
        json_ensure_ascii=False,
        schema_version=LOG_SCHEMA_VERSION,
    )
    context_filter = ParseContextFilter()

    if _STREAM_HANDLER_NAME not in installed:
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.set_name(_STREAM_HANDLER_NAME)
        stream_handler.addFilter(context_filter)
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

    if _FILE_HANDLER_NAME not in installed:
        file_handler = RotatingFileHandler(
            LOG_FILE_PATH, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
        file_handler.set_name(_FILE_HANDLER_NAME)
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger that propagates to the shared JSON handlers."""

    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)
    _ensure_handlers()
    return logger


__all__ = [
    "ParseContextFilter",
    "VersionedJsonFormatter",
    "bind_source_file",
    "bind_translation",
    "reset_source_file",
    "reset_translation",
    "get_source_file",
    "get_translation",
    "source_file_context",
    "translation_context",
    "get_logger",
    "LOG_FILE_PATH",
    "LOG_SCHEMA_VERSION",
]

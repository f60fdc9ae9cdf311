"""Logging for yt2blog.

One process-wide logger: a stderr console handler whose level follows
``YT2BLOG_LOG_LEVEL`` (or ``--verbose``), plus an optional debug file written
with ``StructuredFormatter``. Credentials passed through ``extra=`` are masked
before anything is written.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

_LOG_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

# extra= keys whose values must never reach a log sink.
SECRET_FIELDS = frozenset({"api_key", "apikey", "authorization", "x-api-key", "token"})
MASK = "***"

LevelLike = Union[int, str]


def _resolve_level(level: Optional[LevelLike], fallback: int = logging.WARNING) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level or "").strip().upper())
    return resolved if isinstance(resolved, int) else fallback


def _mask_secrets(extras: Dict[str, Any]) -> Dict[str, Any]:
    return {key: MASK if key.lower() in SECRET_FIELDS else value for key, value in extras.items()}


class StructuredFormatter(logging.Formatter):
    """ISO-8601 UTC timestamps; ``extra=`` fields appended as JSON after ``|``."""

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return timestamp.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _LOG_RECORD_FIELDS and not key.startswith("_")
        }
        if not extras:
            return message
        try:
            serialized = json.dumps(
                _mask_secrets(extras), sort_keys=True, ensure_ascii=False, default=str
            )
        except (TypeError, ValueError):
            serialized = str(_mask_secrets(extras))
        return f"{message} | {serialized}"


class Yt2BlogLogger:
    """Thin wrapper around the ``yt2blog`` stdlib logger."""

    def __init__(self, name: str = "yt2blog", console_level: Optional[LevelLike] = None):
        self.logger = logging.getLogger(name)
        # The logger passes everything; handlers decide what they keep.
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self._console_handler = next(
            (
                handler
                for handler in self.logger.handlers
                if type(handler) is logging.StreamHandler
            ),
            None,
        )
        if self._console_handler is None:
            self._console_handler = logging.StreamHandler(sys.stderr)
            self._console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
            self.logger.addHandler(self._console_handler)
        self.set_console_level(
            console_level if console_level is not None else os.getenv("YT2BLOG_LOG_LEVEL")
        )

        self._file_handler: Optional[logging.FileHandler] = None

    @property
    def console_level(self) -> int:
        return self._console_handler.level

    def set_console_level(self, level: Optional[LevelLike]) -> None:
        """Accepts ``logging.DEBUG`` or a name such as ``"info"``; unknown names mean WARNING."""
        self._console_handler.setLevel(_resolve_level(level))

    def attach_file_handler(self, log_file: Path) -> Path:
        """Write debug-level structured logs to ``log_file``, replacing any earlier file."""
        log_file = Path(log_file)
        if self._file_handler is not None:
            if self._file_handler.baseFilename == os.path.abspath(log_file):
                return log_file
            self.logger.removeHandler(self._file_handler)
            self._file_handler.close()

        log_file.parent.mkdir(parents=True, exist_ok=True)
        # UTF-8 so transcripts and Chinese prompts never hit code page errors.
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(StructuredFormatter("%(asctime)s [%(levelname)s] %(message)s"))
        self.logger.addHandler(handler)
        self._file_handler = handler
        return log_file

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(message, *args, **kwargs)

    def exception(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log at ERROR with the active traceback."""
        self.logger.exception(message, *args, **kwargs)


_logger: Optional[Yt2BlogLogger] = None


def get_logger() -> Yt2BlogLogger:
    """Return the process-wide logger, creating it on first use."""
    global _logger
    if _logger is None:
        _logger = Yt2BlogLogger()
    return _logger


def enable_file_logging(log_file: Path) -> Path:
    """Also write debug logs for this process to ``log_file``."""
    logger = get_logger()
    path = logger.attach_file_handler(log_file)
    logger.debug(f"[logging] File logging enabled at {path}")
    return path

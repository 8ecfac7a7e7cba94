"""Logging setup for applications embedding zlimit.

Registry decisions are emitted as dotted event names with context in
``extra`` (``limiter_name``, ``remaining``, ``elapsed_ms`` ...). This module
renders those extras as JSON, redacting keys callers mark as sensitive, and
routes them to stdout or a (rotating) file.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging import LogRecord
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterable, Mapping

from zlimit.core.config import LogSettings, settings

SENSITIVE_KEYS_DEFAULT: frozenset[str] = frozenset({"api_key", "token", "secret", "password"})

REDACTED = "[REDACTED]"

# Attributes every LogRecord carries; anything else came from ``extra``
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _redact(value: Any, sensitive_keys: frozenset[str]) -> Any:
    if isinstance(value, Mapping):
        return {
            k: REDACTED if str(k).lower() in sensitive_keys else _redact(v, sensitive_keys)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(_redact(v, sensitive_keys) for v in value)
    return value


def record_extras(record: LogRecord, sensitive_keys: Iterable[str] = SENSITIVE_KEYS_DEFAULT) -> dict[str, Any]:
    """Return the ``extra`` fields of a record with sensitive values redacted."""

    keys = frozenset(k.lower() for k in sensitive_keys)
    return {
        key: REDACTED if key.lower() in keys else _redact(value, keys)
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, event, extras."""

    def __init__(self, *, sensitive_keys: Iterable[str] = SENSITIVE_KEYS_DEFAULT) -> None:
        super().__init__()
        self.sensitive_keys = frozenset(sensitive_keys)

    def format(self, record: LogRecord) -> str:  # noqa: D401
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(record_extras(record, self.sensitive_keys))
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def _build_handler(log_settings: LogSettings) -> logging.Handler:
    if log_settings.output == "file":
        file_path = Path(log_settings.file_path or "logs/zlimit.log")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if log_settings.max_bytes:
            return RotatingFileHandler(
                file_path,
                maxBytes=log_settings.max_bytes,
                backupCount=log_settings.backup_count,
                encoding="utf-8",
            )
        return logging.FileHandler(file_path, encoding="utf-8")

    return logging.StreamHandler(sys.stdout)


def configure_logging(log_settings: LogSettings | None = None) -> logging.Handler:
    """Install a single root handler according to ``log_settings``.

    Args:
        log_settings: Optional log settings; defaults to global settings if omitted.

    Returns:
        The handler installed on the root logger.
    """

    cfg = log_settings or settings.log
    handler = _build_handler(cfg)

    if cfg.format == "plain":
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    else:
        handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))

    return handler

"""
Structured JSON logging for the currency kernel.

Every line is one JSON object: ``ts``, ``level``, ``logger`` and ``message``
(the event name, e.g. ``currency_registered``), the seed source bound by
``CurrencyTable.reset()`` while a table is loading, then the event's
``extra`` fields.  Currency kernel errors logged with ``exc_info`` add
their ``code`` and structured attributes as ``exc_*`` fields.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any


class LogContext:
    """Seed source name attached to every line logged while a table loads."""

    _seed_source: ContextVar[str | None] = ContextVar("log_seed_source", default=None)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        seed_source = cls._seed_source.get()
        return {} if seed_source is None else {"seed_source": seed_source}

    @classmethod
    def clear(cls) -> None:
        cls._seed_source.set(None)

    @classmethod
    def bind(cls, *, seed_source: str) -> "_SeedSourceBinding":
        """Set ``seed_source`` for the ``with`` block, restoring the outer value after."""
        return _SeedSourceBinding(seed_source)


class _SeedSourceBinding:

    def __init__(self, seed_source: str):
        self._seed_source = seed_source
        self._token = None

    def __enter__(self) -> None:
        self._token = LogContext._seed_source.set(self._seed_source)

    def __exit__(self, *exc: Any) -> None:
        LogContext._seed_source.reset(self._token)


# Attributes every LogRecord carries; anything else came from ``extra``.
_RECORD_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())

        for key, val in vars(record).items():
            if key not in _RECORD_KEYS and key not in payload:
                payload[key] = val

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            code = getattr(exc, "code", None)
            if code is not None:
                payload["exc_code"] = code
            for key, val in vars(exc).items():
                if not key.startswith("_"):
                    payload[f"exc_{key}"] = val

        return json.dumps(payload, default=str)


_LOGGER_PREFIX = "currency_kernel"


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the currency_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int = logging.INFO,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one JSON handler (stderr by default) to ``currency_kernel``; later calls are no-ops."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level)
    root_logger.propagate = False

    h = handler if handler is not None else logging.StreamHandler(sys.stderr)
    h.setFormatter(StructuredFormatter())
    root_logger.addHandler(h)


def reset_logging() -> None:
    """Detach handlers and allow configure_logging() again. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    logger = logging.getLogger(_LOGGER_PREFIX)
    logger.handlers.clear()
    logger.setLevel(logging.WARNING)
    logger.propagate = True

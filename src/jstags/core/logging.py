"""Structured logging for :mod:`jstags`.

structlog renders every event; stdlib logging routes the result. Two sinks
exist: a Rich console on stderr (stdout carries the tag stream) and an
optional JSON-lines file that rolls over at midnight into gzip archives.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import gzip
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
import shutil
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
import structlog

Logger = structlog.stdlib.BoundLogger

ARCHIVE_DAYS = 7


def normalize_level(level: str) -> int:
    """Map a level name such as ``"debug"`` to its numeric value.

    Raises:
        ValueError: If the level name is not recognized.

    Example:
        >>> normalize_level(" debug ")
        10
    """

    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unsupported log level: {level!r}")
    return value


def _pre_chain() -> list[Any]:
    # Shared by structlog events and plain stdlib records.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


_LIBRARY_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.processors.KeyValueRenderer(key_order=["event"]),
]


def _formatter(renderer: Any) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=_pre_chain(),
    )


def _gzip_namer(name: str) -> str:
    return f"{name}.gz"


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as plain, gzip.open(dest, "wb") as packed:
        shutil.copyfileobj(plain, packed)
    Path(source).unlink(missing_ok=True)


def _console_sink(level: int, console: Console | None) -> logging.Handler:
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        enable_link_path=False,
        log_time_format="%H:%M:%S",
    )
    handler.setLevel(level)
    handler.setFormatter(_formatter(structlog.dev.ConsoleRenderer(colors=False)))
    return handler


def _json_file_sink(log_file: Path, level: int) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        log_file,
        when="midnight",
        utc=True,
        backupCount=ARCHIVE_DAYS,
        encoding="utf-8",
        delay=True,
    )
    handler.suffix = "%Y-%m-%d"
    handler.namer = _gzip_namer
    handler.rotator = _gzip_rotator
    handler.setLevel(level)
    handler.setFormatter(
        _formatter(structlog.processors.JSONRenderer(sort_keys=True))
    )
    return handler


def _install(root: logging.Logger, handlers: list[logging.Handler]) -> None:
    for stale in list(root.handlers):
        root.removeHandler(stale)
        try:
            stale.close()
        except Exception:  # pragma: no cover - closing is best effort
            pass
    for handler in handlers:
        root.addHandler(handler)


def configure_logging(
    *,
    level: str = "WARNING",
    log_file: str | Path | None = None,
    console: Console | None = None,
) -> None:
    """Route structlog and stdlib logging to the configured sinks.

    Args:
        level: Level name applied to the root logger and every sink.
        log_file: Optional JSON-lines log file; missing parents are created.
        console: Rich console override, mostly for tests.

    Raises:
        ValueError: If ``level`` is not a recognized level name.
    """

    numeric = normalize_level(level)

    structlog.reset_defaults()
    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    sinks = [_console_sink(numeric, console)]
    if log_file is not None:
        target = Path(log_file).expanduser().resolve(strict=False)
        sinks.append(_json_file_sink(target, numeric))

    root = logging.getLogger()
    root.setLevel(numeric)
    _install(root, sinks)
    logging.captureWarnings(True)


def get_logger(name: str | None = None, **initial_context: Any) -> Logger:
    """Return a structlog logger with ``initial_context`` bound.

    Before :func:`configure_logging` runs (library use), events go through
    the stdlib logger ``name`` so its levels and handlers apply and nothing
    is printed to stdout.

    Example:
        >>> logger = get_logger(__name__, path="app.js")
        >>> hasattr(logger, "warning")
        True
    """

    if not structlog.is_configured():
        return structlog.wrap_logger(
            logging.getLogger(name),
            processors=_LIBRARY_PROCESSORS,
            wrapper_class=structlog.stdlib.BoundLogger,
        ).bind(**initial_context)
    return structlog.get_logger(name).bind(**initial_context)


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Attach ``values`` to every event logged inside the block."""

    with structlog.contextvars.bound_contextvars(**values):
        yield


__all__ = [
    "ARCHIVE_DAYS",
    "Logger",
    "configure_logging",
    "get_logger",
    "log_context",
    "normalize_level",
]

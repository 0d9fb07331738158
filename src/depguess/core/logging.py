"""Structured logging for scans.

Every output handler (console or JSON, stderr, stdout or a file) renders the
same structlog event stream. Events logged during a scan carry a ``scan_id``
bound through structlog's context variables.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from depguess.config.models import LoggingConfig, LogOutputConfig

# First file destination, reported by the CLI on failure
_log_file_path: Path | None = None


def get_scan_id() -> str | None:
    return structlog.contextvars.get_contextvars().get("scan_id")


def set_scan_id(scan_id: str | None = None) -> str:
    """Bind a scan correlation ID, generating one if none is given."""
    sid = scan_id or uuid4().hex[:12]
    structlog.contextvars.bind_contextvars(scan_id=sid)
    return sid


def clear_scan_id() -> None:
    structlog.contextvars.unbind_contextvars("scan_id")


def get_log_file_path() -> Path | None:
    return _log_file_path


def configure_logging(*, config: LoggingConfig | None = None, level: str = "INFO") -> None:
    """Route structlog through stdlib handlers built from *config*.

    Without a config, logs go to stderr in console format at *level*.
    """
    global _log_file_path
    from depguess.config.models import LoggingConfig

    if config is None:
        config = LoggingConfig(level=level)  # type: ignore[arg-type]
    root_level = logging.getLevelNamesMapping()[config.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]
    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Reconfigured per command, so loggers must not be cached
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    _log_file_path = None
    for output in config.outputs:
        handler = _create_handler(output, shared_processors)
        handler.setLevel(logging.getLevelNamesMapping()[output.level or config.level])
        root_logger.addHandler(handler)
        if isinstance(handler, logging.FileHandler) and _log_file_path is None:
            _log_file_path = Path(output.destination)


def _create_handler(
    output: LogOutputConfig, shared_processors: list[structlog.types.Processor]
) -> logging.Handler:
    handler: logging.Handler
    if output.destination in ("stderr", "stdout"):
        stream = sys.stderr if output.destination == "stderr" else sys.stdout
        handler = logging.StreamHandler(stream)
        colors = stream.isatty()
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a")
        colors = False

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors, pad_event_to=0, pad_level=False)
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=shared_processors
    )
    handler.setFormatter(formatter)
    return handler

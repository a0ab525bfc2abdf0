"""
Structured logging for the ChainRisk engine.

Engine modules log snake_case events through structlog. Every event
carries the emitting ``component`` and, while a crisis simulation or CLI
command is running, the context bound by ``analysis_context``.
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional, TextIO

import structlog
from structlog.types import EventDict, Processor

from chainrisk import __version__
from chainrisk.config import get_settings


def add_severity(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add severity level for structured logging."""
    event_dict["severity"] = method_name.upper()
    return event_dict


def add_engine_version(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp events with the engine version so traces can be compared across releases."""
    event_dict.setdefault("engine_version", __version__)
    return event_dict


def configure_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Configure structured logging for the engine.

    Settings supply the defaults; explicit arguments override them (the
    CLI passes ``--log-level`` and logs to stderr so stdout stays JSON).
    Like ``logging.basicConfig``, the stream is ignored when the root
    logger already has handlers.

    Args:
        log_level: Stdlib level name (default: ``settings.log_level``)
        log_format: ``json`` or ``console`` (default: ``settings.log_format``)
        stream: Log destination (default: stdout)
    """
    settings = get_settings()
    log_level = log_level or settings.log_level
    log_format = log_format or settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    if log_format == "json" and not settings.dev_mode:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            add_severity,
            add_engine_version,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Loggers stay reconfigurable in development and tests
        cache_logger_on_first_use=not settings.dev_mode,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger tagged with its engine component.

    ``chainrisk.engine.paths.path_finder`` logs as ``component="path_finder"``.
    Binding is lazy, so module-level loggers follow later configuration.
    """
    return structlog.get_logger(name, component=name.rsplit(".", 1)[-1])


@contextmanager
def analysis_context(**values: Any) -> Iterator[None]:
    """
    Bind values to every event logged inside the block.

    Example:
        >>> with analysis_context(crisis_label="lithium_shortage"):
        ...     tracer.trace_downstream(index, sources)
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield

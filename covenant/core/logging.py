"""Structured Logging for Covenant

Library modules only obtain loggers (validation_logger(), message_logger()),
which write through stdlib logging. Applications that want covenant's events
rendered call configure_logging(), which installs a structlog-aware handler on
the "covenant" logger only and leaves the root logger alone.

- Colored console output for development, JSON for log shippers
- Context propagation via contextvars (bind_context / unbind_context)
"""
import logging
import sys
from typing import TextIO

import structlog
from structlog.types import EventDict, Processor

LIBRARY_LOGGER = "covenant"
MAX_VALUE_LENGTH = 200  # validated input can be arbitrarily large


def _add_library_info(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("library", LIBRARY_LOGGER)
    event_dict.setdefault("version", "0.1.0")
    return event_dict


def _truncate_values(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_VALUE_LENGTH:
            event_dict[key] = value[:MAX_VALUE_LENGTH] + "..."
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors shared by structlog loggers and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_library_info,
        _truncate_values,
    ]


def configure_logging(level: str = "INFO", json_logs: bool = False, stream: TextIO | None = None) -> None:
    """Route covenant's structlog events through a stdlib handler.

    Args:
        level: threshold for the "covenant" logger (DEBUG shows validation_completed events)
        json_logs: JSON lines instead of colored console output
        stream: destination, stderr by default
    """
    shared = get_shared_processors()
    renderer: Processor = (structlog.processors.JSONRenderer() if json_logs
        else structlog.dev.ConsoleRenderer(colors=stream is None, exception_formatter=structlog.dev.plain_traceback))

    structlog.configure(
        processors=[*shared, structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer]))

    library_logger = logging.getLogger(LIBRARY_LOGGER)
    library_logger.handlers = [handler]
    library_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    library_logger.propagate = False


def configure_from_settings() -> None:
    """configure_logging() from COVENANT_LOG_LEVEL / COVENANT_LOG_JSON."""
    from covenant.core.config import get_settings

    s = get_settings()
    configure_logging(level=s.LOG_LEVEL, json_logs=s.LOG_JSON)


def bind_context(**kwargs) -> None:
    """Attach key-value pairs to every event logged in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


class LoggerRegistry:
    """One logger per library domain, named covenant.<domain>.

    Domain loggers always go through stdlib logging, so an application that
    never calls configure_logging() only sees what its own logging setup
    lets through (nothing below WARNING by default).
    """

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        if name not in cls._loggers:
            cls._loggers[name] = structlog.wrap_logger(
                logging.getLogger(f"{LIBRARY_LOGGER}.{name}"),
                processors=[structlog.stdlib.filter_by_level, *get_shared_processors(),
                    structlog.processors.format_exc_info, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
                wrapper_class=structlog.stdlib.BoundLogger,
            )
        return cls._loggers[name]


def validation_logger() -> structlog.stdlib.BoundLogger:
    """Logger for validation engine events."""
    return LoggerRegistry.get("validation")


def message_logger() -> structlog.stdlib.BoundLogger:
    """Logger for message bundle loading."""
    return LoggerRegistry.get("messages")

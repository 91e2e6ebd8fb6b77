"""Structured Logging for strype

strype never configures logging on import. Applications that want strype's
events rendered call configure_logging() once at startup; otherwise events
flow through structlog's defaults.

Events emitted by the library:
- string_type_defined (debug): a new string type was generated
- pattern_compiled (debug): a lazy pattern cell was built
- pattern_invalid (error): a pattern cell failed to compile
- column_value_invalid (warning): a stored value failed re-validation on read
"""
import logging
import sys

import structlog
from structlog.types import EventDict, Processor


def _add_service_info(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Processor that adds library metadata."""
    event_dict.setdefault("service", "strype")
    event_dict.setdefault("version", "0.1.0")
    return event_dict


def get_shared_processors() -> list[Processor]:
    """Processors used in both console and JSON configurations."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_service_info,
    ]


def configure_logging(level: str = "WARNING", json_logs: bool = False) -> None:
    """Route strype events to stdout through the "strype" stdlib logger.

    Args:
        level: Standard level name; unknown names fall back to WARNING.
        json_logs: One JSON object per event instead of the colored console renderer.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    shared_processors = get_shared_processors()

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    strype_logger = logging.getLogger("strype")
    strype_logger.handlers = [handler]
    strype_logger.setLevel(log_level)
    strype_logger.propagate = False

    # Column adapters run inside SQLAlchemy sessions
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def configure_from_settings() -> None:
    """Configure logging from STRYPE_LOG_LEVEL / STRYPE_LOG_JSON."""
    from strype.config import get_settings

    settings = get_settings()
    configure_logging(level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """structlog logger bound to name, usually a strype.<subsystem> name."""
    return structlog.get_logger(name)


def bind_context(**kwargs) -> None:
    """Bind key-value pairs to the current logging context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Forget every key bound with bind_context()."""
    structlog.contextvars.clear_contextvars()


def unbind_context(*keys: str) -> None:
    """Drop keys previously bound with bind_context()."""
    structlog.contextvars.unbind_contextvars(*keys)


class LoggerRegistry:
    """Registry of loggers for the library's subsystems."""

    _loggers: dict[str, structlog.stdlib.BoundLogger] = {}

    @classmethod
    def get(cls, name: str) -> structlog.stdlib.BoundLogger:
        """Get or create a logger for the given subsystem."""
        if name not in cls._loggers:
            cls._loggers[name] = get_logger(f"strype.{name}")
        return cls._loggers[name]


def definition_logger() -> structlog.stdlib.BoundLogger:
    """Logger for type definition events."""
    return LoggerRegistry.get("definition")


def pattern_logger() -> structlog.stdlib.BoundLogger:
    """Logger for pattern cache events."""
    return LoggerRegistry.get("pattern")


def storage_logger() -> structlog.stdlib.BoundLogger:
    """Logger for column encoding events."""
    return LoggerRegistry.get("storage")

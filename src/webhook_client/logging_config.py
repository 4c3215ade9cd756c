"""Structured logging configuration using structlog."""

import logging
import sys

import structlog

# Libraries that log every request or statement at INFO
_NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "httpx")


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route stdlib logging through structlog.

    Modules keep using ``logging.getLogger(__name__)``; bound context such as
    the trace id and webhook config name is merged into every record.

    Args:
        log_level: Logging level string (debug/info/warning/error).
        json_output: JSON lines when True, colored console output otherwise.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    shared = _shared_processors()

    if json_output:
        final = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        final = [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]

    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
            foreign_pre_chain=shared,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(trace_id: str, config_name: str | None = None) -> None:
    """Bind the trace id (and the webhook config, once routed) to the current async context."""
    ctx = {"trace_id": trace_id}
    if config_name:
        ctx["webhook_config"] = config_name
    structlog.contextvars.bind_contextvars(**ctx)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()

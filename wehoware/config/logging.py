"""structlog setup shared by the API process and the CLI entrypoint."""

import logging
import sys

import structlog

# Chatty third-party loggers kept at WARNING unless debugging
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog with request-scoped context merged into every event.

    ``request_id``, ``user_id`` and ``client_id`` are bound as contextvars by the
    request middleware and the auth gate, so they appear on every line logged
    while a request is being served.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output or not sys.stderr.isatty():
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    if level > logging.DEBUG:
        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

"""structlog setup for the sniper.

Every line goes through the stdlib root logger. Scan-scoped keys such as
scan_id are bound with bind_scan_context() and merged into each event.
"""

import logging
import os

import structlog

# Third-party loggers that are chatty at INFO.
_NOISY_LOGGERS = ("aiohttp.access", "uvicorn.access", "asyncio")

_PRE_CHAIN: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
)


def _select_renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: str = "INFO") -> None:
    """Install the structlog pipeline and a single root handler.

    LOG_FORMAT=json emits one JSON object per line; anything else
    (default "console") uses the coloured dev renderer.
    """
    renderer = _select_renderer(os.environ.get("LOG_FORMAT", "console").lower())

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.getLevelNamesMapping().get(log_level.upper(), logging.INFO))

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module logger; event names are snake_case with key/value context."""
    return structlog.get_logger(name)


def bind_scan_context(**values: object) -> None:
    """Attach key/values to every log line until clear_scan_context()."""
    structlog.contextvars.bind_contextvars(**values)


def clear_scan_context(*keys: str) -> None:
    """Drop scan-scoped keys bound by bind_scan_context()."""
    structlog.contextvars.unbind_contextvars(*keys)

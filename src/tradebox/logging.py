"""Structured logging configuration using structlog.

Event dicts carry raw fixed-point integers. Fields named ``*_usd`` are
rendered as decimal USD strings so a 20-decimal pool value stays readable
in console and JSON output alike.
"""

import logging
import os

import structlog

from tradebox.models import ONE_USD, USD_DECIMALS


def _format_usd(value: int) -> str:
    whole, frac = divmod(abs(value), ONE_USD)
    text = str(whole)
    if frac:
        text += "." + str(frac).zfill(USD_DECIMALS).rstrip("0")
    return f"-{text}" if value < 0 else text


def render_usd_values(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Render integer ``*_usd`` fields as exact decimal strings."""
    for key, value in event_dict.items():
        if key.endswith("_usd") and isinstance(value, int) and not isinstance(value, bool):
            event_dict[key] = _format_usd(value)
    return event_dict


def setup_logging(log_level: str = "INFO", log_format: str | None = None) -> None:
    """Configure structlog over stdlib logging.

    Args:
        log_level: Root logger level name.
        log_format: "json" (machine-readable) or "console" (default). Falls
            back to the LOG_FORMAT environment variable when omitted.
    """
    if log_format is None:
        log_format = os.environ.get("LOG_FORMAT", "console")
    log_format = log_format.lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        render_usd_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def bind_chain(chain_id: str) -> None:
    """Tag every subsequent log event in this context with the network id."""
    structlog.contextvars.bind_contextvars(chain_id=chain_id)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)

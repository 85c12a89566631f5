"""structlog setup shared by the web service and the CLI.

Both entry points write to stderr so the CLI can keep stdout for report JSON.
"""

import logging
import sys

import structlog


def _resolve_level(level: int | str) -> int:
    """Accept ``logging`` ints or names like "debug"; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _renderer(json_output: bool) -> list[structlog.types.Processor]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, json_output: bool = False, level: int | str = logging.INFO) -> None:
    """Configure structlog for report queries and request handling.

    Args:
        json_output: One JSON object per event (deployed service) instead of
            console rendering.
        level: Minimum level, as an int or a level name from settings.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *_renderer(json_output),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Module-level loggers pick up later reconfiguration (CLI --debug)
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger

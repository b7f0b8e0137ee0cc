"""Root logger setup for sllmi entry points.

The library itself only calls ``logging.getLogger(__name__)``; applications
(and the ``sllmi`` CLI) call ``configure_root_logging`` once at startup.
"""

import logging

from sllmi.core.logging.filters.http import HttpRequestLogDowngradeFilter
from sllmi.core.logging.formatters.correlation import CorrelationFormatter

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

NOISY_HTTP_LOGGERS = (
    "httpx",
    "httpcore",
    "httpcore.http11",
    "httpcore.connection",
)


def set_noisy_http_logger_levels(current_log_level: str) -> None:
    """Ensure HTTP client noise only surfaces at DEBUG level."""

    noisy_level = logging.DEBUG if current_log_level == "DEBUG" else logging.WARNING
    for logger_name in NOISY_HTTP_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)


def configure_root_logging(log_level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Args:
        log_level: Level name; anything unrecognised falls back to INFO.
    """
    level = log_level.split()[0].upper() if log_level.strip() else "INFO"
    if level not in VALID_LEVELS:
        level = "INFO"

    handler = logging.StreamHandler()
    handler.addFilter(HttpRequestLogDowngradeFilter(*NOISY_HTTP_LOGGERS))
    handler.setFormatter(
        CorrelationFormatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level))

    set_noisy_http_logger_levels(level)

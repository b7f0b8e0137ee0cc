from sllmi.core.logging.configuration import (
    NOISY_HTTP_LOGGERS,
    configure_root_logging,
    set_noisy_http_logger_levels,
)

__all__ = [
    "NOISY_HTTP_LOGGERS",
    "configure_root_logging",
    "set_noisy_http_logger_levels",
]

"""Logging configuration for the application."""

import logging
import sys

from tenantbridge.core.config import get_settings

# Cluster client internals are chatty at DEBUG (every request/response line).
_NOISY_LOGGERS = ("kubernetes.client.rest", "urllib3.connectionpool")


def setup_logging() -> None:
    """Configure application-wide logging.

    Level is DEBUG when settings.debug is True, otherwise INFO.
    Output goes to stdout. Cluster client transport loggers stay at INFO.
    """
    settings = get_settings()
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.INFO))


# =============================================================================
# axel/logging_config.py - Logging Setup
# =============================================================================
# Configures the standard library logging module once per process.
# Modules log through logging.getLogger(__name__), so every record carries an
# "axel.*" logger name and never writes to a stream directly.
# =============================================================================

import logging
import sys

from axel.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> None:
    """
    Send log records to stdout.

    Level is DEBUG when settings.DEBUG is set, INFO otherwise.
    """
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stdout,
    )

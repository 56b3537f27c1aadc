"""Logging helpers for the mediaxid CLI.

Library modules log through ``logging.getLogger(__name__)`` and never attach
handlers. The CLI calls :func:`setup_logger` once at startup to route records
of the ``mediaxid`` logger tree to stderr; debug records are emitted only when
MEDIAXID_DEBUG=1.
"""

import logging
import os
import sys

DEBUG_ON = os.getenv("MEDIAXID_DEBUG", "0") == "1"

logger = logging.getLogger("mediaxid")


def setup_logger() -> logging.Logger:
    """Attach a stderr handler to the ``mediaxid`` logger (idempotent)."""
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter("[%(levelname)s] %(asctime)s %(name)s: %(message)s")
        )
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if DEBUG_ON else logging.INFO)
    return logger


def debug(msg: str) -> None:
    """Log a debug message if MEDIAXID_DEBUG is enabled."""
    if DEBUG_ON:
        logger.debug(msg)


def error(msg: str) -> None:
    """Log an error message."""
    logger.error(msg)

"""Logging configuration.

Configures the root logger once at startup. Modules log through
``logging.getLogger(__name__)``; the level comes from ``settings.log_level``.
"""

import logging
import sys

from lab_recruitment.core.config import settings


def setup_logging() -> None:
    """Install a single stdout handler with a structured line format."""
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

"""Logging setup for the DocShare API."""

import logging

from docshare.core import config

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for the process.

    Args:
        level: Optional level name overriding ``LOG_LEVEL``.
    """
    resolved = (level or config.LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, resolved, logging.INFO), format=LOG_FORMAT)
    # SQL statements are only echoed when explicitly requested.
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if config.SQL_ECHO else logging.WARNING
    )

"""
Logging configuration for the service.

One stream handler on the root logger, shared by every request. Handlers only
append records, so concurrent requests can log without coordination.
"""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """Install the stream handler once and set the errhandler log level."""
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
    )
    logging.getLogger("errhandler").setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Werkzeug logs every request line at INFO
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

"""Logging for intellihide.

Show/hide decisions, the overlapping window and drag polling are logged at
DEBUG under ``intellihide.intellihide``. Run with INTELLIHIDE_LOG_LEVEL=DEBUG
to trace why the panel moved.
"""

import logging
import os

LOG_LEVEL = os.environ.get("INTELLIHIDE_LOG_LEVEL", "WARNING").upper()

# Widest logger name is intellihide.panel_window
logging.basicConfig(
    format="%(asctime)s.%(msecs)03d %(name)-24s %(levelname)-5s %(message)s",
    datefmt="%H:%M:%S",
    level=getattr(logging, LOG_LEVEL, logging.WARNING),
)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the 'intellihide.' namespace."""
    return logging.getLogger(f"intellihide.{name}")

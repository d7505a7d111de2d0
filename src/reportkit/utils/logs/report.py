"""Logger factory shared by every reportkit module.

Usage mirrors the rest of the code-base::

    from reportkit.utils.logs import report
    logger = report.settings(__file__)

The level comes from ``REPORTKIT_LOG_LEVEL`` (default ``INFO``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_LEVEL_ENV = "REPORTKIT_LOG_LEVEL"

_configured = False


def _configure_root() -> None:
    global _configured
    if _configured:
        return
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    root = logging.getLogger("reportkit")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)
    _configured = True


def settings(file: str) -> logging.Logger:
    """Return the ``reportkit.<module>`` logger for the calling *file*."""
    _configure_root()
    name = Path(file).stem
    if name == "__init__":
        name = Path(file).parent.name
    return logging.getLogger(f"reportkit.{name}")

"""Central logging configuration for the library."""
from __future__ import annotations

import logging
from typing import Optional

_DEFAULT_LEVEL = logging.INFO
_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger with default configuration applied."""
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=_DEFAULT_LEVEL, format=_DEFAULT_FORMAT)
    return logger


def set_level(level: int | str) -> None:
    """Adjust verbosity for every ``docx_resolver`` logger at once."""
    logging.getLogger("docx_resolver").setLevel(level)

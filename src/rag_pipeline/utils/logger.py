"""Logger factory used by every module.

Usage:
    ```python
    from rag_pipeline.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Something happened")
    ```
"""

import logging
import sys

from rag_pipeline.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """Create and return a named logger with the standard formatter.

    Args:
        name: Typically ``__name__`` of the calling module.
        level: Explicit level override. If None, uses settings.log_level.

    Returns:
        A configured ``logging.Logger`` instance.
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers when the module is imported again
    if not logger.handlers:
        logger.setLevel(level if level is not None else settings.log_level.upper())

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger

# log_setup.py
# Console logging through rich

from __future__ import annotations

import logging

from rich.logging import RichHandler


def setup_logger(name: str = "", level: str = "info") -> logging.Logger:
    """Configure `name` (the root logger by default) to log through a RichHandler."""
    logger = logging.getLogger(name)
    logger.handlers.clear()

    lvl = getattr(logging, str(level).upper(), logging.INFO)
    logger.setLevel(lvl)

    handler = RichHandler(
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger

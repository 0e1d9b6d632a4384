"""Logging setup shared by every entry-point.

Records go to stderr through Rich so that stdout only carries command output
(raw HTTP responses, lines read from a pipe).
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: int | str = logging.WARNING) -> logging.Logger:
    """Configure the root logger once and return the `fcctl` logger."""

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler],
        force=True,
    )

    # httpx/httpcore log every request at INFO/DEBUG; keep them quiet unless asked.
    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(noisy_level)

    logger = logging.getLogger("fcctl")
    logger.debug("logging initialized (level=%s)", logging.getLevelName(level))
    return logger

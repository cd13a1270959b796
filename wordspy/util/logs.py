from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    logger.remove()  # drop the default handler
    logger.add(
        sys.stderr,
        format="{time} | {level} | {message}",
        level=level.upper(),
        colorize=True,
    )

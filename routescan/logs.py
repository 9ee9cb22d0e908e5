from __future__ import annotations

import sys

from loguru import logger


LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def configure_logging(level: str = "INFO", verbose: bool = False) -> None:
	logger.remove()
	logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG" if verbose else level.upper())

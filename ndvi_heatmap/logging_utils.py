"""Logging utilities for the heatmap engine"""
from loguru import logger
import sys


def setup_logging(verbose: bool = False, level: str = None):
    """
    Setup logging configuration

    Args:
        verbose: If True, set to DEBUG level, otherwise INFO
        level: Explicit level name; wins over ``verbose`` when given
    """
    logger.remove()

    if level is None:
        level = "DEBUG" if verbose else "INFO"

    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | <level>{message}</level>"
    )

    return logger

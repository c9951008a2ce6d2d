"""
Logging setup: one stdout handler per named logger
"""
import logging
import sys
from chanakya.config import get_settings

settings = get_settings()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _level() -> int:
    if settings.DEBUG:
        return logging.DEBUG
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    # getLevelName hands back a string for unknown names
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Configured logger for entry points (app, scripts). Library modules use
    logging.getLogger(__name__) and inherit from the "chanakya" logger.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(_level())
    return logger

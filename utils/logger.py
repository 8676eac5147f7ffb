import logging
import sys

from config.settings import LOG_FORMAT, LOG_LEVEL


def _resolve_level() -> int:
    """Explicit LOG_LEVEL wins, otherwise follow uvicorn's level."""
    if LOG_LEVEL:
        level = logging.getLevelName(LOG_LEVEL.upper())
        if isinstance(level, int):
            return level
    return logging.getLogger("uvicorn").level or logging.INFO


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # Uvicorn already installs its own handlers; only add ours once per logger
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(_resolve_level())
    logger.propagate = False

    return logger

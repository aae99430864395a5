import logging
from typing import Optional

from .config import LOGGER_LEVEL

# Convert the string to a logging level
env_log_level = getattr(logging, LOGGER_LEVEL, logging.WARNING)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s (file: %(filename)s, line: %(lineno)d)'


# Generic logger creation function to be used by the package
def create_logger(name: str, level: Optional[int] = None, propagate: bool = False) -> logging.Logger:
    _level = level if level is not None else env_log_level
    logger = logging.getLogger(name)
    logger.setLevel(_level)
    # Repeated calls must not stack handlers
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = propagate
    return logger

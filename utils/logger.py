import logging
import os
import sys

# Thread name shows which lines come from background workers
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(threadName)s] %(message)s"


def _resolve_level() -> int | str:
    level = os.getenv("LOG_LEVEL")
    if level:
        return level.upper()
    return logging.getLogger("uvicorn").level or logging.INFO


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # One stdout handler per logger, however often it is requested
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(_resolve_level())

    # Uvicorn's root handler would print every line a second time
    logger.propagate = False

    return logger

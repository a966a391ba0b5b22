import logging
import os
from logging.handlers import RotatingFileHandler

from config import LOG_DIR

LOGGER_NAME = "itinerary.api"


def setup_api_logger(log_path: str | None = None) -> logging.Logger:
    """Setup and return the application-wide API logger.

    Creates a rotating file handler at `log_path` (defaults to LOG_DIR/api.log).
    Module loggers created with ``get_logger(__name__)`` propagate here.
    """
    if log_path is None:
        os.makedirs(LOG_DIR, exist_ok=True)
        log_path = os.path.join(LOG_DIR, "api.log")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)

    # avoid adding multiple handlers if called multiple times
    if not logger.handlers:
        handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8")
        formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the API logger, e.g. ``itinerary.api.routes.share``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")

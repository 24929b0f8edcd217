"""Centralized logging configuration."""

import logging
import sys

from medischedule.config import settings


# Chatty libraries under the advisory model and the store driver
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "pymongo")


def setup_logging() -> logging.Logger:
    """Configure and return the application logger."""

    # Level names are accepted in any case, unknown names fall back to INFO
    level = settings.LOG_LEVEL.upper()
    numeric_level = getattr(logging, level, logging.INFO)

    # One logger for the whole service, modules import it from here
    logger = logging.getLogger("medischedule")
    logger.setLevel(numeric_level)

    # Uvicorn reload imports the app twice
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)

        # Timestamp, source, severity
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        console_handler.setFormatter(formatter)

        logger.addHandler(console_handler)

    # Request-level noise stays hidden unless debugging
    if numeric_level > logging.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug(f"Logging configured with level: {level}")

    return logger


# Create the global logger instance
logger = setup_logging()

"""
Logging setup for the CareerBoard API, driven by the LOG_LEVEL, LOG_FILE and
DATABASE_ECHO settings.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Request lines and multipart parser chatter drown out tracker events at INFO.
QUIET_LOGGERS = ("uvicorn.access", "passlib", "multipart")


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, sql_echo: bool = False) -> None:
    """
    Replace the root handlers with a stdout handler and, when given, a file handler.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path that receives the same records as stdout
        sql_echo: Emit SQLAlchemy statements at INFO instead of silencing them
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_echo else logging.WARNING)


def configure_logging(settings) -> logging.Logger:
    """Apply the logging section of ``Settings`` and return the application logger."""
    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        sql_echo=settings.database_echo,
    )
    logger = get_logger("careerboard")
    logger.debug("Logging configured at %s for %s", settings.log_level, settings.environment)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

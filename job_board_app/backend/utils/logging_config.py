"""
Logging setup for the Job Board Tracker API.

Everything goes through the root logger; the libraries this service talks
through (the HTTP server, SQLAlchemy, requests, the form parser and the
password hasher) are capped at WARNING so request handling stays readable.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

QUIET_LOGGERS = (
    "uvicorn.access",
    "urllib3.connectionpool",
    "multipart",
    "passlib",
    "httpx",
)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, sql_echo: bool = False) -> None:
    """
    Configure the root logger.

    Args:
        level: Logging level name; unknown names fall back to INFO
        log_file: Optional file that receives the same records as stdout
        sql_echo: Keep SQLAlchemy statement logging at INFO
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    # Reconfiguring replaces handlers instead of stacking them
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if sql_echo else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)

import logging
import os
import sys
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
ROOT_LOGGER_NAME = "book_saver"

# HTTP client libraries that log every outbound request at INFO
CLIENT_LOGGERS = ("httpx", "urllib3")


def resolve_level(raw_level: Optional[str]) -> int:
    level = logging.getLevelName((raw_level or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    """Stdout always; a file as well unless ``log_file`` is empty or '-'."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file and log_file != "-":
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(log_file: Optional[str] = None) -> logging.Logger:
    """Configure the service logger once; later calls only re-read LOG_LEVEL."""
    level = resolve_level(os.getenv("LOG_LEVEL"))
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    client_level = level if level <= logging.DEBUG else logging.WARNING
    for name in CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)

    if logger.handlers:
        return logger

    if log_file is None:
        log_file = os.getenv("LOG_FILE", "book_saver.log")
    for handler in build_handlers(log_file):
        logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a child logger from the shared configuration."""
    parent = logging.getLogger(ROOT_LOGGER_NAME)
    if not parent.handlers:
        setup_logging()
    return parent.getChild(name) if name else parent

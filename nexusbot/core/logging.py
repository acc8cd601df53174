import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed by setup_logging so a second call replaces them
_HANDLER_TAG = "_nexusbot_handler"


def setup_logging(config):
    """Setup logging configuration"""
    # Create logs directory
    log_path = Path(config.logging.file_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, config.logging.level, logging.INFO))

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    setattr(console_handler, _HANDLER_TAG, True)
    logger.addHandler(console_handler)

    # File handler
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=config.logging.max_file_size,
        backupCount=config.logging.backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    setattr(file_handler, _HANDLER_TAG, True)
    logger.addHandler(file_handler)

    # Reduce discord.py logging noise
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("discord.http").setLevel(logging.WARNING)

    return logger


def get_logger(name: str):
    """Get a logger with the specified name"""
    return logging.getLogger(f"nexusbot.{name}")

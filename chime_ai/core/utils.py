"""Shared utility functions for the chime-ai project."""

import logging
from datetime import UTC, datetime
from pathlib import Path

import colorlog

ROOT_LOGGER_NAME = "chime-ai"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a project logger; records flow up to the colorized ``chime-ai`` logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            f"%(log_color)s{LOG_FORMAT}",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logging.getLogger(name)


def setup_logging(log_dir: str | Path, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """Configure the project logger to write to the console and to a plain-text log file."""
    ensure_dir(log_dir)
    logger = get_logger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    # Add file handler for persistent logs (not colorized)
    if not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        file_handler = logging.FileHandler(Path(log_dir) / log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)
    return logger


def get_color(color: str) -> str:
    """Return the terminal escape code for a colorlog color name, or an empty string."""
    from colorlog.escape_codes import escape_codes

    return escape_codes.get(color, "")


def ensure_dir(path: str | Path) -> None:
    """Ensure a directory exists (like mkdir -p)."""
    Path(path).mkdir(parents=True, exist_ok=True)


def utcnow_iso() -> str:
    """Get the current UTC time as an ISO8601 string."""
    return datetime.now(UTC).isoformat()

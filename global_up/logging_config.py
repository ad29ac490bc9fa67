"""
Centralized logging configuration for global-up.

Console output goes to stderr so that it never interleaves with the
progress lines and prompts written to stdout.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


LOGGER_NAME = "global_up"

# Global logger instance
_logger: Optional[logging.Logger] = None


def setup_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    verbose: bool = False,
    propagate: bool = False,
) -> logging.Logger:
    """
    Configure the global_up logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file path for a full debug log
        verbose: Enable verbose (DEBUG) console output
        propagate: Allow log propagation (useful for testing)

    Returns:
        Configured logger instance
    """
    global _logger

    if verbose:
        effective_level = logging.DEBUG
    else:
        effective_level = getattr(logging, level.upper())

    logger = logging.getLogger(LOGGER_NAME)
    # The file handler always wants everything; handlers filter for themselves
    logger.setLevel(logging.DEBUG if log_file else effective_level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(effective_level)
    console_handler.setFormatter(ColoredFormatter(
        "%(levelname_colored)s %(message)s",
        use_colors=sys.stderr.isatty(),
    ))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    logger.propagate = propagate

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """
    Get the configured logger, initializing defaults on first use.
    """
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


class ColoredFormatter(logging.Formatter):
    """
    Formatter that prefixes records with a colored level marker.
    """

    COLORS = {
        "DEBUG": "\033[2m",       # Dim
        "INFO": "\033[36m",       # Cyan
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[1;31m", # Bold Red
    }
    RESET = "\033[0m"

    SYMBOLS = {
        "DEBUG": "·",
        "INFO": "i",
        "WARNING": "!",
        "ERROR": "✗",
        "CRITICAL": "✗",
    }

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        symbol = self.SYMBOLS.get(levelname, "")
        if self.use_colors:
            color = self.COLORS.get(levelname, "")
            record.levelname_colored = f"{color}{symbol} {levelname.lower()}{self.RESET}"
        else:
            record.levelname_colored = f"{symbol} {levelname.lower()}"
        return super().format(record)

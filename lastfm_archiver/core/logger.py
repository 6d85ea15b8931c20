"""
Logging configuration for lastfm-archiver.

All output goes through the root logger:
    - Console: level name colored, printed with tqdm.write() so a live
      progress bar is redrawn below the message instead of being torn
    - log_full_{timestamp}.log: every record, DEBUG and above
    - log_errors_{timestamp}.log: ERROR and CRITICAL only

The two files are only written when a log directory is configured
(logging.directory in config.yaml or --log-dir on the command line).

Usage:
    from lastfm_archiver.core.logger import setup_logging, get_logger

    setup_logging(log_dir, "INFO")   # once, from the CLI
    logger = get_logger(__name__)    # at module level everywhere else

    logger.info("Fetching page 1")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOG_FULL_FILENAME = "log_full"
LOG_ERRORS_FILENAME = "log_errors"

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that log every connection at DEBUG
NOISY_LOGGERS = ("urllib3",)


class Colors:
    """ANSI escape sequences used on the console."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Console formatter: "LEVEL: message", with the level name colored.

    With show_names=True (used for --verbose) the logger name is added in
    dim text, so debug lines from the client, the pager and the archive
    loop can be told apart.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def __init__(self, show_names: bool = False) -> None:
        super().__init__()
        self.show_names = show_names

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        prefix = f"{color}{record.levelname}{Colors.RESET}"
        if self.show_names:
            prefix += f" {Colors.DIM}{record.name}{Colors.RESET}"
        text = f"{prefix}: {record.getMessage()}"
        if record.exc_info and self.show_names:
            text += "\n" + self.formatException(record.exc_info)
        return text


class TqdmLoggingHandler(logging.Handler):
    """
    Console handler that cooperates with progress bars.

    The stream is looked up on every emit when none was given, so
    redirections of sys.stderr made after setup are honored.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class ErrorOnlyFilter(logging.Filter):
    """Let through ERROR and CRITICAL records only (errors log file)."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def _file_handler(path: Path, *filters: logging.Filter) -> logging.FileHandler:
    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    for log_filter in filters:
        handler.addFilter(log_filter)
    return handler


def setup_logging(log_dir: Path | None = None, console_level: str = "INFO") -> None:
    """
    Install the console handler and, optionally, the two log files.

    Call once per run, after the configuration is loaded. Calling it again
    replaces every handler on the root logger.

    Args:
        log_dir: Directory for the log files, created if missing.
                 None means console output only.
        console_level: Level name for the console ("DEBUG", "INFO", ...).
                       At DEBUG the console also shows logger names.
    """
    level = getattr(logging, console_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredConsoleFormatter(show_names=level <= logging.DEBUG))
    root_logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        root_logger.addHandler(
            _file_handler(log_dir / f"{LOG_FULL_FILENAME}_{timestamp}.log")
        )
        root_logger.addHandler(
            _file_handler(log_dir / f"{LOG_ERRORS_FILENAME}_{timestamp}.log", ErrorOnlyFilter())
        )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Module logger; records propagate to the handlers set up above."""
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush, close and detach every root handler. Safe to call repeatedly."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

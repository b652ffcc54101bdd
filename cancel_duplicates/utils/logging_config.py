import logging
import sys
import os
from datetime import datetime
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colours each console line by level."""

    RESET = "\x1b[0m"
    COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[31;1m",
    }

    def __init__(self):
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record):
        line = super().format(record)
        color = self.COLORS.get(record.levelno)
        return f"{color}{line}{self.RESET}" if color else line


class WorkflowCommandFormatter(logging.Formatter):
    """
    Emits GitHub Actions workflow commands so warnings and errors show up as
    job annotations. Lower levels are printed as plain lines.
    """

    COMMANDS = {
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def __init__(self):
        super().__init__("%(message)s")

    def format(self, record):
        message = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return message
        # Annotations are single-line; GitHub decodes these escapes
        escaped = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{escaped}"


def setup_logging(level=logging.INFO, log_dir: Optional[str] = None):
    """Setup centralized logging configuration."""
    root_logger = logging.getLogger()

    # Clear existing handlers to prevent duplicate logs
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.setLevel(level)

    # Console: annotations inside Actions, colours on a terminal, plain otherwise
    console_handler = logging.StreamHandler(sys.stderr)
    if os.environ.get("GITHUB_ACTIONS") == "true":
        console_handler.setFormatter(WorkflowCommandFormatter())
    elif sys.stderr.isatty() and os.environ.get("NO_COLOR") is None:
        console_handler.setFormatter(ColoredFormatter())
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"cancel_duplicates_{datetime.now().strftime('%Y%m%d')}.log")
        )
        file_handler.setFormatter(
            logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        )
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO, including the full URL
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    logging.getLogger("cancel_duplicates").setLevel(level)

    root_logger.debug("Logging initialized.")

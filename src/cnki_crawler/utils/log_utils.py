"""Logging utilities for the CNKI crawler."""

import sys
from typing import Optional
from loguru import logger

from cnki_crawler.agent.configuration import LOG_FILE

_configured = False

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(verbose: bool = False, log_file: Optional[str] = LOG_FILE) -> None:
    """(Re)install the stderr and file handlers.

    Args:
        verbose: Emit DEBUG records on stderr instead of INFO
        log_file: Path of the rotating log file, or None to disable it
    """
    global _configured

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        format=_CONSOLE_FORMAT,
        level="DEBUG" if verbose else "INFO",
        colorize=True,
    )

    # Add file handler for persistent logging
    if log_file:
        logger.add(
            log_file,
            rotation="10 MB",
            retention="7 days",
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
        )

    _configured = True


def get_logger(name: Optional[str] = None):
    """Get a configured logger instance.

    Args:
        name: Optional module name for the logger

    Returns:
        Configured loguru logger
    """
    if not _configured:
        configure_logging()

    if name:
        return logger.bind(name=name)
    return logger


class BatchProgress:
    """Progress reporter for a batch of records."""

    def __init__(self, total: int, label: str = "cnki"):
        self.total = total
        self.label = label
        self.succeeded = 0
        self.failed = 0
        self.logger = get_logger("BatchProgress")

    def log_record_start(self, index: int, title: str):
        """Log the start of a record.

        Args:
            index: Zero-based position of the record in the batch
            title: Title used for the lookup
        """
        self.logger.info(f"[{index + 1}/{self.total}] Processing {title} using {self.label}")

    def log_record_end(self, index: int, title: str, success: bool, details: dict = None):
        """Log the end of a record.

        Args:
            index: Zero-based position of the record in the batch
            title: Title used for the lookup
            success: Whether the record was enriched
            details: Optional enrichment fields to echo
        """
        if success:
            self.succeeded += 1
            self.logger.info(f"[{index + 1}/{self.total}] Processed {title}, result: {details or {}}")
        else:
            self.failed += 1
            self.logger.warning(f"[{index + 1}/{self.total}] Left {title} unchanged")

    def log_error(self, index: int, error: str, recoverable: bool = True):
        """Log an error.

        Args:
            index: Zero-based position of the record in the batch
            error: Error message
            recoverable: Whether the batch continues after this error
        """
        level = "warning" if recoverable else "error"
        getattr(self.logger, level)(
            f"[{index + 1}/{self.total}] Error: {error} (recoverable: {recoverable})"
        )

    def summary(self) -> str:
        """One-line summary of the batch so far."""
        return f"{self.succeeded} enriched, {self.failed} unchanged, {self.total} total"

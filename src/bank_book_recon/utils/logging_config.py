"""
Logging setup for reconciliation runs.

Everything logs under the ``bank_book_recon`` namespace; this module only
decides where those records go. Runs always write to the console, and may
also keep a rotating file that captures DEBUG detail (per-pass match
counts, skipped CSV rows) regardless of the console level.
"""

from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from ..config import LoggingConfig

PACKAGE_LOGGER = "bank_book_recon"
FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
)


def setup_logging(
    settings: "LoggingConfig",
    verbose: bool = False,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Route the package's log records according to the logging settings.

    Args:
        settings: Logging section of the configuration
        verbose: Force DEBUG on the console, as ``--verbose`` does
        log_file: Rotating log file; overrides ``settings.file``

    Returns:
        The package logger
    """
    console_level = logging.DEBUG if verbose else logging.getLevelName(settings.level)
    log_file = log_file or (Path(settings.file) if settings.file else None)

    logger = logging.getLogger(PACKAGE_LOGGER)
    # Reconfiguring replaces handlers instead of stacking them
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(settings.format))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=settings.max_bytes,
            backupCount=settings.backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    return logger

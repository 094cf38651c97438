"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    ConfigurationError,
    LoaderError,
    ReportGenerationError,
    DisputeResolutionError,
)
from .logging_config import setup_logging

__all__ = [
    "ReconciliationError",
    "ConfigurationError",
    "LoaderError",
    "ReportGenerationError",
    "DisputeResolutionError",
    "setup_logging",
]

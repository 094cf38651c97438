"""Custom exceptions for the reconciliation engine."""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class LoaderError(ReconciliationError):
    """Error loading transactions from an input file."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error generating Excel report."""

    pass


class DisputeResolutionError(ReconciliationError):
    """Error recording the outcome of a dispute."""

    pass

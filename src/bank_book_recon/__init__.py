"""Bank/book transaction reconciliation and risk-detection engine."""

from .config import ReconConfig, load_config
from .reconciliation import BankReconciliation

__version__ = "0.1.0"

__all__ = ["BankReconciliation", "ReconConfig", "load_config", "__version__"]

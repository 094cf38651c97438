"""Report writers for reconciliation results."""

from .excel_generator import ExcelReportGenerator

__all__ = ["ExcelReportGenerator"]

"""
Validation Module

Pre-analysis data quality checks.
"""

from risk_binning.validation.data_checks import (
    DataValidator,
    ValidationReport,
    CheckResult,
    Severity,
    Status,
)

__all__ = [
    "DataValidator",
    "ValidationReport",
    "CheckResult",
    "Severity",
    "Status",
]

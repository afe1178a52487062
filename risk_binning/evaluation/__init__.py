"""
Evaluation Module

Discrimination metrics and binning quality checks.
"""

from risk_binning.evaluation.metrics import (
    CreditScoringMetrics,
    evaluate_predictions,
    check_monotonic_default_rates,
    performance_frame,
    PERFORMANCE_COLUMNS,
)

__all__ = [
    "CreditScoringMetrics",
    "evaluate_predictions",
    "check_monotonic_default_rates",
    "performance_frame",
    "PERFORMANCE_COLUMNS",
]

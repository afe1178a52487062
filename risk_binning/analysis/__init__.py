"""
Analysis Module

Descriptive statistics and association testing for binned scores.
"""

from risk_binning.analysis.descriptive import (
    describe_score,
    summarize_by_category,
    contingency_table,
)
from risk_binning.analysis.association import ChiSquareResult, chi_square_test

__all__ = [
    "describe_score",
    "summarize_by_category",
    "contingency_table",
    "ChiSquareResult",
    "chi_square_test",
]

"""
Binning Module

Rule-based mapping of the continuous risk score onto ordinal categories.
"""

from risk_binning.binning.binner import (
    RiskBinner,
    assign_risk_category,
    RISK_CATEGORIES,
    MISSING_LABEL,
)

__all__ = [
    "RiskBinner",
    "assign_risk_category",
    "RISK_CATEGORIES",
    "MISSING_LABEL",
]

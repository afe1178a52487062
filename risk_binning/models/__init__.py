"""
Models Module

Logistic regression on the risk categories.
"""

from risk_binning.models.logistic import CategoryLogitResult, fit_category_logit

__all__ = [
    "CategoryLogitResult",
    "fit_category_logit",
]

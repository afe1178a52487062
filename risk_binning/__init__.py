"""
Risk Score Binning

Rule-based binning of a continuous credit-risk score into ordinal risk
categories, validated with descriptive statistics, a chi-square association
test and a logistic regression.
"""

__version__ = "1.0.0"
__author__ = "Credit Scoring Team"

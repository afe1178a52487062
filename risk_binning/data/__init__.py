"""
Data Module

Input loading and holdout splitting.
"""

from risk_binning.data.loader import LoadedData, load_dataset, split_holdout

__all__ = [
    "LoadedData",
    "load_dataset",
    "split_holdout",
]

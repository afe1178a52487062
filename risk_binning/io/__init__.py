"""
IO Module

Run directory management and artifact persistence.
"""

from risk_binning.io.output_manager import OutputManager, STEP_DIRS

__all__ = [
    "OutputManager",
    "STEP_DIRS",
]

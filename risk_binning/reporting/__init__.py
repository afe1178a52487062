"""
Reporting Module

Charts, console tables and the Excel workbook.
"""

from risk_binning.reporting.console import format_console_report
from risk_binning.reporting.excel_reporter import generate_report, SHEET_NAMES
from risk_binning.reporting.plots import (
    plot_score_distribution,
    plot_default_rate_by_category,
    plot_category_counts,
    save_all_charts,
)

__all__ = [
    "format_console_report",
    "generate_report",
    "SHEET_NAMES",
    "plot_score_distribution",
    "plot_default_rate_by_category",
    "plot_category_counts",
    "save_all_charts",
]

"""
Excel Reporter

Generates a single Excel workbook with the binning analysis tables and charts.
"""

from typing import Any, Dict, Optional
from pathlib import Path
import logging

import numpy as np
import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.drawing.image import Image as OpenpyxlImage
from openpyxl.worksheet.worksheet import Worksheet


logger = logging.getLogger(__name__)


SHEET_NAMES = {
    "summary": "00_Summary",
    "data_checks": "01_Data_Checks",
    "score_stats": "02_Score_Stats",
    "category_summary": "03_Category_Summary",
    "chi_square": "04_Chi_Square",
    "logit": "05_Logit_Coefficients",
    "predicted_pd": "06_Predicted_PD",
    "performance": "07_Performance",
    "charts": "08_Charts",
}

# Styles
HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
HEADER_FILL = PatternFill(start_color="2F5496", end_color="2F5496", fill_type="solid")
PASS_FILL = PatternFill(start_color="E2EFDA", end_color="E2EFDA", fill_type="solid")
FAIL_FILL = PatternFill(start_color="FCE4EC", end_color="FCE4EC", fill_type="solid")
WARNING_FILL = PatternFill(start_color="FFF9C4", end_color="FFF9C4", fill_type="solid")
SIGNIFICANT_FILL = PASS_FILL
THIN_BORDER = Border(
    left=Side(style='thin'), right=Side(style='thin'),
    top=Side(style='thin'), bottom=Side(style='thin'),
)
STATUS_FILLS = {"PASS": PASS_FILL, "FAIL": FAIL_FILL, "WARNING": WARNING_FILL}


def generate_report(
    output_path: str,
    summary: Dict[str, Any],
    category_summary_df: pd.DataFrame,
    score_stats_df: Optional[pd.DataFrame] = None,
    data_checks_df: Optional[pd.DataFrame] = None,
    chi_square_df: Optional[pd.DataFrame] = None,
    contingency_df: Optional[pd.DataFrame] = None,
    logit_df: Optional[pd.DataFrame] = None,
    predicted_pd_df: Optional[pd.DataFrame] = None,
    performance_df: Optional[pd.DataFrame] = None,
    chart_paths: Optional[Dict[str, str]] = None,
    alpha: float = 0.05,
) -> str:
    """
    Generate the analysis workbook.

    Args:
        output_path: Path for the output Excel file.
        summary: Key/value pairs for the summary sheet.
        category_summary_df: Default rate by category.
        score_stats_df: Score distribution statistics.
        data_checks_df: ValidationReport.to_dataframe() output.
        chi_square_df: Chi-square key/value table.
        contingency_df: Observed category x outcome counts.
        logit_df: Logit coefficient table.
        predicted_pd_df: Predicted default probability per category.
        performance_df: AUC/Gini/KS per period.
        chart_paths: name -> PNG path, embedded on the charts sheet.
        alpha: Significance level used to highlight p-values.

    Returns:
        Path to the generated Excel file.
    """
    wb = Workbook()

    _write_key_value_sheet(wb, SHEET_NAMES["summary"], summary,
                           title="Risk Score Binning Analysis Report")

    if data_checks_df is not None:
        ws = _write_df_sheet(wb, SHEET_NAMES["data_checks"], data_checks_df)
        _color_rows(ws, data_checks_df, "Status", STATUS_FILLS)

    if score_stats_df is not None:
        _write_df_sheet(wb, SHEET_NAMES["score_stats"], score_stats_df)

    _write_df_sheet(wb, SHEET_NAMES["category_summary"], category_summary_df)

    if chi_square_df is not None:
        ws = _write_df_sheet(wb, SHEET_NAMES["chi_square"], chi_square_df)
        if contingency_df is not None and len(contingency_df) > 0:
            _write_rows(ws, contingency_df.reset_index(), start_row=len(chi_square_df) + 4)

    if logit_df is not None:
        ws = _write_df_sheet(wb, SHEET_NAMES["logit"], logit_df)
        if "P_Value" in logit_df.columns:
            significant = (logit_df["P_Value"] < alpha).map({True: "sig", False: ""})
            _color_rows(ws, logit_df.assign(_sig=significant), "_sig", {"sig": SIGNIFICANT_FILL})

    if predicted_pd_df is not None:
        _write_df_sheet(wb, SHEET_NAMES["predicted_pd"], predicted_pd_df)

    if performance_df is not None:
        _write_df_sheet(wb, SHEET_NAMES["performance"], performance_df)

    if chart_paths:
        _write_charts_sheet(wb, SHEET_NAMES["charts"], chart_paths)

    if "Sheet" in wb.sheetnames:
        del wb["Sheet"]

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
    logger.info(f"EXCEL | Workbook saved: {output_path}")
    return output_path


def _cell_value(value: Any) -> Any:
    if isinstance(value, (list, tuple, dict)):
        return str(value)
    if pd.isna(value):
        return None
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        if np.isinf(value):
            return str(value)
        return float(value)
    if isinstance(value, float) and np.isinf(value):
        return str(value)
    if isinstance(value, (int, float, str)):
        return value
    return str(value)


def _write_rows(ws: Worksheet, df: pd.DataFrame, start_row: int = 1) -> None:
    """Write header + rows of ``df`` starting at ``start_row``."""
    for col_idx, col_name in enumerate(df.columns, 1):
        cell = ws.cell(row=start_row, column=col_idx, value=str(col_name))
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal='center')
        cell.border = THIN_BORDER

    for row_offset, row_data in enumerate(df.itertuples(index=False), 1):
        for col_idx, value in enumerate(row_data, 1):
            cell = ws.cell(row=start_row + row_offset, column=col_idx, value=_cell_value(value))
            cell.border = THIN_BORDER


def _write_df_sheet(wb: Workbook, sheet_name: str, df: pd.DataFrame) -> Worksheet:
    """Write a DataFrame to a styled sheet."""
    ws = wb.create_sheet(sheet_name)
    if df is None or len(df) == 0:
        ws['A1'] = "No data"
        return ws

    _write_rows(ws, df)

    # Auto-fit column widths from the first 100 rows
    for col_idx, col_name in enumerate(df.columns, 1):
        max_len = len(str(col_name))
        for r in range(2, min(len(df) + 2, 102)):
            val = ws.cell(row=r, column=col_idx).value
            if val is not None:
                max_len = max(max_len, len(str(val)))
        ws.column_dimensions[
            ws.cell(row=1, column=col_idx).column_letter
        ].width = min(max_len + 3, 50)

    ws.freeze_panes = 'A2'
    return ws


def _color_rows(
    ws: Worksheet,
    df: pd.DataFrame,
    key_column: str,
    fills: Dict[str, PatternFill],
) -> None:
    """Fill each data row according to the value in ``key_column``."""
    n_cols = len([c for c in df.columns if not str(c).startswith("_")])
    for row_idx, key in enumerate(df[key_column], 2):
        fill = fills.get(key)
        if fill is None:
            continue
        for col_idx in range(1, n_cols + 1):
            ws.cell(row=row_idx, column=col_idx).fill = fill


def _write_key_value_sheet(
    wb: Workbook,
    sheet_name: str,
    values: Dict[str, Any],
    title: Optional[str] = None,
) -> None:
    ws = wb.create_sheet(sheet_name)
    ws.column_dimensions['A'].width = 35
    ws.column_dimensions['B'].width = 50

    row = 1
    if title:
        ws['A1'] = title
        ws['A1'].font = Font(bold=True, size=14, color="2F5496")
        ws.merge_cells('A1:B1')
        row = 3

    for key, value in values.items():
        cell_a = ws.cell(row=row, column=1, value=str(key))
        cell_b = ws.cell(row=row, column=2, value=_cell_value(value))
        cell_a.font = Font(bold=True)
        cell_a.border = THIN_BORDER
        cell_b.border = THIN_BORDER
        row += 1


def _write_charts_sheet(wb: Workbook, sheet_name: str, chart_paths: Dict[str, str]) -> None:
    """Embed chart PNGs one below the other."""
    ws = wb.create_sheet(sheet_name)
    anchor_row = 1
    for name, path in chart_paths.items():
        if not path or not Path(path).exists():
            continue
        ws.cell(row=anchor_row, column=1, value=name).font = Font(bold=True)
        try:
            img = OpenpyxlImage(path)
            img.width = 720
            img.height = 432
            ws.add_image(img, f'A{anchor_row + 1}')
            logger.info(f"EXCEL | Embedded chart '{name}'")
        except Exception as e:
            logger.warning(f"EXCEL | Could not embed chart '{name}': {e}")
        anchor_row += 25

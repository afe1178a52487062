"""
Tests for the Excel Reporter

Builds workbooks from small frames and checks sheet layout with openpyxl.
"""

import pandas as pd
import pytest
from openpyxl import load_workbook

from risk_binning.analysis import chi_square_test, summarize_by_category
from risk_binning.reporting import SHEET_NAMES, generate_report, save_all_charts


@pytest.fixture
def category_summary(binned_data):
    return summarize_by_category(binned_data, "risk_category", "default_flag")


@pytest.fixture
def chi2(binned_data):
    return chi_square_test(binned_data, "risk_category", "default_flag")


class TestGenerateReport:

    def test_minimal_workbook(self, tmp_path, category_summary):
        path = generate_report(
            str(tmp_path / "report.xlsx"),
            summary={"Rows": 2000},
            category_summary_df=category_summary,
        )
        wb = load_workbook(path)
        assert wb.sheetnames == [SHEET_NAMES["summary"], SHEET_NAMES["category_summary"]]

    def test_summary_sheet(self, tmp_path, category_summary):
        path = generate_report(
            str(tmp_path / "report.xlsx"),
            summary={"Run ID": "abc", "Rows": 2000},
            category_summary_df=category_summary,
        )
        ws = load_workbook(path)[SHEET_NAMES["summary"]]
        assert ws["A1"].value == "Risk Score Binning Analysis Report"
        assert ws["A3"].value == "Run ID"
        assert ws["B3"].value == "abc"
        assert ws["B4"].value == 2000

    def test_all_sheets_in_order(self, tmp_path, category_summary, chi2):
        frame = pd.DataFrame({"a": [1]})
        path = generate_report(
            str(tmp_path / "report.xlsx"),
            summary={"Rows": 2000},
            category_summary_df=category_summary,
            score_stats_df=frame,
            data_checks_df=pd.DataFrame({"Check": ["x"], "Status": ["PASS"]}),
            chi_square_df=chi2.to_frame(),
            contingency_df=chi2.observed,
            logit_df=pd.DataFrame({"Term": ["const"], "P_Value": [0.001]}),
            predicted_pd_df=frame,
            performance_df=frame,
        )
        expected = [v for k, v in SHEET_NAMES.items() if k != "charts"]
        assert load_workbook(path).sheetnames == expected

    def test_category_sheet_header_and_rows(self, tmp_path, category_summary):
        path = generate_report(
            str(tmp_path / "report.xlsx"),
            summary={},
            category_summary_df=category_summary,
        )
        ws = load_workbook(path)[SHEET_NAMES["category_summary"]]
        header = [c.value for c in ws[1]]
        assert header[:2] == ["Category", "Count"]
        assert ws.max_row == len(category_summary) + 1
        assert ws.cell(row=2, column=1).value == "Low"

    def test_contingency_below_chi_square(self, tmp_path, category_summary, chi2):
        chi_frame = chi2.to_frame()
        path = generate_report(
            str(tmp_path / "report.xlsx"),
            summary={},
            category_summary_df=category_summary,
            chi_square_df=chi_frame,
            contingency_df=chi2.observed,
        )
        ws = load_workbook(path)[SHEET_NAMES["chi_square"]]
        assert ws.cell(row=1, column=1).value == "Statistic"
        assert ws.cell(row=len(chi_frame) + 4, column=1).value is not None

    def test_empty_frame_writes_placeholder(self, tmp_path, category_summary):
        path = generate_report(
            str(tmp_path / "report.xlsx"),
            summary={},
            category_summary_df=category_summary,
            performance_df=pd.DataFrame(),
        )
        ws = load_workbook(path)[SHEET_NAMES["performance"]]
        assert ws["A1"].value == "No data"

    def test_charts_embedded(self, tmp_path, binned_data, category_summary):
        chart_paths = save_all_charts(
            binned_data, category_summary, "risk_score", "default_flag",
            [0.3, 0.7], str(tmp_path / "charts"), n_bins=10, dpi=40,
        )
        path = generate_report(
            str(tmp_path / "report.xlsx"),
            summary={},
            category_summary_df=category_summary,
            chart_paths=chart_paths,
        )
        ws = load_workbook(path)[SHEET_NAMES["charts"]]
        assert ws["A1"].value == "score_distribution"
        assert ws["A26"].value == "default_rate_by_category"

    def test_missing_chart_file_skipped(self, tmp_path, category_summary):
        path = generate_report(
            str(tmp_path / "report.xlsx"),
            summary={},
            category_summary_df=category_summary,
            chart_paths={"ghost": str(tmp_path / "ghost.png")},
        )
        ws = load_workbook(path)[SHEET_NAMES["charts"]]
        assert ws["A1"].value is None

    def test_creates_parent_dir(self, tmp_path, category_summary):
        path = tmp_path / "nested" / "dir" / "report.xlsx"
        generate_report(str(path), summary={}, category_summary_df=category_summary)
        assert path.exists()

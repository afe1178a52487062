"""
Tests for Descriptive Statistics

Covers: describe_score, summarize_by_category (ordering, empty categories,
Total row) and contingency_table.
"""

import numpy as np
import pandas as pd
import pytest

from risk_binning.analysis import contingency_table, describe_score, summarize_by_category
from risk_binning.analysis.descriptive import SUMMARY_COLUMNS
from risk_binning.binning import RISK_CATEGORIES, RiskBinner


def _binned(scores, targets):
    df = pd.DataFrame({"risk_score": scores, "default_flag": targets})
    return RiskBinner().transform(df, "risk_score")


def _stats(df):
    return describe_score(df, "risk_score").set_index("Statistic")["Value"]


# ===================================================================
# describe_score
# ===================================================================

class TestDescribeScore:

    def test_statistics(self):
        df = pd.DataFrame({"risk_score": [0.1, 0.2, 0.3, np.nan]})
        stats = _stats(df)
        assert stats["count"] == 4
        assert stats["non_missing"] == 3
        assert stats["missing"] == 1
        assert stats["missing_rate"] == pytest.approx(0.25)
        assert stats["mean"] == pytest.approx(0.2)
        assert stats["min"] == pytest.approx(0.1)
        assert stats["p50"] == pytest.approx(0.2)
        assert stats["max"] == pytest.approx(0.3)

    def test_all_missing(self):
        df = pd.DataFrame({"risk_score": [np.nan, np.nan]})
        stats = _stats(df)
        assert stats["non_missing"] == 0
        assert np.isnan(stats["mean"])

    def test_columns(self, sample_data):
        out = describe_score(sample_data, "risk_score")
        assert list(out.columns) == ["Statistic", "Value"]


# ===================================================================
# summarize_by_category
# ===================================================================

class TestSummarizeByCategory:

    def test_counts_and_rates(self):
        df = _binned(
            [0.1, 0.2, 0.5, 0.5, 0.9, np.nan],
            [0, 1, 1, 1, 1, 0],
        )
        summary = summarize_by_category(df, "risk_category", "default_flag")
        by_cat = summary.set_index("Category")
        assert by_cat.loc["Low", "Count"] == 2
        assert by_cat.loc["Low", "Default_Rate"] == pytest.approx(0.5)
        assert by_cat.loc["Medium", "Default_Rate"] == pytest.approx(1.0)
        assert by_cat.loc["Missing", "Defaults"] == 0
        assert by_cat.loc["Total", "Count"] == 6
        assert by_cat.loc["Total", "Default_Rate"] == pytest.approx(4 / 6)

    def test_category_order_and_total_last(self, binned_data):
        summary = summarize_by_category(binned_data, "risk_category", "default_flag")
        assert summary["Category"].tolist() == RISK_CATEGORIES + ["Total"]

    def test_empty_category_kept_with_nan_rate(self):
        df = _binned([0.1, 0.2, 0.5], [0, 1, 0])
        by_cat = summarize_by_category(df, "risk_category", "default_flag").set_index("Category")
        assert by_cat.loc["High", "Count"] == 0
        assert np.isnan(by_cat.loc["High", "Default_Rate"])

    def test_shares_sum_to_one(self, binned_data):
        summary = summarize_by_category(binned_data, "risk_category", "default_flag",
                                        include_total=False)
        assert summary["Share"].sum() == pytest.approx(1.0)
        assert summary["Count"].sum() == len(binned_data)

    def test_score_columns(self, binned_data):
        summary = summarize_by_category(
            binned_data, "risk_category", "default_flag", score_column="risk_score",
        )
        assert list(summary.columns) == SUMMARY_COLUMNS
        by_cat = summary.set_index("Category")
        assert by_cat.loc["Low", "Score_Max"] < 0.3
        assert by_cat.loc["High", "Score_Min"] >= 0.7
        assert np.isnan(by_cat.loc["Missing", "Score_Mean"])

    def test_default_rate_increases_on_sample(self, binned_data):
        by_cat = summarize_by_category(binned_data, "risk_category", "default_flag").set_index("Category")
        assert by_cat.loc["Low", "Default_Rate"] < by_cat.loc["Medium", "Default_Rate"]
        assert by_cat.loc["Medium", "Default_Rate"] < by_cat.loc["High", "Default_Rate"]


# ===================================================================
# contingency_table
# ===================================================================

class TestContingencyTable:

    def test_shape_and_totals(self, binned_data):
        table = contingency_table(binned_data, "risk_category", "default_flag")
        assert table.index.tolist() == RISK_CATEGORIES
        assert table.values.sum() == len(binned_data)
        assert table[1].sum() == binned_data["default_flag"].sum()

    def test_empty_rows(self):
        df = _binned([0.1, 0.5, 0.6], [0, 1, 0])
        table = contingency_table(df, "risk_category", "default_flag")
        assert table.loc["High"].sum() == 0
        dropped = contingency_table(df, "risk_category", "default_flag", drop_empty=True)
        assert dropped.index.tolist() == ["Low", "Medium"]

    def test_plain_string_categories(self):
        df = pd.DataFrame({"band": ["b", "a", "b"], "y": [1, 0, 0]})
        table = contingency_table(df, "band", "y")
        assert table.index.tolist() == ["a", "b"]

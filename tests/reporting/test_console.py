"""
Tests for the Console Report
"""

import pandas as pd

from risk_binning.analysis import chi_square_test, describe_score, summarize_by_category
from risk_binning.binning import RiskBinner
from risk_binning.evaluation import check_monotonic_default_rates
from risk_binning.models import fit_category_logit
from risk_binning.reporting import format_console_report


class TestFormatConsoleReport:

    def test_empty_results(self):
        assert format_console_report({}) == ""

    def test_all_sections(self, binned_data):
        summary = summarize_by_category(binned_data, "risk_category", "default_flag")
        logit = fit_category_logit(binned_data, "risk_category", "default_flag")
        results = {
            "score_stats": describe_score(binned_data, "risk_score"),
            "bin_edges": RiskBinner().bin_edges(),
            "category_summary": summary,
            "monotonicity": check_monotonic_default_rates(summary, ["Low", "Medium", "High"]),
            "chi_square": chi_square_test(binned_data, "risk_category", "default_flag"),
            "logit": logit,
            "predicted_pd": logit.category_probabilities(),
            "performance": pd.DataFrame({"Period": ["Train"], "AUC": [0.7]}),
        }
        text = format_console_report(results)

        for title in [
            "SCORE DISTRIBUTION",
            "BINNING RULES",
            "DEFAULT RATE BY RISK CATEGORY",
            "CHI-SQUARE TEST OF INDEPENDENCE",
            "LOGISTIC REGRESSION (reference = Low)",
            "PREDICTED DEFAULT PROBABILITY BY CATEGORY",
            "MODEL PERFORMANCE",
        ]:
            assert title in text
        assert "Default rate increases with risk: yes" in text
        assert "Association is significant" in text

    def test_monotonic_violation_listed(self):
        summary = pd.DataFrame({
            "Category": ["Low", "Medium", "High"],
            "Default_Rate": [0.1, 0.3, 0.2],
        })
        text = format_console_report({
            "category_summary": summary,
            "monotonicity": check_monotonic_default_rates(summary, ["Low", "Medium", "High"]),
        })
        assert "no, violations: [('Medium', 'High')]" in text

    def test_empty_table_placeholder(self):
        text = format_console_report({"performance": pd.DataFrame()})
        assert "(no data)" in text

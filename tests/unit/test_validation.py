"""
Unit Tests for Data Validation Checks

Tests DataValidator on clean and broken inputs, and the
ValidationReport / CheckResult containers.
"""

import numpy as np
import pandas as pd
import pytest

from risk_binning.config.schema import PipelineConfig
from risk_binning.validation import (
    CheckResult,
    DataValidator,
    Severity,
    Status,
    ValidationReport,
)


def _make_df(n=200, scores=None, target=None):
    rng = np.random.default_rng(0)
    return pd.DataFrame({
        "risk_score": scores if scores is not None else rng.uniform(0, 1, n),
        "default_flag": target if target is not None else (rng.random(n) < 0.1).astype(int),
    })


def _status(report, name):
    matches = [c for c in report.checks if c.check_name == name]
    assert matches, f"No check named {name!r}"
    return matches[0].status


# ===================================================================
# Containers
# ===================================================================

class TestValidationReport:

    def test_counts(self):
        report = ValidationReport()
        report.add(CheckResult("a", Status.PASS, "ok"))
        report.add(CheckResult("b", Status.WARNING, "hmm", severity=Severity.WARNING))
        report.add(CheckResult("c", Status.FAIL, "bad", severity=Severity.WARNING))
        assert report.pass_count == 1
        assert report.warning_count == 1
        assert report.fail_count == 1

    def test_critical_failure_detection(self):
        report = ValidationReport()
        report.add(CheckResult("c", Status.FAIL, "bad", severity=Severity.WARNING))
        assert not report.has_critical_failures
        report.add(CheckResult("d", Status.FAIL, "worse", severity=Severity.CRITICAL))
        assert report.has_critical_failures

    def test_summary_first_line(self):
        report = ValidationReport()
        report.add(CheckResult("a", Status.PASS, "ok"))
        assert report.summary().splitlines()[0] == "Validation Report: 1 PASS, 0 WARNING, 0 FAIL"

    def test_to_dataframe_columns(self):
        report = ValidationReport()
        assert list(report.to_dataframe().columns) == [
            "Check_Name", "Status", "Severity", "Message", "Recommendation",
        ]


# ===================================================================
# DataValidator
# ===================================================================

class TestDataValidator:

    def test_clean_data_passes(self, sample_data):
        report = DataValidator(PipelineConfig()).validate(sample_data)
        assert not report.has_critical_failures
        assert report.fail_count == 0

    def test_empty_frame_is_critical(self):
        df = pd.DataFrame({"risk_score": [], "default_flag": []})
        report = DataValidator(PipelineConfig()).validate(df)
        assert _status(report, "Non-empty dataset") == Status.FAIL
        assert report.has_critical_failures

    def test_small_sample_warns(self):
        report = DataValidator(PipelineConfig()).validate(_make_df(n=10))
        assert _status(report, "Minimum sample size") == Status.WARNING

    def test_missing_score_column(self):
        df = _make_df().drop(columns="risk_score")
        report = DataValidator(PipelineConfig()).validate(df)
        assert _status(report, "Score column exists") == Status.FAIL
        assert report.has_critical_failures

    def test_missing_target_column(self):
        df = _make_df().drop(columns="default_flag")
        report = DataValidator(PipelineConfig()).validate(df)
        assert _status(report, "Target column exists") == Status.FAIL

    def test_all_text_scores_fail(self):
        df = _make_df(n=50, scores=["x"] * 50)
        report = DataValidator(PipelineConfig()).validate(df)
        assert _status(report, "Score is numeric") == Status.FAIL

    def test_some_text_scores_warn(self):
        scores = [0.1] * 45 + ["x"] * 5
        report = DataValidator(PipelineConfig()).validate(_make_df(n=50, scores=scores))
        assert _status(report, "Score is numeric") == Status.WARNING
        assert not report.has_critical_failures

    def test_high_missing_rate_warns(self):
        scores = [np.nan] * 60 + [0.5] * 140
        report = DataValidator(PipelineConfig()).validate(_make_df(scores=scores))
        assert _status(report, "Score missing rate") == Status.WARNING

    def test_out_of_range_scores_warn(self):
        scores = [0.5] * 195 + [1.5] * 5
        report = DataValidator(PipelineConfig()).validate(_make_df(scores=scores))
        assert _status(report, "Score within range") == Status.WARNING

    def test_null_target_is_critical(self):
        target = [0, 1] * 99 + [np.nan, np.nan]
        report = DataValidator(PipelineConfig()).validate(_make_df(target=target))
        assert _status(report, "Target has no nulls") == Status.FAIL
        assert report.has_critical_failures

    def test_non_binary_target(self):
        target = [0, 1, 2, 3] * 50
        report = DataValidator(PipelineConfig()).validate(_make_df(target=target))
        assert _status(report, "Target is binary") == Status.FAIL

    def test_single_class_target(self):
        report = DataValidator(PipelineConfig()).validate(_make_df(target=[0] * 200))
        assert _status(report, "Target is binary") == Status.FAIL
        assert report.has_critical_failures

    def test_bad_rate_out_of_range_warns(self):
        target = [1] * 150 + [0] * 50
        report = DataValidator(PipelineConfig()).validate(_make_df(target=target))
        assert _status(report, "Bad rate within range") == Status.WARNING

    def test_uses_configured_columns(self):
        df = _make_df().rename(columns={"risk_score": "pd", "default_flag": "bad"})
        config = PipelineConfig(data={"score_column": "pd", "target_column": "bad"})
        report = DataValidator(config).validate(df)
        assert not report.has_critical_failures

    @pytest.mark.parametrize("limit,expected", [(0.05, Status.WARNING), (0.50, Status.PASS)])
    def test_missing_rate_threshold_from_config(self, limit, expected):
        scores = [np.nan] * 20 + [0.5] * 180
        config = PipelineConfig(validation={"max_missing_score_rate": limit})
        report = DataValidator(config).validate(_make_df(scores=scores))
        assert _status(report, "Score missing rate") == expected

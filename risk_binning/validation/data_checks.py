"""
Pre-Analysis Data Quality Checks

Validates the input table before binning. Critical failures (no data,
missing columns, non-binary target) block the analysis; everything else
is reported as a warning.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

import logging

import pandas as pd

from risk_binning.config.schema import PipelineConfig
from risk_binning.core.logger import LoggerMixin


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    WARNING = "WARNING"
    INFO = "INFO"


class Status(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"
    WARNING = "WARNING"


@dataclass
class CheckResult:
    """Result of a single validation check."""

    check_name: str
    status: Status
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    severity: Severity = Severity.INFO
    recommendation: str = ""


@dataclass
class ValidationReport:
    """Collection of check results with convenience methods."""

    checks: List[CheckResult] = field(default_factory=list)

    @property
    def has_critical_failures(self) -> bool:
        return any(
            c.status == Status.FAIL and c.severity == Severity.CRITICAL
            for c in self.checks
        )

    @property
    def pass_count(self) -> int:
        return sum(1 for c in self.checks if c.status == Status.PASS)

    @property
    def fail_count(self) -> int:
        return sum(1 for c in self.checks if c.status == Status.FAIL)

    @property
    def warning_count(self) -> int:
        return sum(1 for c in self.checks if c.status == Status.WARNING)

    def summary(self) -> str:
        lines = [
            f"Validation Report: {self.pass_count} PASS, "
            f"{self.warning_count} WARNING, {self.fail_count} FAIL"
        ]
        for c in self.checks:
            marker = {"PASS": "+", "FAIL": "X", "WARNING": "!"}[c.status.value]
            lines.append(f"  [{marker}] {c.check_name}: {c.message}")
        return "\n".join(lines)

    def add(self, result: CheckResult) -> None:
        self.checks.append(result)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame for Excel reporting."""
        rows = []
        for c in self.checks:
            rows.append({
                "Check_Name": c.check_name,
                "Status": c.status.value,
                "Severity": c.severity.value,
                "Message": c.message,
                "Recommendation": c.recommendation,
            })
        return pd.DataFrame(
            rows,
            columns=["Check_Name", "Status", "Severity", "Message", "Recommendation"],
        )


class DataValidator(LoggerMixin):
    """Runs pre-analysis data quality checks on the raw input table."""

    def __init__(self, config: PipelineConfig):
        self.score_column = config.data.score_column
        self.target_column = config.data.target_column
        self.thresholds = config.validation

    def validate(self, df: pd.DataFrame) -> ValidationReport:
        """Run all data quality checks.

        Args:
            df: The full input DataFrame (before binning).

        Returns:
            ValidationReport with all check results.
        """
        report = ValidationReport()

        report.add(self._check_not_empty(df))
        report.add(self._check_sample_size(df))

        report.add(self._check_column_exists(df, self.score_column, "Score"))
        if self.score_column in df.columns:
            report.add(self._check_score_numeric(df))
            report.add(self._check_score_missing_rate(df))
            report.add(self._check_score_range(df))

        report.add(self._check_column_exists(df, self.target_column, "Target"))
        if self.target_column in df.columns:
            report.add(self._check_target_no_nulls(df))
            report.add(self._check_target_binary(df))
            report.add(self._check_bad_rate_range(df))

        for c in report.checks:
            level = {
                Status.PASS: logging.INFO,
                Status.WARNING: logging.WARNING,
                Status.FAIL: logging.WARNING,
            }[c.status]
            self.logger.log(level, "DATA_CHECK | %s | %s | %s", c.status.value, c.check_name, c.message)

        return report

    # ------------------------------------------------------------------
    # Individual checks
    # ------------------------------------------------------------------

    def _check_not_empty(self, df: pd.DataFrame) -> CheckResult:
        if len(df) == 0:
            return CheckResult(
                check_name="Non-empty dataset",
                status=Status.FAIL,
                message="DataFrame is empty (0 rows).",
                severity=Severity.CRITICAL,
                recommendation="Provide an input file with at least one row.",
            )
        return CheckResult(
            check_name="Non-empty dataset",
            status=Status.PASS,
            message=f"Dataset has {len(df):,} rows.",
            severity=Severity.CRITICAL,
        )

    def _check_sample_size(self, df: pd.DataFrame) -> CheckResult:
        min_rows = self.thresholds.min_rows
        if len(df) < min_rows:
            return CheckResult(
                check_name="Minimum sample size",
                status=Status.WARNING,
                message=f"Only {len(df):,} rows; at least {min_rows:,} recommended.",
                severity=Severity.WARNING,
                details={"n_rows": len(df), "min_rows": min_rows},
                recommendation="Chi-square and logit estimates are unstable on small samples.",
            )
        return CheckResult(
            check_name="Minimum sample size",
            status=Status.PASS,
            message=f"{len(df):,} rows >= {min_rows:,}.",
            severity=Severity.WARNING,
        )

    def _check_column_exists(self, df: pd.DataFrame, column: str, role: str) -> CheckResult:
        name = f"{role} column exists"
        if column not in df.columns:
            return CheckResult(
                check_name=name,
                status=Status.FAIL,
                message=f"{role} column '{column}' not found.",
                severity=Severity.CRITICAL,
                recommendation=f"Ensure '{column}' is present or point the config at the right column.",
            )
        return CheckResult(
            check_name=name,
            status=Status.PASS,
            message=f"{role} column '{column}' present.",
            severity=Severity.CRITICAL,
        )

    def _check_score_numeric(self, df: pd.DataFrame) -> CheckResult:
        series = df[self.score_column]
        if pd.api.types.is_numeric_dtype(series):
            return CheckResult(
                check_name="Score is numeric",
                status=Status.PASS,
                message=f"Score column has numeric dtype ({series.dtype}).",
                severity=Severity.CRITICAL,
            )
        coerced = pd.to_numeric(series, errors="coerce")
        n_bad = int(coerced.isna().sum() - series.isna().sum())
        if coerced.notna().sum() == 0:
            return CheckResult(
                check_name="Score is numeric",
                status=Status.FAIL,
                message="Score column has no numeric values.",
                severity=Severity.CRITICAL,
                recommendation="Check the score column name and file encoding.",
            )
        return CheckResult(
            check_name="Score is numeric",
            status=Status.WARNING,
            message=f"{n_bad:,} non-numeric score value(s) will be binned as missing.",
            severity=Severity.WARNING,
            details={"non_numeric_count": n_bad},
            recommendation="Clean non-numeric placeholders in the score column.",
        )

    def _check_score_missing_rate(self, df: pd.DataFrame) -> CheckResult:
        missing_rate = float(pd.to_numeric(df[self.score_column], errors="coerce").isna().mean()) if len(df) else 0.0
        limit = self.thresholds.max_missing_score_rate
        if missing_rate > limit:
            return CheckResult(
                check_name="Score missing rate",
                status=Status.WARNING,
                message=f"Score missing rate {missing_rate:.2%} exceeds {limit:.0%}.",
                severity=Severity.WARNING,
                details={"missing_rate": missing_rate},
                recommendation="A large Missing category dominates the analysis; check upstream scoring.",
            )
        return CheckResult(
            check_name="Score missing rate",
            status=Status.PASS,
            message=f"Score missing rate {missing_rate:.2%}.",
            severity=Severity.WARNING,
            details={"missing_rate": missing_rate},
        )

    def _check_score_range(self, df: pd.DataFrame) -> CheckResult:
        scores = pd.to_numeric(df[self.score_column], errors="coerce").dropna()
        lo, hi = self.thresholds.score_min, self.thresholds.score_max
        out_of_range = int(((scores < lo) | (scores > hi)).sum())
        if out_of_range > 0:
            return CheckResult(
                check_name="Score within range",
                status=Status.WARNING,
                message=f"{out_of_range:,} score(s) outside [{lo:g}, {hi:g}].",
                severity=Severity.WARNING,
                details={
                    "out_of_range": out_of_range,
                    "min": float(scores.min()),
                    "max": float(scores.max()),
                },
                recommendation="Scores outside the expected range still fall into Low or High.",
            )
        return CheckResult(
            check_name="Score within range",
            status=Status.PASS,
            message=f"All scores within [{lo:g}, {hi:g}].",
            severity=Severity.WARNING,
        )

    def _check_target_no_nulls(self, df: pd.DataFrame) -> CheckResult:
        null_count = int(df[self.target_column].isna().sum())
        if null_count > 0:
            return CheckResult(
                check_name="Target has no nulls",
                status=Status.FAIL,
                message=f"Target has {null_count:,} null values ({null_count / len(df):.2%}).",
                severity=Severity.CRITICAL,
                details={"null_count": null_count},
                recommendation="Remove rows with unknown outcome before running the analysis.",
            )
        return CheckResult(
            check_name="Target has no nulls",
            status=Status.PASS,
            message="No null values in target.",
            severity=Severity.CRITICAL,
        )

    def _check_target_binary(self, df: pd.DataFrame) -> CheckResult:
        unique_values = df[self.target_column].dropna().unique()
        is_binary = set(unique_values).issubset({0, 1, 0.0, 1.0, True, False})
        if not is_binary:
            shown = sorted(map(str, unique_values))[:10]
            return CheckResult(
                check_name="Target is binary",
                status=Status.FAIL,
                message=f"Target has non-binary values: {shown}.",
                severity=Severity.CRITICAL,
                details={"unique_values": shown},
                recommendation="Target must contain only 0 and 1.",
            )
        if len(unique_values) < 2:
            return CheckResult(
                check_name="Target is binary",
                status=Status.FAIL,
                message=f"Target has a single class: {list(unique_values)}.",
                severity=Severity.CRITICAL,
                recommendation="Both defaults and non-defaults are needed to test the binning.",
            )
        return CheckResult(
            check_name="Target is binary",
            status=Status.PASS,
            message="Target is binary (0/1).",
            severity=Severity.CRITICAL,
        )

    def _check_bad_rate_range(self, df: pd.DataFrame) -> CheckResult:
        target = pd.to_numeric(df[self.target_column], errors="coerce")
        bad_rate = float(target.mean()) if target.notna().any() else float("nan")
        lo, hi = self.thresholds.min_bad_rate, self.thresholds.max_bad_rate
        if pd.isna(bad_rate) or bad_rate < lo or bad_rate > hi:
            return CheckResult(
                check_name="Bad rate within range",
                status=Status.WARNING,
                message=f"Bad rate {bad_rate:.4%} is outside [{lo:.2%}, {hi:.2%}].",
                severity=Severity.WARNING,
                details={"bad_rate": bad_rate},
                recommendation="Verify the default definition.",
            )
        return CheckResult(
            check_name="Bad rate within range",
            status=Status.PASS,
            message=f"Bad rate {bad_rate:.4%} is within acceptable range.",
            severity=Severity.WARNING,
            details={"bad_rate": bad_rate},
        )

"""
Association Test

Chi-square test of independence between the risk category and the default
outcome. A significant result means default rates differ across categories,
which is the minimum a useful binning has to deliver.
"""

from typing import Any, Dict
from dataclasses import dataclass, field
import logging

import numpy as np
import pandas as pd
from scipy import stats

from risk_binning.analysis.descriptive import contingency_table
from risk_binning.core.exceptions import StatisticalTestError


logger = logging.getLogger(__name__)


@dataclass
class ChiSquareResult:
    """Outcome of the chi-square test of independence."""
    statistic: float
    p_value: float
    dof: int
    cramers_v: float
    n_obs: int
    alpha: float
    observed: pd.DataFrame
    expected: pd.DataFrame
    low_expected_cells: int = 0
    dropped_categories: list = field(default_factory=list)

    @property
    def is_significant(self) -> bool:
        return bool(self.p_value < self.alpha)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statistic": self.statistic,
            "p_value": self.p_value,
            "dof": self.dof,
            "cramers_v": self.cramers_v,
            "n_obs": self.n_obs,
            "alpha": self.alpha,
            "is_significant": self.is_significant,
            "low_expected_cells": self.low_expected_cells,
            "dropped_categories": list(self.dropped_categories),
        }

    def to_frame(self) -> pd.DataFrame:
        """Key/value table for reports."""
        d = self.to_dict()
        d["dropped_categories"] = ", ".join(self.dropped_categories) or "None"
        return pd.DataFrame({"Statistic": list(d.keys()), "Value": list(d.values())})


def chi_square_test(
    df: pd.DataFrame,
    category_column: str,
    target_column: str,
    alpha: float = 0.05,
    min_expected: float = 5.0,
    correction: bool = True,
) -> ChiSquareResult:
    """
    Test independence of risk category and outcome.

    Empty categories are dropped before the test, since a zero row makes
    the expected frequencies undefined.

    Args:
        df: Binned frame.
        category_column: Risk category column.
        target_column: Binary outcome column.
        alpha: Significance level.
        min_expected: Expected-frequency floor for the validity warning.
        correction: Yates continuity correction, applied by scipy only when
            the table has one degree of freedom.

    Returns:
        ChiSquareResult.
    """
    full_table = contingency_table(df, category_column, target_column)
    observed = full_table[full_table.sum(axis=1) > 0]
    dropped = [str(c) for c in full_table.index if c not in observed.index]
    if dropped:
        logger.info("CHI2 | Dropping empty categories: %s", dropped)

    if observed.shape[0] < 2:
        raise StatisticalTestError(
            f"Chi-square test needs at least 2 populated categories, got {observed.shape[0]}",
            test_name="chi_square",
            details={"categories": list(map(str, observed.index))},
        )
    observed = observed.loc[:, observed.sum(axis=0) > 0]
    if observed.shape[1] < 2:
        raise StatisticalTestError(
            "Chi-square test needs both outcome classes present",
            test_name="chi_square",
            details={"outcomes": list(map(str, observed.columns))},
        )

    statistic, p_value, dof, expected = stats.chi2_contingency(
        observed.values, correction=correction,
    )
    expected_df = pd.DataFrame(expected, index=observed.index, columns=observed.columns)

    n_obs = int(observed.values.sum())
    k = min(observed.shape) - 1
    cramers_v = float(np.sqrt(statistic / (n_obs * k))) if n_obs and k else float("nan")

    low_cells = int((expected < min_expected).sum())
    if low_cells:
        logger.warning(
            "CHI2 | %d cell(s) with expected frequency below %.1f; "
            "the chi-square approximation may be unreliable",
            low_cells, min_expected,
        )

    result = ChiSquareResult(
        statistic=float(statistic),
        p_value=float(p_value),
        dof=int(dof),
        cramers_v=cramers_v,
        n_obs=n_obs,
        alpha=alpha,
        observed=observed,
        expected=expected_df,
        low_expected_cells=low_cells,
        dropped_categories=dropped,
    )
    logger.info(
        "CHI2 | chi2=%.4f, dof=%d, p=%.4g, Cramer's V=%.4f (%s at alpha=%.2f)",
        result.statistic, result.dof, result.p_value, result.cramers_v,
        "significant" if result.is_significant else "not significant", alpha,
    )
    return result

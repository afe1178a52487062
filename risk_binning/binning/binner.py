"""
Risk Score Binner

Maps a continuous credit-risk score onto ordinal risk categories with fixed
cut points. Missing scores get their own category.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging
import math

import numpy as np
import pandas as pd

from risk_binning.core.exceptions import BinningError, ConfigurationError


logger = logging.getLogger(__name__)


DEFAULT_LOW_THRESHOLD = 0.3
DEFAULT_HIGH_THRESHOLD = 0.7
DEFAULT_LABELS = ("Low", "Medium", "High")
MISSING_LABEL = "Missing"

RISK_CATEGORIES = list(DEFAULT_LABELS) + [MISSING_LABEL]


def _is_missing(score: Any) -> bool:
    if score is None or score is pd.NA or score is pd.NaT:
        return True
    try:
        return math.isnan(score)
    except TypeError:
        return False


def assign_risk_category(
    score: Optional[float],
    low_threshold: float = DEFAULT_LOW_THRESHOLD,
    high_threshold: float = DEFAULT_HIGH_THRESHOLD,
) -> str:
    """
    Bin a single score.

    Lower bounds are inclusive: a score of exactly ``low_threshold`` is
    Medium and exactly ``high_threshold`` is High.

    Args:
        score: Risk score, or None/NaN when unavailable.
        low_threshold: Lower cut point.
        high_threshold: Upper cut point.

    Returns:
        One of "Low", "Medium", "High", "Missing".
    """
    if low_threshold >= high_threshold:
        raise BinningError(
            f"low_threshold ({low_threshold}) must be less than "
            f"high_threshold ({high_threshold})"
        )
    if _is_missing(score):
        return MISSING_LABEL
    try:
        value = float(score)
    except (TypeError, ValueError):
        return MISSING_LABEL
    if math.isnan(value):
        return MISSING_LABEL
    low, medium, high = DEFAULT_LABELS
    if value < low_threshold:
        return low
    if value < high_threshold:
        return medium
    return high


class RiskBinner:
    """
    Vectorised rule-based binning of a score column.

    The output is an ordered pandas Categorical with categories
    ``labels + [missing_label]``, so group-bys and crosstabs always list
    every category in risk order, including empty ones.
    """

    def __init__(
        self,
        low_threshold: float = DEFAULT_LOW_THRESHOLD,
        high_threshold: float = DEFAULT_HIGH_THRESHOLD,
        labels: Sequence[str] = DEFAULT_LABELS,
        missing_label: str = MISSING_LABEL,
    ):
        if low_threshold >= high_threshold:
            raise BinningError(
                f"low_threshold ({low_threshold}) must be less than "
                f"high_threshold ({high_threshold})"
            )
        if len(labels) != 3:
            raise ConfigurationError(f"Exactly 3 labels are required, got {list(labels)}")
        if len(set(labels) | {missing_label}) != 4:
            raise ConfigurationError(
                f"Labels and missing label must be distinct, got "
                f"{list(labels)} + '{missing_label}'"
            )

        self.low_threshold = float(low_threshold)
        self.high_threshold = float(high_threshold)
        self.labels = list(labels)
        self.missing_label = missing_label
        self.dtype = pd.CategoricalDtype(
            categories=self.categories, ordered=True
        )

    @classmethod
    def from_config(cls, binning_config: Any) -> "RiskBinner":
        """Build from a BinningConfig."""
        return cls(
            low_threshold=binning_config.low_threshold,
            high_threshold=binning_config.high_threshold,
            labels=binning_config.labels,
            missing_label=binning_config.missing_label,
        )

    @property
    def categories(self) -> List[str]:
        """All categories in ordinal order, missing last."""
        return self.labels + [self.missing_label]

    def bin_series(self, scores: pd.Series) -> pd.Series:
        """
        Bin a Series of scores.

        Values that cannot be parsed as numbers are treated as missing.
        """
        numeric = pd.to_numeric(scores, errors="coerce")
        n_coerced = int(numeric.isna().sum() - scores.isna().sum())
        if n_coerced > 0:
            logger.warning(
                "BIN | %d non-numeric score value(s) treated as missing", n_coerced
            )

        values = numeric.to_numpy(dtype=float, na_value=np.nan)
        conditions = [
            np.isnan(values),
            values < self.low_threshold,
            values < self.high_threshold,
        ]
        choices = [self.missing_label, self.labels[0], self.labels[1]]
        binned = np.select(conditions, choices, default=self.labels[2])

        return pd.Series(
            pd.Categorical(binned, dtype=self.dtype),
            index=scores.index,
            name=scores.name,
        )

    def transform(
        self,
        df: pd.DataFrame,
        score_column: str,
        output_column: str = "risk_category",
    ) -> pd.DataFrame:
        """
        Return a copy of ``df`` with the category column added.

        Args:
            df: Input frame.
            score_column: Column holding the continuous score.
            output_column: Name of the new categorical column.

        Returns:
            New DataFrame with the same rows plus ``output_column``.
        """
        if score_column not in df.columns:
            raise BinningError(
                f"Score column '{score_column}' not found in data",
                column=score_column,
            )

        result = df.copy()
        result[output_column] = self.bin_series(df[score_column]).rename(output_column)

        counts = result[output_column].value_counts(sort=False)
        logger.info(
            "BIN | Binned %d rows: %s",
            len(result),
            ", ".join(f"{cat}={int(counts[cat])}" for cat in self.categories),
        )
        return result

    def bin_edges(self) -> pd.DataFrame:
        """Describe each category's interval, for reports."""
        lo, hi = self.low_threshold, self.high_threshold
        return pd.DataFrame({
            "Category": self.categories,
            "Lower_Bound": [-np.inf, lo, hi, np.nan],
            "Upper_Bound": [lo, hi, np.inf, np.nan],
            "Rule": [
                f"score < {lo:g}",
                f"{lo:g} <= score < {hi:g}",
                f"score >= {hi:g}",
                "score is missing",
            ],
        })

    def to_dict(self) -> Dict[str, Any]:
        return {
            "low_threshold": self.low_threshold,
            "high_threshold": self.high_threshold,
            "labels": self.labels,
            "missing_label": self.missing_label,
        }

    def __repr__(self) -> str:
        return (
            f"RiskBinner(low_threshold={self.low_threshold}, "
            f"high_threshold={self.high_threshold})"
        )

"""
Descriptive Statistics

Score distribution and per-category default summaries.
"""

from typing import Optional
import logging

import numpy as np
import pandas as pd


logger = logging.getLogger(__name__)


SUMMARY_COLUMNS = [
    "Category", "Count", "Share", "Defaults", "Default_Rate",
    "Score_Mean", "Score_Min", "Score_Max",
]


def describe_score(df: pd.DataFrame, score_column: str) -> pd.DataFrame:
    """
    Distribution of the raw score.

    Returns:
        Two-column frame (Statistic, Value) with count, missing, mean, std,
        min, quartiles and max of the non-missing scores.
    """
    scores = df[score_column]
    non_null = scores.dropna()

    stats = {
        "count": int(len(scores)),
        "non_missing": int(len(non_null)),
        "missing": int(scores.isna().sum()),
        "missing_rate": float(scores.isna().mean()) if len(scores) else np.nan,
        "mean": float(non_null.mean()) if len(non_null) else np.nan,
        "std": float(non_null.std()) if len(non_null) > 1 else np.nan,
        "min": float(non_null.min()) if len(non_null) else np.nan,
        "p25": float(non_null.quantile(0.25)) if len(non_null) else np.nan,
        "p50": float(non_null.quantile(0.50)) if len(non_null) else np.nan,
        "p75": float(non_null.quantile(0.75)) if len(non_null) else np.nan,
        "max": float(non_null.max()) if len(non_null) else np.nan,
    }
    return pd.DataFrame({"Statistic": list(stats.keys()), "Value": list(stats.values())})


def summarize_by_category(
    df: pd.DataFrame,
    category_column: str,
    target_column: str,
    score_column: Optional[str] = None,
    include_total: bool = True,
) -> pd.DataFrame:
    """
    Count, share and default rate per risk category.

    Categories are listed in their categorical order; categories with no rows
    are kept with zero counts and NaN rates.

    Args:
        df: Binned frame.
        category_column: Categorical risk category column.
        target_column: Binary outcome column.
        score_column: Optional score column for mean/min/max per category.
        include_total: Append a ``Total`` row.

    Returns:
        DataFrame with SUMMARY_COLUMNS (score columns omitted when
        ``score_column`` is None).
    """
    categories = _category_order(df[category_column])
    grouped = df.groupby(category_column, observed=False)

    def _per_category(values: pd.Series, fill_value=np.nan) -> np.ndarray:
        return values.reindex(categories, fill_value=fill_value).to_numpy()

    counts = _per_category(grouped.size(), fill_value=0).astype(int)
    defaults = _per_category(grouped[target_column].sum(), fill_value=0).astype(int)
    total = int(counts.sum())

    summary = pd.DataFrame({
        "Category": categories,
        "Count": counts,
        "Share": counts / total if total else np.nan,
        "Defaults": defaults,
        "Default_Rate": np.where(counts > 0, defaults / np.maximum(counts, 1), np.nan),
    })

    if score_column is not None:
        summary["Score_Mean"] = _per_category(grouped[score_column].mean())
        summary["Score_Min"] = _per_category(grouped[score_column].min())
        summary["Score_Max"] = _per_category(grouped[score_column].max())

    if include_total:
        total_row = {
            "Category": "Total",
            "Count": total,
            "Share": 1.0 if total else np.nan,
            "Defaults": int(summary["Defaults"].sum()),
            "Default_Rate": summary["Defaults"].sum() / total if total else np.nan,
        }
        if score_column is not None:
            scores = df[score_column]
            total_row["Score_Mean"] = scores.mean()
            total_row["Score_Min"] = scores.min()
            total_row["Score_Max"] = scores.max()
        summary = pd.concat([summary, pd.DataFrame([total_row])], ignore_index=True)

    logger.info(
        "DESC | Default rate by category: %s",
        ", ".join(
            f"{row.Category}={row.Default_Rate:.2%}"
            for row in summary.itertuples()
            if row.Count > 0
        ),
    )
    return summary


def contingency_table(
    df: pd.DataFrame,
    category_column: str,
    target_column: str,
    drop_empty: bool = False,
) -> pd.DataFrame:
    """
    Observed counts of category x outcome.

    Rows follow the categorical order; columns are the outcome values (0, 1).
    """
    table = pd.crosstab(df[category_column], df[target_column], dropna=False)
    table = table.reindex(_category_order(df[category_column]), fill_value=0)
    table.index.name = "Category"
    table.columns.name = target_column
    if drop_empty:
        table = table[table.sum(axis=1) > 0]
    return table.astype(int)


def _category_order(series: pd.Series) -> list:
    if isinstance(series.dtype, pd.CategoricalDtype):
        return list(series.cat.categories)
    return sorted(series.dropna().unique().tolist())

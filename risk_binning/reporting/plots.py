"""
Charts

PNG charts for the binning analysis: score distribution with cut points,
default rate per category and category volumes.
"""

from typing import Dict, Optional, Sequence
from pathlib import Path
import logging

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.ticker import PercentFormatter
import numpy as np
import pandas as pd
import seaborn as sns


logger = logging.getLogger(__name__)


CATEGORY_COLORS = {
    "Low": "#28A745",
    "Medium": "#FFC107",
    "High": "#DC3545",
    "Missing": "#6C757D",
}
THRESHOLD_COLOR = "#2F5496"


def _palette(categories: Sequence[str]) -> list:
    fallback = sns.color_palette("deep", len(categories))
    return [CATEGORY_COLORS.get(c, fallback[i]) for i, c in enumerate(categories)]


def plot_score_distribution(
    df: pd.DataFrame,
    score_column: str,
    target_column: str,
    thresholds: Sequence[float],
    output_path: str,
    n_bins: int = 40,
    dpi: int = 150,
) -> str:
    """Histogram of the score split by outcome, with the cut points marked."""
    data = df[[score_column, target_column]].dropna(subset=[score_column])

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.histplot(
        data=data, x=score_column, hue=target_column,
        bins=n_bins, stat="density", common_norm=False,
        element="step", ax=ax,
    )
    for t in thresholds:
        ax.axvline(x=t, color=THRESHOLD_COLOR, linestyle="--", linewidth=1.5)
        ax.text(t, ax.get_ylim()[1] * 0.95, f" {t:g}", color=THRESHOLD_COLOR, va="top")

    ax.set_xlabel("Risk score", fontsize=12)
    ax.set_ylabel("Density", fontsize=12)
    ax.set_title("Score Distribution by Outcome", fontsize=14)

    return _save(fig, output_path, dpi)


def plot_default_rate_by_category(
    summary_df: pd.DataFrame,
    output_path: str,
    overall_rate: Optional[float] = None,
    dpi: int = 150,
) -> str:
    """Bar chart of observed default rate per category."""
    data = summary_df[(summary_df["Category"] != "Total") & (summary_df["Count"] > 0)]
    categories = data["Category"].astype(str).tolist()

    fig, ax = plt.subplots(figsize=(8, 5))
    bars = ax.bar(categories, data["Default_Rate"].to_numpy(), color=_palette(categories))
    for bar, rate, count in zip(bars, data["Default_Rate"], data["Count"]):
        ax.annotate(
            f"{rate:.1%}\n(n={int(count):,})",
            xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
            ha="center", va="bottom", fontsize=9,
        )
    if overall_rate is not None and not np.isnan(overall_rate):
        ax.axhline(overall_rate, color=THRESHOLD_COLOR, linestyle="--", linewidth=1,
                   label=f"Overall {overall_rate:.1%}")
        ax.legend(loc="upper left", fontsize=10)

    ax.set_ylabel("Default rate", fontsize=12)
    ax.set_title("Default Rate by Risk Category", fontsize=14)
    ax.yaxis.set_major_formatter(PercentFormatter(1.0))
    ax.set_ylim(0, max(data["Default_Rate"].max() * 1.25, 0.05) if len(data) else 1)

    return _save(fig, output_path, dpi)


def plot_category_counts(
    summary_df: pd.DataFrame,
    output_path: str,
    dpi: int = 150,
) -> str:
    """Bar chart of row counts per category."""
    data = summary_df[summary_df["Category"] != "Total"]
    categories = data["Category"].astype(str).tolist()

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar(categories, data["Count"].to_numpy(), color=_palette(categories))
    ax.set_ylabel("Count", fontsize=12)
    ax.set_title("Observations by Risk Category", fontsize=14)

    return _save(fig, output_path, dpi)


def save_all_charts(
    df: pd.DataFrame,
    summary_df: pd.DataFrame,
    score_column: str,
    target_column: str,
    thresholds: Sequence[float],
    output_dir: str,
    n_bins: int = 40,
    dpi: int = 150,
    style: str = "whitegrid",
) -> Dict[str, str]:
    """Render every chart into ``output_dir``; returns name -> path."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    sns.set_style(style)

    total = summary_df[summary_df["Category"] == "Total"]
    overall = float(total["Default_Rate"].iloc[0]) if len(total) else None

    paths = {
        "score_distribution": plot_score_distribution(
            df, score_column, target_column, thresholds,
            str(out / "score_distribution.png"), n_bins=n_bins, dpi=dpi,
        ),
        "default_rate_by_category": plot_default_rate_by_category(
            summary_df, str(out / "default_rate_by_category.png"),
            overall_rate=overall, dpi=dpi,
        ),
        "category_counts": plot_category_counts(
            summary_df, str(out / "category_counts.png"), dpi=dpi,
        ),
    }
    logger.info("PLOTS | %d charts saved to %s", len(paths), out)
    return paths


def _save(fig, output_path: str, dpi: int) -> str:
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    try:
        fig.savefig(output_path, dpi=dpi, bbox_inches="tight")
    finally:
        plt.close(fig)
    logger.debug("PLOTS | Saved %s", output_path)
    return output_path

"""
Credit Scoring Metrics

Discrimination metrics for predicted default probabilities and an ordering
check for the binned default rates.
"""

from typing import Any, Dict, List, Sequence, Tuple
import logging

import numpy as np
import pandas as pd

from sklearn.metrics import roc_auc_score

from risk_binning.core.exceptions import EvaluationError


logger = logging.getLogger(__name__)

PERFORMANCE_COLUMNS = ["Period", "N_Samples", "N_Bads", "Bad_Rate", "AUC", "Gini", "KS"]


class CreditScoringMetrics:
    """
    Credit scoring specific metrics.

    Includes:
    - AUC
    - Gini Coefficient
    - KS Statistic
    """

    @staticmethod
    def auc(y_true: np.ndarray, y_score: np.ndarray) -> float:
        return float(roc_auc_score(y_true, y_score))

    @staticmethod
    def gini_coefficient(y_true: np.ndarray, y_score: np.ndarray) -> float:
        """
        Gini = 2 * AUC - 1

        Returns:
            Gini coefficient (-1 to 1, higher is better)
        """
        return 2 * CreditScoringMetrics.auc(y_true, y_score) - 1

    @staticmethod
    def ks_statistic(y_true: np.ndarray, y_score: np.ndarray) -> Tuple[float, float]:
        """
        Kolmogorov-Smirnov statistic.

        Maximum separation between the cumulative score distributions of
        bads and goods. Tied scores are evaluated together, which matters
        here because binned predictions take only a handful of values.

        Returns:
            Tuple of (KS statistic, score threshold at max separation)
        """
        df = pd.DataFrame({
            'score': np.asarray(y_score, dtype=float),
            'target': np.asarray(y_true, dtype=float),
        })
        total_bads = df['target'].sum()
        total_goods = len(df) - total_bads

        by_score = df.groupby('score')['target'].agg(['sum', 'count']).sort_index(ascending=False)
        cum_bads = by_score['sum'].cumsum() / total_bads
        cum_goods = (by_score['count'] - by_score['sum']).cumsum() / total_goods

        ks = (cum_bads - cum_goods).abs()
        threshold = ks.idxmax()
        return float(ks.loc[threshold]), float(threshold)


def evaluate_predictions(
    y_true: Sequence[float],
    y_score: Sequence[float],
    period: str,
) -> Dict[str, Any]:
    """
    One performance row for a set of predictions.

    Metrics are NaN when the period has fewer than two outcome classes.
    """
    y_true = np.asarray(y_true, dtype=float)
    y_score = np.asarray(y_score, dtype=float)
    if len(y_true) != len(y_score):
        raise EvaluationError(
            f"{period}: {len(y_true)} outcomes but {len(y_score)} predictions",
            metric_name="performance",
        )
    n = len(y_true)
    n_bads = int(y_true.sum())

    row = {
        "Period": period,
        "N_Samples": n,
        "N_Bads": n_bads,
        "Bad_Rate": round(n_bads / n, 4) if n else np.nan,
        "AUC": np.nan,
        "Gini": np.nan,
        "KS": np.nan,
    }
    if n == 0 or len(np.unique(y_true)) < 2:
        logger.warning("EVAL | %s: fewer than two outcome classes, metrics skipped", period)
        return row

    auc = CreditScoringMetrics.auc(y_true, y_score)
    ks, _ = CreditScoringMetrics.ks_statistic(y_true, y_score)
    row.update({
        "AUC": round(auc, 4),
        "Gini": round(2 * auc - 1, 4),
        "KS": round(ks, 4),
    })
    logger.info(
        "EVAL | %s: n=%d, bad rate=%.2f%%, AUC=%.4f, Gini=%.4f, KS=%.4f",
        period, n, 100 * row["Bad_Rate"], row["AUC"], row["Gini"], row["KS"],
    )
    return row


def check_monotonic_default_rates(
    summary_df: pd.DataFrame,
    order: Sequence[str],
    category_column: str = "Category",
    rate_column: str = "Default_Rate",
) -> Dict[str, Any]:
    """
    Check that default rates strictly increase along ``order``.

    Categories absent from the summary or with no rows are skipped.

    Returns:
        Dict with ``is_monotonic``, the checked ``rates`` and the
        ``violations`` as (lower_category, higher_category) pairs.
    """
    rates_by_cat = dict(zip(summary_df[category_column], summary_df[rate_column]))
    checked: List[Tuple[str, float]] = [
        (cat, float(rates_by_cat[cat]))
        for cat in order
        if cat in rates_by_cat and not pd.isna(rates_by_cat[cat])
    ]

    violations = [
        (lo_cat, hi_cat)
        for (lo_cat, lo_rate), (hi_cat, hi_rate) in zip(checked, checked[1:])
        if not hi_rate > lo_rate
    ]
    result = {
        "is_monotonic": not violations and len(checked) >= 2,
        "rates": dict(checked),
        "violations": violations,
    }
    if violations:
        logger.warning("EVAL | Default rates not increasing for: %s", violations)
    else:
        logger.info("EVAL | Default rates increase across %s", [c for c, _ in checked])
    return result


def performance_frame(rows: List[Dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=PERFORMANCE_COLUMNS)

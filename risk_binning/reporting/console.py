"""
Console Report

Plain-text tables printed at the end of a run.
"""

from typing import Any, Dict, List, Optional

import pandas as pd


WIDTH = 60


def _section(title: str) -> List[str]:
    return ["", "=" * WIDTH, title, "=" * WIDTH]


def _table(df: Optional[pd.DataFrame], float_format: str = "{:.4f}") -> List[str]:
    if df is None or len(df) == 0:
        return ["(no data)"]
    return df.to_string(
        index=False,
        float_format=lambda v: float_format.format(v),
    ).splitlines()


def format_console_report(results: Dict[str, Any]) -> str:
    """
    Render the run results as text.

    Sections without results (e.g. a skipped model) are left out.
    """
    lines: List[str] = []

    if results.get("score_stats") is not None:
        lines += _section("SCORE DISTRIBUTION")
        lines += _table(results["score_stats"])

    if results.get("bin_edges") is not None:
        lines += _section("BINNING RULES")
        lines += _table(results["bin_edges"][["Category", "Rule"]])

    if results.get("category_summary") is not None:
        lines += _section("DEFAULT RATE BY RISK CATEGORY")
        lines += _table(results["category_summary"])
        mono = results.get("monotonicity")
        if mono is not None:
            verdict = "yes" if mono["is_monotonic"] else f"no, violations: {mono['violations']}"
            lines.append(f"Default rate increases with risk: {verdict}")

    chi2 = results.get("chi_square")
    if chi2 is not None:
        lines += _section("CHI-SQUARE TEST OF INDEPENDENCE")
        lines += _table(chi2.observed.reset_index(), float_format="{:.0f}")
        lines.append(
            f"chi2 = {chi2.statistic:.4f}, dof = {chi2.dof}, p-value = {chi2.p_value:.4g}, "
            f"Cramer's V = {chi2.cramers_v:.4f}"
        )
        lines.append(
            f"Association is {'significant' if chi2.is_significant else 'not significant'} "
            f"at alpha = {chi2.alpha:g}"
        )
        if chi2.low_expected_cells:
            lines.append(f"Warning: {chi2.low_expected_cells} cell(s) with low expected frequency")

    logit = results.get("logit")
    if logit is not None:
        lines += _section(f"LOGISTIC REGRESSION (reference = {logit.reference})")
        lines += _table(logit.coefficients)
        lines.append(
            f"Pseudo R2 = {logit.pseudo_r2:.4f}, LLR p-value = {logit.llr_p_value:.4g}, "
            f"AIC = {logit.aic:.2f}, n = {logit.n_obs:,}"
        )

    if results.get("predicted_pd") is not None:
        lines += _section("PREDICTED DEFAULT PROBABILITY BY CATEGORY")
        lines += _table(results["predicted_pd"])

    if results.get("performance") is not None:
        lines += _section("MODEL PERFORMANCE")
        lines += _table(results["performance"])

    return "\n".join(lines)

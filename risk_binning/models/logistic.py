"""
Category Logistic Regression

Fits default ~ risk category as a logistic regression with treatment
(dummy) coding against a reference category. Significant, increasing
odds ratios for Medium and High over Low confirm the binning separates risk.
"""

from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass, field
import logging
import warnings

import numpy as np
import pandas as pd
import statsmodels.api as sm

from risk_binning.core.exceptions import ModelTrainingError


logger = logging.getLogger(__name__)

MODEL_NAME = "CategoryLogit"
COEFFICIENT_COLUMNS = [
    "Term", "Coefficient", "Std_Error", "Z", "P_Value",
    "Odds_Ratio", "CI_Lower", "CI_Upper",
]


def _dummy_name(category: str) -> str:
    return f"category[{category}]"


@dataclass
class CategoryLogitResult:
    """Fitted category logit with its coefficient table and fit statistics."""
    reference: str
    categories: List[str]
    coefficients: pd.DataFrame
    pseudo_r2: float
    log_likelihood: float
    ll_null: float
    llr_p_value: float
    aic: float
    n_obs: int
    converged: bool
    summary_text: str = ""
    params: Dict[str, float] = field(default_factory=dict)

    @property
    def design_columns(self) -> List[str]:
        return ["const"] + [_dummy_name(c) for c in self.categories if c != self.reference]

    def _design(self, categories: pd.Series) -> pd.DataFrame:
        values = categories.astype(object)
        unknown = sorted(set(values.dropna()) - set(self.categories))
        if unknown or values.isna().any():
            raise ModelTrainingError(
                f"Cannot predict for categories not seen during fitting: "
                f"{unknown or ['<NA>']}",
                model_name=MODEL_NAME,
                details={"fitted_categories": self.categories},
            )
        design = pd.DataFrame({"const": 1.0}, index=categories.index)
        for cat in self.categories:
            if cat != self.reference:
                design[_dummy_name(cat)] = (values == cat).astype(float)
        return design[self.design_columns]

    def predict_proba(self, categories: pd.Series) -> np.ndarray:
        """
        Predicted default probability for each row.

        Args:
            categories: Series of risk category labels.

        Returns:
            1-D array of probabilities, aligned with ``categories``.
        """
        design = self._design(categories)
        beta = np.array([self.params[c] for c in self.design_columns])
        linear = design.to_numpy() @ beta
        return 1.0 / (1.0 + np.exp(-linear))

    def category_probabilities(self) -> pd.DataFrame:
        """Predicted default probability per fitted category."""
        cats = pd.Series(self.categories)
        probs = self.predict_proba(cats)
        odds = {
            row.Term: row.Odds_Ratio for row in self.coefficients.itertuples()
        }
        return pd.DataFrame({
            "Category": self.categories,
            "Predicted_PD": probs,
            "Odds_Ratio_vs_Reference": [
                1.0 if c == self.reference else odds.get(_dummy_name(c), np.nan)
                for c in self.categories
            ],
        })

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reference": self.reference,
            "categories": list(self.categories),
            "pseudo_r2": self.pseudo_r2,
            "log_likelihood": self.log_likelihood,
            "ll_null": self.ll_null,
            "llr_p_value": self.llr_p_value,
            "aic": self.aic,
            "n_obs": self.n_obs,
            "converged": self.converged,
            "params": dict(self.params),
        }


def fit_category_logit(
    df: pd.DataFrame,
    category_column: str,
    target_column: str,
    reference: str = "Low",
    exclude_categories: Optional[Sequence[str]] = None,
    max_iter: int = 100,
    confidence_level: float = 0.95,
) -> CategoryLogitResult:
    """
    Fit a logistic regression of the outcome on the risk category.

    Categories without rows (and any in ``exclude_categories``) are left out
    of the design so the model stays identifiable.

    Args:
        df: Binned frame.
        category_column: Risk category column.
        target_column: Binary outcome column.
        reference: Baseline category; its odds ratio is 1 by construction.
        exclude_categories: Categories to drop, e.g. the missing label.
        max_iter: Newton iterations.
        confidence_level: Level of the coefficient confidence intervals.

    Returns:
        CategoryLogitResult.
    """
    data = df[[category_column, target_column]]
    if exclude_categories:
        data = data[~data[category_column].isin(list(exclude_categories))]

    counts = data[category_column].value_counts()
    if isinstance(data[category_column].dtype, pd.CategoricalDtype):
        order = [str(c) for c in data[category_column].cat.categories]
    else:
        order = sorted(map(str, counts.index))
    categories = [c for c in order if counts.get(c, 0) > 0]

    if reference not in categories:
        raise ModelTrainingError(
            f"Reference category '{reference}' has no observations",
            model_name=MODEL_NAME,
            details={"populated_categories": categories},
        )
    if len(categories) < 2:
        raise ModelTrainingError(
            f"Need at least 2 populated categories, got {categories}",
            model_name=MODEL_NAME,
        )

    y = data[target_column].astype(float)
    if y.nunique() < 2:
        raise ModelTrainingError(
            "Outcome has a single class; logistic regression is undefined",
            model_name=MODEL_NAME,
        )

    rates = y.groupby(data[category_column].astype(object)).mean()
    separated = [c for c in categories if rates.get(c) in (0.0, 1.0)]
    if separated:
        logger.warning(
            "LOGIT | Categories with 0%% or 100%% default rate (quasi-separation): %s",
            separated,
        )

    result_shell = CategoryLogitResult(
        reference=reference, categories=categories, coefficients=pd.DataFrame(),
        pseudo_r2=np.nan, log_likelihood=np.nan, ll_null=np.nan,
        llr_p_value=np.nan, aic=np.nan, n_obs=len(data), converged=False,
    )
    X = result_shell._design(data[category_column])

    logger.info(
        "LOGIT | Fitting %s on %d rows, reference='%s', terms=%s",
        MODEL_NAME, len(X), reference, X.columns[1:].tolist(),
    )
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            fitted = sm.Logit(y, X).fit(disp=0, maxiter=max_iter)
        for w in caught:
            logger.warning("LOGIT | %s", w.message)
    except Exception as e:
        raise ModelTrainingError(
            f"Logistic regression failed: {e}", model_name=MODEL_NAME, cause=e
        )

    alpha = 1.0 - confidence_level
    conf = fitted.conf_int(alpha=alpha)
    coefficients = pd.DataFrame({
        "Term": fitted.params.index,
        "Coefficient": fitted.params.values,
        "Std_Error": fitted.bse.values,
        "Z": fitted.tvalues.values,
        "P_Value": fitted.pvalues.values,
        "Odds_Ratio": np.exp(fitted.params.values),
        "CI_Lower": np.exp(conf[0].values),
        "CI_Upper": np.exp(conf[1].values),
    }, columns=COEFFICIENT_COLUMNS)

    converged = bool(fitted.mle_retvals.get("converged", True))
    if not converged:
        logger.warning("LOGIT | Optimizer did not converge in %d iterations", max_iter)

    result = CategoryLogitResult(
        reference=reference,
        categories=categories,
        coefficients=coefficients.reset_index(drop=True),
        pseudo_r2=float(fitted.prsquared),
        log_likelihood=float(fitted.llf),
        ll_null=float(fitted.llnull),
        llr_p_value=float(fitted.llr_pvalue),
        aic=float(fitted.aic),
        n_obs=int(fitted.nobs),
        converged=converged,
        summary_text=str(fitted.summary()),
        params={k: float(v) for k, v in fitted.params.items()},
    )

    for row in coefficients.itertuples():
        logger.info(
            "LOGIT | %-22s coef=%+.4f OR=%.3f p=%.4g",
            row.Term, row.Coefficient, row.Odds_Ratio, row.P_Value,
        )
    logger.info(
        "LOGIT | pseudo R2=%.4f, LLR p=%.4g, AIC=%.2f",
        result.pseudo_r2, result.llr_p_value, result.aic,
    )
    return result

"""
Risk Binning Pipeline

Orchestrates the binning analysis end to end:
1. Load data
2. Pre-analysis data checks
3. Bin the score into risk categories
4. Descriptive summaries and monotonicity check
5. Chi-square test of category vs. outcome
6. Logistic regression on the categories (train split)
7. Prediction and discrimination metrics (train / holdout)
8. Charts, Excel workbook and console report
"""

from typing import Any, Dict, Optional
from datetime import datetime
import logging
import time

import numpy as np
import pandas as pd

from risk_binning.analysis import (
    chi_square_test,
    describe_score,
    summarize_by_category,
)
from risk_binning.binning import RiskBinner
from risk_binning.config.schema import PipelineConfig
from risk_binning.core.exceptions import DataQualityError
from risk_binning.core.logger import PipelineLogger, setup_logging
from risk_binning.data import LoadedData, load_dataset, split_holdout
from risk_binning.evaluation import (
    check_monotonic_default_rates,
    evaluate_predictions,
    performance_frame,
)
from risk_binning.io.output_manager import OutputManager
from risk_binning.models import CategoryLogitResult, fit_category_logit
from risk_binning.reporting import excel_reporter
from risk_binning.reporting.console import format_console_report
from risk_binning.reporting.plots import save_all_charts
from risk_binning.validation import DataValidator, Severity, Status


logger = logging.getLogger(__name__)

PREDICTION_COLUMN = "predicted_pd"


class RiskBinningPipeline:
    """
    End-to-end risk score binning analysis.

    Args:
        config: Frozen pipeline configuration.
        output_manager: Run directory manager. A new one is created from
            ``config`` when not given.
    """

    def __init__(
        self,
        config: PipelineConfig,
        output_manager: Optional[OutputManager] = None,
    ):
        self.config = config
        self.output_manager = output_manager or OutputManager(config)
        self.run_id = self.output_manager.run_id
        self.binner = RiskBinner.from_config(config.binning)
        self.plog = PipelineLogger(__name__)
        self._setup_logging()

    def _setup_logging(self) -> None:
        """Route the root logger to the console and the run's log file."""
        self.log_file = str(self.output_manager.get_log_path())
        setup_logging(
            log_level=self.config.reproducibility.log_level,
            log_file=self.log_file,
        )
        logger.info(f"INIT | Pipeline started, run_id={self.run_id}")
        logger.info(f"INIT | Input: {self.config.data.input_path}")
        logger.info(f"INIT | Log file: {self.log_file}")

    def run(self) -> Dict[str, Any]:
        """Execute the full pipeline and return the results dict."""
        results: Dict[str, Any] = {
            'run_id': self.run_id,
            'run_dir': str(self.output_manager.run_dir),
            'input_path': self.config.data.input_path,
            'log_file': self.log_file,
        }
        self.plog.set_context(run_id=self.run_id)

        if self.config.reproducibility.save_config:
            self.output_manager.save_config_snapshot(self.config)

        try:
            self._run_steps(results)
        except Exception as e:
            logger.error(f"FAILED | {type(e).__name__}: {e}")
            self.output_manager.mark_failed()
            results['status'] = 'failed'
            if self.config.reproducibility.save_metadata:
                self.output_manager.save_run_metadata({'error': str(e)})
            raise

        self.output_manager.mark_complete()
        results['status'] = 'success'
        if self.config.reproducibility.save_metadata:
            results['metadata_path'] = str(self.output_manager.save_run_metadata({
                'n_rows': results.get('n_rows'),
                'binning': self.binner.to_dict(),
            }))

        if self.config.output.print_console_report:
            print(format_console_report(results))

        logger.info("COMPLETE | Pipeline finished successfully")
        logger.info(f"COMPLETE | Output: {self.output_manager.run_dir}")
        if results.get('excel_path'):
            logger.info(f"COMPLETE | Excel: {results['excel_path']}")
        logger.info(f"COMPLETE | Log: {self.log_file}")
        self.plog.clear_context()
        return results

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _run_steps(self, results: Dict[str, Any]) -> None:
        cfg = self.config
        category_col = cfg.binning.output_column
        target_col = cfg.data.target_column
        score_col = cfg.data.score_column

        # Step 1: Load
        start = time.time()
        self.plog.step_start("Load data")
        data = load_dataset(
            input_path=cfg.data.input_path,
            score_column=score_col,
            target_column=target_col,
            id_columns=cfg.data.id_columns,
        )
        results['n_rows'] = data.n_rows
        self.plog.data_stats("Input", data.n_rows, len(data.df.columns))
        self.plog.step_complete("Load data", time.time() - start)

        # Step 2: Data checks
        if cfg.validation.enabled:
            report = DataValidator(cfg).validate(data.df)
            results['data_checks'] = report.to_dataframe()
            logger.info(f"DATA | {report.summary().splitlines()[0]}")
            if report.has_critical_failures:
                failed = [
                    c.check_name for c in report.checks
                    if c.status == Status.FAIL and c.severity == Severity.CRITICAL
                ]
                raise DataQualityError(
                    f"Critical data checks failed: {failed}",
                    quality_report={
                        "failed_checks": failed,
                        "checks": report.to_dataframe().to_dict(orient="records"),
                    },
                )
        results['bad_rate'] = data.bad_rate

        # Step 3: Binning
        start = time.time()
        self.plog.step_start("Binning")
        binned = self.binner.transform(data.df, score_col, output_column=category_col)
        results['bin_edges'] = self.binner.bin_edges()
        self.plog.step_complete("Binning", time.time() - start)

        # Step 4: Descriptive statistics
        results['score_stats'] = describe_score(binned, score_col)
        summary_df = summarize_by_category(binned, category_col, target_col, score_column=score_col)
        results['category_summary'] = summary_df
        results['monotonicity'] = check_monotonic_default_rates(
            summary_df, order=self.binner.labels,
        )

        # Step 5: Chi-square
        start = time.time()
        self.plog.step_start("Chi-square test")
        chi_input = binned
        if not cfg.analysis.include_missing_category:
            chi_input = binned[binned[category_col] != self.binner.missing_label]
        chi2 = chi_square_test(
            chi_input, category_col, target_col,
            alpha=cfg.analysis.alpha,
            min_expected=cfg.analysis.min_expected_frequency,
        )
        results['chi_square'] = chi2
        self.plog.metric("chi2_p_value", f"{chi2.p_value:.4g}")
        self.plog.step_complete("Chi-square test", time.time() - start)

        # Step 6: Logistic regression on the train split
        start = time.time()
        self.plog.step_start("Logistic regression")
        train_df, holdout_df = split_holdout(
            binned, target_col,
            test_size=cfg.splitting.test_size,
            random_state=cfg.reproducibility.global_seed,
            stratify=cfg.splitting.stratify,
        )
        exclude = [] if cfg.model.include_missing_category else [self.binner.missing_label]
        logit = fit_category_logit(
            train_df, category_col, target_col,
            reference=cfg.model.reference_category,
            exclude_categories=exclude,
            max_iter=cfg.model.max_iter,
            confidence_level=cfg.model.confidence_level,
        )
        results['logit'] = logit
        results['predicted_pd'] = logit.category_probabilities()
        self.plog.step_complete("Logistic regression", time.time() - start)

        # Step 7: Prediction and evaluation
        periods = [('Train', train_df)]
        if len(holdout_df) > 0:
            periods.append(('Holdout', holdout_df))
        perf_rows = []
        for period, frame in periods:
            scorable = frame[frame[category_col].isin(logit.categories)]
            if len(scorable) < len(frame):
                logger.info(
                    f"EVAL | {period}: {len(frame) - len(scorable):,} rows in "
                    f"categories outside the model are not scored"
                )
            perf_rows.append(evaluate_predictions(
                scorable[target_col],
                logit.predict_proba(scorable[category_col]),
                period,
            ))
        results['performance'] = performance_frame(perf_rows)

        scored = self._score(binned, logit, category_col)
        results['scored_data'] = scored

        # Step 8: Outputs
        self._save_outputs(results, data, scored)

    def _score(
        self,
        binned: pd.DataFrame,
        logit: CategoryLogitResult,
        category_col: str,
    ) -> pd.DataFrame:
        """Attach the predicted default probability to every scorable row."""
        scored = binned.copy()
        scored[PREDICTION_COLUMN] = np.nan
        mask = scored[category_col].isin(logit.categories)
        if mask.any():
            scored.loc[mask, PREDICTION_COLUMN] = logit.predict_proba(
                scored.loc[mask, category_col]
            )
        return scored

    def _save_outputs(
        self,
        results: Dict[str, Any],
        data: LoadedData,
        scored: pd.DataFrame,
    ) -> None:
        cfg = self.config
        om = self.output_manager
        chi2 = results['chi_square']
        logit: CategoryLogitResult = results['logit']

        if cfg.output.save_step_results:
            binning_outputs = {
                'bin_edges': results['bin_edges'],
                'binning_rules': self.binner.to_dict(),
            }
            if 'data_checks' in results:
                binning_outputs['data_checks'] = results['data_checks']
            om.save_step_results("01_binning", binning_outputs)
            om.save_step_results("02_descriptive", {
                'score_stats': results['score_stats'],
                'category_summary': results['category_summary'],
                'monotonicity': results['monotonicity'],
            })
            om.save_step_results("03_association", {
                'chi_square': chi2.to_dict(),
                'observed': chi2.observed.reset_index(),
                'expected': chi2.expected.reset_index(),
            })
            om.save_step_results("04_model", {
                'coefficients': logit.coefficients,
                'predicted_pd': results['predicted_pd'],
                'fit_statistics': logit.to_dict(),
                'summary': logit.summary_text,
            })
            om.save_step_results("05_evaluation", {
                'performance': results['performance'],
            })

        if cfg.output.save_scored_data:
            keep = data.id_columns + [
                data.score_column, data.target_column,
                cfg.binning.output_column, PREDICTION_COLUMN,
            ]
            try:
                path = om.save_artifact('scored_data', scored[keep], fmt='csv')
                results['scored_data_path'] = str(path)
            except Exception as e:
                logger.warning("OUTPUT | Scored data save failed: %s", e)

        if cfg.output.save_model:
            try:
                path = om.save_artifact('category_logit', logit, fmt='joblib')
                results['model_path'] = str(path)
                logger.info("OUTPUT | Model saved: %s", path)
            except Exception as e:
                logger.warning("OUTPUT | Model save failed: %s", e)

        chart_paths: Dict[str, str] = {}
        if cfg.plots.enabled:
            try:
                chart_paths = save_all_charts(
                    df=scored,
                    summary_df=results['category_summary'],
                    score_column=data.score_column,
                    target_column=data.target_column,
                    thresholds=[self.binner.low_threshold, self.binner.high_threshold],
                    output_dir=str(om.reports_dir),
                    n_bins=cfg.plots.n_bins,
                    dpi=cfg.plots.dpi,
                    style=cfg.plots.style,
                )
            except Exception as e:
                logger.warning("PLOTS | Chart generation failed: %s", e)
        results['chart_paths'] = chart_paths

        if cfg.output.generate_excel:
            excel_path = str(om.reports_dir / f"risk_binning_{self.run_id}.xlsx")
            try:
                excel_reporter.generate_report(
                    output_path=excel_path,
                    summary=self._build_summary(results),
                    category_summary_df=results['category_summary'],
                    score_stats_df=results['score_stats'],
                    data_checks_df=results.get('data_checks'),
                    chi_square_df=chi2.to_frame(),
                    contingency_df=chi2.observed,
                    logit_df=logit.coefficients,
                    predicted_pd_df=results['predicted_pd'],
                    performance_df=results['performance'],
                    chart_paths=chart_paths,
                    alpha=cfg.analysis.alpha,
                )
                results['excel_path'] = excel_path
            except Exception as e:
                logger.warning("EXCEL | Report generation failed: %s", e)

    def _build_summary(self, results: Dict[str, Any]) -> Dict[str, Any]:
        """Build the summary dict for the 00_Summary sheet."""
        cfg = self.config
        chi2 = results['chi_square']
        logit: CategoryLogitResult = results['logit']
        mono = results['monotonicity']

        summary = {
            'Run Date': datetime.now().strftime('%Y-%m-%d %H:%M:%S'),
            'Run ID': self.run_id,
            'Input File': cfg.data.input_path,
            'Rows': results['n_rows'],
            'Overall Default Rate': f"{results['bad_rate']:.2%}",
            '': '',  # separator
            'Score Column': cfg.data.score_column,
            'Target Column': cfg.data.target_column,
            'Cut Points': f"{self.binner.low_threshold:g} / {self.binner.high_threshold:g}",
            'Categories': ', '.join(self.binner.categories),
            'Default Rate Monotonic': 'Yes' if mono['is_monotonic'] else 'No',
            ' ': '',  # separator
            'Chi-Square Statistic': round(chi2.statistic, 4),
            'Chi-Square p-value': chi2.p_value,
            "Cramer's V": round(chi2.cramers_v, 4),
            'Association Significant': 'Yes' if chi2.is_significant else 'No',
            '  ': '',  # separator
            'Logit Reference Category': logit.reference,
            'Logit Pseudo R2': round(logit.pseudo_r2, 4),
            'Logit LLR p-value': logit.llr_p_value,
            'Logit Converged': 'Yes' if logit.converged else 'No',
        }

        summary['   '] = ''  # separator
        for row in results['performance'].itertuples(index=False):
            summary[f'AUC {row.Period}'] = row.AUC
            summary[f'Gini {row.Period}'] = row.Gini
        return summary


def run_pipeline(config: PipelineConfig) -> Dict[str, Any]:
    """Convenience wrapper: build and run the pipeline for ``config``."""
    return RiskBinningPipeline(config).run()

#!/usr/bin/env python3
"""
Risk Score Binning CLI

Usage:
    # Run with YAML config (recommended):
    python scripts/run_risk_binning.py --config config/risk_binning.yaml

    # Override specific settings via CLI:
    python scripts/run_risk_binning.py \
        --config config/risk_binning.yaml \
        --input data/sample/credit_risk_scores.csv \
        --low-threshold 0.25 --high-threshold 0.65

    # Defaults only (no YAML):
    python scripts/run_risk_binning.py --input data/sample/credit_risk_scores.csv
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = str(Path(__file__).resolve().parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from risk_binning.config.loader import load_config
from risk_binning.core.exceptions import ConfigurationError, PipelineException
from risk_binning.io.output_manager import OutputManager
from risk_binning.pipeline import RiskBinningPipeline


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Risk Score Binning Analysis',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        '--config', default=None,
        help='Path to YAML config file (e.g., config/risk_binning.yaml)',
    )

    # Data overrides
    parser.add_argument(
        '--input', default=None,
        help='Path to the input CSV file (overrides config)',
    )
    parser.add_argument(
        '--score-column', default=None,
        help='Name of the continuous risk score column',
    )
    parser.add_argument(
        '--target-column', default=None,
        help='Name of the binary default column',
    )
    parser.add_argument(
        '--output-dir', default=None,
        help='Base directory for run outputs',
    )

    # Binning and model overrides
    parser.add_argument(
        '--low-threshold', type=float, default=None,
        help='Scores below this are Low',
    )
    parser.add_argument(
        '--high-threshold', type=float, default=None,
        help='Scores at or above this are High',
    )
    parser.add_argument(
        '--reference-category', default=None,
        help='Baseline category of the logistic regression',
    )
    parser.add_argument(
        '--test-size', type=float, default=None,
        help='Holdout fraction for model evaluation (0 = in-sample only)',
    )

    # Output toggles
    parser.add_argument(
        '--no-plots', action='store_true',
        help='Skip chart generation',
    )
    parser.add_argument(
        '--no-excel', action='store_true',
        help='Skip the Excel workbook',
    )
    parser.add_argument(
        '--log-level', default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level',
    )

    return parser.parse_args(argv)


def _build_cli_overrides(args) -> dict:
    """Build a flat dot-notation override dict from CLI args."""
    overrides = {
        "data.input_path": args.input,
        "data.score_column": args.score_column,
        "data.target_column": args.target_column,
        "output.base_dir": args.output_dir,
        "binning.low_threshold": args.low_threshold,
        "binning.high_threshold": args.high_threshold,
        "model.reference_category": args.reference_category,
        "splitting.test_size": args.test_size,
        "reproducibility.log_level": args.log_level,
    }
    if args.no_plots:
        overrides["plots.enabled"] = False
    if args.no_excel:
        overrides["output.generate_excel"] = False

    return {k: v for k, v in overrides.items() if v is not None}


def main(argv=None) -> int:
    args = parse_args(argv)

    # Load config: YAML + CLI overrides
    try:
        config = load_config(yaml_path=args.config, cli_overrides=_build_cli_overrides(args))
    except ConfigurationError as e:
        print(f"\nInvalid configuration: {e}", file=sys.stderr)
        return 1
    output_manager = OutputManager(config)

    try:
        results = RiskBinningPipeline(config, output_manager=output_manager).run()
    except PipelineException as e:
        print(f"\nPipeline failed: {e}", file=sys.stderr)
        print(f"Run directory: {output_manager.run_dir}", file=sys.stderr)
        return 1

    chi2 = results['chi_square']
    print(f"\n{'='*60}")
    print(f"Pipeline completed: {results['status']}")
    print(f"Chi-square p-value: {chi2.p_value:.4g}")
    print(f"Excel report: {results.get('excel_path', 'not generated')}")
    print(f"Run directory: {output_manager.run_dir}")
    print(f"Log file: {results['log_file']}")
    print(f"{'='*60}")
    return 0


if __name__ == '__main__':
    sys.exit(main())

"""
Sample Data Generator

Generates a synthetic credit dataset for the risk binning analysis:
one row per customer with a continuous risk score in [0, 1] (some of it
missing) and a default flag whose probability rises with the score.
"""

from pathlib import Path
from typing import Optional
import argparse

import numpy as np
import pandas as pd


# Seed for reproducibility
RANDOM_SEED = 42

# Score ~ Beta(a, b): most customers low risk, long right tail
SCORE_BETA_A = 2.0
SCORE_BETA_B = 4.0

# logit(PD) = INTERCEPT + SLOPE * score
DEFAULT_INTERCEPT = -4.0
DEFAULT_SLOPE = 5.0

# Customers without a score default more often than average
MISSING_SCORE_PD = 0.12


def generate_risk_scores(
    n_customers: int = 10000,
    missing_rate: float = 0.05,
    seed: int = RANDOM_SEED,
) -> pd.DataFrame:
    """
    Build the synthetic dataset.

    Args:
        n_customers: Number of rows.
        missing_rate: Share of rows whose score is blanked out.
        seed: Random seed.

    Returns:
        DataFrame with customer_id, risk_score and default_flag.
    """
    rng = np.random.default_rng(seed)

    scores = rng.beta(SCORE_BETA_A, SCORE_BETA_B, size=n_customers)
    pd_true = 1.0 / (1.0 + np.exp(-(DEFAULT_INTERCEPT + DEFAULT_SLOPE * scores)))

    is_missing = rng.random(n_customers) < missing_rate
    pd_true = np.where(is_missing, MISSING_SCORE_PD, pd_true)
    defaults = (rng.random(n_customers) < pd_true).astype(int)

    return pd.DataFrame({
        'customer_id': [f"CUST_{i:07d}" for i in range(1, n_customers + 1)],
        'risk_score': np.where(is_missing, np.nan, np.round(scores, 4)),
        'default_flag': defaults,
    })


def generate_sample_data(
    n_customers: int = 10000,
    output_dir: str = 'data/sample',
    missing_rate: float = 0.05,
    seed: int = RANDOM_SEED,
    filename: Optional[str] = None,
) -> Path:
    """Generate the dataset and write it as CSV; returns the file path."""
    df = generate_risk_scores(n_customers=n_customers, missing_rate=missing_rate, seed=seed)

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / (filename or 'credit_risk_scores.csv')
    df.to_csv(out_path, index=False)

    print(f"Generated {len(df):,} rows -> {out_path}")
    print(f"  Missing scores: {df['risk_score'].isna().sum():,} ({df['risk_score'].isna().mean():.1%})")
    print(f"  Default rate:   {df['default_flag'].mean():.2%}")
    return out_path


def main():
    """Main function for CLI usage."""
    parser = argparse.ArgumentParser(
        description="Generate sample data for the risk binning analysis"
    )
    parser.add_argument(
        '-n', '--n-customers',
        type=int,
        default=10000,
        help='Number of customers to generate (default: 10000)'
    )
    parser.add_argument(
        '-o', '--output-dir',
        type=str,
        default='data/sample',
        help='Output directory (default: data/sample)'
    )
    parser.add_argument(
        '-m', '--missing-rate',
        type=float,
        default=0.05,
        help='Share of rows with a missing score (default: 0.05)'
    )
    parser.add_argument(
        '-s', '--seed',
        type=int,
        default=RANDOM_SEED,
        help=f'Random seed (default: {RANDOM_SEED})'
    )

    args = parser.parse_args()

    generate_sample_data(
        n_customers=args.n_customers,
        output_dir=args.output_dir,
        missing_rate=args.missing_rate,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()

"""
Pytest Configuration and Shared Fixtures

Provides common fixtures for all test modules including:
- Pipeline configurations pointing at temporary directories
- Synthetic scored data with known default-rate ordering
- Binned data and a sample CSV on disk
"""

import sys
from pathlib import Path
from typing import Any, Dict

import numpy as np
import pandas as pd
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from risk_binning.binning import RiskBinner
from risk_binning.config.schema import PipelineConfig


# ===================================================================
# DATA FIXTURES
# ===================================================================

# True default probability per score band; missing scores sit between Low and Medium
BAND_PD = {"Low": 0.03, "Medium": 0.12, "High": 0.40, "Missing": 0.08}


def make_scored_data(n: int = 2000, missing_rate: float = 0.05, seed: int = 42) -> pd.DataFrame:
    """Synthetic customers with a uniform score and band-driven defaults."""
    rng = np.random.default_rng(seed)
    scores = rng.uniform(0, 1, n)
    is_missing = rng.random(n) < missing_rate

    band = np.where(scores < 0.3, "Low", np.where(scores < 0.7, "Medium", "High"))
    band = np.where(is_missing, "Missing", band)
    pd_true = np.array([BAND_PD[b] for b in band])

    return pd.DataFrame({
        "customer_id": [f"C{i:05d}" for i in range(n)],
        "risk_score": np.where(is_missing, np.nan, scores),
        "default_flag": (rng.random(n) < pd_true).astype(int),
    })


@pytest.fixture
def sample_data() -> pd.DataFrame:
    """2000 rows, ~5% missing scores, default rate increasing with the score."""
    return make_scored_data()


@pytest.fixture
def binned_data(sample_data) -> pd.DataFrame:
    """sample_data with a risk_category column."""
    return RiskBinner().transform(sample_data, "risk_score", output_column="risk_category")


@pytest.fixture
def sample_csv(tmp_path, sample_data) -> Path:
    path = tmp_path / "credit_risk_scores.csv"
    sample_data.to_csv(path, index=False)
    return path


# ===================================================================
# CONFIGURATION FIXTURES
# ===================================================================

@pytest.fixture
def sample_config_dict(tmp_path, sample_csv) -> Dict[str, Any]:
    """Valid config dict with data and outputs under tmp_path."""
    return {
        "data": {
            "input_path": str(sample_csv),
            "score_column": "risk_score",
            "target_column": "default_flag",
            "id_columns": ["customer_id"],
        },
        "splitting": {"test_size": 0.30, "stratify": True},
        "binning": {"low_threshold": 0.3, "high_threshold": 0.7},
        "plots": {"enabled": True, "dpi": 60, "n_bins": 20},
        "output": {
            "base_dir": str(tmp_path / "outputs"),
            "print_console_report": False,
        },
        "reproducibility": {"global_seed": 42, "log_level": "INFO"},
    }


@pytest.fixture
def sample_config(sample_config_dict) -> PipelineConfig:
    return PipelineConfig(**sample_config_dict)

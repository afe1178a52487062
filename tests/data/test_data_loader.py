"""
Tests for the Data Loader

Covers: load_dataset (CSV reading, column checks, score coercion, errors)
and split_holdout (stratification, reproducibility, zero test size).
"""

import numpy as np
import pandas as pd
import pytest

from risk_binning.core.exceptions import DataReaderError, SchemaValidationError
from risk_binning.data import LoadedData, load_dataset, split_holdout


# ===================================================================
# load_dataset
# ===================================================================

class TestLoadDataset:

    def test_loads_csv(self, sample_csv, sample_data):
        loaded = load_dataset(str(sample_csv))
        assert isinstance(loaded, LoadedData)
        assert loaded.n_rows == len(sample_data)
        assert loaded.score_column == "risk_score"
        assert loaded.target_column == "default_flag"

    def test_bad_rate(self, sample_csv, sample_data):
        loaded = load_dataset(str(sample_csv))
        assert loaded.bad_rate == pytest.approx(sample_data["default_flag"].mean())

    def test_bad_rate_ignores_text_outcomes(self, tmp_path):
        path = tmp_path / "text.csv"
        pd.DataFrame({"risk_score": [0.1, 0.5, 0.9], "default_flag": ["Y", "N", "N"]}).to_csv(
            path, index=False,
        )
        assert np.isnan(load_dataset(str(path)).bad_rate)

    def test_missing_scores_preserved(self, sample_csv, sample_data):
        loaded = load_dataset(str(sample_csv))
        assert loaded.df["risk_score"].isna().sum() == sample_data["risk_score"].isna().sum()

    def test_id_columns_filtered_to_existing(self, sample_csv):
        loaded = load_dataset(str(sample_csv), id_columns=["customer_id", "not_there"])
        assert loaded.id_columns == ["customer_id"]

    def test_non_numeric_scores_coerced(self, tmp_path):
        path = tmp_path / "dirty.csv"
        pd.DataFrame({
            "risk_score": ["0.1", "oops", "0.8", ""],
            "default_flag": [0, 1, 1, 0],
        }).to_csv(path, index=False)

        loaded = load_dataset(str(path))
        assert pd.api.types.is_float_dtype(loaded.df["risk_score"])
        assert loaded.df["risk_score"].isna().sum() == 2

    def test_file_not_found(self, tmp_path):
        with pytest.raises(DataReaderError, match="not found") as exc_info:
            load_dataset(str(tmp_path / "missing.csv"))
        assert exc_info.value.source.endswith("missing.csv")

    def test_missing_required_column(self, tmp_path):
        path = tmp_path / "no_target.csv"
        pd.DataFrame({"risk_score": [0.1, 0.2]}).to_csv(path, index=False)

        with pytest.raises(SchemaValidationError) as exc_info:
            load_dataset(str(path))
        assert exc_info.value.missing_columns == ["default_flag"]

    def test_custom_column_names(self, tmp_path):
        path = tmp_path / "custom.csv"
        pd.DataFrame({"pd_score": [0.1, 0.9], "bad": [0, 1]}).to_csv(path, index=False)

        loaded = load_dataset(str(path), score_column="pd_score", target_column="bad")
        assert loaded.n_rows == 2


# ===================================================================
# split_holdout
# ===================================================================

class TestSplitHoldout:

    def test_sizes(self, sample_data):
        train, holdout = split_holdout(sample_data, "default_flag", test_size=0.30)
        assert len(train) + len(holdout) == len(sample_data)
        assert len(holdout) == pytest.approx(0.30 * len(sample_data), abs=1)

    def test_stratified_bad_rates_close(self, sample_data):
        train, holdout = split_holdout(sample_data, "default_flag", test_size=0.30)
        assert train["default_flag"].mean() == pytest.approx(
            holdout["default_flag"].mean(), abs=0.01
        )

    def test_reproducible(self, sample_data):
        a, _ = split_holdout(sample_data, "default_flag", random_state=7)
        b, _ = split_holdout(sample_data, "default_flag", random_state=7)
        assert a["customer_id"].tolist() == b["customer_id"].tolist()

    def test_index_reset(self, sample_data):
        train, holdout = split_holdout(sample_data, "default_flag")
        assert train.index.tolist() == list(range(len(train)))
        assert holdout.index.tolist() == list(range(len(holdout)))

    def test_zero_test_size_returns_full_train(self, sample_data):
        train, holdout = split_holdout(sample_data, "default_flag", test_size=0.0)
        assert len(train) == len(sample_data)
        assert len(holdout) == 0
        assert list(holdout.columns) == list(sample_data.columns)

    def test_unstratified(self, sample_data):
        train, holdout = split_holdout(sample_data, "default_flag", stratify=False)
        assert len(train) + len(holdout) == len(sample_data)

"""
Unit Tests for Output Manager

Tests directory creation, run_id format, config snapshots,
artifact saving and metadata generation.
"""

import json
import re
from datetime import datetime

import pandas as pd
import pytest
import yaml

from risk_binning.config.schema import PipelineConfig
from risk_binning.core.exceptions import ArtifactError
from risk_binning.io import STEP_DIRS, OutputManager


@pytest.fixture
def om(tmp_path):
    config = PipelineConfig(output={"base_dir": str(tmp_path / "outputs")})
    return OutputManager(config)


# ===================================================================
# Directory Structure
# ===================================================================

class TestDirectoryStructure:

    @pytest.mark.parametrize("subdir", ["config", "data", "reports", "logs"])
    def test_subdirs_created(self, om, subdir):
        assert (om.run_dir / subdir).is_dir()

    def test_all_step_dirs_created(self, om):
        for step_dir in STEP_DIRS:
            assert (om.run_dir / "steps" / step_dir).is_dir()
        assert len(list((om.run_dir / "steps").iterdir())) == 5

    def test_reports_dir_property(self, om):
        assert om.reports_dir == om.run_dir / "reports"

    def test_log_path(self, om):
        assert om.get_log_path() == om.run_dir / "logs" / "pipeline.log"


# ===================================================================
# Run ID
# ===================================================================

class TestRunId:

    def test_format(self, om):
        assert re.match(r"^\d{8}_\d{6}_[a-f0-9]{6}$", om.run_id)

    def test_uses_run_start(self, tmp_path):
        config = PipelineConfig(output={"base_dir": str(tmp_path)})
        om = OutputManager(config, run_start=datetime(2024, 3, 1, 9, 30, 0))
        assert om.run_id.startswith("20240301_093000_")

    def test_hash_depends_on_config(self, tmp_path):
        start = datetime(2024, 3, 1, 9, 30, 0)
        a = OutputManager(PipelineConfig(output={"base_dir": str(tmp_path)}), run_start=start)
        b = OutputManager(
            PipelineConfig(output={"base_dir": str(tmp_path)}, binning={"low_threshold": 0.2}),
            run_start=start,
        )
        assert a.run_id != b.run_id


# ===================================================================
# Saving
# ===================================================================

class TestSaving:

    def test_config_snapshot(self, om):
        config = PipelineConfig(binning={"low_threshold": 0.25})
        path = om.save_config_snapshot(config)
        with open(path) as f:
            data = yaml.safe_load(f)
        assert data["binning"]["low_threshold"] == 0.25

    def test_step_results(self, om):
        om.save_step_results("03_association", {
            "table": pd.DataFrame({"a": [1, 2]}),
            "stats": {"p_value": 0.01},
            "note": "text",
        })
        step_dir = om.run_dir / "steps" / "03_association"
        assert pd.read_csv(step_dir / "table.csv")["a"].tolist() == [1, 2]
        assert json.loads((step_dir / "stats.json").read_text())["p_value"] == 0.01
        assert (step_dir / "note.txt").read_text() == "text"

    def test_artifact_csv(self, om):
        path = om.save_artifact("scored", pd.DataFrame({"x": [1]}))
        assert path == om.run_dir / "data" / "scored.csv"
        assert path.exists()

    def test_artifact_joblib(self, om):
        import joblib
        path = om.save_artifact("obj", {"k": 1}, fmt="joblib")
        assert joblib.load(path) == {"k": 1}

    def test_artifact_json_subdir(self, om):
        path = om.save_artifact("meta", {"k": 1}, fmt="json", subdir="reports")
        assert path.parent == om.reports_dir

    def test_unsupported_format(self, om):
        with pytest.raises(ArtifactError, match="Unsupported artifact format"):
            om.save_artifact("x", {"k": 1}, fmt="xml")


# ===================================================================
# Metadata
# ===================================================================

class TestMetadata:

    def test_metadata_contents(self, tmp_path, sample_csv):
        om = OutputManager(PipelineConfig(
            data={"input_path": str(sample_csv)},
            output={"base_dir": str(tmp_path / "outputs")},
        ))
        om.mark_complete()
        path = om.save_run_metadata(extra={"n_rows": 10})
        meta = json.loads(path.read_text())
        assert meta["run_id"] == om.run_id
        assert meta["status"] == "success"
        assert meta["n_rows"] == 10
        assert len(meta["input_file_hash"]) == 32
        assert "statsmodels" in meta["package_versions"]

    def test_unknown_hash_for_missing_input(self, tmp_path):
        om = OutputManager(PipelineConfig(
            data={"input_path": str(tmp_path / "absent.csv")},
            output={"base_dir": str(tmp_path / "outputs")},
        ))
        meta = json.loads(om.save_run_metadata().read_text())
        assert meta["input_file_hash"] == "unknown"

    def test_mark_failed(self, om):
        om.mark_failed()
        assert om.status == "failed"

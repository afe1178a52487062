"""
Output Manager

Creates and manages the run directory structure, saves artifacts and metadata.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional
import hashlib
import json
import logging
import platform
import sys

import pandas as pd
import yaml

from risk_binning.config.schema import PipelineConfig
from risk_binning.core.exceptions import ArtifactError


logger = logging.getLogger(__name__)

# Step directory names in pipeline order
STEP_DIRS = [
    "01_binning",
    "02_descriptive",
    "03_association",
    "04_model",
    "05_evaluation",
]

TRACKED_PACKAGES = ["pandas", "numpy", "scipy", "statsmodels", "scikit-learn", "pydantic"]


def _get_package_version(package: str) -> str:
    """Version string of an installed package, or 'not installed'."""
    import importlib.metadata
    try:
        return importlib.metadata.version(package)
    except importlib.metadata.PackageNotFoundError:
        return "not installed"


def _compute_input_hash(input_path: str) -> str:
    """MD5 of the input file, or 'unknown' if it cannot be read."""
    try:
        digest = hashlib.md5()
        with open(input_path, "rb") as f:
            for chunk in iter(lambda: f.read(1 << 20), b""):
                digest.update(chunk)
        return digest.hexdigest()
    except OSError:
        return "unknown"


class OutputManager:
    """Manages the output directory structure and artifact saving for a run.

    Creates a unique run directory under the configured base_dir:
        {base_dir}/{run_id}/
            config/
            data/
            steps/01_binning/ ... steps/05_evaluation/
            reports/
            logs/

    The run_id format is {YYYYMMDD}_{HHMMSS}_{short_hash} where short_hash
    is derived from the config.

    Args:
        config: The pipeline configuration.
        run_start: Optional datetime for the run start. Defaults to now.
    """

    def __init__(self, config: PipelineConfig, run_start: Optional[datetime] = None):
        self._config = config
        self._run_start = run_start or datetime.now()
        self._run_end: Optional[datetime] = None
        self._status = "running"

        config_json = config.model_dump_json()
        short_hash = hashlib.md5(config_json.encode()).hexdigest()[:6]
        timestamp = self._run_start.strftime("%Y%m%d_%H%M%S")
        self._run_id = f"{timestamp}_{short_hash}"

        self._base_dir = Path(config.output.base_dir)
        self._run_dir = self._base_dir / self._run_id
        self._create_directories()

        logger.info("Output directory: %s", self._run_dir)

    @property
    def run_id(self) -> str:
        return self._run_id

    @property
    def run_dir(self) -> Path:
        return self._run_dir

    @property
    def reports_dir(self) -> Path:
        return self._run_dir / "reports"

    @property
    def status(self) -> str:
        return self._status

    def _create_directories(self) -> None:
        dirs = [
            self._run_dir / "config",
            self._run_dir / "data",
            self._run_dir / "reports",
            self._run_dir / "logs",
        ]
        dirs.extend(self._run_dir / "steps" / step_dir for step_dir in STEP_DIRS)

        for d in dirs:
            d.mkdir(parents=True, exist_ok=True)

    def save_config_snapshot(self, config: PipelineConfig) -> Path:
        """Save the frozen config as YAML in the run's config/ directory."""
        config_path = self._run_dir / "config" / "pipeline_config.yaml"
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)

        logger.debug("Config snapshot saved to %s", config_path)
        return config_path

    def save_step_results(self, step_name: str, results_dict: Dict[str, Any]) -> None:
        """Save step outputs into the step directory.

        DataFrames go to CSV, dicts and lists to JSON, anything else to text.

        Args:
            step_name: Name of the step (e.g., '01_binning').
            results_dict: Dict of name -> DataFrame or other serializable data.
        """
        step_dir = self.get_step_dir(step_name)

        for name, obj in results_dict.items():
            if isinstance(obj, pd.DataFrame):
                out_path = step_dir / f"{name}.csv"
                obj.to_csv(out_path, index=False)
            elif isinstance(obj, (dict, list)):
                out_path = step_dir / f"{name}.json"
                with open(out_path, "w", encoding="utf-8") as f:
                    json.dump(obj, f, indent=2, default=str)
            else:
                out_path = step_dir / f"{name}.txt"
                with open(out_path, "w", encoding="utf-8") as f:
                    f.write(str(obj))
            logger.debug("Saved %s to %s", name, out_path)

    def save_artifact(
        self,
        name: str,
        obj: Any,
        fmt: str = "csv",
        subdir: str = "data",
    ) -> Path:
        """Save a generic artifact to the run directory.

        Args:
            name: Artifact name (without extension).
            obj: The object to save.
            fmt: Format - 'csv', 'parquet', 'json', 'joblib'.
            subdir: Subdirectory within the run dir.

        Returns:
            Path to the saved artifact.
        """
        target_dir = self._run_dir / subdir
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / f"{name}.{fmt}"

        try:
            if fmt == "csv" and isinstance(obj, pd.DataFrame):
                obj.to_csv(path, index=False)
            elif fmt == "parquet" and isinstance(obj, pd.DataFrame):
                obj.to_parquet(path, index=False)
            elif fmt == "json":
                with open(path, "w", encoding="utf-8") as f:
                    json.dump(obj, f, indent=2, default=str)
            elif fmt == "joblib":
                import joblib
                joblib.dump(obj, path)
            else:
                raise ArtifactError(
                    f"Unsupported artifact format '{fmt}' for {type(obj).__name__}",
                    artifact_path=str(path),
                )
        except ArtifactError:
            raise
        except Exception as e:
            raise ArtifactError(
                f"Failed to save artifact '{name}'", artifact_path=str(path), cause=e
            )

        logger.debug("Artifact saved: %s", path)
        return path

    def save_run_metadata(self, extra: Optional[Dict[str, Any]] = None) -> Path:
        """Collect and save run metadata to run_metadata.json.

        Includes package versions, OS info, timing and the input file hash.
        """
        self._run_end = self._run_end or datetime.now()
        duration = (self._run_end - self._run_start).total_seconds()

        metadata = {
            "run_id": self._run_id,
            "python_version": sys.version,
            "package_versions": {p: _get_package_version(p) for p in TRACKED_PACKAGES},
            "os_info": {
                "system": platform.system(),
                "release": platform.release(),
                "machine": platform.machine(),
            },
            "run_start": self._run_start.isoformat(),
            "run_end": self._run_end.isoformat(),
            "duration_seconds": round(duration, 2),
            "status": self._status,
            "input_file": self._config.data.input_path,
            "input_file_hash": _compute_input_hash(self._config.data.input_path),
        }
        if extra:
            metadata.update(extra)

        path = self._run_dir / "run_metadata.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2, default=str)

        logger.info("Run metadata saved to %s", path)
        return path

    def get_step_dir(self, step_name: str) -> Path:
        step_dir = self._run_dir / "steps" / step_name
        step_dir.mkdir(parents=True, exist_ok=True)
        return step_dir

    def get_log_path(self) -> Path:
        return self._run_dir / "logs" / "pipeline.log"

    def mark_complete(self, status: str = "success") -> None:
        """Mark the run as complete.

        Args:
            status: Final status ('success' or 'failed').
        """
        self._status = status
        self._run_end = datetime.now()

    def mark_failed(self) -> None:
        self.mark_complete(status="failed")

"""
Pydantic Configuration Schema

Defines all configuration models for the risk binning analysis.
Defaults reproduce the standard Low / Medium / High cut points at 0.3 and 0.7.
"""

from typing import List, Literal
from pydantic import BaseModel, Field, model_validator


class DataConfig(BaseModel):
    """Data source configuration."""

    model_config = {"frozen": True}

    input_path: str = "data/sample/credit_risk_scores.csv"
    score_column: str = "risk_score"
    target_column: str = "default_flag"
    id_columns: List[str] = Field(default_factory=lambda: ["customer_id"])


class SplittingConfig(BaseModel):
    """Holdout split used to evaluate the logistic model's predictions."""

    model_config = {"frozen": True}

    test_size: float = Field(default=0.30, ge=0.0, lt=1.0)
    stratify: bool = True


class BinningConfig(BaseModel):
    """Cut points and labels for the risk categories.

    score < low_threshold                   -> labels[0]
    low_threshold <= score < high_threshold -> labels[1]
    score >= high_threshold                 -> labels[2]
    missing score                           -> missing_label
    """

    model_config = {"frozen": True}

    low_threshold: float = 0.3
    high_threshold: float = 0.7
    labels: List[str] = Field(default_factory=lambda: ["Low", "Medium", "High"])
    missing_label: str = "Missing"
    output_column: str = "risk_category"

    @model_validator(mode="after")
    def thresholds_valid(self) -> "BinningConfig":
        if self.low_threshold >= self.high_threshold:
            raise ValueError(
                f"low_threshold ({self.low_threshold}) must be less than "
                f"high_threshold ({self.high_threshold})"
            )
        if len(self.labels) != 3:
            raise ValueError(f"Exactly 3 labels are required, got {len(self.labels)}")
        if len(set(self.labels + [self.missing_label])) != 4:
            raise ValueError("Category labels and missing_label must be distinct")
        return self


class AnalysisConfig(BaseModel):
    """Chi-square association test settings."""

    model_config = {"frozen": True}

    alpha: float = Field(default=0.05, gt=0.0, lt=1.0)
    min_expected_frequency: float = Field(default=5.0, ge=0.0)
    include_missing_category: bool = True


class ModelConfig(BaseModel):
    """Logistic regression settings."""

    model_config = {"frozen": True}

    reference_category: str = "Low"
    include_missing_category: bool = True
    max_iter: int = Field(default=100, ge=1)
    confidence_level: float = Field(default=0.95, gt=0.0, lt=1.0)


class ValidationConfig(BaseModel):
    """Pre-analysis data check thresholds."""

    model_config = {"frozen": True}

    enabled: bool = True
    min_rows: int = Field(default=30, ge=1)
    max_missing_score_rate: float = Field(default=0.20, ge=0.0, le=1.0)
    min_bad_rate: float = Field(default=0.005, ge=0.0, le=1.0)
    max_bad_rate: float = Field(default=0.50, ge=0.0, le=1.0)
    score_min: float = 0.0
    score_max: float = 1.0


class PlotConfig(BaseModel):
    """Chart output configuration."""

    model_config = {"frozen": True}

    enabled: bool = True
    dpi: int = Field(default=150, ge=50)
    n_bins: int = Field(default=40, ge=5)
    style: str = "whitegrid"


class OutputConfig(BaseModel):
    """Output configuration."""

    model_config = {"frozen": True}

    base_dir: str = "outputs/risk_binning"
    save_step_results: bool = True
    save_scored_data: bool = True
    save_model: bool = True
    generate_excel: bool = True
    print_console_report: bool = True


class ReproducibilityConfig(BaseModel):
    """Reproducibility and logging configuration."""

    model_config = {"frozen": True}

    global_seed: int = 42
    save_config: bool = True
    save_metadata: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


class PipelineConfig(BaseModel):
    """Top-level configuration combining all sections."""

    model_config = {"frozen": True}

    data: DataConfig = Field(default_factory=DataConfig)
    splitting: SplittingConfig = Field(default_factory=SplittingConfig)
    binning: BinningConfig = Field(default_factory=BinningConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    model: ModelConfig = Field(default_factory=ModelConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    plots: PlotConfig = Field(default_factory=PlotConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    reproducibility: ReproducibilityConfig = Field(default_factory=ReproducibilityConfig)

    @model_validator(mode="after")
    def reference_is_a_category(self) -> "PipelineConfig":
        valid = list(self.binning.labels) + [self.binning.missing_label]
        if self.model.reference_category not in valid:
            raise ValueError(
                f"reference_category '{self.model.reference_category}' "
                f"is not one of {valid}"
            )
        if (
            self.model.reference_category == self.binning.missing_label
            and not self.model.include_missing_category
        ):
            raise ValueError(
                "reference_category cannot be the missing label when "
                "include_missing_category is False"
            )
        return self

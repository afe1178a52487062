"""
Config Module

Pydantic-based configuration for the risk binning analysis.
"""

from risk_binning.config.schema import (
    PipelineConfig,
    DataConfig,
    SplittingConfig,
    BinningConfig,
    AnalysisConfig,
    ModelConfig,
    ValidationConfig,
    PlotConfig,
    OutputConfig,
    ReproducibilityConfig,
)
from risk_binning.config.loader import load_config, save_config

__all__ = [
    "PipelineConfig",
    "DataConfig",
    "SplittingConfig",
    "BinningConfig",
    "AnalysisConfig",
    "ModelConfig",
    "ValidationConfig",
    "PlotConfig",
    "OutputConfig",
    "ReproducibilityConfig",
    "load_config",
    "save_config",
]

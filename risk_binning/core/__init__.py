"""
Risk Score Binning - Core Package

Shared infrastructure:
- Logging utilities
- Custom exceptions
"""

from risk_binning.core.logger import get_logger, setup_logging, LoggerMixin, PipelineLogger
from risk_binning.core.exceptions import (
    PipelineException,
    ConfigurationError,
    DataValidationError,
    SchemaValidationError,
    DataQualityError,
    DataReaderError,
    BinningError,
    StatisticalTestError,
    ModelTrainingError,
    EvaluationError,
    ArtifactError,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "LoggerMixin",
    "PipelineLogger",
    # Exceptions
    "PipelineException",
    "ConfigurationError",
    "DataValidationError",
    "SchemaValidationError",
    "DataQualityError",
    "DataReaderError",
    "BinningError",
    "StatisticalTestError",
    "ModelTrainingError",
    "EvaluationError",
    "ArtifactError",
]

"""
Custom Exceptions for the Analysis

Provides a hierarchy of exceptions for different error types,
enabling precise error handling throughout the pipeline.
"""

from typing import Any, Dict, List, Optional


class PipelineException(Exception):
    """
    Base exception for all pipeline errors.

    All custom exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Additional error details
            cause: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = self.message
        if self.details:
            result += f" | Details: {self.details}"
        if self.cause:
            result += f" | Caused by: {self.cause}"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None
        }


class ConfigurationError(PipelineException):
    """
    Raised when there's a configuration error.

    Examples:
    - Invalid threshold ordering
    - Unknown reference category
    """
    pass


class DataValidationError(PipelineException):
    """
    Raised when data validation fails.

    Examples:
    - Missing score or target column
    - Non-binary target
    """

    def __init__(
        self,
        message: str,
        validation_errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs
    ):
        """
        Initialize the data validation error.

        Args:
            message: Error message
            validation_errors: List of validation error details
            **kwargs: Additional arguments for parent class
        """
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors or []

    def __str__(self) -> str:
        result = super().__str__()
        if self.validation_errors:
            error_count = len(self.validation_errors)
            result += f" | {error_count} validation error(s)"
        return result


class SchemaValidationError(DataValidationError):
    """
    Raised when the input table does not have the expected columns.
    """

    def __init__(
        self,
        message: str,
        missing_columns: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.missing_columns = missing_columns or []


class DataQualityError(DataValidationError):
    """
    Raised when pre-analysis data checks report critical failures.
    """

    def __init__(
        self,
        message: str,
        quality_report: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.quality_report = quality_report


class DataReaderError(PipelineException):
    """
    Raised when the input file cannot be read.
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.source = source

    def __str__(self) -> str:
        result = super().__str__()
        if self.source:
            result += f" | Source: {self.source}"
        return result


class BinningError(PipelineException):
    """
    Raised when the score cannot be binned.

    Examples:
    - low threshold not below high threshold
    - Score column missing from the frame
    """

    def __init__(
        self,
        message: str,
        column: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.column = column

    def __str__(self) -> str:
        result = super().__str__()
        if self.column:
            result += f" | Column: {self.column}"
        return result


class StatisticalTestError(PipelineException):
    """
    Raised when a statistical test cannot be computed.

    Examples:
    - Fewer than two populated categories
    - Outcome has a single class
    """

    def __init__(
        self,
        message: str,
        test_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.test_name = test_name


class ModelTrainingError(PipelineException):
    """
    Raised when model fitting or prediction fails.

    Examples:
    - Singular design matrix
    - Perfect separation
    - Category not seen during fitting
    """

    def __init__(
        self,
        message: str,
        model_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.model_name = model_name

    def __str__(self) -> str:
        result = super().__str__()
        if self.model_name:
            result += f" | Model: {self.model_name}"
        return result


class EvaluationError(PipelineException):
    """
    Raised when model evaluation fails.
    """

    def __init__(
        self,
        message: str,
        metric_name: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.metric_name = metric_name


class ArtifactError(PipelineException):
    """
    Raised when artifact operations fail.

    Examples:
    - Model save error
    - Unsupported artifact format
    """

    def __init__(
        self,
        message: str,
        artifact_path: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.artifact_path = artifact_path

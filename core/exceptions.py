"""
Custom exception hierarchy for the Mindful Insights pipeline.
Provides structured error handling with proper context.

Only ConfigurationError is meant to reach callers of the pipeline; everything
else is caught and degraded into an offline aggregation or a FallbackResponse.
"""

from typing import Optional, Dict, Any


class InsightException(Exception):
    """Base exception for all Mindful Insights errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize exception with message and optional context.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "context": self.context,
        }


# ==================== Data Source Exceptions ====================


class DataSourceException(InsightException):
    """Raised when journal, gratitude or breathing records cannot be loaded."""

    def __init__(self, operation: str, details: Optional[str] = None):
        super().__init__(
            message=f"Data source operation failed: {operation}",
            error_code="DATA_SOURCE_ERROR",
            context={"operation": operation, "details": details} if details else {"operation": operation},
        )


# ==================== API/External Service Exceptions ====================


class ExternalServiceException(InsightException):
    """Base exception for external service errors."""

    pass


class LLMAPIError(ExternalServiceException):
    """Raised when the chat completions endpoint answers with an error."""

    def __init__(self, status_code: Optional[int] = None, details: Optional[str] = None):
        message = "LLM API request failed"
        if status_code is not None:
            message = f"LLM API request failed: {status_code}"
        if details:
            message = f"{message} {details}"
        super().__init__(
            message=message,
            error_code="LLM_API_ERROR",
            context={"status_code": status_code, "details": details},
        )
        self.status_code = status_code


# ==================== Validation Exceptions ====================


class ValidationException(InsightException):
    """Base exception for validation errors."""

    pass


class InvalidInputError(ValidationException):
    """Raised when input validation fails."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            message=f"Invalid input: {field} - {reason}",
            error_code="INVALID_INPUT",
            context={"field": field, "reason": reason},
        )


class ConfigurationError(ValidationException):
    """Raised when configuration is invalid."""

    def __init__(self, setting: str, reason: str):
        super().__init__(
            message=f"Invalid configuration: {setting} - {reason}",
            error_code="CONFIGURATION_ERROR",
            context={"setting": setting, "reason": reason},
        )

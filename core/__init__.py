"""
Core utilities and infrastructure for the Mindful Insights pipeline.
"""

from core.exceptions import (
    InsightException,
    DataSourceException,
    ExternalServiceException,
    LLMAPIError,
    ValidationException,
    InvalidInputError,
    ConfigurationError,
)
from core.logging_config import configure_logging, get_logger

__all__ = [
    "InsightException",
    "DataSourceException",
    "ExternalServiceException",
    "LLMAPIError",
    "ValidationException",
    "InvalidInputError",
    "ConfigurationError",
    "configure_logging",
    "get_logger",
]

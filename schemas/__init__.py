"""
Pydantic schemas for type-safe data transfer.
"""

from schemas.records import DiaryRecord, GratitudeRecord, BreathingRecord
from schemas.aggregation import DataRange, EveningAggregation, MorningAggregation, Aggregation
from schemas.redaction import CustomPlaceholders, ScrubOptions, RedactionResult
from schemas.prompt import Language, InsightKind, PromptConfig, Prompt
from schemas.insight import (
    FallbackReason,
    InsightRequest,
    TokenUsage,
    InsightResponse,
    FallbackResponse,
    InsightResult,
)
from schemas.usage import RateLimitConfig, UsageStatus, UsageStats
from schemas.preferences import InsightPreferences, InsightTrigger, InsightAvailability, UsageStatsDisplay

__all__ = [
    "DiaryRecord",
    "GratitudeRecord",
    "BreathingRecord",
    "DataRange",
    "EveningAggregation",
    "MorningAggregation",
    "Aggregation",
    "CustomPlaceholders",
    "ScrubOptions",
    "RedactionResult",
    "Language",
    "InsightKind",
    "PromptConfig",
    "Prompt",
    "FallbackReason",
    "InsightRequest",
    "TokenUsage",
    "InsightResponse",
    "FallbackResponse",
    "InsightResult",
    "RateLimitConfig",
    "UsageStatus",
    "UsageStats",
    "InsightPreferences",
    "InsightTrigger",
    "InsightAvailability",
    "UsageStatsDisplay",
]

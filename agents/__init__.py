"""Agent modules for the insight pipeline."""

from .aggregator import TimeWindowAggregator
from .prompt_composer import PromptComposer, estimate_tokens
from .insight_settings import InsightSettings, validate_preferences
from .insight_agent import InsightAgent

__all__ = [
    "TimeWindowAggregator",
    "PromptComposer",
    "estimate_tokens",
    "InsightSettings",
    "validate_preferences",
    "InsightAgent",
]

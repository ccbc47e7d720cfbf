"""
Prompts module - All LLM prompts and local fallback texts organized by insight kind.

Import prompts directly:
    from prompts import EVENING_SYSTEM_PROMPT, MORNING_SYSTEM_PROMPT

Or import from specific modules:
    from prompts.evening import BREATHING_RECOMMENDATIONS
"""

from prompts.evening import (
    EVENING_SYSTEM_PROMPT,
    EVENING_USER_PROMPT,
    EVENING_NO_DATA,
    EVENING_FALLBACK_USER_PROMPT,
    BREATHING_RECOMMENDATIONS,
)
from prompts.morning import (
    MORNING_SYSTEM_PROMPT,
    MORNING_USER_PROMPT,
    MORNING_NO_DATA,
    MORNING_FALLBACK_USER_PROMPT,
    MORNING_IMPULSES,
    GENERIC_MORNING_IMPULSES,
)
from prompts.fallback import EVENING_FALLBACKS, MORNING_FALLBACKS, FALLBACKS

__all__ = [
    "EVENING_SYSTEM_PROMPT",
    "EVENING_USER_PROMPT",
    "EVENING_NO_DATA",
    "EVENING_FALLBACK_USER_PROMPT",
    "BREATHING_RECOMMENDATIONS",
    "MORNING_SYSTEM_PROMPT",
    "MORNING_USER_PROMPT",
    "MORNING_NO_DATA",
    "MORNING_FALLBACK_USER_PROMPT",
    "MORNING_IMPULSES",
    "GENERIC_MORNING_IMPULSES",
    "EVENING_FALLBACKS",
    "MORNING_FALLBACKS",
    "FALLBACKS",
]

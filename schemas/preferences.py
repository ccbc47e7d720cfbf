"""Per-user insight preferences and reminder triggers."""

import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from schemas.prompt import InsightKind, Language


TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")


class InsightPreferences(BaseModel):
    """Opt-in, language and reminder times for a user's insights."""

    user_id: str = Field(..., description="User ID")
    enabled: bool = Field(True, description="AI insights opt-in")
    language: Language = Field("de", description="Insight language")
    evening_reminder_enabled: bool = Field(True)
    morning_reminder_enabled: bool = Field(True)
    evening_reminder_time: str = Field("19:00", description="HH:MM in the user's timezone")
    morning_reminder_time: str = Field("06:00", description="HH:MM in the user's timezone")
    timezone: str = Field("Europe/Berlin", description="IANA timezone for reminder evaluation")
    last_evening_insight: Optional[datetime] = Field(None, description="Last evening insight (UTC)")
    last_morning_insight: Optional[datetime] = Field(None, description="Last morning insight (UTC)")
    updated_at: Optional[datetime] = None

    @field_validator("evening_reminder_time", "morning_reminder_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not TIME_PATTERN.match(v):
            raise ValueError("Reminder time must be in HH:MM format")
        return v


class InsightTrigger(BaseModel):
    """Whether an insight of a given kind should be offered right now."""

    kind: InsightKind
    should_show: bool
    reason: str
    last_shown: Optional[datetime] = None


class InsightAvailability(BaseModel):
    """Whether a user may request insights at all, with the remaining budget."""

    can_use: bool
    reason: Optional[str] = None
    remaining_calls: int = 0
    remaining_tokens: int = 0


class UsageStatsDisplay(BaseModel):
    """Display strings for a usage overview."""

    calls_text: str
    tokens_text: str
    status_text: str
    is_limited: bool

"""Usage and rate-limit schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class RateLimitConfig(BaseModel):
    """Per-user ceilings applied before every API call."""

    max_calls_per_day: int = Field(4, ge=0, description="Maximum API calls per user per day")
    max_tokens_per_day: int = Field(2000, ge=0, description="Maximum tokens per user per day")
    max_calls_per_minute: int = Field(10, ge=0, description="Maximum API calls per user per minute")


class UsageStatus(BaseModel):
    """Daily usage counters for one user."""

    user_id: str = Field(..., description="User ID")
    calls_today: int = Field(0, ge=0, description="Successful API calls today")
    tokens_today: int = Field(0, ge=0, description="Tokens consumed today")
    last_call_time: Optional[datetime] = Field(None, description="Time of the last successful call (UTC)")
    is_limited: bool = Field(False, description="Whether the daily budget is used up")

    model_config = ConfigDict(from_attributes=True)


class UsageStats(BaseModel):
    """Usage status with the remaining budget for display."""

    user_id: str
    calls_today: int = 0
    tokens_today: int = 0
    last_call_time: Optional[datetime] = None
    is_limited: bool = False
    remaining_calls: int = Field(0, ge=0)
    remaining_tokens: int = Field(0, ge=0)
    max_calls_per_day: int = Field(0, ge=0)
    max_tokens_per_day: int = Field(0, ge=0)

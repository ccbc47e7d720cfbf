"""Journal, gratitude and breathing record schemas (read-only inputs)."""

from datetime import datetime, timezone
from typing import List, Literal

from pydantic import BaseModel, Field, ConfigDict, field_validator


BreathingMethod = Literal["box", "478", "coherent", "triangle", "custom"]


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps are stored as UTC; aware ones are converted to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DiaryRecord(BaseModel):
    """A journal entry as delivered by the data source."""

    id: str = Field(..., description="Diary entry ID")
    user_id: str = Field(..., description="Owning user ID")
    date: str = Field(..., description="Entry date (YYYY-MM-DD)")
    text: str = Field(..., description="Free journal text")
    tags: List[str] = Field(default_factory=list, description="User tags")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def created_at_to_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class GratitudeRecord(BaseModel):
    """A morning or evening gratitude note."""

    id: str = Field(..., description="Gratitude entry ID")
    user_id: str = Field(..., description="Owning user ID")
    date: str = Field(..., description="Entry date (YYYY-MM-DD)")
    morning: bool = Field(..., description="True = morning entry, False = evening entry")
    text: str = Field(..., description="Gratitude text")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def created_at_to_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)


class BreathingRecord(BaseModel):
    """A breathing exercise session."""

    id: str = Field(..., description="Session ID")
    user_id: str = Field(..., description="Owning user ID")
    method: BreathingMethod = Field(..., description="Breathing method id")
    duration_sec: int = Field(..., ge=0, description="Session duration in seconds")
    completed: bool = Field(False, description="Whether the session was finished")
    timestamp: datetime = Field(..., description="Session start (UTC)")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")

    model_config = ConfigDict(from_attributes=True)

    @field_validator("timestamp", "created_at")
    @classmethod
    def timestamps_to_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

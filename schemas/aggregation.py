"""Aggregation schemas: bounded snapshots of a user's recent activity."""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, ConfigDict

from schemas.records import BreathingRecord, DiaryRecord, GratitudeRecord


class DataRange(BaseModel):
    """Time window an aggregation was computed over."""

    start: datetime = Field(..., description="Window start (UTC)")
    end: datetime = Field(..., description="Window end (UTC)")

    model_config = ConfigDict(frozen=True)


class EveningAggregation(BaseModel):
    """Last 24 hours of journal, gratitude and completed breathing sessions."""

    diary_entries: List[DiaryRecord] = Field(default_factory=list, description="Up to 5 newest diary entries")
    gratitude_entries: List[GratitudeRecord] = Field(
        default_factory=list, description="Up to 5 newest gratitude entries"
    )
    breathing_sessions: List[BreathingRecord] = Field(
        default_factory=list, description="Up to 5 newest completed sessions"
    )
    summary: str = Field(..., description="Human-readable one-line summary")
    has_data: bool = Field(..., description="True iff any domain has at least one record")
    data_range: DataRange = Field(..., description="Aggregated time window")

    model_config = ConfigDict(frozen=True)


class MorningAggregation(BaseModel):
    """Inputs for the morning focus: yesterday's summary and today's impulses."""

    last_evening_summary: Optional[str] = Field(None, description="Summary of the previous evening")
    today_goals: List[str] = Field(default_factory=list, description="2-5 generic impulses")
    has_data: bool = Field(True, description="Always true, generic impulses always exist")
    data_range: DataRange = Field(..., description="Aggregated time window")

    model_config = ConfigDict(frozen=True)


Aggregation = Union[EveningAggregation, MorningAggregation]

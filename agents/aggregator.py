"""
Time-window aggregation of journal, gratitude and breathing records.

Builds the bounded snapshot an insight prompt is rendered from. Data source
failures never propagate: the aggregator degrades to an offline aggregation so
insight generation can still fall back to generic content.
"""

import asyncio
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from core import get_logger
from memory.data_source import DataSource
from prompts.morning import GENERIC_MORNING_IMPULSES
from schemas import (
    Aggregation,
    BreathingRecord,
    DataRange,
    DiaryRecord,
    EveningAggregation,
    GratitudeRecord,
    Language,
    MorningAggregation,
)

logger = get_logger(__name__)


EVENING_WINDOW = timedelta(hours=24)
MAX_ITEMS = 5
MAX_TEXT_LENGTH = 500
ELLIPSIS = "..."
SUMMARY_PREVIEW_CHARS = 200
MORNING_IMPULSE_COUNT = 3

EMPTY_SUMMARY = {
    "de": "Keine Aktivitäten in den letzten 24 Stunden",
    "en": "No activities in the last 24 hours",
}
OFFLINE_SUMMARY = {
    "de": "Keine Daten verfügbar - Offline-Modus",
    "en": "No data available - offline mode",
}

HEADERS = {
    "de": {
        "diary": "JOURNAL:",
        "gratitude": "DANKBARKEIT:",
        "breathing": "ATEMÜBUNGEN:",
        "last_evening": "GESTERN ABEND:",
        "impulses": "HEUTIGE IMPULSE:",
        "morning": "morgens",
        "evening": "abends",
        "minutes": "Minuten",
    },
    "en": {
        "diary": "JOURNAL:",
        "gratitude": "GRATITUDE:",
        "breathing": "BREATHING:",
        "last_evening": "YESTERDAY EVENING:",
        "impulses": "TODAY'S IMPULSES:",
        "morning": "morning",
        "evening": "evening",
        "minutes": "minutes",
    },
}


def _truncate(text: str, limit: int = MAX_TEXT_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def _utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def _minutes(seconds: int) -> int:
    # Half-up rounding for display
    return int(seconds / 60 + 0.5)


class TimeWindowAggregator:
    """
    Collects a user's recent records into evening and morning aggregations.

    Usage:
        aggregator = TimeWindowAggregator(language="de")
        evening = await aggregator.aggregate_evening("user-1", source)
        text = aggregator.format_for_ai_prompt(evening)
    """

    def __init__(self, language: Language = "de", rng: Optional[random.Random] = None):
        self.language = language
        self._rng = rng or random.Random()

    # ==================== Evening ====================

    async def aggregate_evening(
        self, user_id: str, source: DataSource, now: Optional[datetime] = None
    ) -> EveningAggregation:
        """
        Aggregate the last 24 hours ending at now.

        Args:
            user_id: User whose records are read
            source: Record source
            now: Window end (defaults to current UTC time)

        Returns:
            EveningAggregation, offline variant if the source fails
        """
        end = _utc(now)
        start = end - EVENING_WINDOW
        data_range = DataRange(start=start, end=end)
        start_iso, end_iso = start.isoformat(), end.isoformat()

        # All three reads finish before the first failure is reported
        results = await asyncio.gather(
            source.get_diary_entries(user_id, start_iso, end_iso),
            source.get_gratitude_entries(user_id, start_iso, end_iso),
            source.get_breathing_sessions(user_id, start_iso, end_iso),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            logger.warning(
                "Evening aggregation offline",
                user_id=user_id,
                error=str(errors[0]),
                failed_reads=len(errors),
            )
            return EveningAggregation(
                summary=OFFLINE_SUMMARY[self.language],
                has_data=False,
                data_range=data_range,
            )

        diary, gratitude, breathing = results
        diary_entries = self._trim_diary(diary)
        gratitude_entries = self._trim_gratitude(gratitude)
        breathing_sessions = self._filter_completed_sessions(breathing)
        has_data = bool(diary_entries or gratitude_entries or breathing_sessions)

        logger.debug(
            "Evening aggregation built",
            user_id=user_id,
            diary=len(diary_entries),
            gratitude=len(gratitude_entries),
            breathing=len(breathing_sessions),
        )

        return EveningAggregation(
            diary_entries=diary_entries,
            gratitude_entries=gratitude_entries,
            breathing_sessions=breathing_sessions,
            summary=self._evening_summary(diary_entries, gratitude_entries, breathing_sessions),
            has_data=has_data,
            data_range=data_range,
        )

    @staticmethod
    def _trim_diary(entries: Sequence[DiaryRecord]) -> List[DiaryRecord]:
        newest = sorted(entries, key=lambda e: e.created_at, reverse=True)[:MAX_ITEMS]
        return [e.model_copy(update={"text": _truncate(e.text)}) for e in newest]

    @staticmethod
    def _trim_gratitude(entries: Sequence[GratitudeRecord]) -> List[GratitudeRecord]:
        newest = sorted(entries, key=lambda e: e.created_at, reverse=True)[:MAX_ITEMS]
        return [e.model_copy(update={"text": _truncate(e.text)}) for e in newest]

    @staticmethod
    def _filter_completed_sessions(sessions: Sequence[BreathingRecord]) -> List[BreathingRecord]:
        completed = [s for s in sessions if s.completed]
        return sorted(completed, key=lambda s: s.timestamp, reverse=True)[:MAX_ITEMS]

    def _evening_summary(
        self,
        diary: Sequence[DiaryRecord],
        gratitude: Sequence[GratitudeRecord],
        breathing: Sequence[BreathingRecord],
    ) -> str:
        parts = []

        if diary:
            joined = " ".join(e.text for e in diary)
            if self.language == "de":
                parts.append(f"Journal: {len(diary)} Einträge - {joined[:SUMMARY_PREVIEW_CHARS]}...")
            else:
                parts.append(f"Journal: {len(diary)} entries - {joined[:SUMMARY_PREVIEW_CHARS]}...")

        if gratitude:
            morning = sum(1 for g in gratitude if g.morning)
            evening = len(gratitude) - morning
            if self.language == "de":
                parts.append(f"Dankbarkeit: {morning} morgens, {evening} abends")
            else:
                parts.append(f"Gratitude: {morning} morning, {evening} evening")

        if breathing:
            minutes = _minutes(sum(s.duration_sec for s in breathing))
            if self.language == "de":
                parts.append(f"Atemübungen: {len(breathing)} Sessions, {minutes} Minuten")
            else:
                parts.append(f"Breathing: {len(breathing)} sessions, {minutes} minutes")

        return " | ".join(parts) if parts else EMPTY_SUMMARY[self.language]

    # ==================== Morning ====================

    async def aggregate_morning(
        self, user_id: str, source: DataSource, now: Optional[datetime] = None
    ) -> MorningAggregation:
        """
        Aggregate yesterday's evening summary and today's impulses.

        The window runs from UTC midnight to now. At exactly midnight it starts
        24 hours earlier so the range is never empty.
        """
        end = _utc(now)
        start = end.replace(hour=0, minute=0, second=0, microsecond=0)
        if start >= end:
            start = end - EVENING_WINDOW
        data_range = DataRange(start=start, end=end)
        candidates = GENERIC_MORNING_IMPULSES[self.language]

        try:
            last_evening_summary = await source.get_last_evening_summary(user_id)
        except Exception as e:
            logger.warning("Morning aggregation offline", user_id=user_id, error=str(e))
            return MorningAggregation(
                today_goals=list(candidates),
                has_data=True,
                data_range=data_range,
            )

        return MorningAggregation(
            last_evening_summary=last_evening_summary or None,
            today_goals=self._rng.sample(candidates, MORNING_IMPULSE_COUNT),
            has_data=True,
            data_range=data_range,
        )

    # ==================== Rendering ====================

    def format_for_ai_prompt(self, aggregation: Aggregation) -> str:
        """
        Render an aggregation as a plain-text block with uppercase headers.

        Only populated sections are rendered. Returns "" when has_data is false.
        """
        if not aggregation.has_data:
            return ""

        labels = HEADERS[self.language]
        sections = []

        if isinstance(aggregation, EveningAggregation):
            if aggregation.diary_entries:
                lines = [f"{i}. {e.date}: {e.text}" for i, e in enumerate(aggregation.diary_entries, 1)]
                sections.append("\n".join([labels["diary"], *lines]))
            if aggregation.gratitude_entries:
                lines = [
                    f"{i}. {e.date} {labels['morning'] if e.morning else labels['evening']}: {e.text}"
                    for i, e in enumerate(aggregation.gratitude_entries, 1)
                ]
                sections.append("\n".join([labels["gratitude"], *lines]))
            if aggregation.breathing_sessions:
                lines = [
                    f"{i}. {s.method} - {_minutes(s.duration_sec)} {labels['minutes']}"
                    for i, s in enumerate(aggregation.breathing_sessions, 1)
                ]
                sections.append("\n".join([labels["breathing"], *lines]))
        else:
            if aggregation.last_evening_summary:
                sections.append(f"{labels['last_evening']}\n{aggregation.last_evening_summary}")
            if aggregation.today_goals:
                lines = [f"{i}. {goal}" for i, goal in enumerate(aggregation.today_goals, 1)]
                sections.append("\n".join([labels["impulses"], *lines]))

        return "\n\n".join(sections)

    @staticmethod
    def validate_aggregation(aggregation: Aggregation) -> bool:
        """False iff the data range is empty or inverted."""
        return aggregation.data_range.end > aggregation.data_range.start

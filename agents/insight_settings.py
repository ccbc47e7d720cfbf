"""
Insight preferences, reminder triggers and usage overview.

Keeps per-user opt-in, language and reminder times, decides whether an
evening or morning insight is due, and turns usage counters into the
remaining budget shown to the user.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pytz

from config.settings import settings
from core import get_logger, InvalidInputError
from schemas import (
    InsightAvailability,
    InsightKind,
    InsightPreferences,
    InsightTrigger,
    RateLimitConfig,
    UsageStats,
    UsageStatsDisplay,
    UsageStatus,
)
from schemas.preferences import TIME_PATTERN

logger = get_logger(__name__)


AVAILABLE_LANGUAGES = [
    {"code": "de", "name": "Deutsch"},
    {"code": "en", "name": "English"},
]

REASON_DISABLED = "AI-Insights deaktiviert"
REASON_ALREADY_SHOWN = "Bereits heute erstellt"
REASON_NOT_YET = "Noch nicht Zeit"
REASON_DUE = {
    "evening": "Zeit für Tagesrückblick",
    "morning": "Zeit für Tagesfokus",
}
REASON_LIMIT_REACHED = "Tägliches Limit erreicht"

USAGE_TEXTS = {
    "de": {
        "available": "Verfügbar",
        "almost_reached": "Fast erreicht",
        "limit_reached": "Limit erreicht",
        "calls": "Aufrufe heute",
        "tokens": "Tokens heute",
    },
    "en": {
        "available": "Available",
        "almost_reached": "Almost reached",
        "limit_reached": "Limit reached",
        "calls": "calls today",
        "tokens": "tokens today",
    },
}


def _parse_time(value: str) -> Tuple[int, int]:
    hours, minutes = value.split(":")
    return int(hours), int(minutes)


def _default_limits() -> RateLimitConfig:
    return RateLimitConfig(
        max_calls_per_day=settings.MAX_CALLS_PER_DAY,
        max_tokens_per_day=settings.MAX_TOKENS_PER_DAY,
        max_calls_per_minute=settings.MAX_CALLS_PER_MINUTE,
    )


def validate_preferences(updates: Dict[str, Any]) -> List[str]:
    """
    Validate a partial preferences update.

    Returns:
        List of human-readable errors, empty when valid
    """
    errors = []
    language = updates.get("language")
    if language is not None and language not in ("de", "en"):
        errors.append('Sprache muss "de" oder "en" sein')
    evening = updates.get("evening_reminder_time")
    if evening is not None and not TIME_PATTERN.match(evening):
        errors.append("Evening-Zeit muss im Format HH:mm sein")
    morning = updates.get("morning_reminder_time")
    if morning is not None and not TIME_PATTERN.match(morning):
        errors.append("Morning-Zeit muss im Format HH:mm sein")
    tz = updates.get("timezone")
    if tz is not None and tz not in pytz.all_timezones_set:
        errors.append(f"Unbekannte Zeitzone: {tz}")
    return errors


class InsightSettings:
    """
    In-memory store and rules for insight preferences.

    Usage:
        bridge = InsightSettings()
        prefs = bridge.get_preferences("user-1")
        trigger = bridge.should_show_insight("evening", prefs)
    """

    def __init__(self, limits: Optional[RateLimitConfig] = None):
        self.limits = limits or _default_limits()
        self._preferences: Dict[str, InsightPreferences] = {}

    # ==================== Preferences ====================

    def get_preferences(self, user_id: str) -> InsightPreferences:
        """Stored preferences for a user, or the defaults from settings."""
        stored = self._preferences.get(user_id)
        if stored is not None:
            return stored
        return InsightPreferences(
            user_id=user_id,
            language=settings.DEFAULT_LANGUAGE,
            evening_reminder_time=settings.DEFAULT_EVENING_REMINDER_TIME,
            morning_reminder_time=settings.DEFAULT_MORNING_REMINDER_TIME,
            timezone=settings.TIMEZONE,
        )

    def update_preferences(self, user_id: str, **updates: Any) -> InsightPreferences:
        """
        Apply a partial update.

        Raises:
            InvalidInputError: If any updated field is invalid
        """
        errors = validate_preferences(updates)
        if errors:
            raise InvalidInputError("preferences", "; ".join(errors))

        current = self.get_preferences(user_id)
        data = current.model_dump()
        data.update(updates)
        data["updated_at"] = datetime.now(pytz.UTC)
        updated = InsightPreferences.model_validate(data)
        self._preferences[user_id] = updated
        logger.info("Insight preferences updated", user_id=user_id, fields=sorted(updates))
        return updated

    def mark_insight_created(self, user_id: str, kind: InsightKind, now: Optional[datetime] = None) -> InsightPreferences:
        """Record that an insight of the given kind was shown."""
        timestamp = now or datetime.now(pytz.UTC)
        field = "last_evening_insight" if kind == "evening" else "last_morning_insight"
        return self.update_preferences(user_id, **{field: timestamp})

    @staticmethod
    def get_available_languages() -> List[Dict[str, str]]:
        return list(AVAILABLE_LANGUAGES)

    @staticmethod
    def get_default_times() -> Dict[str, str]:
        return {
            "evening": settings.DEFAULT_EVENING_REMINDER_TIME,
            "morning": settings.DEFAULT_MORNING_REMINDER_TIME,
        }

    # ==================== Triggers ====================

    def should_show_insight(
        self, kind: InsightKind, preferences: InsightPreferences, now: Optional[datetime] = None
    ) -> InsightTrigger:
        """
        Decide whether an insight of this kind is due for the user.

        Due means: enabled, the reminder time has passed in the user's
        timezone, and none was created today (local date).
        """
        enabled = preferences.evening_reminder_enabled if kind == "evening" else preferences.morning_reminder_enabled
        last_shown = preferences.last_evening_insight if kind == "evening" else preferences.last_morning_insight

        if not preferences.enabled or not enabled:
            return InsightTrigger(kind=kind, should_show=False, reason=REASON_DISABLED)

        tz = pytz.timezone(preferences.timezone)
        now_utc = now or datetime.now(pytz.UTC)
        if now_utc.tzinfo is None:
            now_utc = pytz.UTC.localize(now_utc)
        local_now = now_utc.astimezone(tz)

        reminder = preferences.evening_reminder_time if kind == "evening" else preferences.morning_reminder_time
        due_by_time = (local_now.hour, local_now.minute) >= _parse_time(reminder)

        already_shown = False
        if last_shown is not None:
            if last_shown.tzinfo is None:
                last_shown = pytz.UTC.localize(last_shown)
            already_shown = last_shown.astimezone(tz).date() == local_now.date()

        if due_by_time and not already_shown:
            return InsightTrigger(kind=kind, should_show=True, reason=REASON_DUE[kind], last_shown=last_shown)

        return InsightTrigger(
            kind=kind,
            should_show=False,
            reason=REASON_ALREADY_SHOWN if already_shown else REASON_NOT_YET,
            last_shown=last_shown,
        )

    # ==================== Usage ====================

    def get_usage_stats(self, status: UsageStatus) -> UsageStats:
        """Combine usage counters with the configured daily budget."""
        return UsageStats(
            user_id=status.user_id,
            calls_today=status.calls_today,
            tokens_today=status.tokens_today,
            last_call_time=status.last_call_time,
            is_limited=status.is_limited,
            remaining_calls=max(0, self.limits.max_calls_per_day - status.calls_today),
            remaining_tokens=max(0, self.limits.max_tokens_per_day - status.tokens_today),
            max_calls_per_day=self.limits.max_calls_per_day,
            max_tokens_per_day=self.limits.max_tokens_per_day,
        )

    @staticmethod
    def format_usage_stats(stats: UsageStats, language: str = "de") -> UsageStatsDisplay:
        """Render usage counters as display strings in the given language."""
        texts = USAGE_TEXTS.get(language, USAGE_TEXTS["de"])
        if stats.is_limited:
            status_text = texts["limit_reached"]
        elif stats.remaining_calls <= 1:
            status_text = texts["almost_reached"]
        else:
            status_text = texts["available"]
        return UsageStatsDisplay(
            calls_text=f"{stats.calls_today}/{stats.max_calls_per_day} {texts['calls']}",
            tokens_text=f"{stats.tokens_today}/{stats.max_tokens_per_day} {texts['tokens']}",
            status_text=status_text,
            is_limited=stats.is_limited,
        )

    def can_use_insights(self, preferences: InsightPreferences, status: UsageStatus) -> InsightAvailability:
        if not preferences.enabled:
            return InsightAvailability(can_use=False, reason=REASON_DISABLED)
        if status.is_limited:
            return InsightAvailability(can_use=False, reason=REASON_LIMIT_REACHED)
        stats = self.get_usage_stats(status)
        return InsightAvailability(
            can_use=True,
            remaining_calls=stats.remaining_calls,
            remaining_tokens=stats.remaining_tokens,
        )

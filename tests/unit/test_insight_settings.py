"""
Unit tests for insight preferences, reminder triggers and usage display.
"""

from datetime import datetime, timedelta, timezone

import pytest

from agents.insight_settings import InsightSettings, validate_preferences
from core import InvalidInputError
from schemas import InsightPreferences, RateLimitConfig, UsageStatus


@pytest.fixture
def bridge(rate_limits):
    return InsightSettings(limits=rate_limits)


@pytest.fixture
def prefs():
    return InsightPreferences(user_id="user-1", timezone="Europe/Berlin")


class TestValidatePreferences:
    """Tests for partial update validation."""

    def test_valid_update(self):
        assert validate_preferences({"language": "en", "evening_reminder_time": "21:15", "timezone": "UTC"}) == []

    def test_collects_all_errors(self):
        errors = validate_preferences(
            {"language": "fr", "evening_reminder_time": "25:00", "morning_reminder_time": "7", "timezone": "Mars/Base"}
        )

        assert len(errors) == 4
        assert 'Sprache muss "de" oder "en" sein' in errors
        assert "Unbekannte Zeitzone: Mars/Base" in errors


class TestPreferences:
    """Tests for reading and updating preferences."""

    def test_defaults(self, bridge):
        prefs = bridge.get_preferences("user-1")

        assert prefs.enabled is True
        assert prefs.evening_reminder_time == "19:00"
        assert prefs.morning_reminder_time == "06:00"

    def test_update_persists(self, bridge):
        updated = bridge.update_preferences("user-1", language="en", evening_reminder_time="20:30")

        assert updated.language == "en"
        assert updated.updated_at is not None
        assert bridge.get_preferences("user-1").evening_reminder_time == "20:30"
        assert bridge.get_preferences("user-2").evening_reminder_time == "19:00"

    def test_invalid_update_raises(self, bridge):
        with pytest.raises(InvalidInputError):
            bridge.update_preferences("user-1", morning_reminder_time="6 Uhr")

        assert bridge.get_preferences("user-1").morning_reminder_time == "06:00"

    def test_mark_insight_created(self, bridge, fixed_now):
        prefs = bridge.mark_insight_created("user-1", "morning", fixed_now)

        assert prefs.last_morning_insight == fixed_now
        assert prefs.last_evening_insight is None

    def test_languages_and_default_times(self, bridge):
        assert [lang["code"] for lang in bridge.get_available_languages()] == ["de", "en"]
        assert bridge.get_default_times() == {"evening": "19:00", "morning": "06:00"}


class TestShouldShowInsight:
    """Tests for reminder triggers evaluated in the user's timezone."""

    def test_due_after_reminder_time(self, bridge, prefs):
        now = datetime(2026, 2, 5, 18, 30, tzinfo=timezone.utc)  # 19:30 in Berlin

        trigger = bridge.should_show_insight("evening", prefs, now)

        assert trigger.should_show is True
        assert trigger.reason == "Zeit für Tagesrückblick"

    def test_not_yet_in_local_time(self, bridge, prefs):
        now = datetime(2026, 2, 5, 17, 30, tzinfo=timezone.utc)  # 18:30 in Berlin

        trigger = bridge.should_show_insight("evening", prefs, now)

        assert trigger.should_show is False
        assert trigger.reason == "Noch nicht Zeit"

    def test_already_shown_today(self, bridge, prefs):
        now = datetime(2026, 2, 5, 20, 0, tzinfo=timezone.utc)
        shown = prefs.model_copy(update={"last_evening_insight": now - timedelta(minutes=30)})

        trigger = bridge.should_show_insight("evening", shown, now)

        assert trigger.should_show is False
        assert trigger.reason == "Bereits heute erstellt"

    def test_shown_yesterday_is_due_again(self, bridge, prefs):
        now = datetime(2026, 2, 5, 20, 0, tzinfo=timezone.utc)
        shown = prefs.model_copy(update={"last_evening_insight": now - timedelta(days=1)})

        assert bridge.should_show_insight("evening", shown, now).should_show is True

    def test_morning_due(self, bridge, prefs):
        now = datetime(2026, 2, 5, 6, 0, tzinfo=timezone.utc)  # 07:00 in Berlin

        trigger = bridge.should_show_insight("morning", prefs, now)

        assert trigger.should_show is True
        assert trigger.reason == "Zeit für Tagesfokus"

    @pytest.mark.parametrize(
        "update",
        [{"enabled": False}, {"evening_reminder_enabled": False}],
    )
    def test_disabled(self, bridge, prefs, update):
        now = datetime(2026, 2, 5, 20, 0, tzinfo=timezone.utc)

        trigger = bridge.should_show_insight("evening", prefs.model_copy(update=update), now)

        assert trigger.should_show is False
        assert trigger.reason == "AI-Insights deaktiviert"


class TestUsage:
    """Tests for usage stats, display and availability."""

    def test_usage_stats(self, bridge):
        stats = bridge.get_usage_stats(UsageStatus(user_id="user-1", calls_today=1, tokens_today=450))

        assert stats.remaining_calls == 3
        assert stats.remaining_tokens == 1550
        assert stats.max_calls_per_day == 4

    def test_remaining_never_negative(self):
        bridge = InsightSettings(limits=RateLimitConfig(max_calls_per_day=2, max_tokens_per_day=100))

        stats = bridge.get_usage_stats(UsageStatus(user_id="u", calls_today=5, tokens_today=500))

        assert stats.remaining_calls == 0
        assert stats.remaining_tokens == 0

    @pytest.mark.parametrize(
        "calls,limited,expected",
        [(0, False, "Verfügbar"), (3, False, "Fast erreicht"), (4, True, "Limit erreicht")],
    )
    def test_format_usage_stats(self, bridge, calls, limited, expected):
        stats = bridge.get_usage_stats(
            UsageStatus(user_id="u", calls_today=calls, tokens_today=100, is_limited=limited)
        )

        display = bridge.format_usage_stats(stats)

        assert display.status_text == expected
        assert display.calls_text == f"{calls}/4 Aufrufe heute"
        assert display.tokens_text == "100/2000 Tokens heute"

    @pytest.mark.parametrize(
        "calls,limited,expected",
        [(0, False, "Available"), (3, False, "Almost reached"), (4, True, "Limit reached")],
    )
    def test_format_usage_stats_english(self, bridge, calls, limited, expected):
        stats = bridge.get_usage_stats(
            UsageStatus(user_id="u", calls_today=calls, tokens_today=100, is_limited=limited)
        )

        display = bridge.format_usage_stats(stats, "en")

        assert display.status_text == expected
        assert display.calls_text == f"{calls}/4 calls today"
        assert display.tokens_text == "100/2000 tokens today"

    def test_can_use_insights(self, bridge, prefs):
        availability = bridge.can_use_insights(prefs, UsageStatus(user_id="user-1", calls_today=1))

        assert availability.can_use is True
        assert availability.remaining_calls == 3

    def test_cannot_use_when_limited(self, bridge, prefs):
        availability = bridge.can_use_insights(prefs, UsageStatus(user_id="user-1", calls_today=4, is_limited=True))

        assert availability.can_use is False
        assert availability.reason == "Tägliches Limit erreicht"

    def test_cannot_use_when_disabled(self, bridge, prefs):
        availability = bridge.can_use_insights(prefs.model_copy(update={"enabled": False}), UsageStatus(user_id="u"))

        assert availability.reason == "AI-Insights deaktiviert"

"""
Data sources for journal, gratitude and breathing records.

The insight pipeline only reads records. Persistence lives elsewhere; these
implementations back the CLI and the test suite.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, TypeVar, Union, runtime_checkable

from pydantic import ValidationError

from core import get_logger, DataSourceException
from schemas import BreathingRecord, DiaryRecord, GratitudeRecord

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", DiaryRecord, GratitudeRecord, BreathingRecord)


@runtime_checkable
class DataSource(Protocol):
    """Read-only access to a user's records. Every method may raise."""

    async def get_diary_entries(self, user_id: str, start_iso: str, end_iso: str) -> List[DiaryRecord]:
        ...

    async def get_gratitude_entries(self, user_id: str, start_iso: str, end_iso: str) -> List[GratitudeRecord]:
        ...

    async def get_breathing_sessions(self, user_id: str, start_iso: str, end_iso: str) -> List[BreathingRecord]:
        ...

    async def get_last_evening_summary(self, user_id: str) -> Optional[str]:
        ...


def _parse_bound(value: str) -> datetime:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise DataSourceException("parse_window", f"invalid ISO timestamp {value!r}") from e
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _in_window(records: Iterable[RecordT], user_id: str, start_iso: str, end_iso: str, attr: str) -> List[RecordT]:
    start = _parse_bound(start_iso)
    end = _parse_bound(end_iso)
    return [r for r in records if r.user_id == user_id and start <= getattr(r, attr) <= end]


class InMemoryDataSource:
    """
    Dictionary-backed data source.

    Records of all users are kept in flat lists and filtered per query,
    diary and gratitude by created_at, breathing sessions by timestamp.
    """

    def __init__(
        self,
        diary: Optional[List[DiaryRecord]] = None,
        gratitude: Optional[List[GratitudeRecord]] = None,
        breathing: Optional[List[BreathingRecord]] = None,
        evening_summaries: Optional[Dict[str, str]] = None,
    ):
        self.diary = list(diary or [])
        self.gratitude = list(gratitude or [])
        self.breathing = list(breathing or [])
        self.evening_summaries = dict(evening_summaries or {})

    async def get_diary_entries(self, user_id: str, start_iso: str, end_iso: str) -> List[DiaryRecord]:
        return _in_window(self.diary, user_id, start_iso, end_iso, "created_at")

    async def get_gratitude_entries(self, user_id: str, start_iso: str, end_iso: str) -> List[GratitudeRecord]:
        return _in_window(self.gratitude, user_id, start_iso, end_iso, "created_at")

    async def get_breathing_sessions(self, user_id: str, start_iso: str, end_iso: str) -> List[BreathingRecord]:
        return _in_window(self.breathing, user_id, start_iso, end_iso, "timestamp")

    async def get_last_evening_summary(self, user_id: str) -> Optional[str]:
        return self.evening_summaries.get(user_id)

    def save_evening_summary(self, user_id: str, summary: str) -> None:
        """Remember an evening insight so the next morning prompt can refer to it."""
        self.evening_summaries[user_id] = summary


class JsonFileDataSource(InMemoryDataSource):
    """
    Data source loaded from a JSON export.

    Expected shape:
        {
            "diary": [{"id": ..., "user_id": ..., "date": ..., "text": ..., "created_at": ...}],
            "gratitude": [...],
            "breathing": [...],
            "evening_summaries": {"<user_id>": "..."}
        }

    Missing keys are treated as empty collections.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            super().__init__(
                diary=[DiaryRecord.model_validate(item) for item in raw.get("diary", [])],
                gratitude=[GratitudeRecord.model_validate(item) for item in raw.get("gratitude", [])],
                breathing=[BreathingRecord.model_validate(item) for item in raw.get("breathing", [])],
                evening_summaries=raw.get("evening_summaries", {}),
            )
        except (OSError, json.JSONDecodeError, ValidationError, AttributeError) as e:
            logger.error("Failed to load data export", path=str(self.path), error=str(e))
            raise DataSourceException("load_export", str(e)) from e

        logger.info(
            "Data export loaded",
            path=str(self.path),
            diary=len(self.diary),
            gratitude=len(self.gratitude),
            breathing=len(self.breathing),
        )

# entry store — persistence of mood entries in the journal_entries collection
# the only place that knows the mongodb document layout. everything above it
# works with EntryResponse (api) or MoodEntry (analytics engine).

import hashlib
import logging
import math
from datetime import date, datetime, timezone
from typing import Optional

from brainpulse.models.journal import EntryCreate, EntryResponse, EntryUpdate
from brainpulse.services.analytics import MoodEntry
from brainpulse.services.db import Database

logger = logging.getLogger(__name__)

# entry document fields that map 1:1 onto EntryUpdate / EntryCreate attributes
_METRIC_FIELDS = ("energy_level", "stress_level", "sleep_quality", "sleep_hours", "steps")


def _parse_day(value) -> Optional[date]:
    """entry_date is stored as YYYY-MM-DD, older docs may carry a full timestamp"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _parse_timestamp(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _clean_number(value):
    # mongodb may hold NaN for metrics that were never filled in
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def doc_to_entry(doc: dict) -> EntryResponse:
    """convert a journal_entries document to the api response model"""
    emotions = list(doc.get("emotions") or [])
    entry_date = _parse_day(doc.get("entry_date"))
    return EntryResponse(
        id=doc.get("entry_id", str(doc.get("_id", ""))),
        date=entry_date.isoformat() if entry_date else "",
        moodScore=int(doc.get("mood_score", 0)),
        primaryEmotion=emotions[0] if emotions else None,
        secondaryEmotions=emotions[1:],
        emotions=emotions,
        text=doc.get("text", ""),
        tags=list(doc.get("tags") or []),
        energyLevel=_clean_number(doc.get("energy_level")),
        stressLevel=_clean_number(doc.get("stress_level")),
        sleepQuality=_clean_number(doc.get("sleep_quality")),
        sleepHours=_clean_number(doc.get("sleep_hours")),
        steps=_clean_number(doc.get("steps")),
        aiSummary=doc.get("ai_summary"),
        createdAt=str(doc.get("created_at", "")),
    )


def doc_to_mood_entry(doc: dict) -> Optional[MoodEntry]:
    """reduce a document to what the analytics engine reads. undated docs are skipped."""
    entry_date = _parse_day(doc.get("entry_date"))
    if entry_date is None or doc.get("mood_score") is None:
        return None
    return MoodEntry(
        date=entry_date,
        mood_score=int(doc["mood_score"]),
        emotions=tuple(doc.get("emotions") or ()),
        created_at=_parse_timestamp(doc.get("created_at")),
    )


class EntryStore:
    """journal entry persistence for one request, bound to a Database handle"""

    def __init__(self, db: Database):
        self.db = db

    @property
    def collection(self):
        return self.db.journal_entries

    async def list_entries(self, user_id: str, limit: int = 20, offset: int = 0) -> list[EntryResponse]:
        """newest first"""
        cursor = (
            self.collection.find({"user_id": user_id})
            .sort("created_at", -1)
            .skip(offset)
            .limit(limit)
        )
        return [doc_to_entry(doc) async for doc in cursor]

    async def get_entry(self, user_id: str, entry_id: str) -> Optional[EntryResponse]:
        doc = await self.collection.find_one({"entry_id": entry_id, "user_id": user_id})
        return doc_to_entry(doc) if doc else None

    async def today_entry(self, user_id: str, today: Optional[date] = None) -> Optional[EntryResponse]:
        """most recently created entry dated today"""
        day = (today or date.today()).isoformat()
        cursor = self.collection.find({"user_id": user_id, "entry_date": day}).sort("created_at", -1).limit(1)
        async for doc in cursor:
            return doc_to_entry(doc)
        return None

    async def entries_since(self, user_id: str, start: date) -> list[MoodEntry]:
        """entries dated on or after start, ascending by date"""
        cursor = self.collection.find(
            {"user_id": user_id, "entry_date": {"$gte": start.isoformat()}},
            {"entry_date": 1, "mood_score": 1, "emotions": 1, "created_at": 1, "_id": 0},
        ).sort([("entry_date", 1), ("created_at", 1)])
        entries = []
        async for doc in cursor:
            entry = doc_to_mood_entry(doc)
            if entry is not None:
                entries.append(entry)
        return entries

    async def recent_mood_entries(self, user_id: str, limit: int = 7) -> list[MoodEntry]:
        """the user's latest entries, oldest first"""
        cursor = (
            self.collection.find({"user_id": user_id})
            .sort([("entry_date", -1), ("created_at", -1)])
            .limit(limit)
        )
        entries = []
        async for doc in cursor:
            entry = doc_to_mood_entry(doc)
            if entry is not None:
                entries.append(entry)
        entries.reverse()
        return entries

    async def recent_metric_averages(self, user_id: str, limit: int = 7) -> dict[str, Optional[float]]:
        """mean stress level and sleep quality over the latest entries, None where never filled in"""
        cursor = (
            self.collection.find({"user_id": user_id}, {"stress_level": 1, "sleep_quality": 1, "_id": 0})
            .sort([("entry_date", -1), ("created_at", -1)])
            .limit(limit)
        )
        values: dict[str, list[float]] = {"stress_level": [], "sleep_quality": []}
        async for doc in cursor:
            for name, collected in values.items():
                value = _clean_number(doc.get(name))
                if value is not None:
                    collected.append(value)
        return {
            name: sum(collected) / len(collected) if collected else None
            for name, collected in values.items()
        }

    async def entry_dates(self, user_id: str) -> list[date]:
        """every day the user has logged on, across the whole history"""
        cursor = self.collection.find({"user_id": user_id}, {"entry_date": 1, "_id": 0})
        dates = []
        async for doc in cursor:
            day = _parse_day(doc.get("entry_date"))
            if day is not None:
                dates.append(day)
        return dates

    async def create_entry(self, user_id: str, body: EntryCreate) -> EntryResponse:
        now = datetime.now(timezone.utc)

        # entry_id is an md5 of user + day + timestamp
        raw = f"{user_id}:{body.entry_date.isoformat()}:{now.isoformat()}"
        entry_id = hashlib.md5(raw.encode()).hexdigest()[:12]

        doc = {
            "entry_id": entry_id,
            "user_id": user_id,
            "entry_date": body.entry_date.isoformat(),
            "mood_score": body.mood_score,
            "emotions": body.emotions,
            "text": body.text,
            "tags": list(body.tags),
            "ai_summary": None,
            "created_at": now.isoformat(),
        }
        for name in _METRIC_FIELDS:
            doc[name] = getattr(body, name)

        await self.collection.insert_one(doc)
        logger.info(f"Entry created: {entry_id} for user {user_id}")
        return doc_to_entry(doc)

    async def update_entry(self, user_id: str, entry_id: str, body: EntryUpdate) -> Optional[EntryResponse]:
        existing = await self.collection.find_one({"entry_id": entry_id, "user_id": user_id})
        if not existing:
            return None

        # null means "leave as is", stored entries never hold a null score or text
        update_fields = body.model_dump(exclude_unset=True, exclude_none=True, by_alias=False)
        if not update_fields:
            return doc_to_entry(existing)
        update_fields["updated_at"] = datetime.now(timezone.utc).isoformat()

        await self.collection.update_one(
            {"entry_id": entry_id, "user_id": user_id},
            {"$set": update_fields},
        )
        updated = await self.collection.find_one({"entry_id": entry_id, "user_id": user_id})
        logger.info(f"Entry updated: {entry_id} by user {user_id}")
        return doc_to_entry(updated)

    async def delete_entry(self, user_id: str, entry_id: str) -> bool:
        result = await self.collection.delete_one({"entry_id": entry_id, "user_id": user_id})
        deleted = result.deleted_count > 0
        if deleted:
            logger.info(f"Entry deleted: {entry_id} by user {user_id}")
        return deleted

    async def export_entries(self, user_id: str) -> list[dict]:
        """every entry of the user in wire format, oldest first"""
        cursor = self.collection.find({"user_id": user_id}).sort("entry_date", 1)
        return [doc_to_entry(doc).model_dump(by_alias=True) async for doc in cursor]

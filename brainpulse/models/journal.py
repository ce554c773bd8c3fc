# journal models — mood entry creation and response schemas
# wire format is camelCase, mongodb documents are snake_case

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class EntryCreate(BaseModel):
    """payload for logging a new mood entry"""
    mood_score: int = Field(..., alias="moodScore", ge=1, le=10, description="mood score 1-10")
    primary_emotion: Optional[str] = Field(None, alias="primaryEmotion")
    secondary_emotions: list[str] = Field(default_factory=list, alias="secondaryEmotions")
    text: str = Field(..., min_length=1, description="journal entry text")
    tags: list[str] = Field(default_factory=list)
    energy_level: Optional[int] = Field(None, alias="energyLevel", ge=1, le=10)
    stress_level: Optional[int] = Field(None, alias="stressLevel", ge=1, le=10)
    sleep_quality: Optional[int] = Field(None, alias="sleepQuality", ge=1, le=10)
    sleep_hours: Optional[float] = Field(None, alias="sleepHours", ge=0, le=24)
    steps: Optional[int] = Field(None, ge=0)
    entry_date: date = Field(..., alias="date", description="calendar day the entry belongs to")

    model_config = {"populate_by_name": True}

    @property
    def emotions(self) -> list[str]:
        """primary emotion first, then the secondary ones"""
        combined = [self.primary_emotion] if self.primary_emotion else []
        return combined + list(self.secondary_emotions)


class EntryUpdate(BaseModel):
    """partial update — only fields that are sent get written"""
    mood_score: Optional[int] = Field(None, alias="moodScore", ge=1, le=10)
    emotions: Optional[list[str]] = None
    text: Optional[str] = Field(None, min_length=1)
    tags: Optional[list[str]] = None
    energy_level: Optional[int] = Field(None, alias="energyLevel", ge=1, le=10)
    stress_level: Optional[int] = Field(None, alias="stressLevel", ge=1, le=10)
    sleep_quality: Optional[int] = Field(None, alias="sleepQuality", ge=1, le=10)
    sleep_hours: Optional[float] = Field(None, alias="sleepHours", ge=0, le=24)
    steps: Optional[int] = Field(None, ge=0)

    model_config = {"populate_by_name": True}


class EntryResponse(BaseModel):
    """a stored mood entry"""
    id: str
    date: str
    mood_score: int = Field(..., alias="moodScore")
    primary_emotion: Optional[str] = Field(None, alias="primaryEmotion")
    secondary_emotions: list[str] = Field(default_factory=list, alias="secondaryEmotions")
    emotions: list[str] = Field(default_factory=list)
    text: str = ""
    tags: list[str] = Field(default_factory=list)
    energy_level: Optional[int] = Field(None, alias="energyLevel")
    stress_level: Optional[int] = Field(None, alias="stressLevel")
    sleep_quality: Optional[int] = Field(None, alias="sleepQuality")
    sleep_hours: Optional[float] = Field(None, alias="sleepHours")
    steps: Optional[int] = None
    ai_summary: Optional[str] = Field(None, alias="aiSummary")
    created_at: str = Field("", alias="createdAt")

    model_config = {"populate_by_name": True}


class EntryListResponse(BaseModel):
    entries: list[EntryResponse]


class EntryCreatedResponse(BaseModel):
    """response after logging an entry, with an affirmation matched to the mood"""
    entry: EntryResponse
    affirmation: str


class TodayEntryResponse(BaseModel):
    entry: Optional[EntryResponse] = None

# analytics models — aggregate views computed from mood entries
# nothing here is persisted, every response is rebuilt per request

from typing import Optional
from pydantic import BaseModel, Field


class MoodTrendPoint(BaseModel):
    """mean mood of one calendar day plus its 3-day centered moving average"""
    date: str
    mood: float
    moving_average: float = Field(..., alias="movingAverage")

    model_config = {"populate_by_name": True}


class EmotionFrequency(BaseModel):
    emotion: str
    count: int
    percentage: float


class HeatmapPoint(BaseModel):
    date: str
    mood: float


class AnalyticsStats(BaseModel):
    average_mood: float = Field(0.0, alias="averageMood")
    total_entries: int = Field(0, alias="totalEntries")
    streak: int = 0
    mood_improvement: float = Field(0.0, alias="moodImprovement")

    model_config = {"populate_by_name": True}


class Correlations(BaseModel):
    """wellness/mood correlations. not computed yet, always returned as null"""
    sleep_mood: float = Field(..., alias="sleepMood")
    stress_mood: float = Field(..., alias="stressMood")
    energy_mood: float = Field(..., alias="energyMood")

    model_config = {"populate_by_name": True}


class AnalyticsResponse(BaseModel):
    """everything the insights page renders for one range"""
    mood_trend: list[MoodTrendPoint] = Field(default_factory=list, alias="moodTrend")
    emotion_frequency: list[EmotionFrequency] = Field(default_factory=list, alias="emotionFrequency")
    heatmap_data: list[HeatmapPoint] = Field(default_factory=list, alias="heatmapData")
    stats: AnalyticsStats = Field(default_factory=AnalyticsStats)
    correlations: Optional[Correlations] = None
    weekly_insights: list[str] = Field(default_factory=list, alias="weeklyInsights")

    model_config = {"populate_by_name": True}


class StreakResponse(BaseModel):
    streak: int = 0

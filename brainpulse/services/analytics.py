# mood analytics engine — pure aggregations over a user's mood entries
# no i/o and no hidden state: the same entries always produce the same output
#
# inputs are MoodEntry values produced by the entry store. dates are trusted
# as given (day granularity), no timezone conversion happens here.

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from brainpulse.models.analytics import (
    AnalyticsResponse,
    AnalyticsStats,
    EmotionFrequency,
    HeatmapPoint,
    MoodTrendPoint,
)

logger = logging.getLogger(__name__)

RANGE_DAYS = {"week": 7, "month": 30}
DEFAULT_RANGE = "month"
FALLBACK_RANGE = "quarter"
FALLBACK_DAYS = 90

MOVING_AVERAGE_WINDOW = 3
IMPROVEMENT_WINDOW = 7
DEFAULT_TOP_EMOTION = "joy"


@dataclass(frozen=True)
class MoodEntry:
    """the slice of a journal entry the engine needs"""
    date: date
    mood_score: int
    emotions: tuple[str, ...] = ()
    created_at: Optional[datetime] = None


@dataclass
class _DayGroup:
    date: str
    scores: list[int] = field(default_factory=list)

    @property
    def mood(self) -> float:
        return sum(self.scores) / len(self.scores)


def range_to_days(range_name: str) -> int:
    """week -> 7, month -> 30, anything else -> 90"""
    return RANGE_DAYS.get(range_name, FALLBACK_DAYS)


def range_label(range_name: str) -> str:
    return range_name if range_name in RANGE_DAYS else FALLBACK_RANGE


def _sort_key(entry: MoodEntry):
    # created_at only breaks ties between entries of the same day
    created = entry.created_at.timestamp() if entry.created_at else float("-inf")
    return (entry.date, created)


def sort_entries(entries: Iterable[MoodEntry]) -> list[MoodEntry]:
    return sorted(entries, key=_sort_key)


def group_by_day(entries: Iterable[MoodEntry]) -> list[_DayGroup]:
    """bucket entries by calendar day, ascending by date"""
    groups: dict[str, _DayGroup] = {}
    for entry in sort_entries(entries):
        key = entry.date.isoformat()
        groups.setdefault(key, _DayGroup(date=key)).scores.append(entry.mood_score)
    return list(groups.values())


def _moving_averages(values: list[float], window: int = MOVING_AVERAGE_WINDOW) -> list[float]:
    """centered moving average. the window starts one step back and is clipped
    at the end of the sequence, it never wraps."""
    averages = []
    for index in range(len(values)):
        start = max(0, index - window // 2)
        end = min(len(values), start + window)
        chunk = values[start:end]
        averages.append(sum(chunk) / len(chunk))
    return averages


def mood_trend(entries: Iterable[MoodEntry], groups: Optional[list[_DayGroup]] = None) -> list[MoodTrendPoint]:
    """one point per day that has entries, ascending by date"""
    if groups is None:
        groups = group_by_day(entries)
    moods = [g.mood for g in groups]
    return [
        MoodTrendPoint(date=g.date, mood=mood, movingAverage=avg)
        for g, mood, avg in zip(groups, moods, _moving_averages(moods))
    ]


def emotion_frequency(entries: Iterable[MoodEntry]) -> list[EmotionFrequency]:
    """how many entries mention each emotion, most frequent first.
    ties keep the order in which the emotions were first seen."""
    entries = list(entries)
    total_entries = len(entries)
    counts: Counter = Counter()
    for entry in entries:
        for emotion in entry.emotions:
            counts[emotion] += 1

    frequencies = []
    for emotion, count in counts.most_common():
        percentage = round(count / total_entries * 100, 1) if total_entries > 0 else 0.0
        frequencies.append(EmotionFrequency(emotion=emotion, count=count, percentage=percentage))
    return frequencies


def heatmap_series(entries: Iterable[MoodEntry], groups: Optional[list[_DayGroup]] = None) -> list[HeatmapPoint]:
    if groups is None:
        groups = group_by_day(entries)
    return [HeatmapPoint(date=g.date, mood=g.mood) for g in groups]


def calculate_streak(dates: Iterable[date], today: Optional[date] = None) -> int:
    """consecutive days with at least one entry, counted back from today.
    no entry today means no streak, even after a long run up to yesterday."""
    expected = today or date.today()
    streak = 0
    for day in sorted(set(dates), reverse=True):
        if day != expected:
            break
        streak += 1
        expected -= timedelta(days=1)
    return streak


def _mean_score(entries: list[MoodEntry]) -> float:
    if not entries:
        return 0.0
    return sum(e.mood_score for e in entries) / len(entries)


def mood_improvement(entries: Iterable[MoodEntry]) -> float:
    """percent change of the last 7 entries' mean vs the 7 entries before them.
    compares entries, not days, so several entries on one day each count."""
    ordered = sort_entries(entries)
    recent = ordered[-IMPROVEMENT_WINDOW:]
    older = ordered[-2 * IMPROVEMENT_WINDOW:-IMPROVEMENT_WINDOW]
    recent_avg = _mean_score(recent)
    older_avg = _mean_score(older)
    if older_avg <= 0:
        return 0.0
    return (recent_avg - older_avg) / older_avg * 100


def summary_stats(entries: Iterable[MoodEntry], streak: int = 0) -> AnalyticsStats:
    entries = list(entries)
    return AnalyticsStats(
        averageMood=_mean_score(entries),
        totalEntries=len(entries),
        streak=streak,
        moodImprovement=mood_improvement(entries),
    )


def weekly_insights(
    stats: AnalyticsStats,
    frequencies: list[EmotionFrequency],
    range_name: str = DEFAULT_RANGE,
) -> list[str]:
    top_emotion = frequencies[0].emotion if frequencies else DEFAULT_TOP_EMOTION
    insights = [
        f"Your average mood this {range_label(range_name)} was {stats.average_mood:.1f}/10",
        f"You logged {stats.total_entries} mood entries, showing great consistency!",
        f"{top_emotion} was your most frequent emotion",
    ]
    if stats.mood_improvement > 0:
        insights.append(f"Your mood improved by {stats.mood_improvement:.1f}% compared to last week")
    return insights


def build_analytics(
    entries: Iterable[MoodEntry],
    range_name: str = DEFAULT_RANGE,
    streak: int = 0,
) -> AnalyticsResponse:
    """assemble every aggregate for one range window"""
    entries = sort_entries(entries)
    groups = group_by_day(entries)
    frequencies = emotion_frequency(entries)
    stats = summary_stats(entries, streak=streak)

    logger.debug(f"Built analytics for {len(entries)} entries over {len(groups)} days")

    return AnalyticsResponse(
        moodTrend=mood_trend(entries, groups=groups),
        emotionFrequency=frequencies,
        heatmapData=heatmap_series(entries, groups=groups),
        stats=stats,
        correlations=None,
        weeklyInsights=weekly_insights(stats, frequencies, range_name),
    )

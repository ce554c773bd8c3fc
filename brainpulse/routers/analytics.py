# analytics router — mood trend, emotion breakdown, heatmap, stats and streak
# aggregates are computed per request from the user's entries, never stored

import logging
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query

from brainpulse.models.analytics import AnalyticsResponse, StreakResponse
from brainpulse.services.analytics import DEFAULT_RANGE, build_analytics, calculate_streak, range_to_days
from brainpulse.services.entry_store import EntryStore
from brainpulse.dependencies import get_current_user, get_entry_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/analytics", tags=["analytics"])


async def _compute_streak(store: EntryStore, user_id: str) -> int:
    """streak over the full history"""
    return calculate_streak(await store.entry_dates(user_id), today=date.today())


async def _streak_or_zero(store: EntryStore, user_id: str) -> int:
    # analytics must still render when the streak lookup fails
    try:
        return await _compute_streak(store, user_id)
    except Exception as e:
        logger.warning(f"Failed to fetch streak data for {user_id}: {e}")
        return 0


@router.get("", response_model=AnalyticsResponse)
async def get_analytics(
    range_name: str = Query(DEFAULT_RANGE, alias="range", description="week | month | quarter"),
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """aggregate the user's entries over the selected range"""
    user_id = current_user["id"]
    start = date.today() - timedelta(days=range_to_days(range_name))

    entries = await store.entries_since(user_id, start)
    streak = await _streak_or_zero(store, user_id)

    logger.info(f"Analytics for {user_id}: {len(entries)} entries in range '{range_name}'")
    return build_analytics(entries, range_name=range_name, streak=streak)


@router.get("/streak", response_model=StreakResponse)
async def get_streak(
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """consecutive days with an entry, ending today"""
    return StreakResponse(streak=await _compute_streak(store, current_user["id"]))

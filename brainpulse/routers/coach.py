# coach router — pulse coach chat (server-sent events) and mood insight

import logging
from collections import Counter
from datetime import date, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from brainpulse.config import settings
from brainpulse.models.coach import CoachInsightResponse, CoachRequest
from brainpulse.services.coach_service import (
    CoachingContext,
    CoachService,
    generate_insight,
    get_coach_service,
)
from brainpulse.services.entry_store import EntryStore
from brainpulse.dependencies import get_current_user, get_entry_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/coach", tags=["coach"])

CONTEXT_ENTRIES = 7
INSIGHT_DAYS = 30


async def _build_context(store: EntryStore, user_id: str) -> Optional[CoachingContext]:
    """recent moods, top emotions, stress and sleep for the system prompt. the chat works without it."""
    try:
        entries = await store.recent_mood_entries(user_id, limit=CONTEXT_ENTRIES)
        metrics = await store.recent_metric_averages(user_id, limit=CONTEXT_ENTRIES)
    except Exception as e:
        logger.warning(f"Could not load coaching context for {user_id}: {e}")
        return None
    if not entries:
        return None

    emotions = Counter(emotion for entry in entries for emotion in entry.emotions)
    return CoachingContext(
        recent_moods=[entry.mood_score for entry in entries],
        common_emotions=[emotion for emotion, _ in emotions.most_common(3)],
        stress_level=metrics["stress_level"],
        sleep_quality=metrics["sleep_quality"],
    )


@router.post("")
async def chat(
    body: CoachRequest,
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
    coach: CoachService = Depends(get_coach_service),
):
    """stream a coach reply as text/event-stream"""
    if not body.message.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message is required",
        )

    if not settings.GEMINI_API_KEY:
        logger.error("GEMINI_API_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="AI service is not properly configured",
        )

    context = await _build_context(store, current_user["id"])
    return StreamingResponse(
        coach.stream_reply(body.message, body.history, context),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


@router.get("/insight", response_model=CoachInsightResponse)
async def get_insight(
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """one supportive sentence about the last 30 days"""
    start = date.today() - timedelta(days=INSIGHT_DAYS)
    entries = await store.entries_since(current_user["id"], start)
    moods = [entry.mood_score for entry in entries]
    emotions = [emotion for entry in entries for emotion in entry.emotions]
    return CoachInsightResponse(insight=generate_insight(moods, emotions))

# entries router — log, list, edit and delete mood entries
# every route is scoped to the authenticated user's own entries

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from brainpulse.models.journal import (
    EntryCreate,
    EntryCreatedResponse,
    EntryListResponse,
    EntryResponse,
    EntryUpdate,
    TodayEntryResponse,
)
from brainpulse.services.coach_service import generate_affirmation
from brainpulse.services.entry_store import EntryStore
from brainpulse.dependencies import get_current_user, get_entry_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/entries", tags=["entries"])


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Journal entry not found",
    )


@router.get("", response_model=EntryListResponse)
async def list_entries(
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """list the user's entries, newest first"""
    entries = await store.list_entries(current_user["id"], limit=limit, offset=offset)
    return EntryListResponse(entries=entries)


@router.post("", response_model=EntryCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    body: EntryCreate,
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """log a new mood entry"""
    entry = await store.create_entry(current_user["id"], body)
    return EntryCreatedResponse(
        entry=entry,
        affirmation=generate_affirmation(body.mood_score, body.emotions),
    )


@router.get("/today", response_model=TodayEntryResponse)
async def get_today_entry(
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """today's latest entry, or null if nothing has been logged yet"""
    entry = await store.today_entry(current_user["id"])
    return TodayEntryResponse(entry=entry)


@router.get("/{entry_id}", response_model=EntryResponse)
async def get_entry(
    entry_id: str,
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    entry = await store.get_entry(current_user["id"], entry_id)
    if entry is None:
        raise _not_found()
    return entry


@router.patch("/{entry_id}", response_model=EntryResponse)
async def update_entry(
    entry_id: str,
    body: EntryUpdate,
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """edit an entry. only the fields present in the body change."""
    entry = await store.update_entry(current_user["id"], entry_id, body)
    if entry is None:
        raise _not_found()
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_entry(
    entry_id: str,
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    if not await store.delete_entry(current_user["id"], entry_id):
        raise _not_found()

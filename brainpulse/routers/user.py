# user router — settings and data export for the signed-in user

import json
import logging
from datetime import datetime, timezone

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Response, status

from brainpulse.models.user import NotificationSettings, Preferences, SettingsResponse, SettingsUpdate
from brainpulse.services.db import Database, get_db
from brainpulse.services.entry_store import EntryStore
from brainpulse.dependencies import get_current_user, get_entry_store

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/user", tags=["user"])


def _settings_from_user(user: dict) -> SettingsResponse:
    stored = user.get("notifications") or {}
    theme = user.get("theme") or "default"
    return SettingsResponse(
        id=user["id"],
        name=user.get("name") or "",
        email=user.get("email", ""),
        gender=(user.get("gender") or "default").lower(),
        plan=user.get("plan", "free"),
        notifications=NotificationSettings(
            dailyReminder=stored.get("daily_reminder", True),
            weeklyInsights=stored.get("weekly_insights", False),
            coachTips=stored.get("coach_tips", False),
        ),
        preferences=Preferences(theme=theme),
    )


@router.get("/settings", response_model=SettingsResponse)
async def get_settings(current_user: dict = Depends(get_current_user)):
    return _settings_from_user(current_user)


@router.patch("/settings")
async def update_settings(
    body: SettingsUpdate,
    current_user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """update name, notification flags and theme"""
    update_fields = {}
    if body.name is not None:
        update_fields["name"] = body.name
    if body.notifications is not None:
        update_fields["notifications"] = body.notifications.model_dump()
    if body.preferences is not None and body.preferences.theme is not None:
        update_fields["theme"] = body.preferences.theme

    if not update_fields:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No settings to update",
        )

    update_fields["updated_at"] = datetime.now(timezone.utc).isoformat()
    await db.users.update_one(
        {"_id": ObjectId(current_user["id"])},
        {"$set": update_fields},
    )
    logger.info(f"Settings updated for user {current_user['id']}: {sorted(update_fields)}")
    return {"success": True}


@router.get("/export")
async def export_data(
    current_user: dict = Depends(get_current_user),
    store: EntryStore = Depends(get_entry_store),
):
    """download the user's profile and every entry as a json file"""
    now = datetime.now(timezone.utc)
    export = {
        "user": {
            "id": current_user["id"],
            "email": current_user.get("email", ""),
            "name": current_user.get("name", ""),
            "gender": current_user.get("gender"),
            "theme": current_user.get("theme", "default"),
            "createdAt": current_user.get("created_at", ""),
            "updatedAt": current_user.get("updated_at"),
        },
        "journalEntries": await store.export_entries(current_user["id"]),
        "exportedAt": now.isoformat(),
    }

    logger.info(f"Data export for user {current_user['id']}: {len(export['journalEntries'])} entries")
    return Response(
        content=json.dumps(export, indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="mood-data-{now.date().isoformat()}.json"'},
    )

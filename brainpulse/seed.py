# seed script — creates a demo user with a month of mood entries
# run once: python -m brainpulse.seed (skips anything that already exists)

import asyncio
import hashlib
import logging
import os
import random
from datetime import date, datetime, timedelta, timezone

from brainpulse.config import settings
from brainpulse.services.db import Database
from brainpulse.services.auth_service import hash_password

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# seed password from env
DEFAULT_PASSWORD = os.getenv("SEED_PASSWORD", "brainpulse123")
DEMO_EMAIL = "demo@brainpulse.app"
SEED_DAYS = 30

EMOTIONS = ["Joy", "Calm", "Grateful", "Anxious", "Sadness", "Tired", "Hopeful", "Frustrated"]
NOTES = [
    "Went for a walk after work and felt lighter.",
    "Busy day, a bit overwhelmed by deadlines.",
    "Had a good talk with a friend over coffee.",
    "Slept badly, dragging through the afternoon.",
    "Quiet evening with a book, feeling settled.",
]


def _demo_entry(user_id: str, day: date, rng: random.Random) -> dict:
    mood = rng.randint(3, 9)
    created = datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc) + timedelta(hours=rng.randint(7, 22))
    raw = f"{user_id}:{day.isoformat()}:{created.isoformat()}"
    return {
        "entry_id": hashlib.md5(raw.encode()).hexdigest()[:12],
        "user_id": user_id,
        "entry_date": day.isoformat(),
        "mood_score": mood,
        "emotions": rng.sample(EMOTIONS, k=rng.randint(1, 3)),
        "text": rng.choice(NOTES),
        "tags": [],
        "stress_level": rng.randint(1, 10),
        "sleep_hours": round(rng.uniform(5, 9), 1),
        "energy_level": None,
        "sleep_quality": None,
        "steps": rng.randint(2000, 12000),
        "ai_summary": None,
        "created_at": created.isoformat(),
    }


async def seed_demo_data(db: Database) -> int:
    """create the demo user and backfill entries for the last 30 days, skips existing"""
    existing = await db.users.find_one({"email": DEMO_EMAIL})
    if existing:
        user_id = str(existing["_id"])
        logger.info(f"Demo user already exists: {DEMO_EMAIL} (id: {user_id})")
    else:
        result = await db.users.insert_one({
            "email": DEMO_EMAIL,
            "name": "Demo User",
            "hashed_password": hash_password(DEFAULT_PASSWORD),
            "gender": None,
            "theme": "default",
            "notifications": {"daily_reminder": True, "weekly_insights": True, "coach_tips": False},
            "created_at": datetime.now(timezone.utc).isoformat(),
        })
        user_id = str(result.inserted_id)
        logger.info(f"Created demo user (id: {user_id})")

    rng = random.Random(42)
    today = date.today()
    created = 0
    for offset in range(SEED_DAYS):
        day = today - timedelta(days=offset)
        if await db.journal_entries.find_one({"user_id": user_id, "entry_date": day.isoformat()}):
            continue
        await db.journal_entries.insert_one(_demo_entry(user_id, day, rng))
        created += 1

    logger.info(f"Seed complete! {created} entries created for {DEMO_EMAIL}")
    return created


async def seed():
    db = Database(settings.MONGODB_URI, settings.MONGODB_DATABASE)
    await db.connect()
    try:
        await db.ensure_indexes()
        return await seed_demo_data(db)
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(seed())

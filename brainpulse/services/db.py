# async mongodb client for the backend api
# uses motor for non-blocking operations

import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


class Database:
    """async mongodb connection manager.
    owned by whoever constructs it (the app lifespan or the seed script)."""

    def __init__(self, uri: str, database_name: str):
        self.uri = uri
        self.database_name = database_name
        self.client: Optional[AsyncIOMotorClient] = None
        self.db: Optional[AsyncIOMotorDatabase] = None

    async def connect(self):
        """establish connection to mongodb"""
        if self.client is not None:
            return

        logger.info(f"Connecting to MongoDB database: {self.database_name}")
        self.client = AsyncIOMotorClient(self.uri)
        self.db = self.client[self.database_name]

        # verify connection
        await self.client.admin.command("ping")
        logger.info("MongoDB connection established")

    async def close(self):
        """close mongodb connection"""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed")

    async def ensure_indexes(self):
        """create the indexes the api queries rely on"""
        await self.users.create_index("email", unique=True)
        await self.journal_entries.create_index("entry_id", unique=True)
        await self.journal_entries.create_index([("user_id", 1), ("entry_date", 1)])
        logger.info("MongoDB indexes ensured")

    # collection accessors

    @property
    def users(self):
        return self.db["users"]

    @property
    def journal_entries(self):
        return self.db["journal_entries"]


async def get_db(request: Request) -> Database:
    """dependency injection for database access"""
    return request.app.state.db

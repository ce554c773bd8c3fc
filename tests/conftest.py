# shared fixtures for backend api tests
# provides mock db, test users, auth tokens, and httpx test client

import copy
from datetime import date, timedelta

import pytest
import pytest_asyncio
from unittest.mock import MagicMock
from bson import ObjectId

from httpx import AsyncClient, ASGITransport

from brainpulse.main import app
from brainpulse.services.db import get_db
from brainpulse.services.auth_service import hash_password, create_access_token
from brainpulse.dependencies import get_current_user


# test ids
USER_OID = ObjectId()
OTHER_USER_OID = ObjectId()
USER_ID = str(USER_OID)
OTHER_USER_ID = str(OTHER_USER_OID)

TODAY = date.today()


def day(offset: int) -> str:
    """iso date `offset` days before today"""
    return (TODAY - timedelta(days=offset)).isoformat()


# test user documents (as they'd appear from mongodb)

USER_DOC = {
    "_id": USER_OID,
    "email": "maya.ortiz@email.com",
    "hashed_password": hash_password("pulse12345"),
    "name": "Maya Ortiz",
    "gender": "FEMALE",
    "theme": "female",
    "notifications": {"daily_reminder": True, "weekly_insights": True, "coach_tips": False},
    "created_at": "2025-01-04T09:00:00+00:00",
}

OTHER_USER_DOC = {
    "_id": OTHER_USER_OID,
    "email": "leo.brandt@email.com",
    "hashed_password": hash_password("pulse12345"),
    "name": "Leo Brandt",
    "gender": None,
    "theme": "default",
    "created_at": "2025-02-11T18:30:00+00:00",
}


# sample entries — the user logged today, yesterday and two days ago

SAMPLE_ENTRY_TODAY = {
    "_id": ObjectId(),
    "entry_id": "e1a2b3c4d5e6",
    "user_id": USER_ID,
    "entry_date": day(0),
    "mood_score": 8,
    "emotions": ["Joy", "Grateful"],
    "text": "Morning run by the river, felt great afterwards.",
    "tags": ["exercise"],
    "stress_level": 3,
    "sleep_quality": 7,
    "sleep_hours": 7.5,
    "steps": 9400,
    "created_at": f"{day(0)}T08:15:00+00:00",
}

SAMPLE_ENTRY_YESTERDAY = {
    "_id": ObjectId(),
    "entry_id": "f6e5d4c3b2a1",
    "user_id": USER_ID,
    "entry_date": day(1),
    "mood_score": 4,
    "emotions": ["Anxious"],
    "text": "Presentation prep all day, could not switch off.",
    "tags": ["work"],
    "stress_level": 8,
    "sleep_quality": 3,
    "sleep_hours": 5.0,
    "steps": 3100,
    "created_at": f"{day(1)}T21:40:00+00:00",
}

SAMPLE_ENTRY_TWO_DAYS_AGO = {
    "_id": ObjectId(),
    "entry_id": "a9b8c7d6e5f4",
    "user_id": USER_ID,
    "entry_date": day(2),
    "mood_score": 6,
    "emotions": ["Calm"],
    "text": "Slow Sunday, cooked dinner with my sister.",
    "tags": [],
    "created_at": f"{day(2)}T19:05:00+00:00",
}

OTHER_USER_ENTRY = {
    "_id": ObjectId(),
    "entry_id": "0123456789ab",
    "user_id": OTHER_USER_ID,
    "entry_date": day(0),
    "mood_score": 2,
    "emotions": ["Sadness"],
    "text": "Someone else's entry.",
    "tags": [],
    "created_at": f"{day(0)}T10:00:00+00:00",
}


# async cursor mock

def _sort_value(value):
    # None sorts first, like mongodb
    return (value is not None, value if value is not None else "")


class AsyncCursorMock:
    """mock for motor's async cursor — supports async for and chained methods"""

    def __init__(self, data=None):
        self._data = list(data or [])
        self._index = 0

    def sort(self, key_or_list, direction=1):
        keys = key_or_list if isinstance(key_or_list, list) else [(key_or_list, direction)]
        # apply the least significant key first, python's sort is stable
        for key, dirn in reversed(keys):
            self._data.sort(key=lambda d: _sort_value(d.get(key)), reverse=dirn == -1)
        return self

    def skip(self, n):
        self._data = self._data[n:]
        return self

    def limit(self, n):
        self._data = self._data[:n]
        return self

    def __aiter__(self):
        self._index = 0
        return self

    async def __anext__(self):
        if self._index >= len(self._data):
            raise StopAsyncIteration
        item = self._data[self._index]
        self._index += 1
        return item

    async def to_list(self, length=None):
        if length is not None:
            return self._data[:length]
        return self._data


class MockCollection:
    """mock for a motor collection with async methods"""

    def __init__(self, data=None):
        self._data = data or []
        self.inserted = []

    def find(self, query=None, projection=None):
        results = self._data
        if query:
            results = [d for d in results if self._matches(d, query)]
        return AsyncCursorMock(results)

    async def find_one(self, query=None, projection=None):
        if not query:
            return self._data[0] if self._data else None
        for doc in self._data:
            if self._matches(doc, query):
                return doc
        return None

    async def insert_one(self, doc):
        oid = doc.get("_id", ObjectId())
        doc["_id"] = oid
        self._data.append(doc)
        self.inserted.append(doc)
        result = MagicMock()
        result.inserted_id = oid
        return result

    async def count_documents(self, query=None):
        if not query:
            return len(self._data)
        return len([d for d in self._data if self._matches(d, query)])

    async def update_one(self, query, update, upsert=False):
        result = MagicMock()
        result.matched_count = 0
        result.modified_count = 0
        for doc in self._data:
            if self._matches(doc, query):
                if "$set" in update:
                    doc.update(update["$set"])
                result.matched_count = 1
                result.modified_count = 1
                break
        return result

    async def delete_one(self, query):
        result = MagicMock()
        result.deleted_count = 0
        for i, doc in enumerate(self._data):
            if self._matches(doc, query):
                del self._data[i]
                result.deleted_count = 1
                break
        return result

    async def create_index(self, *args, **kwargs):
        return "mock_index"

    def _matches(self, doc, query):
        """basic mongodb query matching for tests"""
        for key, value in query.items():
            doc_val = doc.get(key)
            if isinstance(value, dict):
                for op, operand in value.items():
                    if op == "$in" and doc_val not in operand:
                        return False
                    if op in ("$gte", "$gt", "$lte", "$lt") and doc_val is None:
                        return False
                    if op == "$gte" and doc_val < operand:
                        return False
                    if op == "$gt" and doc_val <= operand:
                        return False
                    if op == "$lte" and doc_val > operand:
                        return False
                    if op == "$lt" and doc_val >= operand:
                        return False
            elif doc_val != value:
                return False
        return True


class MockDatabase:
    """mock database that mimics the Database class"""

    def __init__(self):
        self.users = MockCollection([
            copy.deepcopy(USER_DOC),
            copy.deepcopy(OTHER_USER_DOC),
        ])
        self.journal_entries = MockCollection([
            copy.deepcopy(SAMPLE_ENTRY_TWO_DAYS_AGO),
            copy.deepcopy(SAMPLE_ENTRY_TODAY),
            copy.deepcopy(SAMPLE_ENTRY_YESTERDAY),
            copy.deepcopy(OTHER_USER_ENTRY),
        ])

    async def connect(self):
        pass

    async def close(self):
        pass

    async def ensure_indexes(self):
        pass


@pytest.fixture
def mock_db():
    """create a fresh mock database for each test"""
    return MockDatabase()


def _user_dict():
    """return user dict as get_current_user would return"""
    doc = copy.deepcopy(USER_DOC)
    doc["id"] = USER_ID
    del doc["_id"]
    return doc


@pytest.fixture
def user_token():
    """jwt access token for the test user"""
    return create_access_token({"sub": USER_ID, "email": USER_DOC["email"]})


@pytest_asyncio.fixture
async def client(mock_db):
    """httpx async test client with only the database mocked"""

    async def override_get_db():
        return mock_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def user_client(mock_db):
    """client authenticated as the test user"""

    async def override_get_db():
        return mock_db

    async def override_get_current_user():
        return _user_dict()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()

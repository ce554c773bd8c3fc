# auth router — registration, login, token refresh and profile
# email + password only, tokens are jwt bearer tokens

import logging
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.errors import DuplicateKeyError

from brainpulse.models.user import (
    RefreshRequest,
    RegisterResponse,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from brainpulse.services.auth_service import (
    create_token_pair,
    decode_token,
    hash_password,
    verify_password,
)
from brainpulse.services.db import Database, get_db
from brainpulse.dependencies import get_current_user

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _doc_to_user(doc: dict) -> UserResponse:
    return UserResponse(
        id=doc.get("id") or str(doc.get("_id", "")),
        email=doc.get("email", ""),
        name=doc.get("name", ""),
        gender=doc.get("gender"),
        theme=doc.get("theme", "default"),
        createdAt=doc.get("created_at", ""),
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(body: UserCreate, db: Database = Depends(get_db)):
    """create an account"""
    email = body.email.lower()

    existing = await db.users.find_one({"email": email})
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )

    doc = {
        "email": email,
        "name": body.name,
        "hashed_password": hash_password(body.password),
        "gender": body.gender,
        "theme": "default",
        "notifications": {"daily_reminder": True, "weekly_insights": False, "coach_tips": False},
        "created_at": datetime.now(timezone.utc).isoformat(),
    }
    try:
        result = await db.users.insert_one(doc)
    except DuplicateKeyError:
        # a concurrent registration won the race for this email
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )
    doc["id"] = str(result.inserted_id)

    logger.info(f"User registered: {doc['id']}")
    return RegisterResponse(user=_doc_to_user(doc))


@router.post("/login", response_model=TokenResponse)
async def login(body: UserLogin, db: Database = Depends(get_db)):
    """exchange email + password for a token pair"""
    user = await db.users.find_one({"email": body.email.lower()})
    if not user or not verify_password(body.password, user.get("hashed_password", "")):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    logger.info(f"User logged in: {user['_id']}")
    return TokenResponse(**create_token_pair(str(user["_id"]), user["email"]))


@router.post("/refresh", response_model=TokenResponse)
async def refresh(body: RefreshRequest, db: Database = Depends(get_db)):
    """issue a fresh token pair from a refresh token"""
    payload = decode_token(body.refresh_token)
    if payload is None or payload.get("type") != "refresh":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    try:
        user = await db.users.find_one({"_id": ObjectId(payload.get("sub", ""))})
    except InvalidId:
        user = None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return TokenResponse(**create_token_pair(str(user["_id"]), user["email"]))


@router.get("/me", response_model=UserResponse)
async def me(current_user: dict = Depends(get_current_user)):
    return _doc_to_user(current_user)

# user models — registration, tokens, profile and settings schemas

from typing import Optional, Literal
from pydantic import BaseModel, EmailStr, Field, field_validator


# auth

class UserCreate(BaseModel):
    email: EmailStr = Field(..., description="user email address")
    name: str = Field(..., min_length=2, description="display name")
    password: str = Field(..., min_length=8, description="plaintext password (min 8 chars)")
    gender: Optional[Literal["MALE", "FEMALE", "OTHER"]] = None

    @field_validator("gender", mode="before")
    @classmethod
    def _upper_gender(cls, value):
        # accepts male / Male / MALE
        if isinstance(value, str):
            return value.upper()
        return value


class UserLogin(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")
    token_type: str = "bearer"

    model_config = {"populate_by_name": True}


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., alias="refreshToken")

    model_config = {"populate_by_name": True}


# user responses

class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    gender: Optional[str] = None
    theme: str = "default"
    created_at: str = Field("", alias="createdAt")

    model_config = {"populate_by_name": True}


class RegisterResponse(BaseModel):
    message: str = "User created successfully"
    user: UserResponse


# settings

class NotificationSettings(BaseModel):
    daily_reminder: bool = Field(True, alias="dailyReminder")
    weekly_insights: bool = Field(False, alias="weeklyInsights")
    coach_tips: bool = Field(False, alias="coachTips")

    model_config = {"populate_by_name": True}


class PrivacySettings(BaseModel):
    data_export_enabled: bool = Field(True, alias="dataExportEnabled")

    model_config = {"populate_by_name": True}


class Preferences(BaseModel):
    theme: Literal["default", "male", "female"] = "default"
    privacy: PrivacySettings = Field(default_factory=PrivacySettings)


class SettingsResponse(BaseModel):
    id: str
    name: str = ""
    email: str
    gender: str = "default"
    plan: str = "free"
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    preferences: Preferences = Field(default_factory=Preferences)


class PreferencesUpdate(BaseModel):
    theme: Optional[Literal["default", "male", "female"]] = None


class SettingsUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2)
    notifications: Optional[NotificationSettings] = None
    preferences: Optional[PreferencesUpdate] = None

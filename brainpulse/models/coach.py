# coach models — chat request and insight schemas for pulse coach

from typing import Literal
from pydantic import BaseModel, Field


class CoachMessage(BaseModel):
    """single message in the chat history"""
    role: Literal["user", "assistant"] = Field(..., description="message role: user or assistant")
    content: str = Field(..., description="message content")


class CoachRequest(BaseModel):
    message: str = Field("", description="the user's new message")
    history: list[CoachMessage] = Field(default_factory=list, description="previous turns, oldest first")


class CoachInsightResponse(BaseModel):
    insight: str

"""Counselor chat models"""
from enum import Enum
from datetime import datetime
from pydantic import BaseModel


class ChatRole(str, Enum):
    """Author of a chat message"""
    USER = "user"
    MODEL = "model"


class ChatMessage(BaseModel):
    """A single counselor chat message"""
    id: str
    user_id: str
    role: ChatRole
    text: str
    created_at: datetime

"""Mood log models"""
from enum import Enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class MoodType(str, Enum):
    """Moods a student can log"""
    HAPPY = "happy"
    CALM = "calm"
    NEUTRAL = "neutral"
    SAD = "sad"
    ANXIOUS = "anxious"
    ANGRY = "angry"
    TIRED = "tired"
    STRESSED = "stressed"


class MoodEntry(BaseModel):
    """A logged mood"""
    id: str
    user_id: str
    mood: MoodType
    note: Optional[str] = Field(None, max_length=1000)
    ai_insight: Optional[str] = None
    created_at: datetime

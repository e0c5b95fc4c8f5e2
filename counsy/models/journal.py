"""Journal models"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from counsy.models.mood import MoodType


class JournalAnalysis(BaseModel):
    """Structured reading of a journal entry"""
    mood_summary: str
    productivity_insight: str
    recommendations: list[str] = Field(default_factory=list)


class JournalEntry(BaseModel):
    """A journal entry"""
    id: str
    user_id: str
    content: str
    tags: list[str] = Field(default_factory=list)
    mood: MoodType
    is_locked: bool = False
    ai_analysis: Optional[JournalAnalysis] = None
    created_at: datetime

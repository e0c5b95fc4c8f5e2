"""Pydantic models for API request/response validation"""
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import date, datetime

from counsy.config import DEFAULT_LANGUAGE

from counsy.models.achievement import Achievement
from counsy.models.chat import ChatMessage
from counsy.models.journal import JournalEntry
from counsy.models.mood import MoodEntry, MoodType
from counsy.models.streak import StreakState
from counsy.models.user import UserProfile


# ==========================================
# Shared
# ==========================================

class StreakSummary(BaseModel):
    """Streak state as returned by the API"""
    current_streak: int
    last_activity_date: Optional[date] = None
    journal_streak: int
    last_journal_date: Optional[date] = None
    mood_streak: int
    last_mood_date: Optional[date] = None
    focus_streak: int
    last_focus_date: Optional[date] = None
    achievements: List[str] = Field(default_factory=list, description="Unlocked achievement ids, sorted")

    @classmethod
    def from_state(cls, state: StreakState) -> "StreakSummary":
        data = state.model_dump(exclude={"achievements"})
        return cls(**data, achievements=sorted(a.value for a in state.achievements))


class UnlockedAchievement(BaseModel):
    """An achievement unlocked by the request"""
    id: str
    name: str
    description: str
    icon: str
    tier: str

    @classmethod
    def from_definition(cls, achievement: Achievement) -> "UnlockedAchievement":
        return cls(
            id=achievement.id.value,
            name=achievement.name,
            description=achievement.description,
            icon=achievement.icon,
            tier=achievement.tier.value,
        )


# ==========================================
# Moods
# ==========================================

class MoodLogRequest(BaseModel):
    """Request to log a mood"""
    mood: MoodType = Field(..., description="Mood being logged")
    note: Optional[str] = Field(default=None, max_length=1000, description="Optional note")
    lang: str = Field(default=DEFAULT_LANGUAGE, description="Language for fallback text")


class MoodLogResponse(BaseModel):
    """Response after logging a mood"""
    entry: MoodEntry
    streak: StreakSummary
    achievements_unlocked: List[UnlockedAchievement] = Field(default_factory=list)


class MoodListResponse(BaseModel):
    """Mood history"""
    user_id: str
    entries: List[MoodEntry]


# ==========================================
# Journals
# ==========================================

class JournalCreateRequest(BaseModel):
    """Request to save a journal entry"""
    content: str = Field(..., min_length=1, max_length=20000, description="Entry text")
    mood: MoodType = Field(..., description="Mood attached to the entry")
    tags: List[str] = Field(default_factory=list, description="Optional tags")
    is_locked: bool = Field(default=False, description="Hide the entry behind a lock in the UI")
    analyze: bool = Field(default=False, description="Attach an AI analysis")
    lang: str = Field(default=DEFAULT_LANGUAGE, description="Language for fallback text")


class JournalSaveResponse(BaseModel):
    """Response after saving a journal entry"""
    entry: JournalEntry
    streak: StreakSummary
    achievements_unlocked: List[UnlockedAchievement] = Field(default_factory=list)


class JournalListResponse(BaseModel):
    """Journal history"""
    user_id: str
    entries: List[JournalEntry]


class JournalAnalyzeRequest(BaseModel):
    """Request to analyze text without saving it"""
    text: str = Field(..., max_length=20000, description="Journal text")
    lang: str = Field(default=DEFAULT_LANGUAGE, description="Language for fallback text")


# ==========================================
# Counselor chat
# ==========================================

class ChatRequest(BaseModel):
    """Request model for chat endpoint"""
    message: str = Field(..., description="User message text")
    user_name: str = Field(default="Friend", description="Name the counselor uses")
    lang: str = Field(default=DEFAULT_LANGUAGE, description="Language for fallback replies")


class ChatResponse(BaseModel):
    """Response model for chat endpoint"""
    reply: ChatMessage
    user_id: str


class ChatHistoryResponse(BaseModel):
    """Chat history, oldest first"""
    user_id: str
    messages: List[ChatMessage]


# ==========================================
# Streaks & achievements
# ==========================================

class FocusSessionRequest(BaseModel):
    """A completed focus (pomodoro) session"""
    lang: str = Field(default=DEFAULT_LANGUAGE, description="Language for the status message")


class ActivityResponse(BaseModel):
    """Response after a streak-counted activity"""
    user_id: str
    streak: StreakSummary
    achievements_unlocked: List[UnlockedAchievement] = Field(default_factory=list)
    message: str


class StreakResponse(BaseModel):
    """Response with streak data"""
    user_id: str
    streak: StreakSummary
    summary: str


class AchievementResponse(BaseModel):
    """Response with achievements and progress"""
    user_id: str
    achievements: List[Dict[str, Any]]
    total_unlocked: int
    total_achievements: int


# ==========================================
# Profiles
# ==========================================

class ProfileCreateRequest(BaseModel):
    """Request to create a profile"""
    username: str = Field(..., description="Unique username")
    name: str = Field(..., min_length=1, description="Display name")
    avatar_url: Optional[str] = Field(default=None, description="Avatar URL (generated if omitted)")


class ProfileUpdateRequest(BaseModel):
    """Request to update profile fields"""
    username: Optional[str] = None
    name: Optional[str] = Field(default=None, min_length=1)
    avatar_url: Optional[str] = None


class ProfileResponse(BaseModel):
    """Profile data"""
    profile: UserProfile
    avatar_url: str


class UsernameAvailabilityResponse(BaseModel):
    """Username availability"""
    username: str
    available: bool


# ==========================================
# Health
# ==========================================

class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Service status")
    database: str = Field(..., description="Database connection status")
    ai: str = Field(..., description="'configured' or 'demo'")
    timestamp: datetime = Field(..., description="Check timestamp")

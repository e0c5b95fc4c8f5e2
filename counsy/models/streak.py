"""Streak state models"""
from enum import Enum
from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from counsy.models.achievement import AchievementId


class ActivityCategory(str, Enum):
    """Activities that count toward streaks"""
    JOURNAL = "journal"
    MOOD = "mood"
    FOCUS = "focus"


# category -> (counter field, last date field)
CATEGORY_FIELDS: dict[ActivityCategory, tuple[str, str]] = {
    ActivityCategory.JOURNAL: ("journal_streak", "last_journal_date"),
    ActivityCategory.MOOD: ("mood_streak", "last_mood_date"),
    ActivityCategory.FOCUS: ("focus_streak", "last_focus_date"),
}


class StreakState(BaseModel):
    """
    Per-user streak record.

    Each counter moves together with its paired last date. The achievement
    set only ever grows.
    """
    model_config = ConfigDict(frozen=True)

    current_streak: int = Field(default=0, ge=0)
    last_activity_date: Optional[date] = None

    journal_streak: int = Field(default=0, ge=0)
    last_journal_date: Optional[date] = None
    mood_streak: int = Field(default=0, ge=0)
    last_mood_date: Optional[date] = None
    focus_streak: int = Field(default=0, ge=0)
    last_focus_date: Optional[date] = None

    achievements: frozenset[AchievementId] = Field(default_factory=frozenset)

    @classmethod
    def empty(cls) -> "StreakState":
        """Zero state for a user with no history"""
        return cls()

    def category_streak(self, category: ActivityCategory) -> int:
        counter_field, _ = CATEGORY_FIELDS[ActivityCategory(category)]
        return getattr(self, counter_field)

    def category_last_date(self, category: ActivityCategory) -> Optional[date]:
        _, date_field = CATEGORY_FIELDS[ActivityCategory(category)]
        return getattr(self, date_field)

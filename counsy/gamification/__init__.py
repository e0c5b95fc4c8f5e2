"""
Gamification for counsy

- Consecutive-day streak tracking (overall and per activity category)
- Achievement badges unlocked from streak state
"""

from counsy.gamification.streak_system import record_activity, calculate_new_streak, format_streak_display
from counsy.gamification.achievement_system import (
    ACHIEVEMENTS,
    evaluate_achievements,
    newly_unlocked,
    get_achievement_progress,
)

__all__ = [
    "record_activity",
    "calculate_new_streak",
    "format_streak_display",
    "ACHIEVEMENTS",
    "evaluate_achievements",
    "newly_unlocked",
    "get_achievement_progress",
]

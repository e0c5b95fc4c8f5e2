"""
Streak Tracking System

Tracks consecutive-day streaks for a student:
- overall (any tracked activity)
- journal
- mood
- focus

Rules:
- First activity ever starts a streak at 1
- Another activity on the same day changes nothing
- Activity on the day after the last one extends the streak
- Any longer gap resets the streak to 1

Everything here is a pure computation on StreakState. Loading and saving
the state is the caller's job (see counsy.services.streak_service).
"""

from typing import Optional
from datetime import date, datetime, timedelta
import logging

from counsy.exceptions import ValidationError
from counsy.gamification.achievement_system import evaluate_achievements
from counsy.models.streak import ActivityCategory, StreakState, CATEGORY_FIELDS

logger = logging.getLogger(__name__)


def calculate_new_streak(current_streak: int, last_date: Optional[date], today: date) -> int:
    """
    Apply the consecutive-day rule to one counter

    Args:
        current_streak: Counter value before the activity
        last_date: Last day the counter was advanced (None if never)
        today: Day of the new activity

    Returns:
        New counter value
    """
    if last_date is None:
        return 1

    if last_date == today:
        return current_streak

    if last_date == today - timedelta(days=1):
        return current_streak + 1

    return 1


def parse_category(category) -> ActivityCategory:
    """Validate an activity category (enum member or its string value)"""
    try:
        return ActivityCategory(category)
    except (ValueError, TypeError):
        raise ValidationError(
            message=f"Unknown activity category '{category}'. "
                    f"Expected one of: {', '.join(c.value for c in ActivityCategory)}",
            field="category",
            value=category
        )


def parse_activity_date(today) -> date:
    """Validate an activity day; a datetime is truncated to its date"""
    # datetime is a subclass of date, check it first
    if isinstance(today, datetime):
        return today.date()
    if isinstance(today, date):
        return today
    raise ValidationError(
        message="Activity date must be a calendar date",
        field="today",
        value=today
    )


def record_activity(state: StreakState, category: ActivityCategory, today: date) -> StreakState:
    """
    Record one qualifying activity and return the updated streak state

    Logic:
    - Update the overall streak with the consecutive-day rule
    - Update only the counter/date pair for the activity's category
    - Unlock any achievement whose criteria now hold

    Args:
        state: Current streak state (StreakState.empty() for a new user)
        category: 'journal', 'mood' or 'focus'
        today: Calendar day of the activity (a datetime is truncated to its date)

    Returns:
        The new StreakState. The input state is left untouched.

    Raises:
        ValidationError: category or today is malformed
    """
    category = parse_category(category)
    today = parse_activity_date(today)

    counter_field, date_field = CATEGORY_FIELDS[category]

    new_current = calculate_new_streak(state.current_streak, state.last_activity_date, today)
    new_category_streak = calculate_new_streak(
        state.category_streak(category),
        state.category_last_date(category),
        today
    )

    updated = state.model_copy(update={
        "current_streak": new_current,
        "last_activity_date": today,
        counter_field: new_category_streak,
        date_field: today,
    })

    # Achievements are only ever added
    achievements = updated.achievements | evaluate_achievements(updated)
    updated = updated.model_copy(update={"achievements": frozenset(achievements)})

    if updated.current_streak != state.current_streak:
        logger.info(
            f"Overall streak {state.current_streak} → {updated.current_streak} "
            f"({category.value} activity on {today.isoformat()})"
        )

    return updated


def _days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def format_streak_display(state: StreakState) -> str:
    """
    Format streaks for display

    Args:
        state: Streak state to summarise

    Returns:
        Multi-line summary string
    """
    if state.last_activity_date is None:
        return "No streaks yet. Log a mood, write a journal entry or finish a focus session to start one! 🌱"

    emoji_map = {
        ActivityCategory.JOURNAL: "📓",
        ActivityCategory.MOOD: "🙂",
        ActivityCategory.FOCUS: "🎯",
    }

    lines = [f"🔥 Overall: {_days(state.current_streak)}"]

    for category in ActivityCategory:
        count = state.category_streak(category)
        if count:
            lines.append(f"{emoji_map[category]} {category.value.capitalize()}: {_days(count)}")

    return "\n".join(lines)

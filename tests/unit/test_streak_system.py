"""Unit tests for Streak System (counsy/gamification/streak_system.py)"""
import pytest
from datetime import date, datetime, timedelta

from counsy.exceptions import ValidationError
from counsy.gamification.streak_system import (
    calculate_new_streak,
    format_streak_display,
    parse_activity_date,
    parse_category,
    record_activity,
)
from counsy.models.achievement import AchievementId
from counsy.models.streak import ActivityCategory, StreakState


# ============================================================================
# Consecutive-Day Rule
# ============================================================================

def test_calculate_new_streak_no_prior_date():
    """First activity ever starts at 1, not 0"""
    assert calculate_new_streak(0, None, date(2024, 1, 1)) == 1


def test_calculate_new_streak_same_day_unchanged():
    assert calculate_new_streak(4, date(2024, 1, 5), date(2024, 1, 5)) == 4


def test_calculate_new_streak_yesterday_increments():
    assert calculate_new_streak(4, date(2024, 1, 4), date(2024, 1, 5)) == 5


def test_calculate_new_streak_across_month_boundary():
    assert calculate_new_streak(10, date(2024, 1, 31), date(2024, 2, 1)) == 11


def test_calculate_new_streak_across_leap_day():
    assert calculate_new_streak(2, date(2024, 2, 28), date(2024, 2, 29)) == 3
    assert calculate_new_streak(3, date(2024, 2, 29), date(2024, 3, 1)) == 4


@pytest.mark.parametrize("gap_days", [2, 3, 30, 400])
def test_calculate_new_streak_gap_resets(gap_days):
    today = date(2024, 6, 15)
    assert calculate_new_streak(25, today - timedelta(days=gap_days), today) == 1


# ============================================================================
# record_activity
# ============================================================================

def test_first_mood_activity(empty_state):
    """Brand new user logs a mood on 2024-01-01"""
    result = record_activity(empty_state, "mood", date(2024, 1, 1))

    assert result.current_streak == 1
    assert result.mood_streak == 1
    assert result.last_activity_date == date(2024, 1, 1)
    assert result.last_mood_date == date(2024, 1, 1)
    assert result.journal_streak == 0
    assert result.last_journal_date is None
    assert result.focus_streak == 0
    assert result.last_focus_date is None
    assert result.achievements == frozenset({AchievementId.CALM_STARTER})


def test_journal_on_next_day_starts_journal_streak(empty_state):
    """Global streak advances while the new category starts at 1"""
    day_one = record_activity(empty_state, ActivityCategory.MOOD, date(2024, 1, 1))
    day_two = record_activity(day_one, ActivityCategory.JOURNAL, date(2024, 1, 2))

    assert day_two.current_streak == 2
    assert day_two.journal_streak == 1
    assert day_two.last_journal_date == date(2024, 1, 2)
    assert day_two.mood_streak == 1
    assert day_two.last_mood_date == date(2024, 1, 1)


def test_seventh_day_unlocks_mindful_week(six_day_state):
    result = record_activity(six_day_state, ActivityCategory.FOCUS, date(2024, 1, 7))

    assert result.current_streak == 7
    assert AchievementId.MINDFUL_7_DAY in result.achievements
    assert AchievementId.CALM_STARTER in result.achievements


def test_gap_resets_streak_and_blocks_mindful_week():
    state = StreakState(
        current_streak=6,
        last_activity_date=date(2024, 1, 1),
        achievements=frozenset({AchievementId.CALM_STARTER}),
    )

    result = record_activity(state, ActivityCategory.MOOD, date(2024, 1, 7))

    assert result.current_streak == 1
    assert AchievementId.MINDFUL_7_DAY not in result.achievements


@pytest.mark.parametrize("category", list(ActivityCategory))
def test_same_day_is_idempotent(six_day_state, category):
    today = date(2024, 1, 7)

    once = record_activity(six_day_state, category, today)
    twice = record_activity(once, category, today)

    assert twice == once


def test_same_day_different_category_does_not_inflate_global(six_day_state):
    today = date(2024, 1, 7)

    after_mood = record_activity(six_day_state, ActivityCategory.MOOD, today)
    after_journal = record_activity(after_mood, ActivityCategory.JOURNAL, today)

    assert after_journal.current_streak == after_mood.current_streak == 7
    assert after_journal.journal_streak == 1
    assert after_journal.mood_streak == 7


@pytest.mark.parametrize("category", list(ActivityCategory))
def test_category_isolation(category):
    """Only the category's own counter/date pair moves"""
    state = StreakState(
        current_streak=3,
        last_activity_date=date(2024, 3, 9),
        journal_streak=3,
        last_journal_date=date(2024, 3, 9),
        mood_streak=2,
        last_mood_date=date(2024, 3, 8),
        focus_streak=1,
        last_focus_date=date(2024, 3, 5),
    )

    result = record_activity(state, category, date(2024, 3, 10))

    for other in ActivityCategory:
        if other == category:
            continue
        assert result.category_streak(other) == state.category_streak(other)
        assert result.category_last_date(other) == state.category_last_date(other)

    assert result.category_last_date(category) == date(2024, 3, 10)


def test_achievements_never_shrink():
    """Badges earned earlier survive a streak reset"""
    state = StreakState(
        current_streak=31,
        last_activity_date=date(2024, 1, 31),
        focus_streak=5,
        last_focus_date=date(2024, 1, 31),
        achievements=frozenset(AchievementId),
    )

    result = record_activity(state, ActivityCategory.JOURNAL, date(2024, 3, 1))

    assert result.current_streak == 1
    assert result.achievements >= state.achievements


def test_focus_master_after_five_focus_days(empty_state):
    state = empty_state
    for offset in range(5):
        state = record_activity(state, ActivityCategory.FOCUS, date(2024, 5, 1) + timedelta(days=offset))

    assert state.focus_streak == 5
    assert AchievementId.FOCUS_MASTER in state.achievements
    assert AchievementId.MINDFUL_7_DAY not in state.achievements


def test_thirty_day_streak_unlocks_consistency_champ(empty_state):
    state = empty_state
    for offset in range(30):
        category = list(ActivityCategory)[offset % 3]
        state = record_activity(state, category, date(2024, 1, 1) + timedelta(days=offset))

    assert state.current_streak == 30
    assert {
        AchievementId.CALM_STARTER,
        AchievementId.MINDFUL_7_DAY,
        AchievementId.CONSISTENCY_CHAMP,
    } <= state.achievements


def test_input_state_is_not_mutated(six_day_state):
    before = six_day_state.model_copy()

    record_activity(six_day_state, ActivityCategory.MOOD, date(2024, 1, 7))

    assert six_day_state == before


def test_datetime_is_truncated_to_calendar_day(six_day_state):
    result = record_activity(six_day_state, "mood", datetime(2024, 1, 7, 23, 59))

    assert result.last_activity_date == date(2024, 1, 7)
    assert result.current_streak == 7


# ============================================================================
# Invalid Arguments
# ============================================================================

@pytest.mark.parametrize("category", ["sleep", "", "MOOD", None, 3])
def test_unknown_category_rejected(empty_state, category):
    with pytest.raises(ValidationError) as exc_info:
        record_activity(empty_state, category, date(2024, 1, 1))

    assert exc_info.value.field == "category"


@pytest.mark.parametrize("today", ["2024-01-01", None, 20240101])
def test_non_date_rejected(empty_state, today):
    with pytest.raises(ValidationError) as exc_info:
        record_activity(empty_state, ActivityCategory.MOOD, today)

    assert exc_info.value.field == "today"


def test_parse_category_accepts_values_and_members():
    assert parse_category("focus") is ActivityCategory.FOCUS
    assert parse_category(ActivityCategory.JOURNAL) is ActivityCategory.JOURNAL


def test_parse_activity_date_passes_dates_through():
    assert parse_activity_date(date(2024, 2, 29)) == date(2024, 2, 29)


# ============================================================================
# Display
# ============================================================================

def test_format_streak_display_empty(empty_state):
    assert "No streaks yet" in format_streak_display(empty_state)


def test_format_streak_display_lists_active_categories():
    state = StreakState(
        current_streak=1,
        last_activity_date=date(2024, 1, 1),
        mood_streak=1,
        last_mood_date=date(2024, 1, 1),
        focus_streak=4,
        last_focus_date=date(2024, 1, 1),
    )

    display = format_streak_display(state)

    assert "🔥 Overall: 1 day" in display
    assert "Mood: 1 day" in display
    assert "Focus: 4 days" in display
    assert "Journal" not in display

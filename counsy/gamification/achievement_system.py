"""
Achievement System

Badges unlocked from a user's streak state:
- Milestones (first tracked activity)
- Consistency (overall streak length)
- Focus (focus-session streak length)

Each catalog entry carries its criteria. An achievement is unlocked as soon as
its criteria hold for the current StreakState, and is never revoked.
Adding a badge means adding an AchievementId and a catalog entry; a new kind
of criteria also needs a checker in _CRITERIA_CHECKERS.
"""

from typing import Any, Callable, Dict, List
import logging

from counsy.models.achievement import (
    Achievement,
    AchievementCategory,
    AchievementId,
    AchievementTier,
)

logger = logging.getLogger(__name__)


ACHIEVEMENTS: Dict[AchievementId, Achievement] = {
    AchievementId.CALM_STARTER: Achievement(
        id=AchievementId.CALM_STARTER,
        name="Calm Starter",
        description="Track your first activity",
        icon="🌱",
        category=AchievementCategory.MILESTONES,
        criteria={"type": "first_activity"},
        tier=AchievementTier.BRONZE,
    ),
    AchievementId.MINDFUL_7_DAY: Achievement(
        id=AchievementId.MINDFUL_7_DAY,
        name="Mindful Week",
        description="Keep a 7-day streak",
        icon="🧘",
        category=AchievementCategory.CONSISTENCY,
        criteria={"type": "streak", "field": "current_streak", "count": 7},
        tier=AchievementTier.SILVER,
    ),
    AchievementId.CONSISTENCY_CHAMP: Achievement(
        id=AchievementId.CONSISTENCY_CHAMP,
        name="Consistency Champ",
        description="Keep a 30-day streak",
        icon="🏆",
        category=AchievementCategory.CONSISTENCY,
        criteria={"type": "streak", "field": "current_streak", "count": 30},
        tier=AchievementTier.GOLD,
    ),
    AchievementId.FOCUS_MASTER: Achievement(
        id=AchievementId.FOCUS_MASTER,
        name="Focus Master",
        description="Complete focus sessions 5 days in a row",
        icon="🎯",
        category=AchievementCategory.FOCUS,
        criteria={"type": "streak", "field": "focus_streak", "count": 5},
        tier=AchievementTier.SILVER,
    ),
}


def _check_first_activity(criteria: Dict[str, Any], state) -> bool:
    # Only evaluated after an activity has been recorded
    return True


def _check_streak(criteria: Dict[str, Any], state) -> bool:
    return getattr(state, criteria["field"]) >= criteria["count"]


_CRITERIA_CHECKERS: Dict[str, Callable[[Dict[str, Any], Any], bool]] = {
    "first_activity": _check_first_activity,
    "streak": _check_streak,
}


def is_unlocked(achievement: Achievement, state) -> bool:
    """
    Check a single achievement's criteria against a streak state

    Raises:
        KeyError: criteria type has no registered checker
    """
    checker = _CRITERIA_CHECKERS[achievement.criteria["type"]]
    return checker(achievement.criteria, state)


def evaluate_achievements(state) -> frozenset:
    """
    Get every achievement whose criteria hold for the given state

    Args:
        state: StreakState after the activity was applied

    Returns:
        frozenset of AchievementId
    """
    return frozenset(
        achievement_id
        for achievement_id, achievement in ACHIEVEMENTS.items()
        if is_unlocked(achievement, state)
    )


def newly_unlocked(before, after) -> List[Achievement]:
    """
    Achievements gained by a state transition, in catalog order

    Args:
        before: State before record_activity
        after: State returned by record_activity

    Returns:
        List of Achievement definitions
    """
    gained = after.achievements - before.achievements
    unlocked = [ACHIEVEMENTS[aid] for aid in ACHIEVEMENTS if aid in gained]

    for achievement in unlocked:
        logger.info(f"Achievement unlocked: {achievement.id.value} ({achievement.name})")

    return unlocked


def get_achievement_progress(state) -> List[Dict[str, Any]]:
    """
    Get every achievement with its unlock status and progress

    Returns:
        [
            {
                'id': str,
                'name': str,
                'description': str,
                'icon': str,
                'category': str,
                'tier': str,
                'unlocked': bool,
                'progress': int,   # current value toward the target
                'target': int,
            }
        ]
    """
    result = []

    for achievement_id, achievement in ACHIEVEMENTS.items():
        unlocked = achievement_id in state.achievements
        criteria = achievement.criteria

        if criteria["type"] == "streak":
            target = criteria["count"]
            progress = min(getattr(state, criteria["field"]), target)
        else:
            target = 1
            progress = 1 if unlocked else 0

        if unlocked:
            progress = target

        result.append({
            "id": achievement_id.value,
            "name": achievement.name,
            "description": achievement.description,
            "icon": achievement.icon,
            "category": achievement.category.value,
            "tier": achievement.tier.value,
            "unlocked": unlocked,
            "progress": progress,
            "target": target,
        })

    return result

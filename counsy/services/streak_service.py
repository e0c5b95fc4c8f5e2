"""
StreakService - Streak and achievement orchestration

Records an activity in one database transaction: lock the user's streak
row, write the activity's entry (if any), run the pure streak computation
and save the result. A second request for the same user waits on the row
lock, so concurrent mood and journal saves cannot overwrite each other.

Transient failures retry the whole transaction. The failed attempt rolled
back, so the retry reads the same row and computes the same state unless
another request for this user committed in between.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional

import psycopg

from counsy.db import queries
from counsy.exceptions import StreakPersistenceError
from counsy.gamification import get_achievement_progress, newly_unlocked, record_activity
from counsy.gamification.streak_system import parse_activity_date, parse_category
from counsy.models.achievement import Achievement
from counsy.models.streak import ActivityCategory, StreakState
from counsy.resilience.retry import retry_with_backoff

logger = logging.getLogger(__name__)

# Writes the activity's own record on the transaction's connection
EntryWriter = Callable[[psycopg.AsyncConnection], Awaitable[Any]]


@dataclass
class ActivityResult:
    """Outcome of recording one activity"""
    state: StreakState
    newly_unlocked: List[Achievement] = field(default_factory=list)
    record: Any = None


class StreakService:
    """
    Service for streak tracking.

    Responsibilities:
    - Lazily create a user's zero streak record
    - Apply activities (mood, journal, focus) to the streak state
    - Persist the result together with the activity's entry
    - Report achievement progress
    """

    SAVE_MAX_RETRIES = 3

    def __init__(self, db_connection, save_retry_base_delay: float = 0.5):
        """
        Initialize StreakService.

        Args:
            db_connection: Database instance
            save_retry_base_delay: First backoff delay when retrying the transaction
        """
        self.db = db_connection
        self.save_retry_base_delay = save_retry_base_delay
        logger.debug("StreakService initialized")

    async def get_streak_state(self, user_id: str) -> StreakState:
        """
        Get the user's streak state, creating the zero record if none exists
        """
        state = await queries.get_streak_state(self.db, user_id)
        if state is None:
            state = await queries.create_streak_state(self.db, user_id)
        return state

    async def record_activity(
        self,
        user_id: str,
        category: ActivityCategory,
        today: Optional[date] = None,
        write_entry: Optional[EntryWriter] = None
    ) -> ActivityResult:
        """
        Record a qualifying activity and persist the new streak state.

        Args:
            user_id: User identifier
            category: 'journal', 'mood' or 'focus'
            today: Day of the activity (defaults to the server's local date)
            write_entry: Inserts the activity's record on the given
                connection; it commits or rolls back with the streak

        Returns:
            ActivityResult with the saved state, newly unlocked achievements
            and whatever write_entry returned

        Raises:
            ValidationError: category or date malformed (nothing is loaded or saved)
            StreakPersistenceError: the transaction failed after retries; nothing
                was committed and it carries the last computed state
        """
        category = parse_category(category)
        today = parse_activity_date(date.today() if today is None else today)

        # Last computed state, for the error raised when every attempt fails
        computed: Dict[str, StreakState] = {}

        async def apply_in_transaction():
            async with self.db.connection() as conn:
                async with conn.transaction():
                    before = await queries.lock_streak_state(conn, user_id)
                    record = await write_entry(conn) if write_entry is not None else None
                    after = record_activity(before, category, today)
                    computed["state"] = after
                    await queries.save_streak_state(conn, user_id, after)
            return before, after, record

        try:
            before, updated, record = await retry_with_backoff(
                apply_in_transaction,
                max_retries=self.SAVE_MAX_RETRIES,
                base_delay=self.save_retry_base_delay,
            )
        except psycopg.Error as e:
            raise StreakPersistenceError(
                message=f"Failed to record {category.value} activity: {e}",
                state=computed.get("state"),
                user_id=user_id,
                operation="record_activity",
                cause=e
            )

        unlocked = newly_unlocked(before, updated)

        logger.info(
            f"Recorded {category.value} activity for user {user_id}: "
            f"streak={updated.current_streak}, unlocked={[a.id.value for a in unlocked]}"
        )

        return ActivityResult(state=updated, newly_unlocked=unlocked, record=record)

    async def complete_focus_session(self, user_id: str, today: Optional[date] = None) -> ActivityResult:
        """Record a completed focus session"""
        return await self.record_activity(user_id, ActivityCategory.FOCUS, today)

    async def get_achievement_progress(self, user_id: str) -> List[Dict[str, Any]]:
        """All achievements with unlock status and progress for the user"""
        state = await self.get_streak_state(user_id)
        return get_achievement_progress(state)

"""Streak and achievement database queries"""
import logging
from typing import Optional

import psycopg

from counsy.db.connection import Database
from counsy.models.achievement import AchievementId
from counsy.models.streak import StreakState

logger = logging.getLogger(__name__)

_STREAK_COLUMNS = """
    current_streak, last_activity_date,
    journal_streak, last_journal_date,
    mood_streak, last_mood_date,
    focus_streak, last_focus_date,
    achievements
"""


def row_to_streak_state(row: dict) -> StreakState:
    """Build a StreakState from a streaks row"""
    achievements = frozenset(AchievementId(value) for value in row.get("achievements") or [])

    return StreakState(
        current_streak=row["current_streak"] or 0,
        last_activity_date=row["last_activity_date"],
        journal_streak=row["journal_streak"] or 0,
        last_journal_date=row["last_journal_date"],
        mood_streak=row["mood_streak"] or 0,
        last_mood_date=row["last_mood_date"],
        focus_streak=row["focus_streak"] or 0,
        last_focus_date=row["last_focus_date"],
        achievements=achievements,
    )


async def get_streak_state(db: Database, user_id: str) -> Optional[StreakState]:
    """
    Get a user's streak record

    Returns:
        StreakState, or None if the user has no streak row yet
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_STREAK_COLUMNS}
                FROM streaks
                WHERE user_id = %s
                """,
                (user_id,)
            )
            row = await cur.fetchone()

    return row_to_streak_state(row) if row else None


async def create_streak_state(db: Database, user_id: str) -> StreakState:
    """
    Insert the zero streak record for a user

    Concurrent first requests for the same user are harmless: the insert is
    skipped if the row already exists and the stored row is returned.

    Returns:
        The stored StreakState
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO streaks (user_id)
                VALUES (%s)
                ON CONFLICT (user_id) DO NOTHING
                """,
                (user_id,)
            )
            await cur.execute(
                f"""
                SELECT {_STREAK_COLUMNS}
                FROM streaks
                WHERE user_id = %s
                """,
                (user_id,)
            )
            row = await cur.fetchone()
            await conn.commit()

    logger.info(f"Initialized streak record for user {user_id}")
    return row_to_streak_state(row) if row else StreakState.empty()


async def lock_streak_state(conn: psycopg.AsyncConnection, user_id: str) -> StreakState:
    """
    Load a user's streak record and lock it until the transaction ends

    Creates the zero record first when none exists. Must run inside
    `conn.transaction()`: a second request for the same user blocks here
    until the first one commits or rolls back, then reads its result.
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            INSERT INTO streaks (user_id)
            VALUES (%s)
            ON CONFLICT (user_id) DO NOTHING
            """,
            (user_id,)
        )
        await cur.execute(
            f"""
            SELECT {_STREAK_COLUMNS}
            FROM streaks
            WHERE user_id = %s
            FOR UPDATE
            """,
            (user_id,)
        )
        row = await cur.fetchone()

    return row_to_streak_state(row)


async def save_streak_state(conn: psycopg.AsyncConnection, user_id: str, state: StreakState) -> None:
    """
    Write a computed streak state on an open connection

    Every counter, date and the achievement set go out in one statement,
    so a counter and its paired date can never be stored apart. The caller
    owns the transaction; nothing is committed here.

    Raises:
        psycopg.Error: on any database failure
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            UPDATE streaks
            SET current_streak = %s,
                last_activity_date = %s,
                journal_streak = %s,
                last_journal_date = %s,
                mood_streak = %s,
                last_mood_date = %s,
                focus_streak = %s,
                last_focus_date = %s,
                achievements = %s,
                updated_at = CURRENT_TIMESTAMP
            WHERE user_id = %s
            """,
            (
                state.current_streak,
                state.last_activity_date,
                state.journal_streak,
                state.last_journal_date,
                state.mood_streak,
                state.last_mood_date,
                state.focus_streak,
                state.last_focus_date,
                sorted(a.value for a in state.achievements),
                user_id
            )
        )

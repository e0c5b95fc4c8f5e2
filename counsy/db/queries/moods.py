"""Mood entry database queries"""
import logging
from typing import Optional

import psycopg

from counsy.db.connection import Database
from counsy.models.mood import MoodEntry, MoodType

logger = logging.getLogger(__name__)


async def save_mood_entry(
    conn: psycopg.AsyncConnection,
    user_id: str,
    mood: MoodType,
    note: Optional[str] = None,
    ai_insight: Optional[str] = None
) -> MoodEntry:
    """
    Insert a mood entry on an open connection

    The caller owns the transaction, so the entry commits or rolls back
    together with the streak update it counts toward.

    Returns:
        The stored MoodEntry
    """
    async with conn.cursor() as cur:
        await cur.execute(
            """
            INSERT INTO mood_entries (user_id, mood, note, ai_insight)
            VALUES (%s, %s, %s, %s)
            RETURNING id::text AS id, user_id, mood, note, ai_insight, created_at
            """,
            (user_id, MoodType(mood).value, note, ai_insight)
        )
        row = await cur.fetchone()

    logger.info(f"Saved mood entry for user {user_id}: {row['mood']}")
    return MoodEntry(**row)


async def get_mood_entries(db: Database, user_id: str, limit: int = 100) -> list[MoodEntry]:
    """Get a user's mood entries, newest first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id::text AS id, user_id, mood, note, ai_insight, created_at
                FROM mood_entries
                WHERE user_id = %s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()

    return [MoodEntry(**row) for row in rows]

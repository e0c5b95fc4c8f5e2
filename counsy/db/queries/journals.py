"""Journal entry database queries"""
import logging
from typing import Optional

import psycopg
from psycopg.types.json import Jsonb

from counsy.db.connection import Database
from counsy.models.journal import JournalAnalysis, JournalEntry
from counsy.models.mood import MoodType

logger = logging.getLogger(__name__)

_JOURNAL_COLUMNS = "id::text AS id, user_id, content, tags, mood, is_locked, ai_analysis, created_at"


def _row_to_entry(row: dict) -> JournalEntry:
    return JournalEntry(
        id=row["id"],
        user_id=row["user_id"],
        content=row["content"],
        tags=row["tags"] or [],
        mood=row["mood"],
        is_locked=row["is_locked"],
        ai_analysis=JournalAnalysis(**row["ai_analysis"]) if row["ai_analysis"] else None,
        created_at=row["created_at"],
    )


async def save_journal_entry(
    conn: psycopg.AsyncConnection,
    user_id: str,
    content: str,
    mood: MoodType,
    tags: Optional[list[str]] = None,
    is_locked: bool = False,
    ai_analysis: Optional[JournalAnalysis] = None
) -> JournalEntry:
    """
    Insert a journal entry on an open connection (the caller commits)

    Returns:
        The stored JournalEntry
    """
    async with conn.cursor() as cur:
        await cur.execute(
            f"""
            INSERT INTO journal_entries (user_id, content, tags, mood, is_locked, ai_analysis)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {_JOURNAL_COLUMNS}
            """,
            (
                user_id,
                content,
                tags or [],
                MoodType(mood).value,
                is_locked,
                Jsonb(ai_analysis.model_dump()) if ai_analysis else None,
            )
        )
        row = await cur.fetchone()

    logger.info(f"Saved journal entry {row['id']} for user {user_id}")
    return _row_to_entry(row)


async def get_journal_entries(db: Database, user_id: str, limit: int = 100) -> list[JournalEntry]:
    """Get a user's journal entries, newest first"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                SELECT {_JOURNAL_COLUMNS}
                FROM journal_entries
                WHERE user_id = %s
                ORDER BY created_at DESC
                LIMIT %s
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()

    return [_row_to_entry(row) for row in rows]


async def delete_journal_entry(db: Database, user_id: str, entry_id: str) -> bool:
    """
    Delete one of a user's journal entries

    Returns:
        True if an entry was deleted
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                DELETE FROM journal_entries
                WHERE id::text = %s AND user_id = %s
                """,
                (entry_id, user_id)
            )
            deleted = cur.rowcount > 0
            await conn.commit()

    if deleted:
        logger.info(f"Deleted journal entry {entry_id} for user {user_id}")
    return deleted

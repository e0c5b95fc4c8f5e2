"""Counselor chat history queries"""
import logging

from counsy.db.connection import Database
from counsy.models.chat import ChatMessage, ChatRole

logger = logging.getLogger(__name__)


async def save_chat_message(db: Database, user_id: str, role: ChatRole, text: str) -> ChatMessage:
    """Insert a chat message"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO chat_messages (user_id, role, text)
                VALUES (%s, %s, %s)
                RETURNING id::text AS id, user_id, role, text, created_at
                """,
                (user_id, ChatRole(role).value, text)
            )
            row = await cur.fetchone()
            await conn.commit()

    return ChatMessage(**row)


async def get_chat_history(db: Database, user_id: str, limit: int = 50) -> list[ChatMessage]:
    """
    Get the most recent chat messages for a user

    Returns:
        Up to `limit` messages, oldest first
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, user_id, role, text, created_at FROM (
                    SELECT id::text AS id, user_id, role, text, created_at
                    FROM chat_messages
                    WHERE user_id = %s
                    ORDER BY created_at DESC
                    LIMIT %s
                ) recent
                ORDER BY created_at ASC
                """,
                (user_id, limit)
            )
            rows = await cur.fetchall()

    return [ChatMessage(**row) for row in rows]


async def clear_chat_history(db: Database, user_id: str) -> int:
    """
    Delete all chat messages for a user

    Returns:
        Number of deleted messages
    """
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "DELETE FROM chat_messages WHERE user_id = %s",
                (user_id,)
            )
            deleted = cur.rowcount
            await conn.commit()

    logger.info(f"Cleared {deleted} chat messages for user {user_id}")
    return deleted

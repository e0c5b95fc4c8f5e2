"""User profile queries"""
import logging
from typing import Any, Optional

from counsy.db.connection import Database
from counsy.models.user import UserProfile

logger = logging.getLogger(__name__)

# Columns a profile update may touch
UPDATABLE_FIELDS = ("username", "name", "avatar_url")


async def get_profile(db: Database, user_id: str) -> Optional[UserProfile]:
    """Get a user's profile, or None"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                SELECT id, username, name, avatar_url, created_at
                FROM profiles
                WHERE id = %s
                """,
                (user_id,)
            )
            row = await cur.fetchone()

    return UserProfile(**row) if row else None


async def create_profile(
    db: Database,
    user_id: str,
    username: str,
    name: str,
    avatar_url: Optional[str] = None
) -> UserProfile:
    """Insert a profile"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                """
                INSERT INTO profiles (id, username, name, avatar_url)
                VALUES (%s, %s, %s, %s)
                RETURNING id, username, name, avatar_url, created_at
                """,
                (user_id, username, name, avatar_url)
            )
            row = await cur.fetchone()
            await conn.commit()

    logger.info(f"Created profile for user {user_id} ({username})")
    return UserProfile(**row)


async def update_profile(db: Database, user_id: str, updates: dict[str, Any]) -> Optional[UserProfile]:
    """
    Update profile columns

    Args:
        updates: Subset of UPDATABLE_FIELDS -> new value

    Returns:
        Updated profile, or None if the user has no profile
    """
    fields = [field for field in UPDATABLE_FIELDS if field in updates]
    if not fields:
        return await get_profile(db, user_id)

    # Column names come from UPDATABLE_FIELDS, never from the caller
    assignments = ", ".join(f"{field} = %s" for field in fields)
    params = [updates[field] for field in fields] + [user_id]

    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                f"""
                UPDATE profiles
                SET {assignments}, updated_at = CURRENT_TIMESTAMP
                WHERE id = %s
                RETURNING id, username, name, avatar_url, created_at
                """,
                params
            )
            row = await cur.fetchone()
            await conn.commit()

    return UserProfile(**row) if row else None


async def username_exists(db: Database, username: str) -> bool:
    """Check whether a username is taken"""
    async with db.connection() as conn:
        async with conn.cursor() as cur:
            await cur.execute(
                "SELECT 1 FROM profiles WHERE lower(username) = lower(%s)",
                (username,)
            )
            row = await cur.fetchone()

    return row is not None

"""
UserService - Profile management

Profiles are keyed by the user id issued by the identity provider.
"""

import logging
import re
from typing import Any, Dict, Optional

import psycopg

from counsy.db import queries
from counsy.exceptions import RecordNotFoundError, ValidationError
from counsy.models.user import UserProfile, default_avatar_url

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.]{3,32}$")


class UserService:
    """
    Service for user profiles.

    Responsibilities:
    - Create profiles (with a generated avatar)
    - Update profile fields
    - Check username availability
    """

    def __init__(self, db_connection):
        self.db = db_connection
        logger.debug("UserService initialized")

    @staticmethod
    def validate_username(username: str) -> str:
        username = (username or "").strip()
        if not USERNAME_PATTERN.match(username):
            raise ValidationError(
                "Username must be 3-32 characters: letters, numbers, '_' or '.'",
                field="username",
                value=username
            )
        return username

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Raises:
            RecordNotFoundError: user has no profile
        """
        profile = await queries.get_profile(self.db, user_id)
        if profile is None:
            raise RecordNotFoundError(
                f"Profile for user {user_id} not found",
                record_type="Profile",
                record_id=user_id
            )
        return profile

    async def get_or_create_profile(
        self,
        user_id: str,
        username: str,
        name: str,
        avatar_url: Optional[str] = None
    ) -> UserProfile:
        """Return the existing profile or create one"""
        profile = await queries.get_profile(self.db, user_id)
        if profile is not None:
            return profile

        username = self.validate_username(username)
        if await queries.username_exists(self.db, username):
            raise ValidationError("Username is already taken", field="username", value=username)

        try:
            return await queries.create_profile(
                self.db,
                user_id,
                username,
                (name or "").strip() or username,
                avatar_url or default_avatar_url(username),
            )
        except psycopg.errors.UniqueViolation:
            # Created concurrently, or the username was claimed since the check
            profile = await queries.get_profile(self.db, user_id)
            if profile is not None:
                return profile
            raise ValidationError("Username is already taken", field="username", value=username)

    async def update_profile(self, user_id: str, updates: Dict[str, Any]) -> UserProfile:
        """
        Update name, username or avatar_url.

        Raises:
            ValidationError: empty name, bad or taken username, unknown field
            RecordNotFoundError: user has no profile
        """
        unknown = set(updates) - set(queries.profiles.UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update fields: {', '.join(sorted(unknown))}",
                field="updates",
                value=sorted(unknown)
            )

        if "name" in updates:
            name = (updates["name"] or "").strip()
            if not name:
                raise ValidationError("Name cannot be empty", field="name", value=updates["name"])
            updates = dict(updates, name=name)

        if "username" in updates:
            updates = dict(updates, username=self.validate_username(updates["username"]))
            current = await self.get_profile(user_id)
            if (
                updates["username"].lower() != current.username.lower()
                and await queries.username_exists(self.db, updates["username"])
            ):
                raise ValidationError("Username is already taken", field="username", value=updates["username"])

        try:
            profile = await queries.update_profile(self.db, user_id, updates)
        except psycopg.errors.UniqueViolation:
            raise ValidationError("Username is already taken", field="username", value=updates.get("username"))
        if profile is None:
            raise RecordNotFoundError(
                f"Profile for user {user_id} not found",
                record_type="Profile",
                record_id=user_id
            )

        logger.info(f"Updated profile for user {user_id}: {sorted(updates)}")
        return profile

    async def check_username_availability(self, username: str) -> bool:
        """True if the username is valid and not taken"""
        username = (username or "").strip()
        if not USERNAME_PATTERN.match(username):
            return False
        return not await queries.username_exists(self.db, username)

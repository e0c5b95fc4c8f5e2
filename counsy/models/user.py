"""User profile models"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

AVATAR_URL_TEMPLATE = "https://api.dicebear.com/7.x/avataaars/svg?seed={username}"


def default_avatar_url(username: str) -> str:
    """Generated avatar for users who have not set one"""
    return AVATAR_URL_TEMPLATE.format(username=username)


class UserProfile(BaseModel):
    """Public profile of a student"""
    id: str
    username: str = Field(..., min_length=3, max_length=32)
    name: str
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_avatar_url(self) -> str:
        return self.avatar_url or default_avatar_url(self.username)

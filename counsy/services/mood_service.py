"""
MoodService - Mood logging

Saves a mood entry with a short AI insight and counts it toward the
user's mood streak.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from counsy.ai.prompts import build_mood_insight_messages
from counsy.db import queries
from counsy.i18n.translations import t
from counsy.models.achievement import Achievement
from counsy.models.completion import Completed
from counsy.models.mood import MoodEntry, MoodType
from counsy.models.streak import ActivityCategory, StreakState

logger = logging.getLogger(__name__)


@dataclass
class MoodLogResult:
    """Saved entry plus its effect on streaks"""
    entry: MoodEntry
    streak: StreakState
    achievements_unlocked: List[Achievement] = field(default_factory=list)


class MoodService:
    """
    Service for mood logging.

    Responsibilities:
    - Ask the completion service for a one-sentence insight
    - Persist the mood entry
    - Record a mood activity for streaks
    """

    def __init__(self, db_connection, completion_client, streak_service):
        self.db = db_connection
        self.completion = completion_client
        self.streaks = streak_service
        logger.debug("MoodService initialized")

    async def get_mood_insight(self, mood: MoodType, lang: str = "en") -> str:
        """One-sentence supportive insight for a mood (offline tip when AI is unavailable)"""
        result = await self.completion.complete(
            build_mood_insight_messages(MoodType(mood).value),
            max_tokens=50,
        )
        if isinstance(result, Completed):
            return result.text

        logger.info(f"Mood insight unavailable ({result.reason}), using offline tip")
        return t("mood_insight_offline", lang)

    async def log_mood(
        self,
        user_id: str,
        mood: MoodType,
        note: Optional[str] = None,
        lang: str = "en"
    ) -> MoodLogResult:
        """
        Log a mood for the user.

        Args:
            user_id: User identifier
            mood: One of MoodType
            note: Optional free-text note
            lang: Language for fallback text

        Returns:
            MoodLogResult

        Raises:
            StreakPersistenceError: nothing was saved; the call can be repeated
        """
        mood = MoodType(mood)
        insight = await self.get_mood_insight(mood, lang)

        activity = await self.streaks.record_activity(
            user_id,
            ActivityCategory.MOOD,
            write_entry=lambda conn: queries.save_mood_entry(
                conn, user_id, mood, note=note, ai_insight=insight
            ),
        )

        return MoodLogResult(
            entry=activity.record,
            streak=activity.state,
            achievements_unlocked=activity.newly_unlocked,
        )

    async def get_mood_history(self, user_id: str, limit: int = 100) -> List[MoodEntry]:
        """Mood entries, newest first"""
        return await queries.get_mood_entries(self.db, user_id, limit=limit)

"""
JournalService - Journaling

Saves journal entries (optionally with an AI analysis) and counts them
toward the user's journal streak.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from counsy.ai.prompts import build_journal_analysis_messages, parse_journal_analysis
from counsy.db import queries
from counsy.exceptions import RecordNotFoundError, ValidationError
from counsy.i18n.translations import t
from counsy.models.achievement import Achievement
from counsy.models.completion import Completed
from counsy.models.journal import JournalAnalysis, JournalEntry
from counsy.models.mood import MoodType
from counsy.models.streak import ActivityCategory, StreakState

logger = logging.getLogger(__name__)


@dataclass
class JournalSaveResult:
    """Saved entry plus its effect on streaks"""
    entry: JournalEntry
    streak: StreakState
    achievements_unlocked: List[Achievement] = field(default_factory=list)


class JournalService:
    """
    Service for journaling.

    Responsibilities:
    - Analyze entries with the completion service
    - Persist, list and delete entries
    - Record a journal activity for streaks
    """

    def __init__(self, db_connection, completion_client, streak_service):
        self.db = db_connection
        self.completion = completion_client
        self.streaks = streak_service
        logger.debug("JournalService initialized")

    def _offline_analysis(self, lang: str) -> JournalAnalysis:
        return JournalAnalysis(
            mood_summary=t("journal_summary_offline", lang),
            productivity_insight=t("journal_insight_offline", lang),
            recommendations=[t("journal_recommendation_offline", lang)],
        )

    async def analyze_entry(self, text: str, lang: str = "en") -> JournalAnalysis:
        """
        Analyze a journal text.

        Returns the parsed AI analysis, or the offline analysis when the text
        is blank or the completion service is unavailable.
        """
        if not text.strip():
            return self._offline_analysis(lang)

        result = await self.completion.complete(
            build_journal_analysis_messages(text),
            max_tokens=200,
        )
        if isinstance(result, Completed):
            return parse_journal_analysis(result.text)

        logger.info(f"Journal analysis unavailable ({result.reason}), using offline analysis")
        return self._offline_analysis(lang)

    async def save_entry(
        self,
        user_id: str,
        content: str,
        mood: MoodType,
        tags: Optional[List[str]] = None,
        is_locked: bool = False,
        analyze: bool = False,
        lang: str = "en"
    ) -> JournalSaveResult:
        """
        Save a journal entry.

        Args:
            user_id: User identifier
            content: Entry text (must not be blank)
            mood: Mood attached to the entry
            tags: Optional tags (deduplicated, order kept)
            is_locked: Whether the entry is private/locked in the UI
            analyze: Attach an AI analysis before saving
            lang: Language for fallback text

        Raises:
            ValidationError: blank content
            StreakPersistenceError: nothing was saved; the call can be repeated
        """
        if not content or not content.strip():
            raise ValidationError("Journal entry cannot be empty", field="content", value=content)

        mood = MoodType(mood)
        clean_tags = list(dict.fromkeys(tag.strip() for tag in (tags or []) if tag.strip()))
        analysis = await self.analyze_entry(content, lang) if analyze else None

        activity = await self.streaks.record_activity(
            user_id,
            ActivityCategory.JOURNAL,
            write_entry=lambda conn: queries.save_journal_entry(
                conn,
                user_id,
                content,
                mood,
                tags=clean_tags,
                is_locked=is_locked,
                ai_analysis=analysis,
            ),
        )

        return JournalSaveResult(
            entry=activity.record,
            streak=activity.state,
            achievements_unlocked=activity.newly_unlocked,
        )

    async def get_entries(self, user_id: str, limit: int = 100) -> List[JournalEntry]:
        """Journal entries, newest first"""
        return await queries.get_journal_entries(self.db, user_id, limit=limit)

    async def delete_entry(self, user_id: str, entry_id: str) -> None:
        """
        Delete a journal entry. Streaks are not affected.

        Raises:
            RecordNotFoundError: no such entry for this user
        """
        deleted = await queries.delete_journal_entry(self.db, user_id, entry_id)
        if not deleted:
            raise RecordNotFoundError(
                f"Journal entry {entry_id} not found",
                record_type="Journal entry",
                record_id=entry_id,
                user_id=user_id
            )

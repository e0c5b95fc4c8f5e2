"""
Service Container - Dependency Injection Container

Holds the infrastructure clients built at startup and lazily constructs the
services that depend on them. The API keeps one container on app.state;
tests build their own with doubles.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    Services are lazy-loaded on first access via properties.
    Infrastructure dependencies (db, completion_client) are injected.
    """

    # Infrastructure dependencies (injected)
    db: object  # Database instance
    completion_client: object  # CompletionClient instance

    # Services (lazy-loaded via properties)
    _streak_service: Optional[object] = field(default=None, init=False, repr=False)
    _mood_service: Optional[object] = field(default=None, init=False, repr=False)
    _journal_service: Optional[object] = field(default=None, init=False, repr=False)
    _counselor_service: Optional[object] = field(default=None, init=False, repr=False)
    _user_service: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def streak_service(self):
        """Get StreakService instance (lazy-loaded)"""
        if self._streak_service is None:
            from counsy.services.streak_service import StreakService
            self._streak_service = StreakService(self.db)
            logger.debug("StreakService instantiated")
        return self._streak_service

    @property
    def mood_service(self):
        """Get MoodService instance (lazy-loaded)"""
        if self._mood_service is None:
            from counsy.services.mood_service import MoodService
            self._mood_service = MoodService(self.db, self.completion_client, self.streak_service)
            logger.debug("MoodService instantiated")
        return self._mood_service

    @property
    def journal_service(self):
        """Get JournalService instance (lazy-loaded)"""
        if self._journal_service is None:
            from counsy.services.journal_service import JournalService
            self._journal_service = JournalService(self.db, self.completion_client, self.streak_service)
            logger.debug("JournalService instantiated")
        return self._journal_service

    @property
    def counselor_service(self):
        """Get CounselorService instance (lazy-loaded)"""
        if self._counselor_service is None:
            from counsy.services.counselor_service import CounselorService
            self._counselor_service = CounselorService(self.db, self.completion_client)
            logger.debug("CounselorService instantiated")
        return self._counselor_service

    @property
    def user_service(self):
        """Get UserService instance (lazy-loaded)"""
        if self._user_service is None:
            from counsy.services.user_service import UserService
            self._user_service = UserService(self.db)
            logger.debug("UserService instantiated")
        return self._user_service


def build_container() -> ServiceContainer:
    """
    Build a container from counsy.config.

    The database pool is created but not opened; call db.init_pool() during
    application startup.
    """
    from counsy import config
    from counsy.ai.completion_client import CompletionClient
    from counsy.db.connection import Database

    db = Database(
        config.DATABASE_URL,
        min_size=config.DB_POOL_MIN_SIZE,
        max_size=config.DB_POOL_MAX_SIZE,
    )
    completion_client = CompletionClient(
        api_key=config.LLM_API_KEY,
        base_url=config.LLM_BASE_URL,
        model=config.LLM_MODEL,
        temperature=config.LLM_TEMPERATURE,
        timeout_seconds=config.LLM_TIMEOUT_SECONDS,
    )

    logger.info("Service container built")
    return ServiceContainer(db=db, completion_client=completion_client)

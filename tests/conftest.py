"""Global test fixtures and utilities for counsy tests"""
import asyncio
import pytest
import psycopg
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, Mock
from datetime import date, datetime, timezone
from uuid import uuid4

from counsy.db import queries
from counsy.models.achievement import AchievementId
from counsy.models.journal import JournalEntry
from counsy.models.mood import MoodEntry
from counsy.models.completion import Completed, Unavailable
from counsy.models.streak import StreakState


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def mock_db_cursor():
    """Mock database cursor with standard query results"""
    cursor = AsyncMock()
    cursor.fetchone = AsyncMock(return_value=None)
    cursor.fetchall = AsyncMock(return_value=[])
    cursor.execute = AsyncMock()
    cursor.rowcount = 0
    return cursor


@pytest.fixture
def mock_db_connection(mock_db_cursor):
    """Mock psycopg connection whose cursor() is an async context manager"""
    conn = MagicMock()
    conn.cursor.return_value.__aenter__ = AsyncMock(return_value=mock_db_cursor)
    conn.cursor.return_value.__aexit__ = AsyncMock(return_value=False)
    conn.transaction.return_value.__aenter__ = AsyncMock(return_value=None)
    conn.transaction.return_value.__aexit__ = AsyncMock(return_value=False)
    conn.commit = AsyncMock()
    conn.rollback = AsyncMock()
    return conn


@pytest.fixture
def mock_db(mock_db_connection):
    """Stand-in for counsy.db.connection.Database"""
    db = Mock()

    @asynccontextmanager
    async def connection():
        yield mock_db_connection

    db.connection = connection
    db.init_pool = AsyncMock()
    db.ping = AsyncMock(return_value=True)
    db.close_pool = AsyncMock()
    return db


# ============================================================================
# In-Memory Database
# ============================================================================

class InMemoryStore:
    """
    Streak rows plus mood and journal entries, with transactions

    A connection buffers its writes until its transaction exits cleanly and
    drops them on an exception. Locking a streak row holds a per-user lock
    until the transaction ends, like SELECT ... FOR UPDATE.
    """

    def __init__(self):
        self.streaks = {}
        self.moods = []
        self.journals = []
        self.failing_saves = 0
        self._row_locks = {}

    def row_lock(self, user_id):
        return self._row_locks.setdefault(user_id, asyncio.Lock())

    @asynccontextmanager
    async def connection(self):
        yield InMemoryConnection(self)


class InMemoryConnection:
    def __init__(self, store):
        self.store = store
        self.streaks = {}
        self.moods = []
        self.journals = []
        self.held_locks = []

    @asynccontextmanager
    async def transaction(self):
        try:
            yield
            self.store.streaks.update(self.streaks)
            self.store.moods.extend(self.moods)
            self.store.journals.extend(self.journals)
        finally:
            for lock in self.held_locks:
                lock.release()
            self.held_locks = []
            self.streaks, self.moods, self.journals = {}, [], []


async def _lock_streak_state(conn, user_id):
    lock = conn.store.row_lock(user_id)
    await lock.acquire()
    conn.held_locks.append(lock)
    await asyncio.sleep(0)
    return conn.store.streaks.get(user_id, StreakState.empty())


async def _save_streak_state(conn, user_id, state):
    await asyncio.sleep(0)
    if conn.store.failing_saves:
        conn.store.failing_saves -= 1
        raise psycopg.OperationalError("server closed the connection unexpectedly")
    conn.streaks[user_id] = state


async def _save_mood_entry(conn, user_id, mood, note=None, ai_insight=None):
    entry = MoodEntry(
        id=str(uuid4()),
        user_id=user_id,
        mood=mood,
        note=note,
        ai_insight=ai_insight,
        created_at=datetime.now(timezone.utc),
    )
    conn.moods.append(entry)
    return entry


async def _save_journal_entry(conn, user_id, content, mood, tags=None, is_locked=False, ai_analysis=None):
    entry = JournalEntry(
        id=str(uuid4()),
        user_id=user_id,
        content=content,
        tags=tags or [],
        mood=mood,
        is_locked=is_locked,
        ai_analysis=ai_analysis,
        created_at=datetime.now(timezone.utc),
    )
    conn.journals.append(entry)
    return entry


@pytest.fixture
def memory_db(monkeypatch):
    """InMemoryStore standing in for both the Database and the write queries"""
    store = InMemoryStore()
    monkeypatch.setattr(queries, "lock_streak_state", _lock_streak_state)
    monkeypatch.setattr(queries, "save_streak_state", _save_streak_state)
    monkeypatch.setattr(queries, "save_mood_entry", _save_mood_entry)
    monkeypatch.setattr(queries, "save_journal_entry", _save_journal_entry)
    return store


# ============================================================================
# Completion Service Fixtures
# ============================================================================

@pytest.fixture
def offline_completion_client():
    """Completion client that is never available"""
    client = Mock()
    client.is_configured = False
    client.complete = AsyncMock(return_value=Unavailable("not_configured"))
    client.close = AsyncMock()
    return client


@pytest.fixture
def completion_client_factory():
    """Build a completion client that answers with the given text"""
    def _factory(text: str):
        client = Mock()
        client.is_configured = True
        client.complete = AsyncMock(return_value=Completed(text))
        client.close = AsyncMock()
        return client
    return _factory


# ============================================================================
# User & Auth Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID (as issued by the identity provider)"""
    return "8d3c1f6e-2b4a-4c1e-9f7a-5e0d2c9b1a77"


@pytest.fixture
def test_api_key():
    """Standard test API key"""
    return "test_api_key_12345"


@pytest.fixture
def fixed_now():
    return datetime(2024, 1, 7, 9, 30, tzinfo=timezone.utc)


# ============================================================================
# Streak Fixtures
# ============================================================================

@pytest.fixture
def empty_state():
    """Zero streak state for a brand new user"""
    return StreakState.empty()


@pytest.fixture
def six_day_state():
    """Six-day overall streak ending 2024-01-06 (one mood activity per day)"""
    return StreakState(
        current_streak=6,
        last_activity_date=date(2024, 1, 6),
        mood_streak=6,
        last_mood_date=date(2024, 1, 6),
        achievements=frozenset({AchievementId.CALM_STARTER}),
    )

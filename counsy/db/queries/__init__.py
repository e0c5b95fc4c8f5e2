"""
Database queries, grouped by record type.

Reads and standalone writes take the Database instance as their first
argument. Writes that count toward a streak (mood and journal entries, the
streak record itself) take an open connection instead, so the service can
group them in one transaction.

Module organization:
- streaks.py: Streak state and achievements
- moods.py: Mood entries
- journals.py: Journal entries
- chat.py: Counselor chat history
- profiles.py: User profiles
"""

from counsy.db.queries.streaks import (
    get_streak_state,
    create_streak_state,
    lock_streak_state,
    save_streak_state,
)
from counsy.db.queries.moods import (
    save_mood_entry,
    get_mood_entries,
)
from counsy.db.queries.journals import (
    save_journal_entry,
    get_journal_entries,
    delete_journal_entry,
)
from counsy.db.queries.chat import (
    save_chat_message,
    get_chat_history,
    clear_chat_history,
)
from counsy.db.queries.profiles import (
    get_profile,
    create_profile,
    update_profile,
    username_exists,
)

__all__ = [
    "get_streak_state",
    "create_streak_state",
    "lock_streak_state",
    "save_streak_state",
    "save_mood_entry",
    "get_mood_entries",
    "save_journal_entry",
    "get_journal_entries",
    "delete_journal_entry",
    "save_chat_message",
    "get_chat_history",
    "clear_chat_history",
    "get_profile",
    "create_profile",
    "update_profile",
    "username_exists",
]

# Area: Store
"""
Store - Persistence and change notification for team matches.

This package handles:
- SQLite schema and connection management
- Match, participant and question-bank repositories
- Versioned match updates
- Change fan-out to subscribed clients
"""

from .database import init_database, get_connection, BaseRepository
from .repo_matches import MatchRepository
from .repo_participants import ParticipantRepository
from .repo_questions import QuestionBankRepository
from .change_feed import Change, ChangeFeed
from .store import MatchStore

__all__ = [
    "init_database",
    "get_connection",
    "BaseRepository",
    "MatchRepository",
    "ParticipantRepository",
    "QuestionBankRepository",
    "Change",
    "ChangeFeed",
    "MatchStore",
]

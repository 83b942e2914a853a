from __future__ import annotations
import threading
from typing import Callable, Dict, List, Optional, Set, TYPE_CHECKING

from ..schemas import User

if TYPE_CHECKING:
    from .game import Game


class SessionStore:
    """Live game, used words and lock for every session seen by this process.

    Constructed once by the application and handed to the engine. Entries are
    replaced by a new game but never removed.
    """

    def __init__(self):
        self._games: Dict[str, 'Game'] = {}
        self._used_words: Dict[str, Set[str]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def lock(self, session_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = self._locks[session_id] = threading.Lock()
            return lock

    def peek(self, session_id: str) -> Optional['Game']:
        return self._games.get(session_id)

    def get_or_create(self, session_id: str, create: Callable[[], 'Game']) -> 'Game':
        game = self._games.get(session_id)
        if game is None:
            game = self.replace(session_id, create())
        return game

    def replace(self, session_id: str, game: 'Game') -> 'Game':
        self._games[session_id] = game
        self._used_words[session_id] = set()
        return game

    def used_words(self, session_id: str) -> Set[str]:
        return self._used_words.setdefault(session_id, set())


class UserRegistry:
    """Cross-session user records. Scores mirror the last game a user scored in."""

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._guard = threading.Lock()

    def ensure(self, user_id: str, display_name: Optional[str] = None) -> User:
        with self._guard:
            user = self._users.get(user_id)
            if user is None:
                user = User(id=user_id, name=display_name or default_display_name(user_id))
                self._users[user_id] = user
            return user

    def get(self, user_id: str) -> Optional[User]:
        with self._guard:
            return self._users.get(user_id)

    def set_score(self, user_id: str, score: int):
        with self._guard:
            user = self._users.get(user_id)
            if user:
                user.score = score

    def all(self) -> List[User]:
        with self._guard:
            return [u.model_copy() for u in self._users.values()]


def default_display_name(user_id: str) -> str:
    return f"کاربر {user_id}"

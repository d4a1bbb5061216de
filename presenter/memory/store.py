"""Bounded in-memory conversation sessions and their registry."""

from __future__ import annotations

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from collections import OrderedDict, deque
from typing import Iterable

from presenter.core.errors import UnknownSession
from .models import ConversationTurn

DEFAULT_SESSION_ID = "default"

logger = logging.getLogger("presenter.memory")


class ConversationSession:
    """Sliding window of the most recent turns, oldest evicted first."""

    def __init__(self, max_turns: int) -> None:
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self.max_turns = max_turns
        self._turns: deque[ConversationTurn] = deque()

    def __len__(self) -> int:
        return len(self._turns)

    def reset(self) -> None:
        self._turns.clear()

    def append(self, turn: ConversationTurn) -> None:
        self._turns.append(turn)
        while len(self._turns) > self.max_turns:
            self._turns.popleft()

    def extend(self, turns: Iterable[ConversationTurn]) -> None:
        for turn in turns:
            self.append(turn)

    def snapshot(self) -> list[ConversationTurn]:
        return list(self._turns)


class SessionStore(ABC):
    """Abstract interface for looking up conversation sessions."""

    @abstractmethod
    def get(self, session_id: str | None) -> ConversationSession:
        """Return the session for a known id, or the default one when no id is given."""

    @abstractmethod
    def start(self, session_id: str | None = None) -> str:
        """Create (or clear) a session and return its identifier."""

    @abstractmethod
    def reset(self, session_id: str | None) -> None:
        """Clear every turn of a session."""


class InMemorySessionStore(SessionStore):
    """Process-local sessions keyed by id.

    Requests without an id share the ``default`` session, so concurrent
    clients that never start a session interleave their turns. Only
    ``start`` registers new ids; once more than ``max_sessions`` are held the
    least recently used one is dropped. The default session is never evicted.
    """

    def __init__(self, max_turns: int, max_sessions: int = 100) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_turns = max_turns
        self.max_sessions = max_sessions
        self._lock = threading.Lock()
        self._default = ConversationSession(max_turns)
        self._sessions: OrderedDict[str, ConversationSession] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def get(self, session_id: str | None) -> ConversationSession:
        if not session_id or session_id == DEFAULT_SESSION_ID:
            return self._default
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise UnknownSession(session_id)
            self._sessions.move_to_end(session_id)
            return session

    def start(self, session_id: str | None = None) -> str:
        if session_id == DEFAULT_SESSION_ID:
            self._default.reset()
            return session_id
        session_id = session_id or uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = ConversationSession(self.max_turns)
            self._sessions.move_to_end(session_id)
            while len(self._sessions) > self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("Evicted conversation session %s", evicted)
        logger.info("Started conversation session %s", session_id)
        return session_id

    def reset(self, session_id: str | None) -> None:
        self.get(session_id).reset()

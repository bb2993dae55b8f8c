# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: ConversationStore
# -----------------------------------------------------------------------------
import logging
import threading
from collections import OrderedDict, deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Hashable, Optional, Tuple

from utility.logging_utils import get_class_logger

ROLE_CALLER = "caller"
ROLE_ASSISTANT = "assistant"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ConversationTurn:
    role: str
    text: str
    created_at: datetime = field(default_factory=_utcnow, compare=False)

    @classmethod
    def caller(cls, text: str) -> "ConversationTurn":
        return cls(role=ROLE_CALLER, text=text)

    @classmethod
    def assistant(cls, text: str) -> "ConversationTurn":
        return cls(role=ROLE_ASSISTANT, text=text)


class ConversationSession:
    """Append-only turn log for one user, capped at `max_turns` (oldest dropped)."""

    def __init__(self, user_id: Hashable, max_turns: int):
        self.user_id = user_id
        self._turns: Deque[ConversationTurn] = deque(maxlen=max_turns)
        self._lock = threading.Lock()

    def append(self, turn: ConversationTurn) -> None:
        with self._lock:
            self._turns.append(turn)

    def snapshot(self) -> Tuple[ConversationTurn, ...]:
        with self._lock:
            return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)


class ConversationStore:
    """
    Per-user conversation history, bounded in two directions:

      - at most `max_sessions` sessions; the least recently used is evicted
      - at most `max_turns` turns per session

    Get-or-create and the append itself happen under the map lock, so two
    concurrent first messages from one user land in the same session and a
    turn never lands in a session that `clear` or eviction just dropped.
    `read` returns an immutable snapshot.
    """

    def __init__(self, max_sessions: int = 1000, max_turns: int = 50, logger: Optional[logging.Logger] = None):
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1")
        if max_turns < 1:
            raise ValueError("max_turns must be >= 1")
        self.max_sessions = max_sessions
        self.max_turns = max_turns
        self.logger = logger or get_class_logger(self.__class__)
        self._sessions: "OrderedDict[Hashable, ConversationSession]" = OrderedDict()
        self._lock = threading.Lock()

    def _get_or_create_locked(self, user_id: Hashable) -> ConversationSession:
        # caller holds self._lock
        session = self._sessions.get(user_id)
        if session is None:
            session = ConversationSession(user_id, self.max_turns)
            self._sessions[user_id] = session
            self.logger.debug("Created conversation session for user %s", user_id)
        self._sessions.move_to_end(user_id)

        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            self.logger.info("Evicted least recently used conversation session (user %s)", evicted_id)
        return session

    def append(self, user_id: Hashable, turn: ConversationTurn) -> None:
        with self._lock:
            self._get_or_create_locked(user_id).append(turn)

    def read(self, user_id: Hashable) -> Tuple[ConversationTurn, ...]:
        with self._lock:
            session = self._sessions.get(user_id)
            if session is None:
                return ()
            self._sessions.move_to_end(user_id)
        return session.snapshot()

    def clear(self, user_id: Hashable) -> bool:
        """Drop a user's session. Returns True if one existed."""
        with self._lock:
            return self._sessions.pop(user_id, None) is not None

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, user_id: Hashable) -> bool:
        with self._lock:
            return user_id in self._sessions

"""
Session Store — in-memory map from user id to Session.

Sessions are created lazily on the first stored exchange and live for the
process lifetime. Callers never hold a Session: reads return a snapshot
tuple, writes go through append_exchange / reset.

All methods are synchronous and run on the event loop thread, so each
call is atomic with respect to other tasks. Two concurrent exchanges from
the same user both land in the log, in completion order.
"""

from __future__ import annotations

import logging
import time

from parley.session.models import Role, Session, Turn

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}

    def get_turns(self, user_id: int) -> tuple[Turn, ...]:
        """Current turns for a user; empty if nothing was stored yet."""
        session = self._sessions.get(user_id)
        if session is None:
            return ()
        return tuple(session.turns)

    def append_exchange(
        self, user_id: int, user_turn: Turn, assistant_turn: Turn
    ) -> None:
        """Append a user turn and its answer as one unit."""
        if user_turn.role is not Role.USER:
            raise ValueError(f"Expected a user turn, got {user_turn.role.value}")
        if assistant_turn.role is not Role.ASSISTANT:
            raise ValueError(
                f"Expected an assistant turn, got {assistant_turn.role.value}"
            )

        session = self._sessions.get(user_id)
        if session is None:
            session = Session(user_id=user_id)
            self._sessions[user_id] = session
            logger.debug("Session created", extra={"user_id": user_id})

        session.turns.extend((user_turn, assistant_turn))
        session.updated_at = time.time()

    def reset(self, user_id: int) -> None:
        """Clear a user's turns. Unknown users are a no-op."""
        session = self._sessions.get(user_id)
        if session is None:
            return
        session.turns.clear()
        session.updated_at = time.time()
        logger.info("Session reset", extra={"user_id": user_id})

    def has_session(self, user_id: int) -> bool:
        return user_id in self._sessions

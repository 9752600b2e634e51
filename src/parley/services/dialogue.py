"""
Dialogue Engine — one user message in, one reply out.

Flow: stored turns + new user turn → LLMProvider.complete → joined reply.
The exchange is written to the SessionStore only after the completion
succeeded, so an unanswered user turn never enters the history.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from parley.providers.base import RemoteServiceError
from parley.session.models import Turn

if TYPE_CHECKING:
    from parley.providers.base import LLMProvider
    from parley.session.store import SessionStore

logger = logging.getLogger(__name__)


class DialogueEngine:
    def __init__(
        self,
        llm: "LLMProvider",
        sessions: "SessionStore",
        separator: str = " | ",
    ) -> None:
        self._llm = llm
        self._sessions = sessions
        self._separator = separator

    async def converse(self, user_id: int, text: str) -> str:
        """Answer ``text`` in the context of the user's session.

        Returns the reply, or a ``[ERROR:ChatGPT]`` reply when the
        completion failed. The session is only touched on success.
        """
        user_turn = Turn.user(text)
        working = [*self._sessions.get_turns(user_id), user_turn]

        started = time.time()
        try:
            reply = await self.complete(working)
        except RemoteServiceError as exc:
            logger.warning(
                "Completion failed, session left unchanged: %s",
                exc.message,
                extra={"user_id": user_id, "status": "error"},
            )
            return exc.reply_text()

        self._sessions.append_exchange(user_id, user_turn, Turn.assistant(reply))
        logger.info(
            "Reply generated in %dms (%d turns of context)",
            round((time.time() - started) * 1000),
            len(working),
            extra={"user_id": user_id, "status": "ok"},
        )
        return reply

    async def ask(self, prompt: str) -> str:
        """One-shot query outside any session. Raises RemoteServiceError."""
        return await self.complete([Turn.user(prompt)])

    async def complete(self, turns: list[Turn]) -> str:
        candidates = await self._llm.complete(
            [turn.to_openai_message() for turn in turns]
        )
        return self._separator.join(candidates)

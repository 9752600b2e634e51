"""
Authorization Gate — static allow-list check in front of every handler.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable

from parley.services.transcription import ReplySink

logger = logging.getLogger(__name__)

RESTRICTED_MESSAGE = "Sorry. You are not registered. Have a nice day!"


class AuthorizationGate:
    def __init__(
        self,
        allowed_user_ids: Iterable[int],
        restricted_message: str = RESTRICTED_MESSAGE,
    ) -> None:
        self._allowed = frozenset(allowed_user_ids)
        self.restricted_message = restricted_message

    def is_allowed(self, sender_id: int | None) -> bool:
        return sender_id is not None and sender_id in self._allowed

    async def guard(
        self,
        sender_id: int | None,
        reply: ReplySink,
        action: Callable[[], Awaitable[None]],
    ) -> bool:
        """Run ``action`` for allowed senders; otherwise send the rejection.

        Returns whether the action ran.
        """
        if not self.is_allowed(sender_id):
            logger.warning(
                "Rejected unregistered sender", extra={"user_id": sender_id}
            )
            await reply(self.restricted_message)
            return False

        await action()
        return True

"""
Command/Event Router — transport-neutral dispatch of inbound events.

Every event goes through the AuthorizationGate before reaching the
session store, the dialogue engine or the voice pipeline. Each event is
handled to completion on its own; nothing but the SessionStore is shared
between events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from parley.bot.gate import AuthorizationGate
    from parley.services.dialogue import DialogueEngine
    from parley.services.transcription import ReplySink, TranscriptionPipeline
    from parley.session.store import SessionStore

logger = logging.getLogger(__name__)

START_MESSAGE = """
Hello. If you want to start a free conversation, just send a text or a voice message.
If you want to start teaching, type /teach
If you want to reset the conversation, type /reset
"""

TEACH_MESSAGE = "Let's talk"

RESET_MESSAGE = "Conversation reset."


class EventKind(str, Enum):
    START = "start"
    TEACH = "teach"
    RESET = "reset"
    TEXT = "text"
    VOICE = "voice"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class InboundEvent:
    kind: EventKind
    sender_id: int | None
    text: str = ""
    file_id: str = ""


class CommandRouter:
    def __init__(
        self,
        gate: "AuthorizationGate",
        sessions: "SessionStore",
        dialogue: "DialogueEngine",
        transcription: "TranscriptionPipeline",
    ) -> None:
        self._gate = gate
        self._sessions = sessions
        self._dialogue = dialogue
        self._transcription = transcription

    async def dispatch(self, event: InboundEvent, reply: "ReplySink") -> None:
        if event.kind is EventKind.UNKNOWN:
            logger.debug("Ignoring unsupported event")
            return

        async def action() -> None:
            await self._handle(event, reply)

        await self._gate.guard(event.sender_id, reply, action)

    async def _handle(self, event: InboundEvent, reply: "ReplySink") -> None:
        # The gate has already rejected events without a sender
        user_id = event.sender_id
        assert user_id is not None

        if event.kind is EventKind.START:
            await reply(START_MESSAGE)
        elif event.kind is EventKind.TEACH:
            await reply(TEACH_MESSAGE)
        elif event.kind is EventKind.RESET:
            self._sessions.reset(user_id)
            await reply(RESET_MESSAGE)
        elif event.kind is EventKind.TEXT:
            await reply(await self._dialogue.converse(user_id, event.text))
        elif event.kind is EventKind.VOICE:
            await self._transcription.transcribe_voice(event.file_id, user_id, reply)

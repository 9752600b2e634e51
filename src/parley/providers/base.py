"""
Provider base classes — the two remote boundaries.

LLMProvider answers a chat history with one or more candidate replies.
STTProvider turns an audio file into text. Both raise RemoteServiceError
for anything that went wrong on the far side.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class RemoteServiceError(Exception):
    """A completion or transcription call failed upstream.

    ``message`` is the human-readable text reported by the service, ready
    to be relayed to the user.
    """

    COMPLETION = "completion"
    TRANSCRIPTION = "transcription"

    def __init__(self, service: str, message: str):
        super().__init__(f"{service} failed: {message}")
        self.service = service
        self.message = message

    def reply_text(self) -> str:
        """User-facing error reply, prefixed by the failing service."""
        if self.service == self.TRANSCRIPTION:
            return f"[ERROR:Transcription] {self.message}"
        return f"[ERROR:ChatGPT]: {self.message}"


class LLMProvider(ABC):
    """Chat completion provider interface."""

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @abstractmethod
    async def complete(self, messages: list[dict]) -> list[str]:
        """Return the content of every candidate completion, in order."""
        ...

    async def health_check(self) -> dict:
        return {"provider": self.__class__.__name__, "status": "unknown"}


class STTProvider(ABC):
    """Speech-to-text provider interface."""

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...

    @abstractmethod
    async def transcribe(self, audio_path: Path) -> str:
        ...

    async def health_check(self) -> dict:
        return {"provider": self.__class__.__name__, "status": "unknown"}

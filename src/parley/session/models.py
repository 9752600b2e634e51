"""
Session Models — per-user dialogue state.

A Session is an ordered log of Turns. Turns are frozen; the log only
grows by whole user/assistant exchanges, or is cleared entirely.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    """Who authored a turn."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """One dialogue message. Maps to the OpenAI message format."""

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> Turn:
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> Turn:
        return cls(role=Role.ASSISTANT, content=content)

    def to_openai_message(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


@dataclass
class Session:
    """Conversation state of one authorized user."""

    user_id: int
    turns: list[Turn] = field(default_factory=list)
    created_at: float = field(default_factory=time.time)
    updated_at: float = field(default_factory=time.time)

"""
OpenAI LLM Provider — non-streaming chat completions.

Every returned choice is kept; the dialogue layer decides how to join them.
"""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

import parley.core.config as config_module
from parley.core.config import LLMConfig
from parley.providers.base import LLMProvider, RemoteServiceError

logger = logging.getLogger(__name__)


def upstream_message(exc: openai.OpenAIError) -> str:
    """Extract the human-readable message from an OpenAI client error.

    API errors carry the service's ``{"error": {"message": ...}}`` body;
    connection errors and the rest only have their own text.
    """
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    message = getattr(exc, "message", None)
    return str(message or exc)


class OpenAILLMProvider(LLMProvider):
    def __init__(self, llm_config: LLMConfig | None = None):
        self._config = llm_config or config_module.config.llm
        self.client: AsyncOpenAI | None = None

    async def start(self) -> None:
        if self.client:
            return  # Already started
        self.client = AsyncOpenAI(api_key=self._config.api_key or None)
        logger.info(f"OpenAI LLM ready (model={self._config.model})")

    async def stop(self) -> None:
        if self.client:
            await self.client.close()
        self.client = None

    async def complete(self, messages: list[dict]) -> list[str]:
        if not self.client:
            raise RuntimeError("OpenAI LLM not started")

        try:
            response = await self.client.chat.completions.create(
                model=self._config.model,
                messages=messages,
                temperature=self._config.temperature,
            )
        except openai.OpenAIError as exc:
            logger.error("Chat completion failed: %s", exc)
            raise RemoteServiceError(
                RemoteServiceError.COMPLETION, upstream_message(exc)
            ) from exc

        choices = getattr(response, "choices", None) or []
        candidates = [
            choice.message.content
            for choice in choices
            if choice.message is not None and choice.message.content is not None
        ]
        if not candidates:
            raise RemoteServiceError(
                RemoteServiceError.COMPLETION, "empty completion response"
            )
        return candidates

    async def health_check(self) -> dict:
        return {
            "provider": "openai",
            "model": self._config.model,
            "status": "ready" if self.client else "not_started",
        }

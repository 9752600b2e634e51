"""
OpenAI STT Provider — Whisper transcription of a finished audio file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import openai
from openai import AsyncOpenAI

import parley.core.config as config_module
from parley.core.config import STTConfig
from parley.providers.base import RemoteServiceError, STTProvider
from parley.providers.openai_llm import upstream_message

logger = logging.getLogger(__name__)


class OpenAISTTProvider(STTProvider):
    def __init__(self, stt_config: STTConfig | None = None):
        self._config = stt_config or config_module.config.stt
        self.client: AsyncOpenAI | None = None

    async def start(self) -> None:
        if self.client:
            return  # Already started
        self.client = AsyncOpenAI(api_key=self._config.api_key or None)
        logger.info(
            f"OpenAI STT ready (model={self._config.model}, language={self._config.language})"
        )

    async def stop(self) -> None:
        if self.client:
            await self.client.close()
        self.client = None

    async def transcribe(self, audio_path: Path) -> str:
        if not self.client:
            raise RuntimeError("OpenAI STT not started")

        try:
            with open(audio_path, "rb") as audio_file:
                response = await self.client.audio.transcriptions.create(
                    file=audio_file,
                    model=self._config.model,
                    language=self._config.language,
                    temperature=self._config.temperature,
                )
        except openai.OpenAIError as exc:
            logger.error("Transcription failed: %s", exc)
            raise RemoteServiceError(
                RemoteServiceError.TRANSCRIPTION, upstream_message(exc)
            ) from exc

        return (getattr(response, "text", None) or "").strip()

    async def health_check(self) -> dict:
        return {
            "provider": "openai",
            "model": self._config.model,
            "status": "ready" if self.client else "not_started",
        }

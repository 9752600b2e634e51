"""
Shared fixtures for parley tests.

Fakes stand in for the OpenAI services, ffmpeg, the downloader and the
Telegram file lookup, so the suite needs no network and no binaries.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from parley.bot.gate import AuthorizationGate
from parley.bot.router import CommandRouter
from parley.core.config import VoiceConfig
from parley.media.converter import ConversionResult
from parley.providers.base import LLMProvider, RemoteServiceError, STTProvider
from parley.services.dialogue import DialogueEngine
from parley.services.transcription import TranscriptionPipeline
from parley.session.store import SessionStore

ALLOWED_USER = 111
STRANGER = 999


# ── Remote service fakes ──────────────────────────────────────


class FakeLLM(LLMProvider):
    """Records every request; answers from a queue of candidate lists."""

    def __init__(self, *responses: list[str] | Exception):
        self.responses = list(responses)
        self.requests: list[list[dict]] = []

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def complete(self, messages: list[dict]) -> list[str]:
        self.requests.append([dict(m) for m in messages])
        response = self.responses.pop(0) if self.responses else ["ok"]
        if isinstance(response, Exception):
            raise response
        return response


class FakeSTT(STTProvider):
    def __init__(self, text: str = "hello there", error: Exception | None = None):
        self.text = text
        self.error = error
        self.paths: list[Path] = []

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    async def transcribe(self, audio_path: Path) -> str:
        self.paths.append(audio_path)
        assert audio_path.exists(), "transcribe called before conversion output exists"
        if self.error:
            raise self.error
        return self.text


class FakeConverter:
    def __init__(self, fail_with: str | None = None):
        self.fail_with = fail_with
        self.calls: list[tuple[Path, Path]] = []

    async def convert(self, source: Path, target: Path) -> ConversionResult:
        self.calls.append((source, target))
        if self.fail_with:
            target.write_bytes(b"partial")
            return ConversionResult.failure(self.fail_with)
        target.write_bytes(source.read_bytes() + b"-mp3")
        return ConversionResult.success(target)


class FakeDownloader:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.targets: list[Path] = []

    async def download(self, url: str, target: Path) -> Path:
        self.targets.append(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"oga")
        if self.error:
            raise self.error
        return target


class FakeResolver:
    def __init__(
        self,
        url: str = "https://files.example/bot/voice/file_7.oga",
        error: Exception | None = None,
    ):
        self.url = url
        self.error = error
        self.file_ids: list[str] = []

    async def get_file_link(self, file_id: str) -> str:
        self.file_ids.append(file_id)
        if self.error:
            raise self.error
        return self.url


class ReplyRecorder:
    """Collects replies in order; usable anywhere a ReplySink is expected."""

    def __init__(self):
        self.texts: list[str] = []

    async def __call__(self, text: str) -> None:
        self.texts.append(text)


def completion_error(message: str = "Rate limit reached") -> RemoteServiceError:
    return RemoteServiceError(RemoteServiceError.COMPLETION, message)


def transcription_error(message: str = "Invalid file format") -> RemoteServiceError:
    return RemoteServiceError(RemoteServiceError.TRANSCRIPTION, message)


# ── Fixtures ──────────────────────────────────────────────────


@pytest.fixture
def sessions() -> SessionStore:
    return SessionStore()


@pytest.fixture
def replies() -> ReplyRecorder:
    return ReplyRecorder()


@pytest.fixture
def voice_config(tmp_path: Path) -> VoiceConfig:
    return VoiceConfig(media_dir=str(tmp_path / "media"))


@pytest.fixture
def media_dir(voice_config: VoiceConfig) -> Path:
    return Path(voice_config.media_dir)


def build_pipeline(
    voice_config: VoiceConfig,
    dialogue: DialogueEngine,
    stt: FakeSTT | None = None,
    converter: FakeConverter | None = None,
    downloader: FakeDownloader | None = None,
    resolver: FakeResolver | None = None,
) -> TranscriptionPipeline:
    return TranscriptionPipeline(
        stt=stt or FakeSTT(),
        dialogue=dialogue,
        converter=converter or FakeConverter(),
        downloader=downloader or FakeDownloader(),
        resolver=resolver or FakeResolver(),
        voice_config=voice_config,
    )


def build_router(
    sessions: SessionStore,
    llm: FakeLLM,
    voice_config: VoiceConfig,
    **pipeline_parts,
) -> CommandRouter:
    dialogue = DialogueEngine(llm, sessions)
    return CommandRouter(
        gate=AuthorizationGate([ALLOWED_USER]),
        sessions=sessions,
        dialogue=dialogue,
        transcription=build_pipeline(voice_config, dialogue, **pipeline_parts),
    )

"""Tests for provider interfaces, registry and the OpenAI implementations."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

import parley.core.config as config_module
from parley.core.config import LLMConfig, ParleyConfig, STTConfig
from parley.providers.base import LLMProvider, RemoteServiceError, STTProvider
from parley.providers.openai_llm import OpenAILLMProvider, upstream_message
from parley.providers.openai_stt import OpenAISTTProvider
from parley.providers.registry import get_llm_provider, get_stt_provider


def _completion(*contents):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    )


def _status_error(status: int, message: str) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return openai.APIStatusError(
        f"Error code: {status}",
        response=response,
        body={"message": message, "type": "invalid_request_error"},
    )


def _llm_with_client(create: AsyncMock) -> OpenAILLMProvider:
    provider = OpenAILLMProvider(LLMConfig(model="gpt-test", temperature=0.5))
    provider.client = MagicMock()
    provider.client.chat.completions.create = create
    return provider


# ─── Interfaces & registry ────────────────────────────────────


def test_llm_provider_is_abstract():
    with pytest.raises(TypeError):
        LLMProvider()  # type: ignore


def test_stt_provider_is_abstract():
    with pytest.raises(TypeError):
        STTProvider()  # type: ignore


def test_registry_returns_openai_providers():
    assert isinstance(get_llm_provider(), OpenAILLMProvider)
    assert isinstance(get_stt_provider(), OpenAISTTProvider)


def test_registry_rejects_unknown_provider(monkeypatch):
    monkeypatch.setattr(
        config_module, "config", ParleyConfig(llm=LLMConfig(provider="nope"))
    )
    with pytest.raises(ValueError, match="nope"):
        get_llm_provider()


def test_remote_error_reply_prefixes():
    assert RemoteServiceError("completion", "x").reply_text() == "[ERROR:ChatGPT]: x"
    assert (
        RemoteServiceError("transcription", "y").reply_text()
        == "[ERROR:Transcription] y"
    )


def test_upstream_message_prefers_body():
    assert upstream_message(_status_error(429, "Rate limit reached")) == (
        "Rate limit reached"
    )


def test_upstream_message_for_connection_error():
    exc = openai.APIConnectionError(
        request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    )
    assert upstream_message(exc) == "Connection error."


# ─── OpenAILLMProvider ────────────────────────────────────────


@pytest.mark.asyncio
async def test_complete_requires_start():
    with pytest.raises(RuntimeError):
        await OpenAILLMProvider(LLMConfig()).complete([])


@pytest.mark.asyncio
async def test_complete_returns_all_candidates():
    create = AsyncMock(return_value=_completion("one", "two"))
    provider = _llm_with_client(create)
    messages = [{"role": "user", "content": "hi"}]

    assert await provider.complete(messages) == ["one", "two"]
    create.assert_awaited_once_with(
        model="gpt-test", messages=messages, temperature=0.5
    )


@pytest.mark.asyncio
async def test_complete_wraps_api_errors():
    provider = _llm_with_client(AsyncMock(side_effect=_status_error(401, "Bad key")))

    with pytest.raises(RemoteServiceError) as exc_info:
        await provider.complete([{"role": "user", "content": "hi"}])

    assert exc_info.value.service == RemoteServiceError.COMPLETION
    assert exc_info.value.message == "Bad key"


@pytest.mark.asyncio
async def test_complete_rejects_empty_response():
    provider = _llm_with_client(AsyncMock(return_value=_completion()))

    with pytest.raises(RemoteServiceError, match="empty completion"):
        await provider.complete([{"role": "user", "content": "hi"}])


# ─── OpenAISTTProvider ────────────────────────────────────────


@pytest.mark.asyncio
async def test_transcribe_sends_configured_parameters(tmp_path: Path):
    audio = tmp_path / "a.mp3"
    audio.write_bytes(b"mp3")
    provider = OpenAISTTProvider(STTConfig(model="whisper-1", language="en"))
    provider.client = MagicMock()
    create = AsyncMock(return_value=SimpleNamespace(text="  hello world "))
    provider.client.audio.transcriptions.create = create

    assert await provider.transcribe(audio) == "hello world"
    kwargs = create.await_args.kwargs
    assert kwargs["model"] == "whisper-1"
    assert kwargs["language"] == "en"
    assert kwargs["temperature"] == 0.2


@pytest.mark.asyncio
async def test_transcribe_wraps_api_errors(tmp_path: Path):
    audio = tmp_path / "a.mp3"
    audio.write_bytes(b"mp3")
    provider = OpenAISTTProvider(STTConfig())
    provider.client = MagicMock()
    provider.client.audio.transcriptions.create = AsyncMock(
        side_effect=_status_error(400, "Invalid file format.")
    )

    with pytest.raises(RemoteServiceError) as exc_info:
        await provider.transcribe(audio)

    assert exc_info.value.reply_text() == "[ERROR:Transcription] Invalid file format."


@pytest.mark.asyncio
async def test_start_and_stop_manage_client():
    provider = OpenAILLMProvider(LLMConfig(api_key="sk-test"))
    await provider.start()
    assert (await provider.health_check())["status"] == "ready"
    await provider.stop()
    assert provider.client is None

"""
Parley Configuration — single source of truth for all settings.

Reads from environment variables (a local .env is loaded first).
One frozen dataclass per concern, composed into ParleyConfig.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def parse_user_ids(raw: str) -> frozenset[int]:
    """Parse a comma-separated list of numeric sender ids."""
    parsed: set[int] = set()
    for item in raw.split(","):
        value = item.strip()
        if not value:
            continue
        try:
            parsed.add(int(value))
        except ValueError as exc:
            raise ValueError(f"Invalid USER_IDS value: {value!r}") from exc
    return frozenset(parsed)


def _openai_key() -> str:
    # OPEN_AI_KEY is the legacy name used by older deployments
    return os.getenv("OPENAI_API_KEY") or os.getenv("OPEN_AI_KEY", "")


@dataclass(frozen=True)
class TelegramConfig:
    """Messaging transport settings."""

    token: str = ""
    allowed_user_ids: frozenset[int] = frozenset()
    concurrent_updates: bool = True

    @classmethod
    def from_env(cls) -> TelegramConfig:
        return cls(
            token=os.getenv("TELEGRAM_TOKEN", ""),
            allowed_user_ids=parse_user_ids(os.getenv("USER_IDS", "")),
            concurrent_updates=_env_bool("PARLEY_CONCURRENT_UPDATES", True),
        )


@dataclass(frozen=True)
class LLMConfig:
    """Chat completion settings."""

    provider: str = "openai"
    api_key: str = ""
    model: str = "gpt-3.5-turbo"
    temperature: float = 1.0
    reply_separator: str = " | "

    @classmethod
    def from_env(cls) -> LLMConfig:
        return cls(
            provider=os.getenv("PARLEY_LLM_PROVIDER", "openai"),
            api_key=_openai_key(),
            model=os.getenv("PARLEY_LLM_MODEL", "gpt-3.5-turbo"),
            temperature=_env_float("PARLEY_LLM_TEMPERATURE", 1.0),
        )


@dataclass(frozen=True)
class STTConfig:
    """Speech-to-text settings."""

    provider: str = "openai"
    api_key: str = ""
    model: str = "whisper-1"
    language: str = "en"
    temperature: float = 0.2

    @classmethod
    def from_env(cls) -> STTConfig:
        return cls(
            provider=os.getenv("PARLEY_STT_PROVIDER", "openai"),
            api_key=_openai_key(),
            model=os.getenv("PARLEY_STT_MODEL", "whisper-1"),
            language=os.getenv("PARLEY_STT_LANGUAGE", "en"),
            temperature=_env_float("PARLEY_STT_TEMPERATURE", 0.2),
        )


@dataclass(frozen=True)
class VoiceConfig:
    """Voice message pipeline settings."""

    media_dir: str = "tmp-media"
    ffmpeg_path: str = "ffmpeg"
    audio_format: str = "mp3"
    audio_bitrate_kbps: int = 96
    grammar_correction: bool = True
    correction_template: str = "correct grammar mistakes in: {transcript}"
    download_timeout: float = 30.0

    @classmethod
    def from_env(cls) -> VoiceConfig:
        return cls(
            media_dir=os.getenv("PARLEY_MEDIA_DIR", "tmp-media"),
            ffmpeg_path=os.getenv("PARLEY_FFMPEG_PATH", "ffmpeg"),
            audio_format=os.getenv("PARLEY_AUDIO_FORMAT", "mp3"),
            audio_bitrate_kbps=_env_int("PARLEY_AUDIO_BITRATE_KBPS", 96),
            grammar_correction=_env_bool("PARLEY_GRAMMAR_CORRECTION", True),
            correction_template=os.getenv(
                "PARLEY_CORRECTION_TEMPLATE",
                "correct grammar mistakes in: {transcript}",
            ),
            download_timeout=_env_float("PARLEY_DOWNLOAD_TIMEOUT", 30.0),
        )


@dataclass(frozen=True)
class ParleyConfig:
    """Root configuration."""

    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    stt: STTConfig = field(default_factory=STTConfig)
    voice: VoiceConfig = field(default_factory=VoiceConfig)

    @classmethod
    def from_env(cls) -> ParleyConfig:
        return cls(
            telegram=TelegramConfig.from_env(),
            llm=LLMConfig.from_env(),
            stt=STTConfig.from_env(),
            voice=VoiceConfig.from_env(),
        )


# Singleton — import the module and read config_module.config where reloads matter
config = ParleyConfig.from_env()


def reload_config() -> ParleyConfig:
    """Rebuild the singleton from the current environment."""
    global config
    config = ParleyConfig.from_env()
    return config

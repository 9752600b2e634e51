"""
Parley — Telegram chat assistant backed by OpenAI.

Text and voice messages from allow-listed users are answered by a chat
model that remembers the conversation until /reset.

Run: parley   (or: python -m parley.main)
"""

from __future__ import annotations

import logging

from telegram import Update

import parley.core.config as config_module
from parley.bot.gate import AuthorizationGate
from parley.bot.router import CommandRouter
from parley.bot.telegram import (
    TelegramFileResolver,
    build_application,
    register_handlers,
)
from parley.core.logging import setup_logging
from parley.media.converter import FfmpegConverter
from parley.media.download import HttpDownloader
from parley.providers import get_llm_provider, get_stt_provider
from parley.services.dialogue import DialogueEngine
from parley.services.transcription import TranscriptionPipeline
from parley.session.store import SessionStore

logger = logging.getLogger("parley")


def main() -> None:
    setup_logging()
    config = config_module.config

    if not config.telegram.token:
        raise SystemExit("TELEGRAM_TOKEN is not set")
    if not config.telegram.allowed_user_ids:
        logger.warning("USER_IDS is empty; every sender will be rejected")

    llm = get_llm_provider()
    stt = get_stt_provider()

    application = build_application(
        config.telegram,
        startup=[llm.start, stt.start],
        shutdown=[llm.stop, stt.stop],
    )

    sessions = SessionStore()
    dialogue = DialogueEngine(llm, sessions, separator=config.llm.reply_separator)
    transcription = TranscriptionPipeline(
        stt=stt,
        dialogue=dialogue,
        converter=FfmpegConverter(
            ffmpeg_path=config.voice.ffmpeg_path,
            audio_format=config.voice.audio_format,
            bitrate_kbps=config.voice.audio_bitrate_kbps,
        ),
        downloader=HttpDownloader(timeout=config.voice.download_timeout),
        resolver=TelegramFileResolver(application.bot),
        voice_config=config.voice,
    )
    router = CommandRouter(
        gate=AuthorizationGate(config.telegram.allowed_user_ids),
        sessions=sessions,
        dialogue=dialogue,
        transcription=transcription,
    )
    register_handlers(application, router)

    logger.info(
        "Parley starting (%d allowed users, model=%s)",
        len(config.telegram.allowed_user_ids),
        config.llm.model,
    )
    application.run_polling(allowed_updates=Update.ALL_TYPES)


if __name__ == "__main__":
    main()

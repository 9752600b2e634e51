"""
Transcription Pipeline — voice message to dialogue.

Pipeline: resolve URL → download → convert → transcribe → relay transcript
→ (grammar correction side query) → DialogueEngine.converse

Every voice message gets its own request id, and with it two distinct
temp files in the media directory. Both are removed when the message is
done, whatever happened in between.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol
from urllib.parse import urlparse

from parley.core.logging import PipelineTimer
from parley.media.download import DownloadError
from parley.providers.base import RemoteServiceError

if TYPE_CHECKING:
    from parley.core.config import VoiceConfig
    from parley.media.converter import FfmpegConverter
    from parley.media.download import HttpDownloader
    from parley.providers.base import STTProvider
    from parley.services.dialogue import DialogueEngine

logger = logging.getLogger(__name__)

ReplySink = Callable[[str], Awaitable[Any]]


class FileResolver(Protocol):
    async def get_file_link(self, file_id: str) -> str:
        """Downloadable URL of an attachment. Raises DownloadError."""
        ...


@dataclass
class TranscriptionJob:
    """Transient state of one voice message."""

    request_id: str
    source_path: Path
    converted_path: Path
    text: str = ""

    @classmethod
    def for_url(
        cls, url: str, media_dir: Path, audio_format: str, request_id: str | None = None
    ) -> TranscriptionJob:
        request_id = request_id or uuid.uuid4().hex[:8]
        name = PurePosixPath(urlparse(url).path).name or "voice"
        stem = PurePosixPath(name).stem or "voice"
        return cls(
            request_id=request_id,
            source_path=media_dir / f"{request_id}-{name}",
            converted_path=media_dir / f"{request_id}-{stem}.converted.{audio_format}",
        )


def discard_file(path: Path) -> None:
    """Remove a temp file; failures are logged, never raised."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not delete temp file %s: %s", path, e)


class TranscriptionPipeline:
    def __init__(
        self,
        stt: "STTProvider",
        dialogue: "DialogueEngine",
        converter: "FfmpegConverter",
        downloader: "HttpDownloader",
        resolver: FileResolver,
        voice_config: "VoiceConfig",
    ) -> None:
        self._stt = stt
        self._dialogue = dialogue
        self._converter = converter
        self._downloader = downloader
        self._resolver = resolver
        self._config = voice_config

    async def transcribe_voice(
        self, file_id: str, user_id: int, reply: ReplySink
    ) -> None:
        """Handle one voice message, sending every reply through ``reply``."""
        try:
            url = await self._resolver.get_file_link(file_id)
        except DownloadError as exc:
            logger.error("Voice file lookup failed: %s", exc, extra={"user_id": user_id})
            await reply(f"[ERROR:Download] {exc}")
            return

        job = TranscriptionJob.for_url(
            url, Path(self._config.media_dir), self._config.audio_format
        )
        log_extra = {"user_id": user_id, "request_id": job.request_id}
        timer = PipelineTimer()

        try:
            await self._run(job, url, user_id, reply, timer)
        finally:
            discard_file(job.source_path)
            discard_file(job.converted_path)
            logger.info("[pipeline] voice: %s", timer.summary(), extra=log_extra)

    async def _run(
        self,
        job: TranscriptionJob,
        url: str,
        user_id: int,
        reply: ReplySink,
        timer: PipelineTimer,
    ) -> None:
        try:
            await self._downloader.download(url, job.source_path)
        except DownloadError as exc:
            logger.error("Voice download failed: %s", exc)
            await reply(f"[ERROR:Download] {exc}")
            return
        timer.mark("download")

        result = await self._converter.convert(job.source_path, job.converted_path)
        timer.mark("convert")
        if not result.ok:
            await reply(f"[ERROR:Conversion] {result.error}")
            return

        try:
            job.text = await self._stt.transcribe(job.converted_path)
            timer.mark("transcribe")
            await reply(f"[Voice message]: {job.text}")
            logger.debug("Transcript: %s", job.text)

            if self._config.grammar_correction:
                fixed = await self._dialogue.ask(
                    self._config.correction_template.format(transcript=job.text)
                )
                timer.mark("correct")
                await reply(f"[Fixed message]: {fixed}")
        except RemoteServiceError as exc:
            await reply(exc.reply_text())
            return

        await reply(await self._dialogue.converse(user_id, job.text))
        timer.mark("converse")

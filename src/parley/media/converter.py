"""
Audio conversion — ffmpeg run as an asyncio subprocess.

A conversion ends in exactly one ConversionResult: success with the
output path, or failure with a reason. Exit code 0 is the only success
signal; a spawn error counts as a failure like any other.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    path: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, path: Path) -> ConversionResult:
        return cls(path=path)

    @classmethod
    def failure(cls, reason: str) -> ConversionResult:
        return cls(error=reason or "unknown conversion error")


class FfmpegConverter:
    def __init__(
        self,
        ffmpeg_path: str = "ffmpeg",
        audio_format: str = "mp3",
        bitrate_kbps: int = 96,
    ) -> None:
        self.ffmpeg_path = ffmpeg_path
        self.audio_format = audio_format
        self.bitrate_kbps = bitrate_kbps

    def build_command(self, source: Path, target: Path) -> list[str]:
        return [
            self.ffmpeg_path,
            "-y",
            "-loglevel",
            "error",
            "-i",
            str(source),
            "-vn",
            "-b:a",
            f"{self.bitrate_kbps}k",
            "-f",
            self.audio_format,
            str(target),
        ]

    async def convert(self, source: Path, target: Path) -> ConversionResult:
        cmd = self.build_command(source, target)
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("Encoding error: could not start ffmpeg: %s", exc)
            return ConversionResult.failure(str(exc))

        _, stderr = await process.communicate()
        if process.returncode != 0:
            reason = stderr.decode("utf-8", errors="replace").strip()
            logger.error(
                "Encoding error (exit=%s): %s", process.returncode, reason
            )
            return ConversionResult.failure(
                reason or f"ffmpeg exited with code {process.returncode}"
            )

        logger.debug("Audio transcoding succeeded: %s", target.name)
        return ConversionResult.success(target)

"""Voice attachment handling: download and audio re-encoding."""

from parley.media.converter import ConversionResult, FfmpegConverter
from parley.media.download import DownloadError, HttpDownloader

__all__ = [
    "ConversionResult",
    "FfmpegConverter",
    "DownloadError",
    "HttpDownloader",
]

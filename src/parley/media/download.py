"""
Attachment download — streams a remote file to a local path with httpx.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class DownloadError(Exception):
    """The attachment could not be fetched."""


class HttpDownloader:
    def __init__(
        self,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def download(self, url: str, target: Path) -> Path:
        """Write the body at ``url`` to ``target``. Raises DownloadError."""
        written = 0
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    with open(target, "wb") as fh:
                        async for chunk in response.aiter_bytes(_CHUNK_SIZE):
                            written += fh.write(chunk)
        except httpx.HTTPStatusError as exc:
            raise DownloadError(
                f"HTTP {exc.response.status_code} while fetching attachment"
            ) from exc
        except httpx.HTTPError as exc:
            raise DownloadError(f"{type(exc).__name__}: {exc}") from exc
        except OSError as exc:
            raise DownloadError(f"could not write {target.name}: {exc}") from exc

        logger.debug("Downloaded %s (%d bytes)", target.name, written)
        return target

"""HTTP client for the capture service that records audio and transcribes it."""

from __future__ import annotations

import aiohttp

from convsync.config import settings
from convsync.utils.logging import get_logger

log = get_logger(__name__)


class CaptureServiceError(RuntimeError):
    """The capture service answered with a non-success status."""

    def __init__(self, path: str, status: int) -> None:
        super().__init__(f"capture service {path} returned HTTP {status}")
        self.path = path
        self.status = status


class CaptureServiceClient:
    """Fetches transcripts and mic activity levels from the capture service."""

    def __init__(
        self,
        base_url: str | None = None,
        transcript_duration_seconds: int | None = None,
    ) -> None:
        self._base_url = (base_url or settings.capture_service_url).rstrip("/")
        self._duration = transcript_duration_seconds or settings.transcript_duration_seconds
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def fetch_transcript(self) -> str | None:
        """Return the transcript for the long capture window, or None if empty."""
        path = "/transcript"
        async with self._get_session().get(
            f"{self._base_url}{path}", params={"duration": str(self._duration)}
        ) as resp:
            if resp.status == 204:
                return None
            if resp.status >= 400:
                raise CaptureServiceError(path, resp.status)
            text = await resp.text()
        return text if text.strip() else None

    async def fetch_mic_activity(self, window_ms: int) -> float:
        path = "/mic_activity"
        async with self._get_session().get(
            f"{self._base_url}{path}", params={"duration": str(window_ms)}
        ) as resp:
            if resp.status >= 400:
                raise CaptureServiceError(path, resp.status)
            data = await resp.json()
        return max(float(data.get("activity", 0.0)), 0.0)

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            log.info("capture_client_closed")
        self._session = None

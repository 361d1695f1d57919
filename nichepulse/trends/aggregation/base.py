"""Base fetcher class for trending-content sources."""

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional
import logging
import time

import httpx

from ..filters import ViewWindow
from ..models import FetchDebugInfo, FilteredVideo, Platform


logger = logging.getLogger(__name__)


class FetchResult(NamedTuple):
    videos: list[FilteredVideo]
    debug: FetchDebugInfo


class BaseFetcher(ABC):
    """
    Abstract base class for trending-content fetchers.

    Subclasses turn a niche into FilteredVideo items. Fetchers never raise:
    vendor failures are logged and reported through FetchDebugInfo.errors.
    """

    platform: Platform = Platform.TIKTOK

    def __init__(
        self,
        api_key: Optional[str],
        window: Optional[ViewWindow] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.window = window or ViewWindow()
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    @abstractmethod
    async def fetch(self, niche: str, desired_count: int = 20) -> FetchResult:
        """
        Fetch trending videos for a niche.

        Args:
            niche: Free-text niche
            desired_count: Stop once this many videos are collected

        Returns:
            FetchResult of (videos, debug)
        """
        pass

    async def fetch_with_tracking(self, niche: str, desired_count: int = 20) -> FetchResult:
        """
        Fetch with a last-resort guard around subclass bugs.
        """
        try:
            logger.info(f"Fetching {self.platform.value} videos for niche '{niche}' (target={desired_count})")
            result = await self.fetch(niche, desired_count)
        except Exception as e:
            logger.error(f"Unexpected error fetching {self.platform.value} videos: {e}")
            debug = FetchDebugInfo(errors=[f"{self.platform.value}: {e}"])
            return FetchResult([], debug)

        logger.info(f"Fetched {len(result.videos)} {self.platform.value} videos for '{niche}'")
        return result

    def accept(
        self,
        video: Optional[FilteredVideo],
        seen_ids: set[str],
        debug: FetchDebugInfo,
        now: Optional[float] = None,
    ) -> bool:
        """
        Apply the id, view window, recency and duplicate checks.

        Every rejection is counted in debug.rejected. Accepted ids are added
        to seen_ids.
        """
        if video is None or not video.id:
            debug.rejected.record("missing_id")
            return False

        reason = self.window.check(video, now if now is not None else time.time())
        if reason:
            debug.rejected.record(reason)
            return False

        if video.id in seen_ids:
            debug.rejected.record("duplicate")
            return False

        seen_ids.add(video.id)
        return True

"""Trending-content fetchers for each platform."""

from .base import BaseFetcher, FetchResult
from .instagram import InstagramReelsFetcher
from .tiktok import TikTokHashtagFetcher

__all__ = [
    "BaseFetcher",
    "FetchResult",
    "InstagramReelsFetcher",
    "TikTokHashtagFetcher",
]

"""TikTok hashtag fetcher using the tiktok-scraper2 RapidAPI."""

import random
import time
from typing import Any, Optional
import logging

import httpx
from pydantic import ValidationError

from .base import BaseFetcher, FetchResult
from ..filters import ViewWindow
from ..models import FetchDebugInfo, FilteredVideo, Platform
from ..niches import resolve_hashtags
from ...utils.validation import first_url, safe_int, safe_str


logger = logging.getLogger(__name__)

DEFAULT_TIKTOK_HOST = "tiktok-scraper2.p.rapidapi.com"


def dig(data: Any, *path: str) -> Any:
    """Walk nested dicts, returning None at the first missing key."""
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def first_truthy(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return None


def tiktok_video_url(author: str, video_id: str) -> str:
    return f"https://www.tiktok.com/@{author}/video/{video_id}"


def normalize_tiktok_item(item: Any) -> Optional[FilteredVideo]:
    """
    Normalize one tiktok-scraper2 item.

    The API has shipped several response shapes, so each field is read from
    a list of known aliases. Returns None when the item has no id.
    """
    if not isinstance(item, dict):
        return None

    video_id = first_truthy(item.get("id"), item.get("video_id"))
    if not video_id:
        return None
    video_id = str(video_id)

    author = safe_str(first_truthy(dig(item, "author", "uniqueId"), dig(item, "author", "nickname")), "creator")

    return FilteredVideo(
        id=video_id,
        description=safe_str(first_truthy(item.get("desc"), item.get("description"))),
        views=safe_int(first_truthy(dig(item, "stats", "playCount"), item.get("play_count"), item.get("views")), min_val=0),
        likes=safe_int(first_truthy(dig(item, "stats", "diggCount"), item.get("like_count"), item.get("likes")), min_val=0),
        shares=safe_int(first_truthy(dig(item, "stats", "shareCount"), item.get("share_count"), item.get("shares")), min_val=0),
        comments=safe_int(first_truthy(dig(item, "stats", "commentCount"), item.get("comment_count"), item.get("comments")), min_val=0),
        duration=safe_int(first_truthy(dig(item, "video", "duration"), item.get("duration")), min_val=0),
        cover_url=first_url(first_truthy(dig(item, "video", "cover"), item.get("cover"))),
        author=author,
        create_time=safe_int(first_truthy(item.get("createTime"), item.get("create_time"))),
        platform=Platform.TIKTOK,
        url=tiktok_video_url(author, video_id),
    )


class TikTokHashtagFetcher(BaseFetcher):
    """
    Fetches trending TikTok videos by searching a niche's hashtags.

    Hashtags are shuffled so repeated calls surface different content. The
    first pass queries `first_pass` hashtags; a second pass covers the rest
    only if the target was not met. There is never a third pass.
    """

    platform = Platform.TIKTOK

    def __init__(
        self,
        api_key: Optional[str],
        host: str = DEFAULT_TIKTOK_HOST,
        window: Optional[ViewWindow] = None,
        first_pass: int = 4,
        videos_per_hashtag: int = 30,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(api_key, window=window, timeout=timeout, transport=transport)
        self.host = host
        self.first_pass = first_pass
        self.videos_per_hashtag = videos_per_hashtag
        self.rng = rng or random.Random()

    @property
    def headers(self) -> dict:
        return {
            "x-rapidapi-host": self.host,
            "x-rapidapi-key": self.api_key or "",
            "Accept": "application/json",
        }

    async def fetch(self, niche: str, desired_count: int = 20) -> FetchResult:
        debug = FetchDebugInfo()

        if not self.api_key:
            logger.error("RAPIDAPI_KEY is not set")
            debug.errors.append("RAPIDAPI_KEY is not set")
            return FetchResult([], debug)

        hashtags = resolve_hashtags(niche)
        shuffled = self.rng.sample(hashtags, len(hashtags))
        passes = [shuffled[:self.first_pass], shuffled[self.first_pass:]]

        videos: list[FilteredVideo] = []
        seen_ids: set[str] = set()
        now = time.time()

        async with self._client() as client:
            for batch in passes:
                if not batch or len(videos) >= desired_count:
                    break
                debug.passes += 1
                logger.info(f"TikTok pass {debug.passes}: {', '.join('#' + t for t in batch)}")

                for hashtag in batch:
                    if len(videos) >= desired_count:
                        break
                    await self._collect_hashtag(client, hashtag, videos, seen_ids, debug, desired_count, now)

        logger.info(
            f"Collected {len(videos)} TikTok videos in {debug.passes} pass(es); "
            f"rejected {debug.rejected.model_dump()}"
        )
        return FetchResult(videos, debug)

    async def _collect_hashtag(
        self,
        client: httpx.AsyncClient,
        hashtag: str,
        videos: list[FilteredVideo],
        seen_ids: set[str],
        debug: FetchDebugInfo,
        desired_count: int,
        now: float,
    ) -> None:
        debug.hashtags_tried.append(hashtag)
        try:
            hashtag_id = await self._get_hashtag_id(client, hashtag)
            if not hashtag_id:
                debug.errors.append(f"#{hashtag}: Could not get hashtag ID")
                return

            debug.hashtags_processed.append({"hashtag": hashtag, "hashtagId": hashtag_id})

            items = await self._get_hashtag_videos(client, hashtag_id)
            debug.api_responses.append({
                "hashtag": hashtag,
                "hashtagId": hashtag_id,
                "videosFound": len(items),
            })

            added = 0
            for item in items:
                try:
                    video = normalize_tiktok_item(item)
                except ValidationError as e:
                    logger.warning(f"#{hashtag}: skipping malformed item ({e.error_count()} field errors)")
                    debug.rejected.record("malformed")
                    continue
                if not self.accept(video, seen_ids, debug, now):
                    continue
                videos.append(video)
                added += 1
                if len(videos) >= desired_count:
                    break

            logger.info(f"#{hashtag}: added {added} videos ({len(videos)} total)")

        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error processing #{hashtag}: {e}")
            debug.errors.append(f"#{hashtag}: {e}")

    async def _get_hashtag_id(self, client: httpx.AsyncClient, hashtag: str) -> Optional[str]:
        response = await client.get(
            f"https://{self.host}/hashtag/info",
            params={"hashtag": hashtag},
            headers=self.headers,
        )
        if response.status_code != 200:
            logger.error(f"Failed to get hashtag info for #{hashtag}: {response.status_code}")
            return None

        data = response.json()
        hashtag_id = first_truthy(
            dig(data, "data", "challenge", "id"),
            dig(data, "challengeInfo", "challenge", "id"),
            dig(data, "id"),
        )
        if not hashtag_id:
            logger.warning(f"No hashtag ID found for #{hashtag}: {str(data)[:200]}")
            return None
        return str(hashtag_id)

    async def _get_hashtag_videos(self, client: httpx.AsyncClient, hashtag_id: str) -> list:
        response = await client.get(
            f"https://{self.host}/hashtag/videos",
            params={"hashtag_id": hashtag_id, "count": self.videos_per_hashtag},
            headers=self.headers,
        )
        response.raise_for_status()

        data = response.json()
        items = first_truthy(
            dig(data, "data", "videos"),
            dig(data, "itemList"),
            dig(data, "videos"),
            dig(data, "data"),
        )
        return items if isinstance(items, list) else []

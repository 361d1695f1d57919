"""Instagram reels fetcher using the instagram-scraper-stable-api RapidAPI."""

import time
from typing import Any, Optional
import logging

import httpx
from pydantic import ValidationError

from .base import BaseFetcher, FetchResult
from .tiktok import dig, first_truthy
from ..filters import ViewWindow, is_content_appropriate
from ..models import FetchDebugInfo, FilteredVideo, Platform
from ..niches import resolve_creators
from ..throttle import MinIntervalThrottle
from ...utils.validation import first_url, safe_int, safe_str


logger = logging.getLogger(__name__)

DEFAULT_INSTAGRAM_HOST = "instagram-scraper-stable-api.p.rapidapi.com"
MAX_DESCRIPTION_LENGTH = 200


def instagram_reel_url(code: str) -> str:
    return f"https://www.instagram.com/reel/{code}/"


def normalize_instagram_item(item: Any, username: str, now: Optional[float] = None) -> Optional[FilteredVideo]:
    """
    Normalize one reel from get_ig_user_reels.

    Media may be nested under node.media or node. Reels without a shortcode
    are unusable and return None. A missing timestamp counts as "now".
    """
    if not isinstance(item, dict):
        return None

    media = first_truthy(dig(item, "node", "media"), item.get("node"), item)
    if not isinstance(media, dict) or not media.get("code"):
        return None

    code = str(media["code"])
    caption = safe_str(first_truthy(dig(media, "caption", "text"), media.get("caption")))

    candidates = dig(media, "image_versions2", "candidates")
    first_candidate = candidates[0] if isinstance(candidates, list) and candidates else {}
    thumbnail = first_url(first_truthy(
        dig(first_candidate, "url"),
        media.get("thumbnail_url"),
        media.get("display_url"),
    ))
    play_url = first_url(first_truthy(media.get("video_versions"), media.get("video_url")))

    user = first_truthy(media.get("user"), media.get("owner")) or {}
    author = safe_str(dig(user, "username")) or username

    now = time.time() if now is None else now

    return FilteredVideo(
        id=str(first_truthy(media.get("pk"), media.get("id"), code)),
        description=caption[:MAX_DESCRIPTION_LENGTH],
        views=safe_int(first_truthy(media.get("play_count"), media.get("view_count"), media.get("video_view_count")), min_val=0),
        likes=safe_int(media.get("like_count"), min_val=0),
        comments=safe_int(media.get("comment_count"), min_val=0),
        shares=safe_int(media.get("reshare_count"), min_val=0),
        duration=safe_int(media.get("video_duration"), min_val=0),
        cover_url=thumbnail,
        play_url=play_url,
        author=author,
        create_time=safe_int(first_truthy(media.get("taken_at"), media.get("taken_at_timestamp")), default=int(now)),
        platform=Platform.INSTAGRAM,
        url=instagram_reel_url(code),
    )


class InstagramReelsFetcher(BaseFetcher):
    """
    Fetches recent reels from curated creator accounts for a niche.

    Requests are spaced by a MinIntervalThrottle. Results are filtered for
    views, age and appropriateness, de-duplicated, sorted by views and
    capped at `max_results`.
    """

    platform = Platform.INSTAGRAM

    def __init__(
        self,
        api_key: Optional[str],
        host: str = DEFAULT_INSTAGRAM_HOST,
        window: Optional[ViewWindow] = None,
        creators_per_niche: int = 3,
        reels_per_creator: int = 10,
        max_results: int = 8,
        throttle: Optional[MinIntervalThrottle] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            api_key,
            window=window or ViewWindow(min_views=10_000, max_age_days=30),
            timeout=timeout,
            transport=transport,
        )
        self.host = host
        self.creators_per_niche = creators_per_niche
        self.reels_per_creator = reels_per_creator
        self.max_results = max_results
        self.throttle = throttle or MinIntervalThrottle(0.3)

    @property
    def headers(self) -> dict:
        return {
            "x-rapidapi-host": self.host,
            "x-rapidapi-key": self.api_key or "",
            "Content-Type": "application/x-www-form-urlencoded",
        }

    async def fetch(self, niche: str, desired_count: int = 20) -> FetchResult:
        debug = FetchDebugInfo()

        if not self.api_key:
            logger.error("INSTAGRAM_RAPIDAPI_KEY is not set")
            debug.errors.append("INSTAGRAM_RAPIDAPI_KEY is not set")
            return FetchResult([], debug)

        creators = resolve_creators(niche)[:self.creators_per_niche]
        logger.info(f"Fetching Instagram reels from {len(creators)} creators: {creators}")

        videos: list[FilteredVideo] = []
        seen_ids: set[str] = set()
        now = time.time()
        debug.passes = 1

        async with self._client() as client:
            for username in creators:
                await self.throttle.wait()
                debug.hashtags_tried.append(f"@{username}")
                try:
                    reels = await self._get_user_reels(client, username)
                except (httpx.HTTPError, ValueError) as e:
                    logger.error(f"Error fetching @{username}: {e}")
                    debug.errors.append(f"@{username}: {e}")
                    continue

                debug.api_responses.append({"creator": username, "videosFound": len(reels)})

                for item in reels:
                    try:
                        video = normalize_instagram_item(item, username, now)
                    except ValidationError as e:
                        logger.warning(f"@{username}: skipping malformed reel ({e.error_count()} field errors)")
                        debug.rejected.record("malformed")
                        continue
                    if video is not None and not is_content_appropriate(video.description):
                        debug.rejected.record("inappropriate")
                        continue
                    if self.accept(video, seen_ids, debug, now):
                        videos.append(video)

        videos.sort(key=lambda v: v.views, reverse=True)
        limit = min(desired_count, self.max_results)
        logger.info(f"Collected {len(videos)} Instagram reels, returning {min(len(videos), limit)}")
        return FetchResult(videos[:limit], debug)

    async def _get_user_reels(self, client: httpx.AsyncClient, username: str) -> list:
        response = await client.post(
            f"https://{self.host}/get_ig_user_reels.php",
            data={"username_or_url": username, "amount": str(self.reels_per_creator)},
            headers=self.headers,
        )
        response.raise_for_status()

        data = response.json()
        reels = data.get("reels") if isinstance(data, dict) else None
        if not isinstance(reels, list):
            logger.warning(f"No reels array for @{username}")
            return []
        return reels

"""
Trending formats pipeline.

Resolve -> fetch/filter -> extract -> assemble, plus spoken or caption
hooks. One instance can serve many requests; every run is independent.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import logging

import httpx

from .aggregation.base import BaseFetcher
from .aggregation.instagram import InstagramReelsFetcher
from .aggregation.tiktok import TikTokHashtagFetcher
from .assembler import assemble
from .extraction.extractor import ExtractionTier, FormatExtractor
from .extraction.llm import GeminiTextModel, OpenAIVisionModel
from .filters import ViewWindow
from .hooks import SpokenHookExtractor, build_hooks
from .media import MediaDownloader
from .models import FetchDebugInfo, FilteredVideo, Platform, TrendingFormat, TrendingHook
from .niches import resolve_hashtags
from .throttle import MinIntervalThrottle
from .transcription import DeepgramTranscriber, VideoUrlResolver
from ..config.settings import Settings


logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    niche: str
    platform: Platform
    hashtags: list[str]
    videos: list[FilteredVideo] = field(default_factory=list)
    formats: list[TrendingFormat] = field(default_factory=list)
    hooks: list[TrendingHook] = field(default_factory=list)
    debug: FetchDebugInfo = field(default_factory=FetchDebugInfo)
    extraction_tier: Optional[ExtractionTier] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_videos(self) -> bool:
        return bool(self.videos)


class TrendingFormatsPipeline:
    """
    Orchestrates one trending-formats request.
    """

    def __init__(
        self,
        fetchers: dict[Platform, BaseFetcher],
        extractor: FormatExtractor,
        desired_count: int = 20,
        spoken_hooks: Optional[SpokenHookExtractor] = None,
    ):
        self.fetchers = fetchers
        self.extractor = extractor
        self.desired_count = desired_count
        self.spoken_hooks = spoken_hooks

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "TrendingFormatsPipeline":
        """
        Build the pipeline from configuration.

        `transport` is handed to every HTTP client, which lets tests route
        vendor traffic to an httpx.MockTransport.
        """
        tiktok = TikTokHashtagFetcher(
            api_key=settings.rapidapi_key,
            host=settings.tiktok_api_host,
            window=ViewWindow(
                min_views=settings.min_views,
                max_views=settings.max_views,
                max_age_days=settings.max_age_days,
            ),
            first_pass=settings.first_pass_hashtags,
            videos_per_hashtag=settings.videos_per_hashtag,
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )
        instagram = InstagramReelsFetcher(
            api_key=settings.instagram_rapidapi_key or settings.rapidapi_key,
            host=settings.instagram_api_host,
            window=ViewWindow(
                min_views=settings.instagram_min_views,
                max_views=settings.max_views,
                max_age_days=settings.instagram_max_age_days,
            ),
            creators_per_niche=settings.instagram_creators_per_niche,
            reels_per_creator=settings.instagram_reels_per_creator,
            throttle=MinIntervalThrottle(settings.instagram_request_interval_seconds),
            timeout=settings.http_timeout_seconds,
            transport=transport,
        )
        extractor = FormatExtractor(
            vision=OpenAIVisionModel(settings.openai_api_key, model=settings.openai_vision_model),
            text=GeminiTextModel(settings.gemini_api_key, models=settings.gemini_models),
            downloader=MediaDownloader(
                timeout=settings.http_timeout_seconds,
                transport=transport,
                max_bytes=settings.max_image_bytes,
            ),
            max_images=settings.max_vision_images,
        )
        spoken_hooks = SpokenHookExtractor(
            transcriber=DeepgramTranscriber(
                settings.deepgram_api_key,
                model=settings.deepgram_model,
                timeout=settings.http_timeout_seconds,
                transport=transport,
            ),
            resolver=VideoUrlResolver(
                settings.rapidapi_key,
                host=settings.tiktok_api_host,
                timeout=settings.http_timeout_seconds,
                transport=transport,
            ),
            max_videos=settings.spoken_hook_videos,
            throttle=MinIntervalThrottle(settings.transcription_interval_seconds),
        )
        return cls(
            fetchers={Platform.TIKTOK: tiktok, Platform.INSTAGRAM: instagram},
            extractor=extractor,
            desired_count=settings.desired_video_count,
            spoken_hooks=spoken_hooks,
        )

    async def run(self, niche: str, platform: Platform = Platform.TIKTOK) -> PipelineResult:
        """
        Fetch, extract and assemble trending formats for a niche.

        With zero videos the result carries only the fetch diagnostics; no
        extraction is attempted.
        """
        platform = Platform(platform)
        result = PipelineResult(niche=niche, platform=platform, hashtags=resolve_hashtags(niche))

        fetcher = self.fetchers[platform]
        videos, debug = await fetcher.fetch_with_tracking(niche, self.desired_count)
        result.videos = videos
        result.debug = debug

        if not videos:
            logger.warning(f"No {platform.value} videos for niche '{niche}': {debug.errors}")
            return result

        outcome = await self.extractor.extract_with_tier(videos, niche)
        result.formats = assemble(outcome.formats, videos)
        result.extraction_tier = outcome.tier
        result.hooks = await build_hooks(videos, niche, self.spoken_hooks)

        logger.info(
            f"Pipeline done for '{niche}' on {platform.value}: {len(videos)} videos, "
            f"{len(result.formats)} formats via {outcome.tier.value}, {len(result.hooks)} hooks"
        )
        return result

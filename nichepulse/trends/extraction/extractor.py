"""
Tiered format extraction.

vision (thumbnails + OpenAI) -> text (captions + Gemini) -> static defaults.
Each tier is tried only if the previous one is unavailable or fails, and
the result is always exactly FORMAT_COUNT formats.
"""

from enum import Enum
from statistics import mean
from typing import Any, NamedTuple, Optional, Sequence
import logging

from pydantic import ValidationError

from .defaults import default_formats
from .json_extract import extract_json_array
from .llm import GeminiTextModel, OpenAIVisionModel
from .prompts import build_text_prompt, build_vision_prompt
from ..formatting import format_view_count
from ..media import MediaDownloader
from ..models import AvgStats, EngagementLevel, FilteredVideo, TrendingFormat


logger = logging.getLogger(__name__)

FORMAT_COUNT = 3


class ExtractionTier(str, Enum):
    VISION = "vision"
    TEXT = "text"
    DEFAULT = "default"


class ExtractionOutcome(NamedTuple):
    formats: list[TrendingFormat]
    tier: ExtractionTier


def normalize_engagement(value: Any) -> EngagementLevel:
    if isinstance(value, str):
        lowered = value.strip().lower()
        for level in EngagementLevel:
            if lowered == level.value.lower():
                return level
    return EngagementLevel.MEDIUM


def coerce_string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return []


def compute_avg_stats(videos: Sequence[FilteredVideo]) -> AvgStats:
    """Average views/likes/shares across the analysed videos, as display strings."""
    if not videos:
        return AvgStats()
    return AvgStats(
        views=format_view_count(int(mean(v.views for v in videos))),
        likes=format_view_count(int(mean(v.likes for v in videos))),
        shares=format_view_count(int(mean(v.shares for v in videos))),
    )


def coerce_formats(items: Sequence[Any], videos: Sequence[FilteredVideo]) -> list[TrendingFormat]:
    """
    Turn raw LLM objects into TrendingFormat models.

    Non-objects and objects without a formatName are dropped. Source videos
    are never taken from the model; they are attached by the assembler.
    """
    formats: list[TrendingFormat] = []
    computed_stats: Optional[AvgStats] = None

    for item in items:
        if not isinstance(item, dict):
            continue
        name = item.get("formatName")
        if not isinstance(name, str) or not name.strip():
            continue

        raw_stats = item.get("avgStats")
        if isinstance(raw_stats, dict):
            avg_stats = AvgStats(
                views=str(raw_stats.get("views") or "N/A"),
                likes=str(raw_stats.get("likes") or "N/A"),
                shares=str(raw_stats.get("shares") or "N/A"),
            )
        else:
            if computed_stats is None:
                computed_stats = compute_avg_stats(videos)
            avg_stats = computed_stats

        try:
            formats.append(TrendingFormat(
                id=f"f{len(formats) + 1}",
                format_name=name.strip(),
                format_description=str(item.get("formatDescription") or ""),
                why_it_works=str(item.get("whyItWorks") or ""),
                how_to_apply=coerce_string_list(item.get("howToApply")),
                engagement_potential=normalize_engagement(item.get("engagementPotential")),
                avg_stats=avg_stats,
            ))
        except ValidationError as e:
            logger.warning(f"Dropping malformed format '{name}': {e}")

    return formats


def pad_formats(formats: list[TrendingFormat], niche: str) -> list[TrendingFormat]:
    """Pad with defaults (skipping duplicate names) or truncate to FORMAT_COUNT."""
    result = list(formats[:FORMAT_COUNT])
    names = {f.format_name.lower() for f in result}
    for fallback in default_formats(niche):
        if len(result) >= FORMAT_COUNT:
            break
        if fallback.format_name.lower() in names:
            continue
        result.append(fallback.model_copy(update={"id": f"f{len(result) + 1}"}))
    return result


class FormatExtractor:
    """
    Extracts trending formats from filtered videos.
    """

    def __init__(
        self,
        vision: Optional[OpenAIVisionModel] = None,
        text: Optional[GeminiTextModel] = None,
        downloader: Optional[MediaDownloader] = None,
        max_images: int = 8,
    ):
        self.vision = vision
        self.text = text
        self.downloader = downloader or MediaDownloader()
        self.max_images = max_images

    async def extract(self, videos: Sequence[FilteredVideo], niche: str) -> list[TrendingFormat]:
        """Always returns exactly FORMAT_COUNT formats."""
        outcome = await self.extract_with_tier(videos, niche)
        return outcome.formats

    async def extract_with_tier(self, videos: Sequence[FilteredVideo], niche: str) -> ExtractionOutcome:
        """
        Run the tiers in order and report which one produced the result.
        """
        if not videos:
            logger.info("No videos to analyze, using default formats")
            return ExtractionOutcome(default_formats(niche), ExtractionTier.DEFAULT)

        formats = await self._vision_tier(videos, niche)
        if formats:
            return ExtractionOutcome(pad_formats(formats, niche), ExtractionTier.VISION)

        formats = await self._text_tier(videos, niche)
        if formats:
            return ExtractionOutcome(pad_formats(formats, niche), ExtractionTier.TEXT)

        logger.warning("All extraction tiers failed, using default formats")
        return ExtractionOutcome(default_formats(niche), ExtractionTier.DEFAULT)

    async def _vision_tier(self, videos: Sequence[FilteredVideo], niche: str) -> list[TrendingFormat]:
        if not self.vision or not self.vision.is_configured:
            logger.info("Vision tier skipped: OPENAI_API_KEY not set")
            return []

        with_covers = [v for v in videos if v.cover_url]
        if not with_covers:
            logger.info("Vision tier skipped: no thumbnails")
            return []

        images: list[str] = []
        pictured: list[FilteredVideo] = []
        for video in with_covers:
            if len(images) >= self.max_images:
                break
            data_uri = await self.downloader.download(video.cover_url)
            if data_uri:
                images.append(data_uri)
                pictured.append(video)

        if not images:
            logger.warning("Vision tier skipped: no thumbnails could be downloaded")
            return []

        logger.info(f"Analyzing {len(images)} thumbnails with {self.vision.model}")
        try:
            reply = await self.vision.complete(build_vision_prompt(pictured, niche), images)
        except Exception as e:
            logger.error(f"Vision extraction failed: {e}")
            return []

        return self._parse(reply, videos, "vision")

    async def _text_tier(self, videos: Sequence[FilteredVideo], niche: str) -> list[TrendingFormat]:
        if not self.text or not self.text.is_configured:
            logger.info("Text tier skipped: GEMINI_API_KEY not set")
            return []

        try:
            reply = await self.text.complete(build_text_prompt(videos, niche))
        except Exception as e:
            logger.error(f"Text extraction failed: {e}")
            return []

        return self._parse(reply, videos, "text")

    def _parse(self, reply: str, videos: Sequence[FilteredVideo], tier: str) -> list[TrendingFormat]:
        result = extract_json_array(reply)
        if not result.ok:
            logger.warning(f"Could not parse {tier} tier reply: {result.reason}")
            return []

        formats = coerce_formats(result.value, videos)
        if not formats:
            logger.warning(f"{tier} tier reply contained no usable formats")
        else:
            logger.info(f"Extracted {len(formats)} formats from the {tier} tier")
        return formats

"""
Hook extraction.

A hook is the opening line of a video. Spoken hooks come from a transcript
of the first seconds; when transcription is unavailable or yields nothing,
the first sentence of the caption (minus hashtags and leading emoji) is
used instead.
"""

import logging
import re
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from .models import EngagementLevel, FilteredVideo, TrendingHook
from .niches import match_niche_key
from .throttle import MinIntervalThrottle
from .transcription import DeepgramTranscriber, VideoUrlResolver


logger = logging.getLogger(__name__)


MAX_HOOKS = 10
MAX_HOOK_LENGTH = 80
SHORT_FALLBACK_LENGTH = 60

_HASHTAG_RE = re.compile(r"#\w+")
_LEADING_EMOJI_RE = re.compile(r"^[\s\u2600-\u27bf\ufe0f\u200d\U0001f000-\U0001faff]+")
_SENTENCE_SPLIT_RE = re.compile(r"[.\n!?]")
_SPOKEN_SENTENCE_RE = re.compile(r"[.!?]+")

MIN_SPOKEN_HOOK_LENGTH = 25
MAX_SPOKEN_HOOK_LENGTH = 120
SPOKEN_FALLBACK_LENGTH = 80


def extract_hook(description: str) -> str:
    """
    Pull the opening line out of a caption.

    Args:
        description: Raw video caption

    Returns:
        At most 80 characters; empty string for an empty caption
    """
    if not description:
        return ""

    cleaned = _HASHTAG_RE.sub("", description).strip()
    cleaned = _LEADING_EMOJI_RE.sub("", cleaned)

    first_line = _SENTENCE_SPLIT_RE.split(cleaned, maxsplit=1)[0].strip()

    if len(first_line) < 5:
        fallback = cleaned[:MAX_HOOK_LENGTH].strip()
        if len(fallback) > SHORT_FALLBACK_LENGTH:
            return fallback[:57] + "..."
        return fallback

    if len(first_line) <= MAX_HOOK_LENGTH:
        return first_line
    return first_line[:77] + "..."


def engagement_level(video: FilteredVideo) -> EngagementLevel:
    rate = video.engagement_rate
    if rate > 0.1:
        return EngagementLevel.HIGH
    if rate > 0.05:
        return EngagementLevel.MEDIUM
    return EngagementLevel.LOW


def _hook(hook_id: str, text: str, engagement: EngagementLevel) -> TrendingHook:
    return TrendingHook(id=hook_id, text=text, engagement=engagement)


DEFAULT_HOOKS: Mapping[str, tuple[TrendingHook, ...]] = MappingProxyType({
    "hijab": (
        _hook("h1", "This hijab style changed everything", EngagementLevel.HIGH),
        _hook("h2", "3 styles you need to try", EngagementLevel.HIGH),
        _hook("h3", "POV: You finally found your style", EngagementLevel.MEDIUM),
    ),
    "deen": (
        _hook("h1", "This verse changed my perspective", EngagementLevel.HIGH),
        _hook("h2", "Reminder for those who need it", EngagementLevel.HIGH),
        _hook("h3", "The Prophet ﷺ said...", EngagementLevel.MEDIUM),
    ),
    "default": (
        _hook("h1", "This changed everything for me", EngagementLevel.HIGH),
        _hook("h2", "Things I wish I knew sooner", EngagementLevel.HIGH),
        _hook("h3", "POV: You figured it out", EngagementLevel.MEDIUM),
    ),
})


def default_hooks(niche: str) -> list[TrendingHook]:
    key = match_niche_key(niche, DEFAULT_HOOKS) or "default"
    return [hook.model_copy() for hook in DEFAULT_HOOKS[key]]


def build_caption_hooks(
    videos: Sequence[FilteredVideo],
    niche: str,
    limit: int = MAX_HOOKS,
) -> list[TrendingHook]:
    """
    Hooks from the top videos by views, falling back to the niche defaults.
    """
    ranked = sorted(videos, key=lambda v: v.views, reverse=True)[:limit]

    hooks = []
    for video in ranked:
        if len(video.description) <= 5:
            continue
        text = extract_hook(video.description)
        if not text:
            continue
        hooks.append(TrendingHook(
            id=f"h{len(hooks) + 1}",
            text=text,
            engagement=engagement_level(video),
            platform=video.platform,
            views=video.views,
            likes=video.likes,
        ))

    return hooks or default_hooks(niche)


def extract_spoken_hook(transcript: str) -> str:
    """
    Cut the first one or two sentences out of a transcript.

    Returns "" for transcripts too short to hold a real hook (under 25
    characters or fewer than three words). Long hooks are cut to 117
    characters plus an ellipsis.
    """
    if not transcript or len(transcript) < MIN_SPOKEN_HOOK_LENGTH:
        return ""

    sentences = [s.strip() for s in _SPOKEN_SENTENCE_RE.split(transcript) if s.strip()]
    hook = ". ".join(sentences[:2]).strip()

    if len(hook) < MIN_SPOKEN_HOOK_LENGTH:
        hook = transcript[:SPOKEN_FALLBACK_LENGTH].strip()

    if len(hook.split()) < 3 or len(hook) < MIN_SPOKEN_HOOK_LENGTH:
        return ""

    if len(hook) > MAX_SPOKEN_HOOK_LENGTH:
        return hook[:MAX_SPOKEN_HOOK_LENGTH - 3] + "..."
    return hook


class SpokenHookExtractor:
    """
    Hooks from what creators say on camera.

    The top videos by views are resolved to a downloadable file and
    transcribed one at a time, spaced by a throttle.
    """

    def __init__(
        self,
        transcriber: DeepgramTranscriber,
        resolver: VideoUrlResolver,
        max_videos: int = MAX_HOOKS,
        throttle: Optional[MinIntervalThrottle] = None,
    ):
        self.transcriber = transcriber
        self.resolver = resolver
        self.max_videos = max_videos
        self.throttle = throttle or MinIntervalThrottle(0.5)

    @property
    def is_configured(self) -> bool:
        return self.transcriber.is_configured

    async def extract(self, videos: Sequence[FilteredVideo]) -> list[TrendingHook]:
        ranked = sorted(videos, key=lambda v: v.views, reverse=True)[:self.max_videos]
        logger.info(f"Transcribing up to {len(ranked)} videos for spoken hooks")

        hooks = []
        for index, video in enumerate(ranked, start=1):
            await self.throttle.wait()

            media_url = await self.resolver.resolve(video)
            if not media_url:
                continue

            transcript = await self.transcriber.transcribe(media_url)
            if transcript is None:
                continue

            text = extract_spoken_hook(transcript.text)
            if len(text) <= 5:
                continue

            hooks.append(TrendingHook(
                id=f"spoken_h{index}",
                text=text,
                engagement=engagement_level(video),
                platform=video.platform,
                views=video.views,
                likes=video.likes,
            ))

        logger.info(f"Extracted {len(hooks)} spoken hooks")
        return hooks


async def build_hooks(
    videos: Sequence[FilteredVideo],
    niche: str,
    spoken: Optional[SpokenHookExtractor] = None,
) -> list[TrendingHook]:
    """
    Spoken hooks when transcription is configured and finds any, otherwise
    caption hooks (which fall back to the niche defaults).
    """
    if spoken is not None and spoken.is_configured and videos:
        try:
            hooks = await spoken.extract(videos)
        except Exception as e:
            logger.error(f"Spoken hook extraction failed, using captions: {e}")
            hooks = []
        if hooks:
            return hooks

    return build_caption_hooks(videos, niche)

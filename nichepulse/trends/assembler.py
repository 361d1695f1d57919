"""Attach source-video provenance records to extracted formats."""

from typing import Sequence

from .aggregation.tiktok import tiktok_video_url
from .formatting import format_view_count
from .models import FilteredVideo, SourceVideo, TrendingFormat


MAX_SOURCE_VIDEOS = 8
SOURCES_PER_FORMAT = 3
SOURCE_STRIDE = 2


def to_source_video(video: FilteredVideo) -> SourceVideo:
    return SourceVideo(
        id=video.id or None,
        url=video.url or tiktok_video_url(video.author, video.id),
        thumbnail=video.cover_url,
        views=format_view_count(video.views),
        author=video.author,
        description=video.description,
    )


def assemble(formats: Sequence[TrendingFormat], videos: Sequence[FilteredVideo]) -> list[TrendingFormat]:
    """
    Give each format up to three source videos.

    Positional only: format i gets sources[i*2 : i*2+3], so neighbouring
    formats share one video. Sources without an id are dropped. Returns new
    models; the inputs are not modified.
    """
    sources = [to_source_video(v) for v in videos[:MAX_SOURCE_VIDEOS]]

    assembled = []
    for i, trending_format in enumerate(formats):
        start = i * SOURCE_STRIDE
        attached = [s for s in sources[start:start + SOURCES_PER_FORMAT] if s.id]
        assembled.append(trending_format.model_copy(update={"source_videos": attached}))
    return assembled

"""Trend aggregation and format extraction pipeline."""

from .models import (
    FetchDebugInfo,
    FilteredVideo,
    Platform,
    SourceVideo,
    TrendingFormat,
    TrendingHook,
)
from .niches import resolve_hashtags
from .pipeline import PipelineResult, TrendingFormatsPipeline

__all__ = [
    "FetchDebugInfo",
    "FilteredVideo",
    "Platform",
    "SourceVideo",
    "TrendingFormat",
    "TrendingHook",
    "resolve_hashtags",
    "PipelineResult",
    "TrendingFormatsPipeline",
]

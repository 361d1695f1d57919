"""
Data models for the trend pipeline.
Every platform's raw items are normalized to FilteredVideo before anything
downstream sees them; the API speaks camelCase through field aliases.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class Platform(str, Enum):
    TIKTOK = "tiktok"
    INSTAGRAM = "instagram"


class EngagementLevel(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class NicheProfile(CamelModel):
    """A niche and its curated hashtags."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    key: str
    hashtags: tuple[str, ...]


class FilteredVideo(CamelModel):
    """
    Normalized video that passed the view-count and recency filters.
    """

    id: str
    description: str = ""
    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)
    shares: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    duration: int = Field(default=0, ge=0, description="Seconds")
    cover_url: str = ""
    play_url: str = Field(default="", description="Direct video file, when the vendor exposes one")
    author: str = "creator"
    create_time: int = Field(default=0, description="Epoch seconds")
    platform: Platform = Platform.TIKTOK
    url: Optional[str] = None

    @property
    def engagement_rate(self) -> float:
        return (self.likes + self.comments + self.shares) / max(self.views, 1)


class AvgStats(CamelModel):
    views: str = "N/A"
    likes: str = "N/A"
    shares: str = "N/A"


class SourceVideo(CamelModel):
    """Provenance record linking a format back to a real video."""

    id: Optional[str] = None
    url: str = ""
    thumbnail: str = ""
    views: str = "0"
    author: str = ""
    description: str = ""


class TrendingFormat(CamelModel):
    """A recurring structural pattern extracted from trending videos."""

    id: str
    format_name: str
    format_description: str = ""
    why_it_works: str = ""
    how_to_apply: list[str] = Field(default_factory=list)
    engagement_potential: EngagementLevel = EngagementLevel.MEDIUM
    avg_stats: AvgStats = Field(default_factory=AvgStats)
    source_videos: list[SourceVideo] = Field(default_factory=list, max_length=3)


class TrendingHook(CamelModel):
    """Opening line of a trending video."""

    id: str
    text: str
    engagement: EngagementLevel = EngagementLevel.LOW
    platform: Platform = Platform.TIKTOK
    views: int = 0
    likes: int = 0


class RejectionCounts(CamelModel):
    below_min_views: int = 0
    above_max_views: int = 0
    too_old: int = 0
    duplicate: int = 0
    missing_id: int = 0
    inappropriate: int = 0
    malformed: int = 0

    def record(self, reason: str) -> None:
        setattr(self, reason, getattr(self, reason) + 1)


class FetchDebugInfo(CamelModel):
    """
    Diagnostics collected during one fetch run.
    This is where vendor failures are reported; fetchers never raise.
    """

    hashtags_tried: list[str] = Field(default_factory=list)
    hashtags_processed: list[dict[str, Any]] = Field(default_factory=list)
    api_responses: list[dict[str, Any]] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    rejected: RejectionCounts = Field(default_factory=RejectionCounts)
    passes: int = 0

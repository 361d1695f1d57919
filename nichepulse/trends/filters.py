"""
Content filters: view-count window, recency cutoff and keyword appropriateness.
"""

import time
from dataclasses import dataclass
from typing import Optional

from .models import FilteredVideo


MIN_VIEWS = 50_000
MAX_VIEWS = 10_000_000
MAX_AGE_DAYS = 45

SECONDS_PER_DAY = 86_400

# Substring deny-list, matched case-insensitively against descriptions.
INAPPROPRIATE_KEYWORDS: tuple[str, ...] = (
    # Sexual / suggestive
    "sexy", "hot girl", "kiss", "hookup", "nsfw", "18+", "explicit",
    "cleavage", "busty", "braless", "lingerie", "bikini", "swimsuit",
    "thirst trap", "body count", "situationship",
    # Substances
    "weed", "420", "drunk", "alcohol", "drugs", "xanax",
    # Party
    "twerk", "clubbing", "rave", "nightclub",
    # AI-generated content
    "ai generated", "ai voice", "ai art",
    # Off-message takes
    "hijab not required", "hijab is not fard", "progressive muslim",
    # Gym trend tags that attract the wrong audience
    "gymgirl", "gyat", "leggings", "stay focus",
    # Adult
    "masturbation", "nofap", "porn", "zina",
)


def is_content_appropriate(description: Optional[str]) -> bool:
    """
    Check a description against the deny-list.

    Plain substring containment: a deny-word inside a longer word still
    matches. Empty descriptions are appropriate.
    """
    if not description:
        return True
    lowered = description.lower()
    return not any(keyword in lowered for keyword in INAPPROPRIATE_KEYWORDS)


@dataclass(frozen=True)
class ViewWindow:
    """View-count bounds and maximum age a video must satisfy."""

    min_views: int = MIN_VIEWS
    max_views: int = MAX_VIEWS
    max_age_days: int = MAX_AGE_DAYS

    def cutoff(self, now: Optional[float] = None) -> float:
        """Oldest acceptable create time, in epoch seconds."""
        now = time.time() if now is None else now
        return now - self.max_age_days * SECONDS_PER_DAY

    def check(self, video: FilteredVideo, now: Optional[float] = None) -> Optional[str]:
        """
        Return the rejection reason for a video, or None if it passes.

        Reasons match the RejectionCounts field names.
        """
        if video.views < self.min_views:
            return "below_min_views"
        if video.views > self.max_views:
            return "above_max_views"
        if video.create_time < self.cutoff(now):
            return "too_old"
        return None

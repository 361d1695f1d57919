"""Prompt templates for format extraction."""

from typing import Sequence

from ..formatting import format_view_count
from ..models import FilteredVideo


FORMAT_SCHEMA = """[
  {{
    "id": "f1",
    "formatName": "<Short catchy name, e.g. 'Day 1 vs Day 365 Progression'>",
    "formatDescription": "<2-3 sentences describing the structure of the video>",
    "whyItWorks": "<Why this structure holds attention>",
    "howToApply": [
      "<Concrete example for a {niche} creator>",
      "<Another concrete example for a {niche} creator>",
      "<A third concrete example>"
    ],
    "engagementPotential": "High"
  }}
]"""


VISION_PROMPT = """You are looking at {image_count} thumbnails of trending short-form videos in the "{niche}" niche.

Video details, in the same order as the images:
{video_list}

Identify exactly 3 distinct visual FORMATS shared by these videos. A format is the structure (shot style, text overlays, framing, pacing cues), not the specific topic.

STRICT RULES:
1. Describe only what you can literally see in the thumbnails. Do not invent people, objects, text or events that are not visible.
2. If text appears on screen, quote it exactly as written.
3. If a detail is unclear, say it is unclear instead of guessing.
4. Do not mention specific songs or music.
5. Every "howToApply" item must be a concrete idea a {niche} creator could film this week.

Return ONLY a JSON array of exactly 3 objects in this shape:
""" + FORMAT_SCHEMA


TEXT_PROMPT = """You are analyzing trending short-form videos in the "{niche}" niche to extract reusable FORMATS.

Here are {video_count} trending videos:
{video_list}

Extract exactly 3 distinct FORMATS from these videos. A format is the STRUCTURE and APPROACH, not the specific content.

RULES:
1. Base every format on patterns that actually appear in the descriptions above.
2. Never mention specific music or songs.
3. Give specific examples of how a {niche} creator could apply each format.

Return ONLY a JSON array of exactly 3 objects in this shape:
""" + FORMAT_SCHEMA


def format_video_list(videos: Sequence[FilteredVideo], description_length: int = 150) -> str:
    lines = []
    for i, video in enumerate(videos, 1):
        description = (video.description or "(no caption)").replace("\n", " ")[:description_length]
        lines.append(
            f'Video {i}: "{description}" '
            f"({format_view_count(video.views)} views, {format_view_count(video.likes)} likes, {video.duration}s)"
        )
    return "\n".join(lines)


def build_vision_prompt(videos: Sequence[FilteredVideo], niche: str) -> str:
    return VISION_PROMPT.format(
        image_count=len(videos),
        niche=niche,
        video_list=format_video_list(videos),
    )


def build_text_prompt(videos: Sequence[FilteredVideo], niche: str) -> str:
    return TEXT_PROMPT.format(
        video_count=len(videos),
        niche=niche,
        video_list=format_video_list(videos),
    )

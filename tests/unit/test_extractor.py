"""
Unit tests for tiered format extraction.

LLM clients are real objects with `complete` replaced by AsyncMock, so no
API calls are made.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest


def _videos(count=5):
    from nichepulse.trends.models import FilteredVideo

    return [
        FilteredVideo(
            id=f"v{i}",
            views=100_000 * (i + 1),
            likes=5_000,
            shares=300,
            description=f"Caption {i}",
            cover_url=f"https://cdn.example.com/{i}.jpg",
        )
        for i in range(count)
    ]


def _downloader(result="data:image/jpeg;base64,AAAA"):
    downloader = MagicMock()
    downloader.download = AsyncMock(return_value=result)
    return downloader


def _vision(reply=None, side_effect=None, api_key="sk-test"):
    from nichepulse.trends.extraction.llm import OpenAIVisionModel

    vision = OpenAIVisionModel(api_key=api_key)
    vision.complete = AsyncMock(return_value=reply, side_effect=side_effect)
    return vision


def _text(reply=None, side_effect=None, api_key="gemini-test-key-0123456789"):
    from nichepulse.trends.extraction.llm import GeminiTextModel

    text = GeminiTextModel(api_key=api_key)
    text.complete = AsyncMock(return_value=reply, side_effect=side_effect)
    return text


def _reply(*names):
    return json.dumps([{"formatName": name, "engagementPotential": "High"} for name in names])


class TestFormatExtractor:
    """Tests for FormatExtractor.extract_with_tier."""

    @pytest.mark.asyncio
    async def test_vision_tier(self, vision_reply):
        """Test three formats come from the vision tier when it answers."""
        from nichepulse.trends.extraction.extractor import ExtractionTier, FormatExtractor

        vision, text, downloader = _vision(vision_reply), _text(), _downloader()
        extractor = FormatExtractor(vision=vision, text=text, downloader=downloader)

        formats, tier = await extractor.extract_with_tier(_videos(), "food")

        assert tier == ExtractionTier.VISION
        assert [f.format_name for f in formats] == [
            "Ingredient Flat-Lay Reveal", "Close-Up Sizzle Shot", "Finished Plate Face-Off",
        ]
        assert [f.id for f in formats] == ["f1", "f2", "f3"]
        text.complete.assert_not_awaited()

        prompt, images = vision.complete.await_args.args
        assert "food" in prompt
        assert len(images) == 5

    @pytest.mark.asyncio
    async def test_zero_videos_uses_defaults_without_calls(self):
        """Test no LLM or download happens when there are no videos."""
        from nichepulse.trends.extraction.extractor import ExtractionTier, FormatExtractor

        vision, text, downloader = _vision(), _text(), _downloader()
        extractor = FormatExtractor(vision=vision, text=text, downloader=downloader)

        formats, tier = await extractor.extract_with_tier([], "hijab")

        assert tier == ExtractionTier.DEFAULT
        assert len(formats) == 3
        vision.complete.assert_not_awaited()
        text.complete.assert_not_awaited()
        downloader.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_image_cap(self):
        """Test at most max_images thumbnails are downloaded."""
        from nichepulse.trends.extraction.extractor import FormatExtractor

        vision, downloader = _vision(_reply("A", "B", "C")), _downloader()
        extractor = FormatExtractor(vision=vision, text=_text(), downloader=downloader, max_images=8)

        await extractor.extract(_videos(12), "food")

        assert downloader.download.await_count == 8
        _, images = vision.complete.await_args.args
        assert len(images) == 8

    @pytest.mark.asyncio
    async def test_pads_short_reply(self):
        """Test a one-format reply is padded to three with distinct names."""
        from nichepulse.trends.extraction.extractor import FormatExtractor

        extractor = FormatExtractor(vision=_vision(_reply("Before & After Transformation")), downloader=_downloader())

        formats = await extractor.extract(_videos(), "food")

        names = [f.format_name for f in formats]
        assert len(formats) == 3
        assert len(set(n.lower() for n in names)) == 3
        assert names[0] == "Before & After Transformation"
        assert [f.id for f in formats] == ["f1", "f2", "f3"]

    @pytest.mark.asyncio
    async def test_truncates_long_reply(self):
        """Test extra formats are dropped."""
        from nichepulse.trends.extraction.extractor import FormatExtractor

        extractor = FormatExtractor(vision=_vision(_reply("A", "B", "C", "D", "E")), downloader=_downloader())

        formats = await extractor.extract(_videos(), "food")

        assert [f.format_name for f in formats] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_falls_back_to_text_tier(self):
        """Test a vision failure moves on to the text tier."""
        from nichepulse.trends.extraction.extractor import ExtractionTier, FormatExtractor

        vision = _vision(side_effect=RuntimeError("rate limited"))
        text = _text(_reply("X", "Y", "Z"))
        extractor = FormatExtractor(vision=vision, text=text, downloader=_downloader())

        formats, tier = await extractor.extract_with_tier(_videos(), "food")

        assert tier == ExtractionTier.TEXT
        assert [f.format_name for f in formats] == ["X", "Y", "Z"]

    @pytest.mark.asyncio
    async def test_unconfigured_vision_skipped(self):
        """Test the vision tier is skipped without an OpenAI key."""
        from nichepulse.trends.extraction.extractor import ExtractionTier, FormatExtractor

        vision = _vision(api_key=None)
        downloader = _downloader()
        extractor = FormatExtractor(vision=vision, text=_text(_reply("X")), downloader=downloader)

        _, tier = await extractor.extract_with_tier(_videos(), "food")

        assert tier == ExtractionTier.TEXT
        vision.complete.assert_not_awaited()
        downloader.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_thumbnails_downloaded_skips_vision(self):
        """Test vision is not called when every download fails."""
        from nichepulse.trends.extraction.extractor import ExtractionTier, FormatExtractor

        vision = _vision(_reply("A"))
        extractor = FormatExtractor(vision=vision, text=_text(_reply("X")), downloader=_downloader(result=None))

        _, tier = await extractor.extract_with_tier(_videos(), "food")

        assert tier == ExtractionTier.TEXT
        vision.complete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unparsable_replies_use_defaults(self):
        """Test prose-only replies from both tiers end in the defaults."""
        from nichepulse.trends.extraction.extractor import ExtractionTier, FormatExtractor

        extractor = FormatExtractor(
            vision=_vision("I could not see the images, sorry."),
            text=_text("Formats: GRWM, storytime."),
            downloader=_downloader(),
        )

        formats, tier = await extractor.extract_with_tier(_videos(), "food")

        assert tier == ExtractionTier.DEFAULT
        assert [f.id for f in formats] == ["default-1", "default-2", "default-3"]


class TestCoerceFormats:
    """Tests for coerce_formats."""

    def test_engagement_and_list_coercion(self):
        """Test engagement values and howToApply strings are normalized."""
        from nichepulse.trends.extraction.extractor import coerce_formats
        from nichepulse.trends.models import EngagementLevel

        formats = coerce_formats([
            {"formatName": "A", "engagementPotential": "high", "howToApply": "Do the thing"},
            {"formatName": "B", "engagementPotential": "off the charts"},
        ], _videos())

        assert formats[0].engagement_potential == EngagementLevel.HIGH
        assert formats[0].how_to_apply == ["Do the thing"]
        assert formats[1].engagement_potential == EngagementLevel.MEDIUM

    def test_invalid_items_dropped(self):
        """Test non-objects and nameless objects are ignored."""
        from nichepulse.trends.extraction.extractor import coerce_formats

        formats = coerce_formats(["text", 3, {"formatName": ""}, {"formatName": "Kept"}], _videos())

        assert [f.format_name for f in formats] == ["Kept"]
        assert formats[0].id == "f1"

    def test_model_source_videos_ignored(self):
        """Test source videos suggested by the model are discarded."""
        from nichepulse.trends.extraction.extractor import coerce_formats

        formats = coerce_formats([{"formatName": "A", "sourceVideos": [{"id": "made-up"}]}], _videos())

        assert formats[0].source_videos == []

    def test_avg_stats_computed_when_missing(self):
        """Test missing avgStats are computed from the videos."""
        from nichepulse.trends.extraction.extractor import coerce_formats

        formats = coerce_formats([{"formatName": "A"}], _videos(3))

        # mean of 100K, 200K, 300K
        assert formats[0].avg_stats.views == "200.0K"
        assert formats[0].avg_stats.likes == "5.0K"


class TestDefaultFormats:
    """Tests for default_formats."""

    def test_three_defaults_with_niche_examples(self):
        """Test defaults use the niche's examples."""
        from nichepulse.trends.extraction.defaults import NICHE_EXAMPLES, default_formats

        formats = default_formats("hijab fashion")

        assert len(formats) == 3
        assert formats[0].how_to_apply == list(NICHE_EXAMPLES["hijab"][0])

    def test_unknown_niche(self):
        """Test unknown niches still get three formats."""
        from nichepulse.trends.extraction.defaults import default_formats

        formats = default_formats("woodworking")

        assert [f.format_name for f in formats] == [
            "Before & After Transformation", "Day in My Life", "Get Ready With Me (GRWM)",
        ]

"""
Unit tests for trend pipeline models.
"""

import pytest
from pydantic import ValidationError


class TestFilteredVideo:
    """Tests for the FilteredVideo model."""

    def test_camel_case_serialization(self):
        """Test the API payload uses camelCase keys."""
        from nichepulse.trends.models import FilteredVideo

        video = FilteredVideo(id="1", views=60_000, cover_url="https://x/y.jpg", create_time=123)
        payload = video.to_api()

        assert payload["coverUrl"] == "https://x/y.jpg"
        assert payload["createTime"] == 123
        assert payload["platform"] == "tiktok"

    def test_populate_by_field_name_or_alias(self):
        """Test both snake_case and camelCase input are accepted."""
        from nichepulse.trends.models import FilteredVideo

        assert FilteredVideo(id="1", coverUrl="a").cover_url == "a"
        assert FilteredVideo(id="1", cover_url="a").cover_url == "a"

    def test_negative_counts_rejected(self):
        """Test counts cannot be negative."""
        from nichepulse.trends.models import FilteredVideo

        with pytest.raises(ValidationError):
            FilteredVideo(id="1", views=-1)

    def test_engagement_rate(self):
        """Test engagement rate with and without views."""
        from nichepulse.trends.models import FilteredVideo

        assert FilteredVideo(id="1", views=1000, likes=50, comments=30, shares=20).engagement_rate == 0.1
        assert FilteredVideo(id="1", views=0, likes=5).engagement_rate == 5


class TestTrendingFormat:
    """Tests for the TrendingFormat model."""

    def test_defaults_and_serialization(self):
        """Test optional fields default and serialize with aliases."""
        from nichepulse.trends.models import TrendingFormat

        payload = TrendingFormat(id="f1", format_name="GRWM").to_api()

        assert payload["formatName"] == "GRWM"
        assert payload["engagementPotential"] == "Medium"
        assert payload["avgStats"] == {"views": "N/A", "likes": "N/A", "shares": "N/A"}
        assert payload["howToApply"] == []
        assert payload["sourceVideos"] == []

    def test_at_most_three_source_videos(self):
        """Test more than three source videos are rejected."""
        from nichepulse.trends.models import SourceVideo, TrendingFormat

        sources = [SourceVideo(id=str(i)) for i in range(4)]
        with pytest.raises(ValidationError):
            TrendingFormat(id="f1", format_name="GRWM", source_videos=sources)


class TestFetchDebugInfo:
    """Tests for fetch diagnostics."""

    def test_record_rejection(self):
        """Test rejection counters increment by reason."""
        from nichepulse.trends.models import FetchDebugInfo

        debug = FetchDebugInfo()
        debug.rejected.record("too_old")
        debug.rejected.record("too_old")
        debug.rejected.record("duplicate")

        assert debug.rejected.too_old == 2
        assert debug.rejected.duplicate == 1

    def test_api_payload(self):
        """Test the debug payload keys."""
        from nichepulse.trends.models import FetchDebugInfo

        payload = FetchDebugInfo(errors=["boom"], passes=2).to_api()

        assert payload["errors"] == ["boom"]
        assert payload["passes"] == 2
        assert payload["hashtagsTried"] == []
        assert payload["rejected"]["belowMinViews"] == 0


class TestFormatViewCount:
    """Tests for format_view_count."""

    @pytest.mark.parametrize("count,expected", [
        (0, "0"),
        (999, "999"),
        (1_000, "1.0K"),
        (850_000, "850.0K"),
        (1_200_000, "1.2M"),
        (3_400_000_000, "3.4B"),
    ])
    def test_format(self, count, expected):
        """Test compact display strings."""
        from nichepulse.trends.formatting import format_view_count

        assert format_view_count(count) == expected

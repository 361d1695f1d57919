"""
Unit tests for content filters.
"""

import pytest


NOW = 1_750_000_000


def _video(views=100_000, age_days=1, **kwargs):
    from nichepulse.trends.models import FilteredVideo

    return FilteredVideo(id="v1", views=views, create_time=int(NOW - age_days * 86_400), **kwargs)


class TestIsContentAppropriate:
    """Tests for is_content_appropriate."""

    def test_clean_description_accepted(self):
        """Test ordinary captions pass."""
        from nichepulse.trends.filters import is_content_appropriate

        assert is_content_appropriate("Three easy iftar recipes for busy weeknights")

    def test_deny_word_rejected(self):
        """Test a deny-listed word is rejected regardless of case."""
        from nichepulse.trends.filters import is_content_appropriate

        assert not is_content_appropriate("my xanax story")
        assert not is_content_appropriate("My XANAX story")

    def test_substring_inside_longer_word_rejected(self):
        """Test containment matching also catches deny-words inside other tokens."""
        from nichepulse.trends.filters import is_content_appropriate

        assert not is_content_appropriate("Order #14205 arrived")

    @pytest.mark.parametrize("description", ["", None])
    def test_empty_description_accepted(self, description):
        """Test empty descriptions are appropriate."""
        from nichepulse.trends.filters import is_content_appropriate

        assert is_content_appropriate(description)


class TestViewWindow:
    """Tests for the ViewWindow bounds."""

    def test_defaults(self):
        """Test the default thresholds."""
        from nichepulse.trends.filters import ViewWindow

        window = ViewWindow()

        assert window.min_views == 50_000
        assert window.max_views == 10_000_000
        assert window.max_age_days == 45

    def test_bounds_are_inclusive(self):
        """Test exactly min and exactly max views pass."""
        from nichepulse.trends.filters import MAX_VIEWS, MIN_VIEWS, ViewWindow

        window = ViewWindow()

        assert window.check(_video(views=MIN_VIEWS), NOW) is None
        assert window.check(_video(views=MAX_VIEWS), NOW) is None

    def test_below_min_views(self):
        """Test one view under the minimum is rejected."""
        from nichepulse.trends.filters import MIN_VIEWS, ViewWindow

        assert ViewWindow().check(_video(views=MIN_VIEWS - 1), NOW) == "below_min_views"

    def test_above_max_views(self):
        """Test one view over the maximum is rejected."""
        from nichepulse.trends.filters import MAX_VIEWS, ViewWindow

        assert ViewWindow().check(_video(views=MAX_VIEWS + 1), NOW) == "above_max_views"

    def test_too_old(self):
        """Test videos older than the cutoff are rejected."""
        from nichepulse.trends.filters import ViewWindow

        assert ViewWindow().check(_video(age_days=46), NOW) == "too_old"

    def test_exactly_at_cutoff_accepted(self):
        """Test a video created exactly at the cutoff passes."""
        from nichepulse.trends.filters import ViewWindow

        window = ViewWindow()

        assert window.check(_video(age_days=45), NOW) is None
        assert window.cutoff(NOW) == NOW - 45 * 86_400

    def test_custom_window(self):
        """Test the Instagram-style window."""
        from nichepulse.trends.filters import ViewWindow

        window = ViewWindow(min_views=10_000, max_age_days=30)

        assert window.check(_video(views=10_000, age_days=29), NOW) is None
        assert window.check(_video(views=10_000, age_days=31), NOW) == "too_old"

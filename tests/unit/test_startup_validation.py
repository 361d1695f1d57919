"""
Unit tests for startup validation.
"""

import pytest
from unittest.mock import patch, MagicMock


def _settings(**overrides):
    from nichepulse.config.settings import Settings

    values = {
        "rapidapi_key": None,
        "instagram_rapidapi_key": None,
        "openai_api_key": None,
        "gemini_api_key": None,
        "deepgram_api_key": None,
        "supabase_url": None,
        "supabase_anon_key": None,
        "supabase_service_key": None,
        "stripe_secret_key": None,
        "stripe_webhook_secret": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class TestRapidApiValidation:
    """Tests for the scraper key checks."""

    def test_missing_key(self):
        """Test the TikTok scraper is unavailable without a key."""
        from nichepulse.config.startup_validation import validate_rapidapi, ServiceStatus

        result = validate_rapidapi(_settings())
        assert result.status == ServiceStatus.UNAVAILABLE
        assert "RAPIDAPI_KEY" in result.message

    def test_key_present(self):
        """Test the TikTok scraper is available with a key."""
        from nichepulse.config.startup_validation import validate_rapidapi, ServiceStatus

        assert validate_rapidapi(_settings(rapidapi_key="k")).status == ServiceStatus.AVAILABLE

    def test_instagram_falls_back(self):
        """Test Instagram is degraded when only RAPIDAPI_KEY is set."""
        from nichepulse.config.startup_validation import validate_instagram_api, ServiceStatus

        result = validate_instagram_api(_settings(rapidapi_key="k"))
        assert result.status == ServiceStatus.DEGRADED
        assert result.details == {"fallback": "RAPIDAPI_KEY"}

    def test_instagram_without_any_key(self):
        """Test Instagram is unavailable without any key."""
        from nichepulse.config.startup_validation import validate_instagram_api, ServiceStatus

        result = validate_instagram_api(_settings())
        assert result.status == ServiceStatus.UNAVAILABLE
        assert not result.required


class TestLlmValidation:
    """Tests for OpenAI and Gemini validation."""

    def test_openai_missing(self):
        """Test the vision tier is degraded without an OpenAI key."""
        from nichepulse.config.startup_validation import validate_openai, ServiceStatus

        assert validate_openai(_settings()).status == ServiceStatus.DEGRADED

    def test_gemini_missing_api_key(self):
        """Test the text tier is degraded without an API key."""
        from nichepulse.config.startup_validation import validate_gemini_api, ServiceStatus

        result = validate_gemini_api(_settings())
        assert result.status == ServiceStatus.DEGRADED
        assert "GEMINI_API_KEY" in result.message

    def test_gemini_short_api_key(self):
        """Test a short API key is reported as invalid."""
        from nichepulse.config.startup_validation import validate_gemini_api, ServiceStatus

        result = validate_gemini_api(_settings(gemini_api_key="short"))
        assert result.status == ServiceStatus.DEGRADED
        assert "invalid" in result.message.lower()

    def test_gemini_valid_api_key(self):
        """Test validation passes with a valid API key."""
        from nichepulse.config.startup_validation import validate_gemini_api, ServiceStatus

        with patch("google.genai.Client") as mock_client:
            mock_client.return_value = MagicMock()
            result = validate_gemini_api(_settings(gemini_api_key="a" * 40))
            assert result.status == ServiceStatus.AVAILABLE


class TestDeepgramValidation:
    """Tests for the transcription key check."""

    def test_missing_key(self):
        """Test spoken hooks are degraded without a key."""
        from nichepulse.config.startup_validation import validate_deepgram, ServiceStatus

        result = validate_deepgram(_settings())
        assert result.status == ServiceStatus.DEGRADED
        assert "DEEPGRAM_API_KEY" in result.message
        assert not result.required

    def test_key_present(self):
        """Test the configured model is reported."""
        from nichepulse.config.startup_validation import validate_deepgram, ServiceStatus

        result = validate_deepgram(_settings(deepgram_api_key="dg-key"))
        assert result.status == ServiceStatus.AVAILABLE
        assert "nova-2" in result.message


class TestSupabaseValidation:
    """Tests for Supabase validation."""

    def test_missing_credentials(self):
        """Test all missing variables are listed."""
        from nichepulse.config.startup_validation import validate_supabase, ServiceStatus

        result = validate_supabase(_settings())
        assert result.status == ServiceStatus.UNAVAILABLE
        assert result.details["missing"] == ["SUPABASE_URL", "SUPABASE_SERVICE_KEY", "SUPABASE_ANON_KEY"]

    def test_partial_credentials(self):
        """Test partial credentials are still unavailable."""
        from nichepulse.config.startup_validation import validate_supabase, ServiceStatus

        result = validate_supabase(_settings(supabase_url="https://example.supabase.co"))
        assert result.status == ServiceStatus.UNAVAILABLE
        assert "SUPABASE_URL" not in result.details["missing"]

    def test_valid_credentials(self):
        """Test validation passes with all credentials."""
        from nichepulse.config.startup_validation import validate_supabase, ServiceStatus

        settings = _settings(
            supabase_url="https://example.supabase.co",
            supabase_service_key="service-key",
            supabase_anon_key="anon-key",
        )
        with patch("supabase.create_client") as mock_client:
            mock_client.return_value = MagicMock()
            result = validate_supabase(settings)
            assert result.status == ServiceStatus.AVAILABLE


class TestStripeValidation:
    """Tests for Stripe validation."""

    def test_missing_stripe_key(self):
        """Test validation degrades without Stripe key."""
        from nichepulse.config.startup_validation import validate_stripe, ServiceStatus

        result = validate_stripe(_settings())
        assert result.status == ServiceStatus.DEGRADED
        assert result.details == {"mode": "demo"}

    def test_invalid_stripe_key_format(self):
        """Test validation degrades with invalid key format."""
        from nichepulse.config.startup_validation import validate_stripe, ServiceStatus

        result = validate_stripe(_settings(stripe_secret_key="invalid_key_format_long_enough"))
        assert result.status == ServiceStatus.DEGRADED
        assert "invalid" in result.message.lower()

    @pytest.mark.parametrize("prefix,mode", [("sk_test_", "test"), ("sk_live_", "live")])
    def test_valid_keys(self, prefix, mode):
        """Test test and live keys are recognized."""
        from nichepulse.config.startup_validation import validate_stripe, ServiceStatus

        result = validate_stripe(_settings(stripe_secret_key=prefix + "a" * 40))
        assert result.status == ServiceStatus.AVAILABLE
        assert result.details["mode"] == mode

    def test_webhook_warning(self):
        """Test a missing webhook secret is called out."""
        from nichepulse.config.startup_validation import validate_stripe

        result = validate_stripe(_settings(stripe_secret_key="sk_test_" + "a" * 40))
        assert "STRIPE_WEBHOOK_SECRET" in result.message
        assert result.details["webhooks_enabled"] is False


class TestRunStartupValidation:
    """Tests for the full startup validation run."""

    def test_nothing_configured_is_still_valid(self):
        """Test optional services never fail startup by default."""
        from nichepulse.config.startup_validation import run_startup_validation

        validation = run_startup_validation(_settings(), print_summary=False)

        assert validation.is_valid
        assert validation.errors == []
        assert len(validation.services) == 7

    def test_required_rapidapi(self):
        """Test a required scraper key fails validation when missing."""
        from nichepulse.config.startup_validation import run_startup_validation

        validation = run_startup_validation(_settings(), require_rapidapi=True, print_summary=False)

        assert not validation.is_valid
        assert any("RAPIDAPI_KEY" in e for e in validation.errors)

    def test_exit_on_failure(self):
        """Test the process exits when asked to."""
        from nichepulse.config.startup_validation import run_startup_validation

        with pytest.raises(SystemExit):
            run_startup_validation(_settings(), require_rapidapi=True, exit_on_failure=True, print_summary=False)

    def test_print_summary(self, capsys):
        """Test the summary is printed."""
        from nichepulse.config.startup_validation import run_startup_validation

        run_startup_validation(_settings(rapidapi_key="k"))

        out = capsys.readouterr().out
        assert "NichePulse Startup Validation" in out
        assert "TikTok Scraper" in out

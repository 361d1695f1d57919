"""
Startup Validation Module for NichePulse.

Checks credentials for every outside service when the app starts and
reports what will run in degraded mode. Nothing here makes network calls.
"""

import sys
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any
from enum import Enum

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ServiceStatus(Enum):
    """Status of a validated service."""
    AVAILABLE = "available"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"


@dataclass
class ValidationResult:
    """Result of a single validation check."""
    service: str
    status: ServiceStatus
    message: str
    required: bool = True
    details: Optional[Dict[str, Any]] = None


@dataclass
class StartupValidation:
    """Complete startup validation results."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    services: Dict[str, ValidationResult] = field(default_factory=dict)

    def add_result(self, result: ValidationResult):
        """Add a validation result."""
        self.services[result.service] = result

        if result.status == ServiceStatus.UNAVAILABLE:
            if result.required:
                self.is_valid = False
                self.errors.append(f"[{result.service}] {result.message}")
            else:
                self.warnings.append(f"[{result.service}] {result.message}")
        elif result.status == ServiceStatus.DEGRADED:
            self.warnings.append(f"[{result.service}] {result.message}")

    def print_summary(self):
        """Print validation summary."""
        print("\n" + "=" * 60)
        print("🔍 NichePulse Startup Validation")
        print("=" * 60)

        for service, result in self.services.items():
            icon = {
                ServiceStatus.AVAILABLE: "✅",
                ServiceStatus.DEGRADED: "⚠️",
                ServiceStatus.UNAVAILABLE: "❌"
            }[result.status]
            print(f"{icon} {service}: {result.status.value}")
            if result.status != ServiceStatus.AVAILABLE:
                print(f"   → {result.message}")

        print("-" * 60)

        if self.errors:
            print("\n❌ CRITICAL ERRORS (must fix to start):")
            for error in self.errors:
                print(f"   • {error}")

        if self.warnings:
            print("\n⚠️  WARNINGS (running in degraded mode):")
            for warning in self.warnings:
                print(f"   • {warning}")

        if self.is_valid:
            print("\n✅ Validation PASSED - Application can start")
        else:
            print("\n❌ Validation FAILED - Fix errors above before starting")

        print("=" * 60 + "\n")


def validate_rapidapi(settings: Settings) -> ValidationResult:
    """Validate the TikTok scraper key."""
    if not settings.rapidapi_key:
        return ValidationResult(
            service="TikTok Scraper",
            status=ServiceStatus.UNAVAILABLE,
            message="RAPIDAPI_KEY not set. Trending format searches will return no videos.",
            required=True
        )

    return ValidationResult(
        service="TikTok Scraper",
        status=ServiceStatus.AVAILABLE,
        message=f"RapidAPI configured for {settings.tiktok_api_host}"
    )


def validate_instagram_api(settings: Settings) -> ValidationResult:
    """Validate the Instagram scraper key (falls back to RAPIDAPI_KEY)."""
    if settings.instagram_rapidapi_key:
        return ValidationResult(
            service="Instagram Scraper",
            status=ServiceStatus.AVAILABLE,
            message="INSTAGRAM_RAPIDAPI_KEY configured"
        )

    if settings.rapidapi_key:
        return ValidationResult(
            service="Instagram Scraper",
            status=ServiceStatus.DEGRADED,
            message="INSTAGRAM_RAPIDAPI_KEY not set. Using RAPIDAPI_KEY for Instagram requests.",
            required=False,
            details={"fallback": "RAPIDAPI_KEY"}
        )

    return ValidationResult(
        service="Instagram Scraper",
        status=ServiceStatus.UNAVAILABLE,
        message="No RapidAPI key set. Instagram reels are disabled.",
        required=False
    )


def validate_openai(settings: Settings) -> ValidationResult:
    """Validate OpenAI API key (vision tier)."""
    if not settings.openai_api_key:
        return ValidationResult(
            service="OpenAI Vision",
            status=ServiceStatus.DEGRADED,
            message="OPENAI_API_KEY not set. Thumbnail analysis disabled, using text extraction.",
            required=False
        )

    return ValidationResult(
        service="OpenAI Vision",
        status=ServiceStatus.AVAILABLE,
        message=f"OpenAI configured ({settings.openai_vision_model})"
    )


def validate_deepgram(settings: Settings) -> ValidationResult:
    """Validate Deepgram API key (spoken hooks)."""
    if not settings.deepgram_api_key:
        return ValidationResult(
            service="Deepgram",
            status=ServiceStatus.DEGRADED,
            message="DEEPGRAM_API_KEY not set. Spoken hooks disabled, using caption hooks.",
            required=False
        )

    return ValidationResult(
        service="Deepgram",
        status=ServiceStatus.AVAILABLE,
        message=f"Deepgram configured ({settings.deepgram_model})"
    )


def validate_gemini_api(settings: Settings) -> ValidationResult:
    """Validate Gemini API key (text tier)."""
    api_key = settings.gemini_api_key

    if not api_key:
        return ValidationResult(
            service="Gemini API",
            status=ServiceStatus.DEGRADED,
            message="GEMINI_API_KEY not set. Text extraction disabled.",
            required=False
        )

    if len(api_key) < 20:
        return ValidationResult(
            service="Gemini API",
            status=ServiceStatus.DEGRADED,
            message="GEMINI_API_KEY appears to be invalid (too short).",
            required=False
        )

    try:
        from google import genai
        genai.Client(api_key=api_key)
        return ValidationResult(
            service="Gemini API",
            status=ServiceStatus.AVAILABLE,
            message=f"Gemini configured (models: {', '.join(settings.gemini_models)})"
        )
    except Exception as e:
        return ValidationResult(
            service="Gemini API",
            status=ServiceStatus.DEGRADED,
            message=f"Failed to initialize Gemini client: {e}",
            required=False
        )


def validate_supabase(settings: Settings) -> ValidationResult:
    """Validate Supabase credentials (auth and usage tracking)."""
    missing = []
    if not settings.supabase_url:
        missing.append("SUPABASE_URL")
    if not settings.supabase_service_key:
        missing.append("SUPABASE_SERVICE_KEY")
    if not settings.supabase_anon_key:
        missing.append("SUPABASE_ANON_KEY")

    if missing:
        return ValidationResult(
            service="Supabase",
            status=ServiceStatus.UNAVAILABLE,
            message=f"Missing environment variables: {', '.join(missing)}. "
                    "Login and usage tracking are disabled.",
            required=False,
            details={"missing": missing}
        )

    try:
        from supabase import create_client
        create_client(settings.supabase_url, settings.supabase_service_key)
        return ValidationResult(
            service="Supabase",
            status=ServiceStatus.AVAILABLE,
            message="Supabase connected successfully"
        )
    except Exception as e:
        return ValidationResult(
            service="Supabase",
            status=ServiceStatus.UNAVAILABLE,
            message=f"Failed to connect to Supabase: {e}",
            required=False
        )


def validate_stripe(settings: Settings) -> ValidationResult:
    """Validate Stripe API keys for billing."""
    secret_key = settings.stripe_secret_key

    if not secret_key:
        return ValidationResult(
            service="Stripe Billing",
            status=ServiceStatus.DEGRADED,
            message="STRIPE_SECRET_KEY not set. Payments disabled (free plan only).",
            required=False,
            details={"mode": "demo"}
        )

    if len(secret_key) < 20 or not secret_key.startswith(("sk_live_", "sk_test_")):
        return ValidationResult(
            service="Stripe Billing",
            status=ServiceStatus.DEGRADED,
            message="STRIPE_SECRET_KEY appears invalid. Expected format: sk_live_* or sk_test_*",
            required=False
        )

    mode = "live" if secret_key.startswith("sk_live_") else "test"
    message = f"Stripe configured in {mode} mode"
    if not settings.stripe_webhook_secret:
        message += ". Warnings: STRIPE_WEBHOOK_SECRET not set - webhooks disabled"

    return ValidationResult(
        service="Stripe Billing",
        status=ServiceStatus.AVAILABLE,
        message=message,
        details={"mode": mode, "webhooks_enabled": bool(settings.stripe_webhook_secret)}
    )


def run_startup_validation(
    settings: Optional[Settings] = None,
    require_rapidapi: bool = False,
    require_supabase: bool = False,
    require_stripe: bool = False,
    exit_on_failure: bool = False,
    print_summary: bool = True
) -> StartupValidation:
    """
    Run complete startup validation.

    Args:
        settings: Settings to check (defaults to get_settings())
        require_rapidapi: Treat a missing TikTok key as fatal
        require_supabase: Treat missing Supabase as fatal
        require_stripe: Treat missing Stripe as fatal
        exit_on_failure: Exit process if validation fails
        print_summary: Print validation summary

    Returns:
        StartupValidation with all results
    """
    settings = settings or get_settings()
    validation = StartupValidation()

    rapidapi_result = validate_rapidapi(settings)
    rapidapi_result.required = require_rapidapi
    validation.add_result(rapidapi_result)

    validation.add_result(validate_instagram_api(settings))
    validation.add_result(validate_openai(settings))
    validation.add_result(validate_gemini_api(settings))
    validation.add_result(validate_deepgram(settings))

    supabase_result = validate_supabase(settings)
    supabase_result.required = require_supabase
    validation.add_result(supabase_result)

    stripe_result = validate_stripe(settings)
    stripe_result.required = require_stripe
    validation.add_result(stripe_result)

    if print_summary:
        validation.print_summary()

    if exit_on_failure and not validation.is_valid:
        logger.error("Startup validation failed. Exiting.")
        sys.exit(1)

    return validation

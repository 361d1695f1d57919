"""
Database Service for NichePulse.

Uses Supabase for:
- User profiles (including Stripe subscription fields)
- Monthly usage tracking
"""

import logging
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from supabase import create_client, Client

from nichepulse.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class UsageTrackingError(Exception):
    """Raised when usage counters cannot be read or written."""
    pass


# Supabase client singleton
_supabase_client: Optional[Client] = None


def get_supabase(settings: Optional[Settings] = None) -> Client:
    """Get or create the service-role Supabase client."""
    global _supabase_client

    if _supabase_client is None:
        settings = settings or get_settings()
        url = settings.supabase_url
        key = settings.supabase_service_key

        if not url or not key:
            raise UsageTrackingError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")

        _supabase_client = create_client(url, key)
        logger.info(f"Connected to Supabase: {url}")

    return _supabase_client


# ============== Models ==============

class UserProfile(BaseModel):
    """User profile stored in the `profiles` table."""
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    stripe_price_id: Optional[str] = None
    stripe_current_period_end: Optional[datetime] = None


class UsageTracking(BaseModel):
    """Per-user monthly counters stored in the `usage_tracking` table."""
    user_id: str
    current_month: int
    current_year: int
    format_searches_this_month: int = 0


# ============== Database Operations ==============

class Database:
    """Database operations for NichePulse."""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    # === User Profiles ===

    async def get_user_profile(self, user_id: str) -> Optional[UserProfile]:
        """Get user profile by ID."""
        try:
            result = self.client.table("profiles").select("*").eq("id", user_id).execute()
            if result.data:
                return UserProfile(**result.data[0])
        except Exception as e:
            logger.error(f"Error getting user profile: {e}")
        return None

    async def create_user_profile(self, user_id: str, email: str, full_name: Optional[str] = None) -> bool:
        """Create a profile row if one does not exist yet."""
        try:
            existing = self.client.table("profiles").select("id").eq("id", user_id).execute()
            if not existing.data:
                self.client.table("profiles").insert({
                    "id": user_id,
                    "email": email,
                    "full_name": full_name,
                    "created_at": datetime.now().isoformat(),
                }).execute()
                logger.info(f"Created profile for user {user_id}")
            return True
        except Exception as e:
            logger.error(f"Create profile error: {e}")
        return False

    async def update_user_profile(self, user_id: str, updates: dict) -> bool:
        """Update user profile."""
        try:
            self.client.table("profiles").update(updates).eq("id", user_id).execute()
            return True
        except Exception as e:
            logger.error(f"Error updating user profile: {e}")
        return False

    async def update_profile_by_customer(self, customer_id: str, updates: dict) -> bool:
        """Update the profile owning a Stripe customer id."""
        try:
            self.client.table("profiles").update(updates).eq("stripe_customer_id", customer_id).execute()
            return True
        except Exception as e:
            logger.error(f"Error updating profile for customer {customer_id}: {e}")
        return False

    # === Usage Tracking ===

    async def get_usage_tracking(self, user_id: str) -> Optional[UsageTracking]:
        try:
            result = self.client.table("usage_tracking").select("*").eq("user_id", user_id).execute()
        except Exception as e:
            raise UsageTrackingError(f"Could not read usage for {user_id}: {e}") from e
        if result.data:
            return UsageTracking(**result.data[0])
        return None

    async def save_usage_tracking(self, tracking: UsageTracking) -> UsageTracking:
        """Insert or update a user's counters."""
        try:
            self.client.table("usage_tracking").upsert(
                tracking.model_dump(), on_conflict="user_id"
            ).execute()
        except Exception as e:
            raise UsageTrackingError(f"Could not save usage for {tracking.user_id}: {e}") from e
        return tracking

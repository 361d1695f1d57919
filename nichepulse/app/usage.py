"""
Monthly usage quotas for trending format searches.

Counters live in the usage_tracking table and reset whenever the stored
month/year differs from the current one.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel

from nichepulse.app.billing import resolve_plan
from nichepulse.app.database import Database, UsageTracking
from nichepulse.config.settings import Settings

logger = logging.getLogger(__name__)

UNLIMITED = -1

QUOTA_MESSAGE = "Monthly Trending Format Search limit reached. Upgrade for more!"


class PlanLimits(BaseModel):
    format_refreshes_per_month: int


PLAN_LIMITS = {
    "free": PlanLimits(format_refreshes_per_month=2),
    "starter": PlanLimits(format_refreshes_per_month=10),
    "pro": PlanLimits(format_refreshes_per_month=UNLIMITED),
}


class UsageStatus(BaseModel):
    """Whether a user may run another search, and how many remain (-1 = unlimited)."""
    allowed: bool
    remaining: int
    message: Optional[str] = None


def check_quota(plan: str, used: int) -> UsageStatus:
    """Pure quota decision for a plan and the searches used this month."""
    limit = PLAN_LIMITS.get(plan, PLAN_LIMITS["free"]).format_refreshes_per_month
    if limit == UNLIMITED:
        return UsageStatus(allowed=True, remaining=UNLIMITED)

    remaining = limit - used
    return UsageStatus(
        allowed=remaining > 0,
        remaining=remaining,
        message=QUOTA_MESSAGE if remaining <= 0 else None,
    )


class UsageService:
    """
    Quota checks and usage recording backed by Supabase.

    Raises UsageTrackingError when the counters cannot be read or written.
    """

    def __init__(self, db: Database, settings: Optional[Settings] = None):
        self.db = db
        self.settings = settings

    async def get_or_create_tracking(self, user_id: str, now: Optional[datetime] = None) -> UsageTracking:
        """Load the user's counters, creating or resetting them for the current month."""
        now = now or datetime.now(timezone.utc)
        tracking = await self.db.get_usage_tracking(user_id)

        if tracking is None:
            tracking = UsageTracking(user_id=user_id, current_month=now.month, current_year=now.year)
            return await self.db.save_usage_tracking(tracking)

        if tracking.current_month != now.month or tracking.current_year != now.year:
            logger.info(f"Resetting monthly usage for user {user_id}")
            tracking = UsageTracking(user_id=user_id, current_month=now.month, current_year=now.year)
            return await self.db.save_usage_tracking(tracking)

        return tracking

    async def get_plan(self, user_id: str) -> str:
        profile = await self.db.get_user_profile(user_id)
        if profile is None:
            return "free"
        return resolve_plan(profile.stripe_price_id, profile.stripe_current_period_end, self.settings)

    async def can_use_format_search(self, user_id: str) -> UsageStatus:
        tracking = await self.get_or_create_tracking(user_id)
        plan = await self.get_plan(user_id)
        return check_quota(plan, tracking.format_searches_this_month)

    async def record_format_search_usage(self, user_id: str) -> None:
        tracking = await self.get_or_create_tracking(user_id)
        tracking.format_searches_this_month += 1
        await self.db.save_usage_tracking(tracking)

    async def get_usage_summary(self, user_id: str) -> dict:
        tracking = await self.get_or_create_tracking(user_id)
        plan = await self.get_plan(user_id)
        status = check_quota(plan, tracking.format_searches_this_month)
        return {
            "plan": plan,
            "month": tracking.current_month,
            "year": tracking.current_year,
            "formatSearchesThisMonth": tracking.format_searches_this_month,
            "formatSearchLimit": PLAN_LIMITS[plan].format_refreshes_per_month,
            "remaining": status.remaining,
            "allowed": status.allowed,
        }

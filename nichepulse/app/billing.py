"""
Stripe Billing Integration for NichePulse.

Flow:
1. User picks a plan (starter or pro) and an interval (month or year)
2. We create a Stripe Checkout session in subscription mode
3. User pays on Stripe's hosted page
4. Stripe sends webhooks; we copy the subscription fields onto the profile
5. The plan is resolved from those fields on every quota check
"""

import time
import logging
from datetime import datetime, timezone
from typing import Optional

import stripe
from pydantic import BaseModel

from nichepulse.config.settings import Settings

logger = logging.getLogger(__name__)

# A subscription stays active for one day past its period end
GRACE_PERIOD_SECONDS = 86_400

PLAN_CATALOG = {
    "free": {
        "name": "Free",
        "description": "Try trending formats with a couple of searches a month",
        "monthly_price_cents": 0,
        "yearly_price_cents": 0,
    },
    "starter": {
        "name": "Starter",
        "description": "For creators posting every week",
        "monthly_price_cents": 1900,
        "yearly_price_cents": 19000,
    },
    "pro": {
        "name": "Pro",
        "description": "Unlimited trending format searches",
        "monthly_price_cents": 4900,
        "yearly_price_cents": 49000,
    },
}


class StripeNotConfiguredError(Exception):
    """Raised when Stripe is not properly configured."""
    pass


class CheckoutSession(BaseModel):
    """Checkout session data."""
    session_id: str
    checkout_url: str
    plan: str
    interval: str


def format_price(cents: int) -> str:
    """Format cents as dollars."""
    return f"${cents / 100:.0f}"


def price_ids(settings: Settings) -> dict:
    """Stripe price ids per plan and interval; None when not configured."""
    return {
        "starter": {
            "month": settings.stripe_starter_monthly_price_id,
            "year": settings.stripe_starter_yearly_price_id,
        },
        "pro": {
            "month": settings.stripe_pro_monthly_price_id,
            "year": settings.stripe_pro_yearly_price_id,
        },
    }


def plan_for_price(price_id: str, settings: Optional[Settings] = None) -> str:
    """
    Map a Stripe price id to a plan.

    Configured price ids win; otherwise an id mentioning "pro" or "business"
    is pro and anything else is starter.
    """
    if settings is not None:
        for plan, intervals in price_ids(settings).items():
            if price_id in intervals.values():
                return plan
    lowered = price_id.lower()
    if "pro" in lowered or "business" in lowered:
        return "pro"
    return "starter"


def is_paid(
    price_id: Optional[str],
    current_period_end: Optional[datetime],
    now: Optional[float] = None,
) -> bool:
    """A subscription is paid while period end plus the grace day is in the future."""
    if not price_id or current_period_end is None:
        return False
    if current_period_end.tzinfo is None:
        current_period_end = current_period_end.replace(tzinfo=timezone.utc)
    now = time.time() if now is None else now
    return current_period_end.timestamp() + GRACE_PERIOD_SECONDS > now


def resolve_plan(
    price_id: Optional[str],
    current_period_end: Optional[datetime],
    settings: Optional[Settings] = None,
    now: Optional[float] = None,
) -> str:
    """Resolve the active plan name: free, starter or pro."""
    if not is_paid(price_id, current_period_end, now):
        return "free"
    return plan_for_price(price_id, settings)


def require_stripe(settings: Settings):
    """Configure the Stripe SDK or raise if no secret key is set."""
    if not settings.stripe_secret_key:
        raise StripeNotConfiguredError(
            "Stripe is not configured. Set STRIPE_SECRET_KEY environment variable."
        )
    stripe.api_key = settings.stripe_secret_key


def create_subscription_checkout(
    settings: Settings,
    plan: str,
    interval: str,
    user_id: str,
    email: Optional[str],
    success_url: str,
    cancel_url: str,
) -> CheckoutSession:
    """
    Create a Stripe Checkout session for a subscription.

    Raises:
        StripeNotConfiguredError: No secret key
        ValueError: Unknown plan/interval or no price id configured for it
    """
    require_stripe(settings)

    if plan not in ("starter", "pro"):
        raise ValueError(f"Invalid plan: {plan}")
    if interval not in ("month", "year"):
        raise ValueError(f"Invalid interval: {interval}")

    price_id = price_ids(settings)[plan][interval]
    if not price_id:
        raise ValueError(f"No Stripe price configured for {plan}/{interval}")

    session = stripe.checkout.Session.create(
        mode="subscription",
        line_items=[{"price": price_id, "quantity": 1}],
        success_url=success_url,
        cancel_url=cancel_url,
        client_reference_id=user_id,
        customer_email=email,
        metadata={"user_id": user_id, "plan": plan},
        subscription_data={"metadata": {"user_id": user_id}},
    )

    return CheckoutSession(
        session_id=session.id,
        checkout_url=session.url,
        plan=plan,
        interval=interval,
    )


def _subscription_updates(subscription) -> dict:
    """Profile fields taken from a Stripe subscription object."""
    item = subscription["items"]["data"][0]
    period_end = item.get("current_period_end") or subscription.get("current_period_end")
    updates = {
        "stripe_subscription_id": subscription["id"],
        "stripe_customer_id": subscription.get("customer"),
        "stripe_price_id": item["price"]["id"],
    }
    if period_end:
        updates["stripe_current_period_end"] = datetime.fromtimestamp(period_end, tz=timezone.utc).isoformat()
    return updates


def handle_webhook(payload: bytes, sig_header: str, webhook_secret: str) -> dict:
    """
    Verify a Stripe webhook and work out which profile fields change.

    Returns a dict with "event" and, for subscription events, "user_id" or
    "customer_id" plus "updates". A bad signature returns {"error": ...}.
    """
    try:
        event = stripe.Webhook.construct_event(payload, sig_header, webhook_secret)
    except stripe.SignatureVerificationError:
        return {"error": "Invalid signature"}

    event_type = event["type"]
    obj = event["data"]["object"]

    if event_type == "checkout.session.completed":
        user_id = obj.get("client_reference_id") or (obj.get("metadata") or {}).get("user_id")
        subscription = stripe.Subscription.retrieve(obj["subscription"])
        return {
            "event": "subscription_started",
            "user_id": user_id,
            "updates": _subscription_updates(subscription),
        }

    if event_type in ("customer.subscription.updated", "invoice.payment_succeeded"):
        if event_type == "invoice.payment_succeeded":
            if not obj.get("subscription"):
                return {"event": event_type}
            obj = stripe.Subscription.retrieve(obj["subscription"])
        return {
            "event": "subscription_updated",
            "customer_id": obj.get("customer"),
            "updates": _subscription_updates(obj),
        }

    if event_type == "customer.subscription.deleted":
        return {
            "event": "subscription_canceled",
            "customer_id": obj.get("customer"),
            "updates": {"stripe_price_id": None, "stripe_current_period_end": None},
        }

    return {"event": event_type}

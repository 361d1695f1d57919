"""
Stripe Billing Router for NichePulse.

Provides API endpoints for:
- Listing plans
- Creating subscription checkout sessions
- Handling webhooks
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Header
from pydantic import BaseModel, Field
from typing import Optional
import logging

from nichepulse.app.auth import AuthUser, require_auth
from nichepulse.app.billing import (
    PLAN_CATALOG,
    StripeNotConfiguredError,
    create_subscription_checkout,
    format_price,
    handle_webhook,
)
from nichepulse.app.dependencies import get_database
from nichepulse.app.database import Database
from nichepulse.app.usage import PLAN_LIMITS
from nichepulse.config.settings import Settings, get_settings
from nichepulse.utils.validation import validate_url

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing"])


class CheckoutRequest(BaseModel):
    """Request to create a subscription checkout session."""
    plan: str = Field(..., description="Plan: starter or pro")
    interval: str = Field("month", description="Billing interval: month or year")
    return_url: Optional[str] = Field(None, description="Base URL to return to after checkout")


class CheckoutResponse(BaseModel):
    """Response with checkout session details."""
    session_id: str
    checkout_url: str
    plan: str
    interval: str


@router.get("/plans")
async def get_available_plans(settings: Settings = Depends(get_settings)):
    """
    Get available pricing plans with their monthly search limits.
    """
    plans = {}
    for plan_id, plan_info in PLAN_CATALOG.items():
        plans[plan_id] = {
            "id": plan_id,
            "name": plan_info["name"],
            "description": plan_info["description"],
            "monthly_price_display": format_price(plan_info["monthly_price_cents"]),
            "yearly_price_display": format_price(plan_info["yearly_price_cents"]),
            "format_refreshes_per_month": PLAN_LIMITS[plan_id].format_refreshes_per_month,
        }

    return {"plans": plans, "stripe_configured": bool(settings.stripe_secret_key)}


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    request: CheckoutRequest,
    user: AuthUser = Depends(require_auth),
    settings: Settings = Depends(get_settings),
):
    """
    Create a Stripe Checkout session for a subscription.

    Raises:
        HTTPException: 400 for an invalid plan or return URL, 503 when
            Stripe is not configured
    """
    base_url = request.return_url or f"http://{settings.host}:{settings.port}"
    if not validate_url(base_url):
        raise HTTPException(status_code=400, detail="Invalid return_url")
    base_url = base_url.rstrip("/")

    try:
        session = create_subscription_checkout(
            settings,
            plan=request.plan,
            interval=request.interval,
            user_id=user.id,
            email=user.email,
            success_url=f"{base_url}/dashboard?checkout=success&session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{base_url}/pricing?checkout=canceled",
        )
    except StripeNotConfiguredError:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to create checkout session: {e}")
        raise HTTPException(status_code=500, detail="Failed to create payment session")

    logger.info(f"Created checkout session {session.session_id} for {user.id} ({request.plan}/{request.interval})")
    return CheckoutResponse(**session.model_dump())


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None, alias="Stripe-Signature"),
    settings: Settings = Depends(get_settings),
    db: Database = Depends(get_database),
):
    """
    Handle Stripe webhook events and sync subscription fields to the profile.

    Required header: Stripe-Signature
    """
    if not settings.stripe_webhook_secret:
        logger.warning("Webhook received but STRIPE_WEBHOOK_SECRET not configured")
        raise HTTPException(status_code=503, detail="Webhook endpoint not configured")

    if not stripe_signature:
        raise HTTPException(status_code=400, detail="Missing Stripe-Signature header")

    payload = await request.body()
    try:
        result = handle_webhook(payload, stripe_signature, settings.stripe_webhook_secret)
    except Exception as e:
        logger.error(f"Webhook processing failed: {e}")
        raise HTTPException(status_code=500, detail="Webhook processing failed")

    if "error" in result:
        logger.error(f"Webhook error: {result['error']}")
        raise HTTPException(status_code=400, detail=result["error"])

    updates = result.get("updates")
    if updates:
        if result.get("user_id"):
            await db.update_user_profile(result["user_id"], updates)
        elif result.get("customer_id"):
            await db.update_profile_by_customer(result["customer_id"], updates)
        logger.info(f"Applied {result['event']} to profile: {list(updates)}")

    return {"received": True, "event": result.get("event")}

from fastapi import APIRouter, Depends

from nichepulse.app.auth import AuthUser, require_auth
from nichepulse.app.dependencies import get_usage_service
from nichepulse.app.usage import UsageService

router = APIRouter(tags=["usage"])


@router.get("/usage")
async def get_usage(
    user: AuthUser = Depends(require_auth),
    usage: UsageService = Depends(get_usage_service),
):
    """Current month's trending format searches and plan limit."""
    summary = await usage.get_usage_summary(user.id)
    return {"success": True, "data": summary}

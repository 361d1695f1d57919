"""
Trending formats router.

GET /api/formats/trending runs the full pipeline for one niche and returns
{success, data?, error?, debug?}.
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from nichepulse.app.auth import AuthUser, require_auth
from nichepulse.app.database import UsageTrackingError
from nichepulse.app.dependencies import get_pipeline, get_usage_service
from nichepulse.app.usage import UsageService
from nichepulse.config.settings import Settings, get_settings
from nichepulse.trends.models import FetchDebugInfo, Platform
from nichepulse.trends.pipeline import PipelineResult, TrendingFormatsPipeline
from nichepulse.utils.validation import validate_niche

logger = logging.getLogger(__name__)

router = APIRouter(tags=["formats"])

FETCH_FAILED_ERROR = "Failed to fetch trending videos from TikTok API"
INSTAGRAM_FETCH_FAILED_ERROR = "Failed to fetch trending reels from Instagram API"
ZERO_VIDEOS_MESSAGE = "TikTok API returned 0 videos. Check RAPIDAPI_KEY and API subscription."
ZERO_REELS_MESSAGE = "Instagram API returned 0 reels. Check INSTAGRAM_RAPIDAPI_KEY and API subscription."


def _debug_payload(settings: Settings, errors: list[str], debug: FetchDebugInfo) -> dict:
    return {
        "errors": errors,
        "rapidApiKeyExists": bool(settings.rapidapi_key),
        "openaiKeyExists": bool(settings.openai_api_key),
        "geminiKeyExists": bool(settings.gemini_api_key),
        "apiDebugInfo": debug.to_api(),
    }


def _success_payload(result: PipelineResult) -> dict:
    return {
        "formats": [f.to_api() for f in result.formats],
        "hooks": [h.to_api() for h in result.hooks],
        "videosAnalyzed": len(result.videos),
        "niche": result.niche,
        "hashtags": result.hashtags,
        "platform": result.platform.value,
        "extractionTier": result.extraction_tier.value if result.extraction_tier else None,
        "generatedAt": result.generated_at.isoformat(),
        "source": "live",
    }


@router.get("/formats/trending")
async def get_trending_formats(
    niche: str = Query("", max_length=200, description="Creator niche, e.g. 'hijab fashion'"),
    platform: Platform = Query(Platform.TIKTOK),
    user: AuthUser = Depends(require_auth),
    usage: UsageService = Depends(get_usage_service),
    pipeline: TrendingFormatsPipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_settings),
):
    """
    Fetch trending videos for a niche and extract three formats from them.

    401 without a session, 429 when the monthly quota is used up, 500 with
    debug details when no videos could be fetched.
    """
    niche = validate_niche(niche)

    quota = await usage.can_use_format_search(user.id)
    if not quota.allowed:
        logger.info(f"User {user.id} hit the format search quota")
        return JSONResponse(
            status_code=429,
            content={"success": False, "error": quota.message, "remaining": quota.remaining},
        )

    logger.info(f"Trending formats requested by {user.id}: niche='{niche}', platform={platform.value}")

    try:
        result = await pipeline.run(niche, platform)
    except Exception as e:
        logger.exception(f"Trending formats pipeline failed: {e}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": str(e) or "Unexpected error while extracting formats",
                "debug": _debug_payload(settings, [str(e)], FetchDebugInfo()),
            },
        )

    if not result.has_videos:
        if platform == Platform.INSTAGRAM:
            errors = [ZERO_REELS_MESSAGE, *result.debug.errors]
            error = INSTAGRAM_FETCH_FAILED_ERROR
        else:
            errors = [ZERO_VIDEOS_MESSAGE, *result.debug.errors]
            error = FETCH_FAILED_ERROR
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": error,
                "debug": _debug_payload(settings, errors, result.debug),
            },
        )

    try:
        await usage.record_format_search_usage(user.id)
    except UsageTrackingError as e:
        logger.error(f"Could not record format search for {user.id}: {e}")

    return {"success": True, "data": _success_payload(result)}

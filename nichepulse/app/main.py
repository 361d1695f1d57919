"""
NichePulse - Trending Formats API
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from nichepulse.app.billing import StripeNotConfiguredError
from nichepulse.app.database import UsageTrackingError
from nichepulse.app.routers import auth, billing, formats, usage
from nichepulse.config.settings import Settings, get_settings
from nichepulse.config.startup_validation import run_startup_validation

load_dotenv()

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "google_genai", "hpack")


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        run_startup_validation(settings)
        yield

    app = FastAPI(title="NichePulse", version="1.0.0", lifespan=lifespan)

    # Include Routers
    app.include_router(formats.router, prefix="/api")
    app.include_router(usage.router, prefix="/api")
    app.include_router(auth.router, prefix="/api/auth")
    app.include_router(billing.router, prefix="/api/billing")

    @app.exception_handler(UsageTrackingError)
    async def usage_tracking_unavailable(request: Request, exc: UsageTrackingError):
        logging.getLogger(__name__).error(f"Usage tracking unavailable: {exc}")
        return JSONResponse(
            status_code=503,
            content={"success": False, "error": "Usage tracking is temporarily unavailable"},
        )

    @app.exception_handler(StripeNotConfiguredError)
    async def stripe_not_configured(request: Request, exc: StripeNotConfiguredError):
        return JSONResponse(status_code=503, content={"success": False, "error": str(exc)})

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": app.version}

    return app


app = create_app()

"""FastAPI dependency providers; override these in tests."""

from fastapi import Depends

from nichepulse.app.database import Database, get_supabase
from nichepulse.app.usage import UsageService
from nichepulse.config.settings import Settings, get_settings
from nichepulse.trends.pipeline import TrendingFormatsPipeline


def get_database(settings: Settings = Depends(get_settings)) -> Database:
    return Database(get_supabase(settings))


def get_usage_service(
    db: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
) -> UsageService:
    return UsageService(db, settings)


def get_pipeline(settings: Settings = Depends(get_settings)) -> TrendingFormatsPipeline:
    return TrendingFormatsPipeline.from_settings(settings)

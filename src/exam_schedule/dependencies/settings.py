import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from exam_schedule.external_services.schedule_api_client import (
    SCHEDULE_DEFAULT_BASE_URL,
    SCHEDULE_DEFAULT_PROFTAFLA_ID,
    SCHEDULE_DEFAULT_SID,
    SCHEDULE_REQUEST_TIMEOUT,
    ScheduleAPIClient,
)
from exam_schedule.services.redis_cache_service import DEFAULT_CACHE_TTL, RedisCacheService
from exam_schedule.services.test_lookup_service import TestLookupService

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    app_name: str = "Exam Schedule API"
    debug: bool = False
    redis_url: str = "redis://127.0.0.1:6379/0"
    schedule_cache_ttl: int = DEFAULT_CACHE_TTL
    schedule_api_base_url: str = SCHEDULE_DEFAULT_BASE_URL
    schedule_sid: int = SCHEDULE_DEFAULT_SID
    schedule_proftafla_id: int = SCHEDULE_DEFAULT_PROFTAFLA_ID
    schedule_api_timeout: float = SCHEDULE_REQUEST_TIMEOUT
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    @field_validator("debug", mode="before")
    @classmethod
    def _coerce_debug(cls, value):
        if isinstance(value, bool) or value is None:
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in {"1", "true", "yes", "on"}:
                return True
            if normalized in {"0", "false", "no", "off"}:
                return False
            # Treat common logging level strings as non-debug defaults instead of erroring.
            if normalized in {"warn", "warning", "info", "error", "critical"}:
                return False
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


def build_lookup_service(settings: Settings | None = None) -> TestLookupService:
    """Create a lookup service with its own Redis connection and HTTP client."""
    settings = settings or get_settings()
    cache = RedisCacheService.from_url(settings.redis_url, default_ttl=settings.schedule_cache_ttl)
    client = ScheduleAPIClient(
        settings.schedule_api_base_url,
        sid=settings.schedule_sid,
        proftafla_id=settings.schedule_proftafla_id,
        timeout=settings.schedule_api_timeout,
    )
    return TestLookupService(cache, client, ttl=settings.schedule_cache_ttl)


async def close_lookup_service(service: TestLookupService) -> None:
    await service.client.aclose()
    await service.cache.close()

from fastapi import Request

from exam_schedule.services.test_lookup_service import TestLookupService

from .settings import Settings, build_lookup_service, close_lookup_service, get_settings


def get_lookup_service(request: Request) -> TestLookupService:
    """Lookup service created by the application lifespan."""
    return request.app.state.lookup_service


__all__ = [
    "Settings",
    "build_lookup_service",
    "close_lookup_service",
    "get_lookup_service",
    "get_settings",
]

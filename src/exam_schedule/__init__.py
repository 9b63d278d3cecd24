"""
Exam schedule scraper with Redis caching and cross-division statistics.

Module-level helpers share one lazily created lookup service configured from
the environment. That service owns a Redis pool, an httpx client and asyncio
locks, all bound to the event loop that first used it: call ``close()``
before that loop shuts down. If a helper runs under a different loop, the
stale service is dropped without closing its connections and a fresh one is
built for the current loop.
"""

import asyncio
import logging

from exam_schedule.departments import DEPARTMENTS, Department
from exam_schedule.dependencies.settings import build_lookup_service, close_lookup_service
from exam_schedule.schemas import DepartmentTestListing, StatsSummary
from exam_schedule.services import stats_service
from exam_schedule.services.test_lookup_service import TestLookupService

logger = logging.getLogger(__name__)

departments = DEPARTMENTS

_service: TestLookupService | None = None
_service_loop: asyncio.AbstractEventLoop | None = None


def _default_service() -> TestLookupService:
    global _service, _service_loop
    loop = asyncio.get_running_loop()
    if _service is not None and _service_loop is not loop:
        logger.warning("Default lookup service belongs to another event loop; creating a new one")
        _service = None
    if _service is None:
        _service = build_lookup_service()
        _service_loop = loop
    return _service


async def get_tests(slug: str) -> DepartmentTestListing | None:
    return await _default_service().get_tests(slug)


async def clear_cache() -> bool:
    return await _default_service().clear_cache()


async def get_stats() -> StatsSummary:
    service = _default_service()
    return await stats_service.get_stats(service, service.departments)


async def close() -> None:
    global _service, _service_loop
    if _service is not None:
        service, _service, _service_loop = _service, None, None
        await close_lookup_service(service)


__all__ = [
    "Department",
    "clear_cache",
    "close",
    "departments",
    "get_stats",
    "get_tests",
]

"""
Exam schedule endpoints.

Exposes the division registry, per-division exam listings, the cross-division
statistics and the cache flush.
"""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException

from exam_schedule.dependencies import get_lookup_service
from exam_schedule.schemas import CacheClearResponse, DepartmentSchema, StatsSummary, TestGroup
from exam_schedule.services import stats_service
from exam_schedule.services.schedule_parser import ScheduleParseError
from exam_schedule.services.test_lookup_service import TestLookupService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Exam_Schedule"])

# Module-level dependency to avoid linting issues
lookup_dependency = Depends(get_lookup_service)


def _upstream_error(exc: Exception) -> HTTPException:
    if isinstance(exc, httpx.HTTPStatusError):
        detail = f"Schedule service returned {exc.response.status_code}"
    elif isinstance(exc, ScheduleParseError):
        detail = f"Schedule service returned an unreadable payload: {exc}"
    else:
        detail = f"Schedule service unreachable: {exc}"
    return HTTPException(502, detail)


@router.get("/departments", response_model=list[DepartmentSchema], summary="List divisions")
async def list_departments(lookup: TestLookupService = lookup_dependency):
    return [DepartmentSchema.model_validate(department) for department in lookup.departments]


@router.get(
    "/departments/{slug}",
    response_model=list[TestGroup],
    summary="Exams for one division",
    description="Exam tables for the division, served from cache when available",
)
async def get_department_tests(slug: str, lookup: TestLookupService = lookup_dependency):
    try:
        listing = await lookup.get_tests(slug)
    except (httpx.HTTPError, ScheduleParseError) as exc:
        logger.error("Failed to load exams for %s: %s", slug, exc)
        raise _upstream_error(exc) from exc

    if listing is None:
        raise HTTPException(404, f"division not found: {slug}")
    return listing


@router.get(
    "/stats",
    response_model=StatsSummary,
    response_model_by_alias=True,
    summary="Exam statistics",
    description="Min/max/average students per exam across every division",
)
async def get_exam_stats(lookup: TestLookupService = lookup_dependency):
    try:
        return await stats_service.get_stats(lookup, lookup.departments)
    except (httpx.HTTPError, ScheduleParseError) as exc:
        logger.error("Failed to compute exam statistics: %s", exc)
        raise _upstream_error(exc) from exc


@router.post("/cache/clear", response_model=CacheClearResponse, summary="Clear cached schedules")
async def clear_schedule_cache(lookup: TestLookupService = lookup_dependency):
    cleared = await lookup.clear_cache()
    return CacheClearResponse(cleared=cleared)

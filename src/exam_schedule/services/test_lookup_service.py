"""
Exam schedule lookup with read-through caching.

Cache read → (miss) fetch → parse → cache write, keyed by division slug.
"""

import asyncio
import logging

from pydantic import ValidationError
from redis.exceptions import RedisError

from exam_schedule.departments import DEPARTMENTS, Department, find_department
from exam_schedule.external_services.schedule_api_client import ScheduleAPIClient
from exam_schedule.schemas import DepartmentTestListing, listing_adapter
from exam_schedule.services.redis_cache_service import DEFAULT_CACHE_TTL, RedisCacheService, dump_value, load_value
from exam_schedule.services.schedule_parser import parse_schedule

logger = logging.getLogger(__name__)


def serialize_listing(listing: DepartmentTestListing) -> str:
    return dump_value(listing_adapter.dump_python(listing, mode="json"))


def deserialize_listing(payload: str | bytes) -> DepartmentTestListing:
    return listing_adapter.validate_python(load_value(payload))


class TestLookupService:
    """Resolve a division slug to its parsed exam listing."""

    __test__ = False

    def __init__(
        self,
        cache: RedisCacheService,
        client: ScheduleAPIClient,
        departments: tuple[Department, ...] = DEPARTMENTS,
        ttl: int = DEFAULT_CACHE_TTL,
    ):
        self.cache = cache
        self.client = client
        self.departments = departments
        self.ttl = ttl
        self._locks: dict[str, asyncio.Lock] = {}

    async def _read_cached(self, slug: str) -> DepartmentTestListing | None:
        cached = await self.cache.get(slug)
        if not cached:
            return None
        try:
            return deserialize_listing(cached)
        except (ValueError, ValidationError) as exc:
            logger.warning("Discarding unreadable cache entry for %s: %s", slug, exc)
            return None

    def _get_lock(self, slug: str) -> asyncio.Lock:
        lock = self._locks.get(slug)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[slug] = lock
        return lock

    async def get_tests(self, slug: str) -> DepartmentTestListing | None:
        """
        Return the exam listing for ``slug``, or None if no division has that slug.

        Concurrent misses for one slug share a single fetch; fetch and parse
        errors propagate and leave the cache untouched.
        """
        department = find_department(slug, self.departments)
        if department is None:
            return None

        cached = await self._read_cached(slug)
        if cached is not None:
            return cached

        async with self._get_lock(slug):
            cached = await self._read_cached(slug)
            if cached is not None:
                return cached

            raw = await self.client.fetch_department(department.id)
            listing = parse_schedule(raw)
            await self.cache.set(slug, serialize_listing(listing), self.ttl)
            logger.info("Fetched %d exam tables for %s", len(listing), slug)
            return listing

    async def clear_cache(self) -> bool:
        """Flush every cached listing; False if the store reports a failure."""
        try:
            await self.cache.flush_all()
        except RedisError as exc:
            logger.error("Error clearing cache: %s", exc, exc_info=True)
            return False
        return True

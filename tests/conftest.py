import asyncio
import os

import orjson
import pytest
from httpx import ASGITransport, AsyncClient

from exam_schedule.departments import Department
from exam_schedule.services.test_lookup_service import TestLookupService

# Keep tests away from any developer .env pointing at a real Redis.
os.environ["REDIS_URL"] = "redis://127.0.0.1:6379/15"


class FakeCache:
    """In-memory stand-in for RedisCacheService recording every call."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.calls: list[tuple[str, str | None]] = []
        self.flush_error: Exception | None = None

    async def get(self, key):
        self.calls.append(("get", key))
        return self.store.get(key)

    async def set(self, key, value, ttl=None):
        self.calls.append(("set", key))
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    async def flush_all(self):
        self.calls.append(("flush_all", None))
        if self.flush_error is not None:
            raise self.flush_error
        self.store.clear()
        return True

    async def ping(self):
        return True

    async def close(self):
        pass


class FakeScheduleClient:
    """Returns canned payloads per division id and counts fetches."""

    def __init__(self, payloads: dict[int, str] | None = None, error: Exception | None = None):
        self.payloads = payloads or {}
        self.error = error
        self.fetched: list[int] = []

    async def fetch_department(self, department_id):
        self.fetched.append(department_id)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.payloads.get(department_id, make_payload(""))

    async def aclose(self):
        pass


def make_payload(html: str) -> str:
    return orjson.dumps({"html": html}).decode("utf-8")


def make_table(heading: str, rows: list[tuple[str, ...]]) -> str:
    body = "".join("<tr>" + "".join(f"<td>{cell}</td>" for cell in row) + "</tr>" for row in rows)
    return (
        f"<h3>{heading}</h3>"
        "<table><thead><tr><th>Námskeið</th><th>Heiti</th><th>Tegund</th><th>Fjöldi</th><th>Dagsetning</th></tr></thead>"
        f"<tbody>{body}</tbody></table>"
    )


def students_payload(*counts: int) -> str:
    rows = [(f"C{i:03d}", f"Course {i}", "Skriflegt", str(count), "2024-05-10") for i, count in enumerate(counts)]
    return make_payload(make_table("Deild", rows))


TWO_DEPARTMENTS = (
    Department(name="Statistics", slug="statistics", id=10),
    Department(name="Physics", slug="physics", id=20),
)


@pytest.fixture
def fake_cache():
    return FakeCache()


@pytest.fixture
def fake_client():
    return FakeScheduleClient(
        {
            10: students_payload(10, 20),
            20: students_payload(30),
        }
    )


@pytest.fixture
def lookup(fake_cache, fake_client):
    return TestLookupService(fake_cache, fake_client, departments=TWO_DEPARTMENTS)


@pytest.fixture
async def client_fixture(lookup):
    """Async HTTP client for the FastAPI app, wired to the fake lookup service."""
    from exam_schedule.dependencies import get_lookup_service
    from exam_schedule.main import app

    app.dependency_overrides[get_lookup_service] = lambda: lookup
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()

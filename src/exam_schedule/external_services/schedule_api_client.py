"""
HTTP client for the university's exam schedule endpoint.

The endpoint returns a JSON envelope whose ``html`` field holds the schedule
tables for one division. This client only transports the payload; parsing
lives in ``exam_schedule.services.schedule_parser``.
"""

import logging
from time import perf_counter

import httpx

logger = logging.getLogger(__name__)

SCHEDULE_DEFAULT_BASE_URL = "https://ugla.hi.is"
SCHEDULE_ENDPOINT_PATH = "/Proftafla/View/ajax.php"
SCHEDULE_DEFAULT_SID = 2027
SCHEDULE_DEFAULT_PROFTAFLA_ID = 37
SCHEDULE_REQUEST_TIMEOUT = 30.0


class ScheduleAPIClient:
    """Async client fetching raw exam schedule payloads by division id."""

    def __init__(
        self,
        base_url: str = SCHEDULE_DEFAULT_BASE_URL,
        *,
        sid: int = SCHEDULE_DEFAULT_SID,
        proftafla_id: int = SCHEDULE_DEFAULT_PROFTAFLA_ID,
        timeout: float = SCHEDULE_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.sid = sid
        self.proftafla_id = proftafla_id
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=10.0),
            follow_redirects=True,
            transport=transport,
        )

    def build_params(self, department_id: int) -> dict[str, str | int]:
        return {
            "sid": self.sid,
            "a": "getProfSvids",
            "proftaflaID": self.proftafla_id,
            "svidID": department_id,
            "notaVinnuToflu": 0,
        }

    async def fetch_department(self, department_id: int) -> str:
        """
        Fetch the raw schedule payload for one division.

        Args:
            department_id: Numeric division id from the registry

        Returns:
            Response body text, unparsed

        Raises:
            httpx.HTTPStatusError: upstream answered with a non-2xx status
            httpx.HTTPError: transport level failure
        """
        params = self.build_params(department_id)
        started = perf_counter()
        try:
            response = await self._client.get(SCHEDULE_ENDPOINT_PATH, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            elapsed_ms = (perf_counter() - started) * 1000
            logger.warning(
                "Schedule API %s returned %s after %.1f ms",
                exc.request.url,
                exc.response.status_code,
                elapsed_ms,
            )
            raise
        except httpx.HTTPError as exc:
            elapsed_ms = (perf_counter() - started) * 1000
            logger.warning("Schedule API request for division %s failed after %.1f ms: %s", department_id, elapsed_ms, exc)
            raise

        elapsed_ms = (perf_counter() - started) * 1000
        logger.debug("Schedule API division %s fetched in %.1f ms", department_id, elapsed_ms)
        return response.text

    async def aclose(self) -> None:
        await self._client.aclose()

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError

from exam_schedule.dependencies import get_lookup_service
from exam_schedule.services.test_lookup_service import TestLookupService

router = APIRouter(tags=["Health"])

lookup_dependency = Depends(get_lookup_service)


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(lookup: TestLookupService = lookup_dependency):
    """
    Health check endpoint for monitoring and load balancers.

    Returns:
        - status: overall health status
        - timestamp: current server time
        - cache: Redis connection status
    """
    health_status = {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": "exam-schedule-api",
    }

    try:
        await lookup.cache.ping()
        health_status["cache"] = "connected"
    except (RedisError, OSError) as e:
        health_status["cache"] = "disconnected"
        health_status["status"] = "unhealthy"
        health_status["error"] = str(e)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=health_status)

    return health_status

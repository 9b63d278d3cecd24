import asyncio
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from exam_schedule.dependencies import build_lookup_service, close_lookup_service, get_settings

logger = logging.getLogger(__name__)

load_dotenv()


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings = get_settings()
    app.state.lookup_service = build_lookup_service(settings)
    logger.info(f"Exam schedule cache using Redis at {settings.redis_url}")

    try:
        yield
    except asyncio.CancelledError:
        logger.info("Application shutdown requested (CancelledError). Exiting gracefully.")
    except Exception:
        logger.exception("Unhandled exception during application lifespan shutdown.")
        raise
    finally:
        await close_lookup_service(app.state.lookup_service)


settings = get_settings()

tags_metadata = [
    {"name": "Root", "description": "Basic status endpoint."},
    {"name": "Exam_Schedule", "description": "Division exam listings, statistics and cache control."},
    {"name": "Health", "description": "Liveness and cache connectivity."},
]

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    openapi_tags=tags_metadata,
    lifespan=_lifespan,
)


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": settings.app_name,
        "departments": "/departments",
        "stats": "/stats",
    }


app.add_middleware(GZipMiddleware, minimum_size=1000, compresslevel=6)

logger.info(f"CORS enabled for origins: {settings.cors_origin_list}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# include routers
from .routers import health, schedule  # noqa: E402

app.include_router(health.router)
app.include_router(schedule.router)


__all__ = ["app"]

import logging
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager

from core.cache import APICache
from core.config import get_settings
from core.database import build_async_engine, build_session_maker, create_tables
from core.exception_handlers import register_exception_handlers
from core.timezone import now_utc
from api.v1 import apartments
from scheduler import SchedulerManager

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    engine = build_async_engine(settings.async_database_url)
    if settings.create_tables_on_startup:
        await create_tables(engine)

    app.state.engine = engine
    app.state.session_maker = build_session_maker(engine)
    app.state.cache = APICache(default_ttl=settings.cache_ttl)
    app.state.started_at = time.monotonic()

    scheduler = SchedulerManager(settings, app.state.cache)
    app.state.scheduler = scheduler
    scheduler.start()
    logger.info(f"Application started (environment={settings.environment}, cache_ttl={settings.cache_ttl}s)")

    yield

    # Shutdown
    scheduler.shutdown()
    app.state.cache.clear()
    await engine.dispose()
    logger.info("Application shutdown")


app = FastAPI(
    title="Apartment Listings API",
    description="매물 등록/조회/검색 API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

register_exception_handlers(app, is_production=settings.is_production)

app.include_router(apartments.router, prefix="/api/v1/apartments", tags=["apartments"])


@app.get("/health")
async def health_check(request: Request):
    return {
        "status": "OK",
        "timestamp": now_utc().isoformat() + "Z",
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
        "environment": settings.environment,
    }


@app.get("/api/v1/cache/stats")
async def cache_stats(request: Request):
    """서버 사이드 캐시 통계 조회."""
    return request.app.state.cache.stats()


@app.post("/api/v1/cache/clear")
async def cache_clear(request: Request):
    """서버 사이드 캐시 전체 초기화."""
    request.app.state.cache.clear()
    return {"status": "cleared"}


@app.get("/api/v1/scheduler/status")
async def scheduler_status(request: Request):
    """스케줄러 상태 조회."""
    scheduler = request.app.state.scheduler
    return {
        "running": scheduler.is_running,
        "jobs": scheduler.get_jobs(),
    }

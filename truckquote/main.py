from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from truckquote.api import admin, auth, quotes, settings as settings_api
from truckquote.core.config import settings
from truckquote.core.errors import ConfigurationError, QuoteValidationError, RouteLookupError, TransientError
from truckquote.core.redis import init_redis, close_redis, get_redis
from truckquote.core.metrics import request_count, request_duration, db_connected, redis_connected, get_metrics_text
from truckquote.db.session import engine, get_db, init_db
import time
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code
            ).inc()

            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)

            return response
        except Exception:
            duration = time.time() - start_time
            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=500
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")

    try:
        if await init_redis() is not None:
            redis_connected.set(1)
            logger.info("Redis connected")
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        redis_connected.set(0)

    try:
        await init_db()
        db_connected.set(1)
        logger.info("Database connected")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        db_connected.set(0)

    yield

    logger.info("Application shutting down...")
    await close_redis()
    redis_connected.set(0)
    await engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(auth.router)
app.include_router(quotes.router)
app.include_router(settings_api.router)
app.include_router(admin.router)


@app.exception_handler(QuoteValidationError)
async def quote_validation_handler(request: Request, exc: QuoteValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.errors})


@app.exception_handler(RouteLookupError)
async def route_lookup_handler(request: Request, exc: RouteLookupError):
    return JSONResponse(
        status_code=422,
        content={"detail": f"Cannot quote this route: {exc.message}", "status": exc.status},
    )


@app.exception_handler(TransientError)
async def transient_handler(request: Request, exc: TransientError):
    return JSONResponse(
        status_code=503,
        content={"detail": f"Distance lookup unavailable, please try again: {exc.message}"},
    )


@app.exception_handler(ConfigurationError)
async def configuration_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Configuration error on {request.url.path}: {exc.message}")
    return JSONResponse(status_code=500, content={"detail": "Quote service is not configured"})


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


async def _database_ok(db: AsyncSession) -> bool:
    try:
        await db.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return False


@app.get("/health", tags=["monitoring"])
async def health_check(db: AsyncSession = Depends(get_db)):
    redis_healthy = get_redis() is not None
    database_healthy = await _database_ok(db)

    return {
        "status": "healthy" if database_healthy else "degraded",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "redis": "connected" if redis_healthy else "disconnected",
            "database": "connected" if database_healthy else "disconnected",
            "distance_provider": "configured" if settings.GOOGLE_MAPS_API_KEY else "not configured"
        }
    }


@app.get("/readiness", tags=["monitoring"])
async def readiness_check(db: AsyncSession = Depends(get_db)):
    if not settings.GOOGLE_MAPS_API_KEY:
        return JSONResponse(
            status_code=503,
            content={"ready": False, "reason": "Google Maps API key not configured"}
        )

    if not await _database_ok(db):
        return JSONResponse(
            status_code=503,
            content={"ready": False, "reason": "Database not available"}
        )

    return {
        "ready": True,
        "service": settings.API_TITLE
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }

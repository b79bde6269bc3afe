"""
F1 Dashboard API - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import charts, dashboard, data
from api.settings import get_settings
from sources.ergast import UpstreamError

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting F1 Dashboard API...")

    # Initialize Sentry for error monitoring
    try:
        from observability.sentry_integration import init_sentry
        sentry_enabled = init_sentry(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1 if settings.environment == "production" else 1.0,
        )
        if sentry_enabled:
            logger.info("Sentry error monitoring initialized")
    except Exception as e:
        logger.warning(f"Failed to initialize Sentry: {e}")

    from sources.ergast import init_client
    init_client(settings.ergast_base_url, settings.ergast_timeout)

    if settings.redis_url:
        try:
            from db.cache import init_redis
            await init_redis(settings.redis_url)
            logger.info("Redis response cache initialized")
        except Exception as e:
            logger.warning(f"Failed to initialize Redis cache, continuing without it: {e}")

    logger.info("API startup complete")

    yield

    # Shutdown
    logger.info("Shutting down API...")

    from sources.ergast import close_client
    await close_client()

    from db.cache import close_redis
    await close_redis()


app = FastAPI(
    title="F1 Dashboard API",
    description="Formula 1 statistics reshaped for dashboard charts and widgets",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(dashboard.router, prefix="/api", tags=["dashboard"])
app.include_router(data.router, prefix="/api", tags=["data"])
app.include_router(charts.router, prefix="/api", tags=["charts"])


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    """Report upstream API failures as 502 with a readable message."""
    from observability.sentry_integration import capture_exception

    logger.error(f"Upstream failure on {request.url.path}: {exc}")
    capture_exception(exc, tags={"endpoint": exc.endpoint or "unknown"})
    return JSONResponse(status_code=502, content={"error": str(exc)})


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "F1 Dashboard API",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    from db.cache import cache_stats, get_redis

    redis_client = get_redis()

    checks = {
        "api": "healthy",
        "redis": "healthy" if redis_client else ("not_connected" if settings.redis_url else "disabled"),
    }

    overall = "healthy" if all(v in ("healthy", "disabled") for v in checks.values()) else "degraded"

    # Get cache stats if Redis is connected
    cache_info = await cache_stats() if redis_client else None

    return {
        "status": overall,
        "checks": checks,
        "cache": cache_info,
        "upstream": settings.ergast_base_url,
    }

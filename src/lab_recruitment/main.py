"""
Lab Recruitment API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Database and Redis connections
- CORS middleware
- Response envelope exception handlers
- API routing
- Health check endpoints
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Response, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from lab_recruitment.api import api_router
from lab_recruitment.core import redis as redis_state
from lab_recruitment.core.config import settings
from lab_recruitment.core.database import async_session_maker, close_db, init_db
from lab_recruitment.core.logging import setup_logging
from lab_recruitment.core.redis import close_redis, init_redis
from lab_recruitment.core.responses import register_exception_handlers

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Outside production a failed Redis or database connection is reported
    and startup continues; verification codes then live in process memory.
    """
    # Startup
    logger.info(f"Starting {settings.app_name} in {settings.python_env} mode...")

    try:
        await init_redis()
        logger.info("[OK] Redis connected")
    except Exception as e:
        logger.error(f"[FAIL] Redis connection failed: {e}")
        if settings.is_production:
            raise

    try:
        await init_db()
        logger.info("[OK] Database connected")
    except Exception as e:
        logger.error(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    if settings.email_test_mode:
        logger.warning("[WARN] No email transport configured, running email in test mode")

    yield  # Application runs here

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await close_redis()
    await close_db()
    logger.info("[OK] Cleanup complete")


app = FastAPI(
    title=settings.app_name,
    description="Lab recruitment platform: labs, interview applications and admin review",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {
        "status": "healthy",
        "email": "test_mode" if settings.email_test_mode else "configured",
        "verification_store": "redis" if redis_state.is_redis_available() else "memory",
    }


@app.get("/ready", tags=["Health"])
async def readiness_check(response: Response) -> dict[str, str]:
    """
    Readiness check: the database answers a trivial query and, in
    production, Redis answers PING.
    """
    database = "connected"
    try:
        async with async_session_maker() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check failed, database: {e}")
        database = "unavailable"

    redis = "connected" if await redis_state.ping_redis() else "unavailable"

    ready = database == "connected" and (redis == "connected" or not settings.is_production)
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "ready" if ready else "not_ready", "database": database, "redis": redis}

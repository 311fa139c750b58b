"""FastAPI application: lifespan, middleware, health probes and routers."""

import logging
import math
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy import text

from cropwatch.config import get_settings
from cropwatch.database import engine
from cropwatch.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from cropwatch.middleware.rate_limit import RateLimitMiddleware
from cropwatch.routes import analysis, crops, weather, ws

logger = logging.getLogger("cropwatch")

VERSION = "0.1.0"


async def _run_readiness_checks(app: FastAPI) -> dict[str, dict[str, Any]]:
    """Probe the database and Redis; each check reports ``ok`` + message."""
    checks: dict[str, dict[str, Any]] = {}

    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))
        checks["database"] = {"ok": True, "message": "ok"}
    except Exception as exc:
        checks["database"] = {"ok": False, "message": str(exc)}

    redis: Redis | None = getattr(app.state, "redis", None)
    if redis is None:
        checks["redis"] = {"ok": False, "message": "not connected"}
    else:
        try:
            await redis.ping()
            checks["redis"] = {"ok": True, "message": "ok"}
        except Exception as exc:
            checks["redis"] = {"ok": False, "message": str(exc)}

    return checks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Verify database connectivity
      3. Connect to Redis

    Shutdown:
      1. Close Redis connection pool
      2. Dispose SQLAlchemy engine
    """
    configure_structured_logging()
    settings = get_settings()
    logger.info(
        "CropWatch starting",
        extra={
            "log_level": settings.log_level,
            "default_location": settings.default_location,
        },
    )

    redis: Redis | None = None
    try:
        async with engine.connect() as connection:
            await connection.execute(text("SELECT 1"))

        redis = Redis.from_url(settings.redis_url, decode_responses=True)
        await redis.ping()
        app.state.redis = redis
    except Exception as exc:
        logger.exception("startup failure", extra={"error": str(exc)})
        raise

    yield

    logger.info("CropWatch shutting down")
    if redis is not None:
        await redis.aclose()
    await engine.dispose()


app = FastAPI(
    title="CropWatch API",
    description=(
        "Crop monitoring API. Records field observations per crop plot, "
        "evaluates crop health from the latest reading and serves trend "
        "series and weather context for dashboards."
    ),
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)


def _json_safe(value: Any) -> Any:
    """Replace NaN / Infinity echoed back in validation errors with their text."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_json_safe(item) for item in value]
    return value


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"detail": _json_safe(jsonable_encoder(exc.errors()))},
    )


# ── Health check ────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Liveness: the process is up and serving."""
    return {
        "status": "ok",
        "service": "cropwatch",
        "version": VERSION,
    }


@app.get("/health/ready", tags=["system"])
async def readiness_check() -> JSONResponse:
    """Readiness: 200 when every dependency answers, 503 otherwise."""
    checks = await _run_readiness_checks(app)
    ready = all(check["ok"] for check in checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ok" if ready else "degraded", "checks": checks},
    )


# ── Router registration ────────────────────────────────────────────────────
app.include_router(crops.router, prefix="/api/v1")
app.include_router(analysis.router, prefix="/api/v1")
app.include_router(weather.router, prefix="/api/v1")
app.include_router(ws.router)

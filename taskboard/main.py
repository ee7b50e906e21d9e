import os
import logging
import logging.config
from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from arq import create_pool
from arq.connections import RedisSettings

from taskboard.core.config import (
    CORS_ORIGINS,
    DEV_CORS_ORIGINS,
    ENV,
    HEARTBEAT_KEY,
    LOGGING_CONFIG_FILE,
    REDIS_URL,
)
from taskboard.core.daily import DailyEnsureTracker
from taskboard.core.errors import (
    ConcurrencyConflict,
    InvalidTarget,
    NotFound,
    StoreWriteFailure,
)
from taskboard.db.base import Base
from taskboard.db.session import engine, async_session
from taskboard.api.routes import boards, columns, organizations, snapshots, system, tasks

# Load logging config if present
if os.path.exists(LOGGING_CONFIG_FILE):
    logging.config.fileConfig(LOGGING_CONFIG_FILE, disable_existing_loggers=False)
logger = logging.getLogger("root")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.redis = await create_pool(RedisSettings.from_dsn(REDIS_URL))
    logger.info("Database initialized")

    yield  # App runs here

    # Shutdown logic
    await app.state.redis.close()
    await app.state.redis.connection_pool.disconnect()
    logger.info("Shutting down...")


# Create FastAPI app with lifespan
app = FastAPI(
    title="Taskboard API",
    version="0.1",
    lifespan=lifespan,
)

# Last processed day per organization for foreground catch-up
app.state.daily_tracker = DailyEnsureTracker()

# Dev-only CORS settings
if ENV == "development":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=DEV_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS allowed for development environment")
elif CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("Running in production environment - CORS restricted")

# API routes
app.include_router(organizations.router)
app.include_router(boards.router)
app.include_router(columns.router)
app.include_router(tasks.router)
app.include_router(snapshots.router)
app.include_router(system.router)


# --- Error mapping --- #


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidTarget)
async def invalid_target_handler(request: Request, exc: InvalidTarget):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(ConcurrencyConflict)
async def conflict_handler(request: Request, exc: ConcurrencyConflict):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(StoreWriteFailure)
async def store_failure_handler(request: Request, exc: StoreWriteFailure):
    # Details are in the server log; clients get a generic notice
    return JSONResponse(status_code=500, content={"detail": "The change could not be saved."})


@app.api_route("/api/health", methods=["GET", "HEAD"])
async def health(request: Request):
    status = {
        "api": "ok",
        "database": None,
        "redis": None,
        "worker": None,
    }

    http_status = 200

    # --- Database check ---
    try:
        async with async_session() as db:
            await db.execute(text("SELECT 1"))
        status["database"] = "connected"
    except Exception as e:
        status["database"] = f"error: {e}"
        http_status = 503

    # --- Redis and worker heartbeat ---
    redis = getattr(request.app.state, "redis", None)
    if redis is None:
        status["redis"] = "not configured"
        return JSONResponse(content=status, status_code=http_status)

    try:
        await redis.ping()
        status["redis"] = "connected"
        heartbeat = await redis.get(HEARTBEAT_KEY)
        if heartbeat:
            last_heartbeat = datetime.fromtimestamp(float(heartbeat))
            status["worker"] = f"running (last heartbeat {last_heartbeat.isoformat()})"
        else:
            # The API keeps working without the worker; only background sweeps stall
            status["worker"] = "not reporting"
    except Exception as e:
        status["redis"] = f"error: {e}"
        http_status = 503

    return JSONResponse(content=status, status_code=http_status)

"""
FastAPI application for the Taskforce directory service.
"""
import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from .config import settings
from .database import engine, init_db
from .services.redis_pool import get_redis_client
from .wiring.bootstrap import close_geocoder

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    logger.info("Starting Taskforce directory API...")
    logger.info("CORS origins: %s", settings.cors_origins_list)
    if not settings.globe_enabled:
        logger.warning("No Mapbox token configured; directory pages fall back to the table view")

    init_db()

    yield

    await close_geocoder()
    logger.info("Shutting down Taskforce directory API...")


# Create FastAPI application
app = FastAPI(
    title="Taskforce Directory API",
    description="Search and filtering for projects, organisations, funding and watchdog issues",
    version="0.1.0",
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Taskforce Directory API",
        "version": "0.1.0",
        "docs": "/docs",
        "status": "running"
    }


@app.get("/livez")
async def liveness():
    """Liveness probe - zero dependencies, confirms process is responsive."""
    return {"status": "ok"}


@app.get("/readyz")
async def readiness():
    """Readiness probe - checks database and Redis connectivity.

    Redis only backs the geocode cache; when it is down the status is
    "degraded" rather than unhealthy.
    """
    checks = {}
    healthy = True

    try:
        def _check_db():
            with engine.connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1

        if await asyncio.to_thread(_check_db):
            checks["database"] = "ok"
        else:
            checks["database"] = "error: unexpected response"
            healthy = False
    except Exception as e:
        checks["database"] = f"error: {type(e).__name__}"
        healthy = False

    if settings.geocode_cache_backend == "redis":
        try:
            def _check_redis():
                client = get_redis_client()
                return client and client.ping()

            if await asyncio.to_thread(_check_redis):
                checks["redis"] = "ok"
            else:
                checks["redis"] = "warning: unavailable"
        except Exception as e:
            checks["redis"] = f"warning: {type(e).__name__}"

    status_code = 200 if healthy else 503
    status_label = "ok" if healthy else "unhealthy"
    if healthy and checks.get("redis", "").startswith("warning"):
        status_label = "degraded"

    return JSONResponse(
        content={"status": status_label, "checks": checks},
        status_code=status_code,
    )


# Include API routers
from .api.v1.router import router as api_router  # noqa: E402
app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("taskforce.main:app", host=settings.api_host, port=settings.api_port)

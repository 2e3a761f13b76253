# src/liftcheck/main.py
"""Main entry point for the LiftCheck application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from liftcheck.api.errors import register_exception_handlers
from liftcheck.api.v1 import (
    admin_router,
    rankings_router,
    shares_router,
    users_router,
    votes_router,
)
from liftcheck.core.settings import settings
from liftcheck.db.session import SessionLocal
from liftcheck.services.leaderboard_worker import LeaderboardWorker
from liftcheck.services.rankings import RankingMaterializer

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="LiftCheck API",
    description="Community validation of shared lifts and scoped leaderboards",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(votes_router, prefix="/api/v1")
app.include_router(shares_router, prefix="/api/v1")
app.include_router(rankings_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    if settings.leaderboard_worker_enabled:
        worker = LeaderboardWorker(RankingMaterializer(SessionLocal))
        await worker.start()
        app.state.leaderboard_worker = worker
        logger.info(
            "Leaderboard worker started (every %.0fs)",
            settings.leaderboard_refresh_seconds,
        )
    else:
        app.state.leaderboard_worker = None


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: LeaderboardWorker | None = getattr(app.state, "leaderboard_worker", None)
    if worker:
        await worker.stop()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Community validation of shared lifts and scoped leaderboards",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("liftcheck.main:app", host="0.0.0.0", port=8000, reload=settings.debug)

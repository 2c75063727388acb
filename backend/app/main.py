"""
FastAPI application entry point.
Sets up the admin pages with lifespan events for database initialization.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.config import settings
from app.database import init_db
from app.api.router import api_router
from app.auth.firebase import initialize_firebase
from app.middleware.metrics_middleware import MetricsMiddleware
from app.storage import get_blob_storage
from app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events.
    - Startup: configure logging, create tables, initialize Firebase and storage
    """
    configure_logging('team-media-api', settings.log_level)

    await init_db()

    # Skip if Firebase config not provided (local dev without Firebase)
    if settings.firebase_project_id:
        try:
            initialize_firebase()
        except ValueError as e:
            if settings.environment == "production":
                raise
            logger.warning(f"Firebase initialization failed: {e}")

    storage = get_blob_storage()
    if not storage.is_configured:
        logger.warning(f"Blob storage backend '{settings.storage_backend}' is not configured")

    yield


app = FastAPI(
    title=settings.app_name,
    description="Admin pages for website images and team member profiles",
    version="0.1.0",
    lifespan=lifespan
)

app.add_middleware(MetricsMiddleware)

app.include_router(api_router)

# Development storage serves its files directly
if settings.storage_backend == "local":
    app.mount(
        settings.local_storage_url,
        StaticFiles(directory=settings.local_storage_path, check_dir=False),
        name="media"
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": settings.app_name,
        "version": "0.1.0",
        "environment": settings.environment
    }


@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )

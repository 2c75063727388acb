"""
Health check endpoint.
Verifies database connectivity and blob storage configuration.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from app.database import get_db
from app.config import settings
from app.storage import BlobStorage, get_blob_storage

router = APIRouter()


@router.get("")
async def health_check(
    db: AsyncSession = Depends(get_db),
    storage: BlobStorage = Depends(get_blob_storage)
):
    """
    Health check endpoint.
    Returns status of the database and the blob storage backend.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "storage": "unknown"
    }

    # Check database
    try:
        await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        health_status["database"] = f"error: {str(e)}"
        health_status["status"] = "unhealthy"

    # Check storage
    if storage.is_configured:
        health_status["storage"] = f"configured ({settings.storage_backend})"
    else:
        health_status["storage"] = "not configured"
        health_status["status"] = "unhealthy"

    if health_status["status"] == "unhealthy":
        raise HTTPException(status_code=503, detail=health_status)

    return health_status

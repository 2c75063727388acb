"""
Translation of image service errors into HTTP responses.

Form pages handle validation errors themselves by re-rendering the form
with a banner; elsewhere they become a 400.
"""
import logging

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse, PlainTextResponse

from app.services.errors import (
    BlobStoreError,
    ConsistencyError,
    ImageServiceError,
    ImageValidationError,
    RecordNotFoundError,
)

logger = logging.getLogger(__name__)


def problem_response(detail: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> JSONResponse:
    """RFC 7807 problem details response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "type": "about:blank",
            "title": "An error occurred while processing your request.",
            "status": status_code,
            "detail": detail,
        },
        media_type="application/problem+json",
    )


def error_response(exc: ImageServiceError):
    """
    Map a service error to a response.

    - ImageValidationError -> 400 text/plain
    - RecordNotFoundError -> 404 (raised as HTTPException)
    - BlobStoreError -> 500 text/plain with the storage backend's status
    - ConsistencyError -> 500 problem details
    - anything else (PersistenceError) -> 500 text/plain
    """
    if isinstance(exc, ImageValidationError):
        return PlainTextResponse(exc.message, status_code=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, RecordNotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    if isinstance(exc, BlobStoreError):
        return PlainTextResponse(exc.status, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    if isinstance(exc, ConsistencyError):
        return problem_response(exc.message)
    logger.error(f"Request failed: {exc.message}", extra={"event": "request_failed", "error": exc.message})
    return PlainTextResponse(exc.message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

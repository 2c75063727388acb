"""
Production logging utility for structured JSON logging.

Provides event-specific logging functions with mandatory fields:
- timestamp (ISO8601)
- level
- service
- event

Optional fields (included when applicable):
- area (storage or team)
- image_name
- record_id
- duration_ms

Usage:
    from app.utils.logging import configure_logging, log_image_uploaded

    configure_logging('team-media-api', 'INFO')
    log_image_uploaded(logger, area='storage', image_name='abc.png', record_id=1)
"""
import logging
import sys
from typing import Optional, Dict, Any
from pythonjsonlogger import jsonlogger


class StructuredLogger:
    """Structured JSON logger with mandatory fields."""

    _service_name = None
    _configured = False

    @classmethod
    def configure(cls, service_name: str, log_level: str = "INFO"):
        """
        Configure structured JSON logging for the application.

        Args:
            service_name: Service identifier
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        """
        if cls._configured:
            return  # Already configured

        cls._service_name = service_name

        # Remove default handlers
        root_logger = logging.getLogger()
        root_logger.handlers = []

        # Create JSON formatter
        formatter = jsonlogger.JsonFormatter(
            '%(timestamp)s %(level)s %(name)s %(message)s',
            timestamp=True,
            json_ensure_ascii=False
        )

        # Create console handler (for docker logs)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)
        root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

        # Add service name to all log records via filter
        class ServiceFilter(logging.Filter):
            def filter(self, record):
                record.service = cls._service_name
                return True

        handler.addFilter(ServiceFilter())
        cls._configured = True


def _build_log_extra(
    event: str,
    area: Optional[str] = None,
    image_name: Optional[str] = None,
    record_id: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **kwargs
) -> Dict[str, Any]:
    """
    Build extra fields for structured logging.

    Args:
        event: Event name (mandatory)
        area: "storage" or "team"
        image_name: Generated image name
        record_id: Database row id
        duration_ms: Optional duration in milliseconds
        **kwargs: Additional fields

    Returns:
        Dictionary of extra fields
    """
    extra = {
        "event": event,
        **kwargs
    }

    if area:
        extra["area"] = area
    if image_name:
        extra["image_name"] = image_name
    if record_id is not None:
        extra["record_id"] = record_id
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)

    return extra


def log_image_uploaded(
    logger: logging.Logger,
    area: str,
    image_name: str,
    record_id: Optional[int] = None,
    duration_ms: Optional[float] = None,
    **kwargs
):
    """Log a completed upload (blob written and metadata stored)."""
    extra = _build_log_extra(
        event="image_uploaded",
        area=area,
        image_name=image_name,
        record_id=record_id,
        duration_ms=duration_ms,
        **kwargs
    )
    logger.info(f"Image uploaded: {image_name}", extra=extra)


def log_image_deleted(
    logger: logging.Logger,
    area: str,
    image_name: str,
    record_id: Optional[int] = None,
    **kwargs
):
    """Log a completed delete (metadata removed and blob deleted)."""
    extra = _build_log_extra(
        event="image_deleted",
        area=area,
        image_name=image_name,
        record_id=record_id,
        **kwargs
    )
    logger.info(f"Image deleted: {image_name}", extra=extra)


def log_storage_failure(
    logger: logging.Logger,
    operation: str,
    error: str,
    image_name: Optional[str] = None,
    area: Optional[str] = None,
    include_traceback: bool = False,
    **kwargs
):
    """
    Log a blob store or persistence failure.

    Args:
        logger: Logger instance
        operation: upload, delete, list or commit
        error: Error message (required)
        image_name: Image involved, if known
        area: "storage" or "team"
        include_traceback: Attach the active exception's stack trace
        **kwargs: Additional fields
    """
    extra = _build_log_extra(
        event="storage_failure",
        area=area,
        image_name=image_name,
        operation=operation,
        error=str(error),
        **kwargs
    )

    message = f"Storage failure: {operation} - {error}"

    if include_traceback and sys.exc_info()[0] is not None:
        logger.error(message, extra=extra, exc_info=True)
    else:
        logger.error(message, extra=extra)


def configure_logging(service_name: str, log_level: str = "INFO"):
    """Configure logging (alias for StructuredLogger.configure)."""
    StructuredLogger.configure(service_name, log_level)

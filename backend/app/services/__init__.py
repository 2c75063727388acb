"""
Business logic services.
"""
from app.services.image_service import ImageService
from app.services.storage_service import StorageService
from app.services.team_service import TeamService

__all__ = [
    "ImageService",
    "StorageService",
    "TeamService",
]

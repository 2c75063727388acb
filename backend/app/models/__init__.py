"""
Database models package.
"""
from app.models.base import Base
from app.models.user import User
from app.models.storage_image import StorageImage
from app.models.team_member import TeamMember

__all__ = [
    "Base",
    "User",
    "StorageImage",
    "TeamMember",
]

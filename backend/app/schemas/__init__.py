"""
Pydantic schemas for request validation.
"""
from app.schemas.team import TeamMemberForm

__all__ = [
    "TeamMemberForm",
]

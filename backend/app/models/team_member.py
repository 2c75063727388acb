"""
TeamMember model: a team profile with an attached photo in blob storage.
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.models.base import Base


class TeamMember(Base):
    """Team member profile shown on the website."""

    __tablename__ = "team_members"

    id = Column(Integer, primary_key=True, autoincrement=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    position = Column(String(150), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    linkedin = Column(String(500), nullable=True)  # Profile URL

    # Photo in blob storage
    image_name = Column(String(255), nullable=False, unique=True, index=True)
    uri = Column(String(2048), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<TeamMember(id={self.id}, name={self.first_name} {self.last_name})>"

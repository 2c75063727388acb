"""
User model.
Authenticated via Firebase (firebase_uid); rows are created on first login.
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.models.base import Base, generate_uuid


class User(Base):
    """Administrator allowed to manage images and team members."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    firebase_uid = Column(String(128), nullable=False, unique=True, index=True)  # Firebase user ID
    email = Column(String(255), nullable=True)  # Email from Firebase token

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, firebase_uid={self.firebase_uid})>"

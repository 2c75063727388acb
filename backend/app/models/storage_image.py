"""
StorageImage model for stand-alone uploaded images.

Stores metadata about images uploaded to blob storage.
The actual file bytes live in the blob store, not the database.

Lifecycle:
1. Admin uploads an image -> blob written, then row inserted
2. Admin deletes the image -> row removed, then blob deleted
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.models.base import Base


class StorageImage(Base):
    """
    Image metadata model.

    Attributes:
        id: Surrogate key
        image_name: Generated file name, also the blob name (e.g. "aZ3...q9.png")
        uri: Public URI of the blob
        created_at: When the image was uploaded
    """
    __tablename__ = "storage_images"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Generated name doubles as the blob name in the container
    image_name = Column(String(255), nullable=False, unique=True, index=True)

    uri = Column(String(2048), nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    def __repr__(self):
        return f"<StorageImage(id={self.id}, image_name={self.image_name})>"

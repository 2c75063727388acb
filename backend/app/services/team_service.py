"""
Team service for business logic around team member profiles.
Handles creation, editing (with optional photo replacement) and deletion.
"""
import logging
import time
from typing import BinaryIO, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.team_member import TeamMember
from app.schemas.team import TeamMemberForm
from app.services.errors import ImageValidationError, RecordNotFoundError
from app.services.image_service import ImageService, commit_or_raise
from app.utils.logging import log_image_deleted, log_image_uploaded
from app.utils.metrics import images_deleted_total, images_uploaded_total

logger = logging.getLogger(__name__)

AREA = "team"


def _apply_fields(member: TeamMember, fields: TeamMemberForm) -> None:
    member.first_name = fields.first_name
    member.last_name = fields.last_name
    member.position = fields.position
    member.email = fields.email
    member.phone = fields.phone
    member.linkedin = fields.linkedin


class TeamService:
    """Service for team member business logic."""

    def __init__(self, images: ImageService):
        self.images = images

    @staticmethod
    async def list_members(db: AsyncSession) -> List[TeamMember]:
        """Get all team members in insertion order."""
        result = await db.execute(select(TeamMember).order_by(TeamMember.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_member(db: AsyncSession, member_id: int) -> TeamMember:
        """
        Get a team member by id.

        Raises:
            RecordNotFoundError: if no such member exists
        """
        member = await db.get(TeamMember, member_id)
        if member is None:
            raise RecordNotFoundError(f"Team member {member_id} not found")
        return member

    async def create_member(
        self,
        db: AsyncSession,
        fields: TeamMemberForm,
        file: Optional[BinaryIO],
        content_type: Optional[str]
    ) -> TeamMember:
        """
        Create a team member with a photo.

        The photo is uploaded first; the row is only inserted once the blob
        exists and its URI is known.
        """
        if file is None:
            raise ImageValidationError("All parameters needs to be filled!")

        start_time = time.time()
        extension = self.images.parse_content_type(content_type)
        image_name = await self.images.generate_unique_name(db, TeamMember, extension)
        uri = await self.images.store_image(file, image_name, content_type)

        member = TeamMember(image_name=image_name, uri=uri)
        _apply_fields(member, fields)
        db.add(member)
        await commit_or_raise(db)
        await db.refresh(member)

        images_uploaded_total.labels(area=AREA).inc()
        log_image_uploaded(
            logger,
            area=AREA,
            image_name=image_name,
            record_id=member.id,
            duration_ms=(time.time() - start_time) * 1000
        )
        return member

    async def edit_member(
        self,
        db: AsyncSession,
        member_id: int,
        fields: TeamMemberForm,
        file: Optional[BinaryIO] = None,
        content_type: Optional[str] = None
    ) -> TeamMember:
        """
        Update a team member, optionally replacing the photo.

        Photo replacement:
        1. Validate the new content type
        2. Delete the old blob
        3. Upload the new blob under the old base name with the new extension
        4. Rewrite the stored URI to point at the new name

        A failing step raises immediately; blob operations that already
        happened are not undone.
        """
        member = await self.get_member(db, member_id)

        if file is not None:
            extension = self.images.parse_content_type(content_type)
            old_name = member.image_name

            await self.images.delete_image(old_name)

            base_name = old_name.split(".", 1)[0]
            new_name = f"{base_name}.{extension}"
            await self.images.upload_blob(file, new_name, content_type)

            member.uri = member.uri.replace(old_name, new_name)
            member.image_name = new_name
            images_uploaded_total.labels(area=AREA).inc()
            log_image_uploaded(logger, area=AREA, image_name=new_name, record_id=member.id, replaced=old_name)

        _apply_fields(member, fields)
        await commit_or_raise(db)
        await db.refresh(member)
        return member

    async def delete_member(self, db: AsyncSession, member_id: int) -> None:
        """
        Delete a team member, then the photo blob.

        The row is committed as deleted first; a failing blob delete raises
        BlobStoreError and leaves the blob orphaned.
        """
        member = await self.get_member(db, member_id)
        image_name = member.image_name

        await db.delete(member)
        await commit_or_raise(db)

        await self.images.delete_image(image_name)

        images_deleted_total.labels(area=AREA).inc()
        log_image_deleted(logger, area=AREA, image_name=image_name, record_id=member_id)

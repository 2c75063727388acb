"""
Tests for the image upload/delete orchestration.
"""
import io
import logging

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.storage_image import StorageImage
from app.models.team_member import TeamMember
from app.services.errors import (
    BlobStoreError,
    ConsistencyError,
    ImageValidationError,
    NameGenerationError,
)
from app.services.image_service import ImageService
from app.storage.base import BlobResponse
from tests.fakes import CDN_URL, InMemoryBlobStorage


class CountingGenerator:
    """Name generator returning scripted names and counting calls."""

    def __init__(self, names):
        self._names = iter(names)
        self.calls = []

    def __call__(self, extension: str, length: int) -> str:
        self.calls.append((extension, length))
        return next(self._names)


class TestParseContentType:
    """Tests for content type validation."""

    def test_accepts_allowed_image_subtype(self, image_service: ImageService):
        assert image_service.parse_content_type("image/png") == "png"

    def test_is_case_insensitive_and_ignores_parameters(self, image_service: ImageService):
        assert image_service.parse_content_type("Image/PNG; charset=binary") == "png"

    @pytest.mark.parametrize("content_type", ["text/plain", "application/pdf", "video/png", "", None, "png"])
    def test_rejects_non_image_kinds(self, image_service: ImageService, content_type):
        with pytest.raises(ImageValidationError, match="only upload an image"):
            image_service.parse_content_type(content_type)

    def test_rejects_subtype_outside_allow_list(self, image_service: ImageService):
        with pytest.raises(ImageValidationError, match="Formats supported: png, jpg"):
            image_service.parse_content_type("image/gif")

    def test_allow_list_defaults_to_settings(self, fake_storage: InMemoryBlobStorage):
        service = ImageService(fake_storage)

        assert service.image_formats == ("png", "jpg")


class TestGenerateUniqueName:
    """Tests for collision-free name generation."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("taken_count", [0, 1, 3])
    async def test_retries_once_per_taken_name(self, db_session: AsyncSession, fake_storage, taken_count):
        """With N names already taken the generator is called exactly N+1 times."""
        taken = [f"taken{i:015d}.png" for i in range(taken_count)]
        for name in taken:
            db_session.add(StorageImage(image_name=name, uri=f"{CDN_URL}/{name}"))
        await db_session.commit()

        generator = CountingGenerator(taken + ["freshfreshfreshfresh.png"])
        service = ImageService(fake_storage, image_formats=["png"], name_generator=generator)

        name = await service.generate_unique_name(db_session, StorageImage, "png")

        assert name == "freshfreshfreshfresh.png"
        assert len(generator.calls) == taken_count + 1
        assert generator.calls[0] == ("png", 20)
        assert fake_storage.calls == []

    @pytest.mark.asyncio
    async def test_tables_are_checked_independently(self, db_session: AsyncSession, fake_storage):
        """A name used by a stored image is still free for a team member."""
        db_session.add(StorageImage(image_name="shared.png", uri=f"{CDN_URL}/shared.png"))
        await db_session.commit()

        generator = CountingGenerator(["shared.png"])
        service = ImageService(fake_storage, image_formats=["png"], name_generator=generator)

        assert await service.generate_unique_name(db_session, TeamMember, "png") == "shared.png"
        assert len(generator.calls) == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, db_session: AsyncSession, fake_storage):
        db_session.add(StorageImage(image_name="always.png", uri=f"{CDN_URL}/always.png"))
        await db_session.commit()

        generator = CountingGenerator(["always.png"] * 5)
        service = ImageService(
            fake_storage,
            image_formats=["png"],
            name_generator=generator,
            max_name_attempts=5
        )

        with pytest.raises(NameGenerationError):
            await service.generate_unique_name(db_session, StorageImage, "png")
        assert len(generator.calls) == 5


class TestStoreImage:
    """Tests for blob upload and URI resolution."""

    @pytest.mark.asyncio
    async def test_returns_uri_from_listing(self, image_service: ImageService, fake_storage: InMemoryBlobStorage):
        uri = await image_service.store_image(io.BytesIO(b"png-bytes"), "abc.png", "image/png")

        assert uri == f"{CDN_URL}/abc.png"
        assert fake_storage.blobs["abc.png"] == b"png-bytes"
        assert [op for op, _ in fake_storage.calls] == ["upload", "list"]

    @pytest.mark.asyncio
    async def test_upload_failure_carries_backend_status(self, image_service: ImageService, fake_storage):
        fake_storage.fail_upload = True

        with pytest.raises(BlobStoreError) as exc_info:
            await image_service.store_image(io.BytesIO(b"x"), "abc.png", "image/png")

        assert exc_info.value.status == "Upload failed: quota exceeded"
        assert fake_storage.operations("list") == []

    @pytest.mark.asyncio
    async def test_upload_failure_logs_key_reported_by_store(self, caplog):
        """The failure log names the object key the store reports, not just the requested name."""

        class PrefixingStorage(InMemoryBlobStorage):
            def upload(self, name, data, content_type=None):
                return BlobResponse(error=True, status="Upload failed: quota exceeded", name=f"media/{name}")

        service = ImageService(PrefixingStorage(), image_formats=["png"])

        with caplog.at_level(logging.ERROR, logger="app.services.image_service"):
            with pytest.raises(BlobStoreError):
                await service.store_image(io.BytesIO(b"x"), "abc.png", "image/png")

        failures = [r for r in caplog.records if getattr(r, "event", None) == "storage_failure"]
        assert len(failures) == 1
        assert failures[0].image_name == "media/abc.png"
        assert failures[0].operation == "upload"

    @pytest.mark.asyncio
    async def test_missing_from_listing_is_consistency_error(self, image_service: ImageService, fake_storage):
        fake_storage.hide_from_listing = True

        with pytest.raises(ConsistencyError, match="Could not find image"):
            await image_service.store_image(io.BytesIO(b"x"), "abc.png", "image/png")


class TestDeleteImage:
    """Tests for blob deletion."""

    @pytest.mark.asyncio
    async def test_deletes_blob(self, image_service: ImageService, fake_storage: InMemoryBlobStorage):
        fake_storage.blobs["old.png"] = b"x"

        await image_service.delete_image("old.png")

        assert "old.png" not in fake_storage.blobs

    @pytest.mark.asyncio
    async def test_failure_raises_blob_store_error(self, image_service: ImageService, fake_storage):
        fake_storage.fail_delete = True

        with pytest.raises(BlobStoreError, match="access denied"):
            await image_service.delete_image("old.png")

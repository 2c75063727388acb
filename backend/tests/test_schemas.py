"""
Tests for Pydantic schemas and settings validation.
"""
import pytest
from pydantic import ValidationError

from app.config import Settings
from app.schemas.team import TeamMemberForm


class TestTeamMemberForm:
    """Tests for TeamMemberForm schema."""

    def test_valid_form(self):
        form = TeamMemberForm(
            first_name="  Ada ",
            last_name="Lovelace",
            position="Engineer",
            email="ada@example.com",
            phone="+46 70 000 00 00",
            linkedin="https://www.linkedin.com/in/ada",
        )
        assert form.first_name == "Ada"
        assert form.email == "ada@example.com"

    def test_optional_fields_blank_become_none(self):
        form = TeamMemberForm(
            first_name="Ada",
            last_name="Lovelace",
            position="Engineer",
            email="",
            phone="   ",
            linkedin=None,
        )
        assert form.email is None
        assert form.phone is None
        assert form.linkedin is None

    @pytest.mark.parametrize("field", ["first_name", "last_name", "position"])
    def test_required_fields(self, field):
        data = {"first_name": "Ada", "last_name": "Lovelace", "position": "Engineer"}
        data[field] = "   "
        with pytest.raises(ValidationError) as exc_info:
            TeamMemberForm(**data)
        assert exc_info.value.errors()[0]["loc"] == (field,)

    def test_invalid_email(self):
        with pytest.raises(ValidationError):
            TeamMemberForm(first_name="Ada", last_name="Lovelace", position="Engineer", email="not-an-email")


class TestSettings:
    """Tests for configuration parsing."""

    def test_image_formats_are_normalized(self):
        settings = Settings(image_formats=[" PNG", "Jpg ", ""])
        assert settings.image_formats == ["png", "jpg"]

    def test_image_formats_from_environment(self, monkeypatch):
        monkeypatch.setenv("IMAGE_FORMATS", '["WEBP", "gif"]')
        assert Settings().image_formats == ["webp", "gif"]

    def test_is_sqlite(self):
        assert Settings(database_url="sqlite+aiosqlite:///./media.db").is_sqlite
        assert not Settings(database_url="postgresql+asyncpg://u:p@db/teammedia").is_sqlite

"""
Pydantic schemas for team member forms.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class TeamMemberForm(BaseModel):
    """Profile fields submitted by the create/edit team member forms."""
    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str = Field(..., min_length=1, max_length=100, description="First name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name")
    position: str = Field(..., min_length=1, max_length=150, description="Role shown on the team page")
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    linkedin: Optional[str] = Field(None, max_length=500, description="LinkedIn profile URL")

    @field_validator("email", "phone", "linkedin", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # HTML forms submit empty strings for untouched inputs
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and "@" not in value:
            raise ValueError("Email must contain '@'")
        return value

"""User schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator

from roster.schemas.common import RecordResponse


def check_confirmation(value: str | None, info: ValidationInfo) -> str | None:
    """Require password_confirmation to equal the password field."""
    # password is missing from info.data when it failed its own checks
    if "password" in info.data and value != info.data["password"]:
        raise ValueError("must match password")
    return value


class UserCreate(BaseModel):
    """Create a new user from multipart form fields."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    password_confirmation: str = Field(..., max_length=128)
    avatar: str = Field(..., min_length=1)

    @field_validator("password_confirmation")
    @classmethod
    def confirmation_matches(cls, value: str, info: ValidationInfo) -> str:
        return check_confirmation(value, info)


class UserUpdate(BaseModel):
    """Update a user. Every field is optional; absent fields are kept."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(None, min_length=1, max_length=255)
    email: EmailStr = Field(None, max_length=255)
    password: str = Field(None, min_length=6, max_length=128)
    password_confirmation: str = Field(None, max_length=128)
    avatar: str = Field(None, min_length=1)

    @field_validator("password_confirmation")
    @classmethod
    def confirmation_matches(cls, value: str, info: ValidationInfo) -> str:
        return check_confirmation(value, info)


class UserResponse(RecordResponse):
    """User information response. Never carries the password."""

    name: str | None = None
    email: str | None = None
    avatar: str | None = None

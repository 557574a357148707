"""Schemas shared by every resource type."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roster.models.enums import DeleteMode, SortField


class FindParams(BaseModel):
    """Query parameters accepted by list endpoints."""

    model_config = ConfigDict(extra="ignore")

    search: str | None = Field(None, max_length=255)
    sort_by: SortField | None = None
    limit: int | None = Field(None, ge=1, le=100)

    @field_validator("search")
    @classmethod
    def strip_search(cls, value: str | None) -> str | None:
        """Trim whitespace; a blank search means no search."""
        if value is None:
            return None
        return value.strip() or None


class DeleteParams(BaseModel):
    """Body of a DELETE request."""

    model_config = ConfigDict(extra="ignore")

    mode: DeleteMode


class RecordResponse(BaseModel):
    """Identity and lifecycle fields present on every record."""

    id: str
    key: str
    rev: str | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None
    deleted_at: datetime | None = None

    @field_validator("*", mode="after")
    @classmethod
    def assume_utc(cls, value):
        """Stored timestamps are UTC even when read back naive."""
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

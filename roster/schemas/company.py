"""Company schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from roster.schemas.common import RecordResponse


class CompanyCreate(BaseModel):
    """Create a new company."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    since: datetime | None = None


class CompanyUpdate(BaseModel):
    """Update a company. An explicit null for since clears it."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(None, min_length=1, max_length=255)
    since: datetime | None = None


class CompanyResponse(RecordResponse):
    """Company response."""

    name: str | None = None
    since: datetime | None = None

"""FastAPI dependencies for repositories, uploads and request parsing."""

from typing import Annotated, Any

from fastapi import Depends, Request
from pymongo.database import Database

from roster.config import Settings, get_settings
from roster.database import get_db
from roster.errors import FieldValidationError
from roster.models import COMPANY_SCHEMA, USER_SCHEMA
from roster.schemas.common import DeleteParams, FindParams
from roster.services.repository import RecordRepository
from roster.services.uploads import UploadExtractor
from roster.services.validation import validate_params

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_company_repository(
    db: Annotated[Database, Depends(get_db)],
) -> RecordRepository:
    """Get the company repository."""
    return RecordRepository(db, COMPANY_SCHEMA)


def get_user_repository(
    db: Annotated[Database, Depends(get_db)],
) -> RecordRepository:
    """Get the user repository."""
    return RecordRepository(db, USER_SCHEMA)


def get_upload_extractor(
    settings: Annotated[Settings, Depends(get_settings)],
) -> UploadExtractor:
    """Get an upload extractor writing into the storage directory."""
    return UploadExtractor(settings.storage_dir)


def get_find_params(request: Request) -> FindParams:
    """Validate list query parameters before anything touches the database."""
    return validate_params(FindParams, request.query_params)


async def read_body(request: Request) -> dict[str, Any]:
    """Read a JSON or form body as a flat mapping.

    File parts of a form body are skipped; an empty or unrecognised body
    yields an empty mapping.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        if not await request.body():
            return {}
        try:
            data = await request.json()
        except ValueError:
            raise FieldValidationError({"body": ["must be valid JSON"]}) from None
        if not isinstance(data, dict):
            raise FieldValidationError({"body": ["must be a JSON object"]})
        return data
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {name: value for name, value in form.multi_items() if isinstance(value, str)}
    return {}


async def get_delete_params(request: Request) -> DeleteParams:
    """Read the delete mode from the body, falling back to the query string."""
    data = await read_body(request)
    if "mode" not in data and "mode" in request.query_params:
        data["mode"] = request.query_params["mode"]
    return validate_params(DeleteParams, data)

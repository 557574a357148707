"""User API endpoints.

Create and update take multipart form data so an avatar image can be
uploaded alongside the text fields.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from roster.api.dependencies import (
    get_delete_params,
    get_find_params,
    get_upload_extractor,
    get_user_repository,
)
from roster.api.rate_limit import rate_limit
from roster.models.enums import DeleteMode
from roster.models.patch import Patch
from roster.schemas.common import DeleteParams, FindParams
from roster.schemas.user import UserCreate, UserResponse, UserUpdate
from roster.services.repository import RecordRepository
from roster.services.uploads import UploadExtractor
from roster.services.validation import validate_params

router = APIRouter(
    prefix="/api/v1/users",
    tags=["users"],
    dependencies=[Depends(rate_limit)],
)


@router.get("", response_model=list[UserResponse])
def find_users(
    params: Annotated[FindParams, Depends(get_find_params)],
    repo: Annotated[RecordRepository, Depends(get_user_repository)],
):
    """List users. Passwords are never included."""
    return repo.find(params)


@router.get("/{key}", response_model=UserResponse)
def show_user(
    key: str,
    repo: Annotated[RecordRepository, Depends(get_user_repository)],
):
    """Get a specific user."""
    return repo.show(key)


@router.post("", response_model=UserResponse)
async def create_user(
    request: Request,
    repo: Annotated[RecordRepository, Depends(get_user_repository)],
    extractor: Annotated[UploadExtractor, Depends(get_upload_extractor)],
):
    """Create a user from multipart form data.

    Fields are validated before the avatar is written, and the avatar is only
    kept once the record is stored, so a rejected request leaves no file
    behind.
    """
    async with request.form() as form:
        extracted = await extractor.extract(form)
        user_data = validate_params(UserCreate, extracted.values)
        async with extractor.stored(extracted):
            record = repo.create(user_data.model_dump())
    return record


@router.put("/{key}", response_model=UserResponse)
async def update_user(
    key: str,
    request: Request,
    repo: Annotated[RecordRepository, Depends(get_user_repository)],
    extractor: Annotated[UploadExtractor, Depends(get_upload_extractor)],
):
    """Update a user from multipart form data; absent fields are kept."""
    async with request.form() as form:
        extracted = await extractor.extract(form)
        user_data = validate_params(UserUpdate, extracted.values)
        async with extractor.stored(extracted):
            record = repo.update(key, Patch.from_model(user_data))
    return record


@router.delete("/{key}", response_model=None)
def delete_user(
    key: str,
    params: Annotated[DeleteParams, Depends(get_delete_params)],
    repo: Annotated[RecordRepository, Depends(get_user_repository)],
) -> UserResponse | Response:
    """Erase, trash or restore a user depending on mode."""
    if not params.mode.is_soft():
        repo.erase(key)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    if params.mode == DeleteMode.TRASH:
        record = repo.trash(key)
    else:
        record = repo.restore(key)
    return UserResponse.model_validate(record)

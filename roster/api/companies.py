"""Company API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status

from roster.api.dependencies import (
    get_company_repository,
    get_delete_params,
    get_find_params,
    read_body,
)
from roster.api.rate_limit import rate_limit
from roster.models.enums import DeleteMode
from roster.models.patch import Patch
from roster.schemas.common import DeleteParams, FindParams
from roster.schemas.company import CompanyCreate, CompanyResponse, CompanyUpdate
from roster.services.repository import RecordRepository
from roster.services.validation import validate_params

router = APIRouter(
    prefix="/api/v1/companies",
    tags=["companies"],
    dependencies=[Depends(rate_limit)],
)


@router.get("", response_model=list[CompanyResponse])
def find_companies(
    params: Annotated[FindParams, Depends(get_find_params)],
    repo: Annotated[RecordRepository, Depends(get_company_repository)],
):
    """List companies, optionally filtered by name, sorted and capped."""
    return repo.find(params)


@router.get("/{key}", response_model=CompanyResponse)
def show_company(
    key: str,
    repo: Annotated[RecordRepository, Depends(get_company_repository)],
):
    """Get a specific company."""
    return repo.show(key)


@router.post("", response_model=CompanyResponse)
async def create_company(
    request: Request,
    repo: Annotated[RecordRepository, Depends(get_company_repository)],
):
    """Create a company from a JSON or form body."""
    company_data = validate_params(CompanyCreate, await read_body(request))
    return repo.create(company_data.model_dump(exclude_none=True))


@router.put("/{key}", response_model=CompanyResponse)
async def update_company(
    key: str,
    request: Request,
    repo: Annotated[RecordRepository, Depends(get_company_repository)],
):
    """Update only the fields present in the body."""
    company_data = validate_params(CompanyUpdate, await read_body(request))
    return repo.update(key, Patch.from_model(company_data))


@router.delete("/{key}", response_model=None)
def delete_company(
    key: str,
    params: Annotated[DeleteParams, Depends(get_delete_params)],
    repo: Annotated[RecordRepository, Depends(get_company_repository)],
) -> CompanyResponse | Response:
    """Erase, trash or restore a company depending on mode."""
    if not params.mode.is_soft():
        repo.erase(key)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    if params.mode == DeleteMode.TRASH:
        record = repo.trash(key)
    else:
        record = repo.restore(key)
    return CompanyResponse.model_validate(record)

"""Pydantic schemas for API requests and responses."""

from roster.schemas.common import DeleteParams, FindParams, RecordResponse
from roster.schemas.company import CompanyCreate, CompanyResponse, CompanyUpdate
from roster.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "FindParams",
    "DeleteParams",
    "RecordResponse",
    "CompanyCreate",
    "CompanyUpdate",
    "CompanyResponse",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
]

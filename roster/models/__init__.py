"""Record schemas for the stored resource types."""

from roster.models.company import COMPANY_SCHEMA
from roster.models.patch import Patch
from roster.models.record import RecordHooks, RecordSchema
from roster.models.user import USER_SCHEMA, UserHooks

__all__ = [
    "COMPANY_SCHEMA",
    "USER_SCHEMA",
    "Patch",
    "RecordHooks",
    "RecordSchema",
    "UserHooks",
]

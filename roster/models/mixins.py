"""Timestamp and soft-delete helpers shared by all record types."""

import uuid
from datetime import UTC, datetime

from roster.models.patch import Patch


def utcnow() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(UTC)


def new_revision() -> str:
    """Opaque token identifying one stored version of a document."""
    return uuid.uuid4().hex


class TimestampMixin:
    """Stamps created_at / modified_at and a fresh revision on writes."""

    def stamp_created(self, values: dict) -> dict:
        now = utcnow()
        return {**values, "created_at": now, "modified_at": now, "_rev": new_revision()}

    def stamp_modified(self, patch: Patch) -> Patch:
        return patch.with_values(modified_at=utcnow(), _rev=new_revision())


class SoftDeleteMixin:
    """Builds the patches that trash and restore a record."""

    def trash_patch(self) -> Patch:
        return Patch({"deleted_at": utcnow(), "_rev": new_revision()})

    def restore_patch(self) -> Patch:
        return Patch({"_rev": new_revision()}, cleared=["deleted_at"])

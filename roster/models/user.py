"""User record schema."""

from typing import Any

from roster.models.record import RecordHooks, RecordSchema
from roster.services.passwords import get_password_hash


class UserHooks(RecordHooks):
    """Hash passwords and never persist the confirmation field."""

    def prepare(self, values: dict[str, Any]) -> dict[str, Any]:
        prepared = dict(values)
        prepared.pop("password_confirmation", None)
        if prepared.get("password") is not None:
            prepared["password"] = get_password_hash(prepared["password"])
        return prepared


USER_SCHEMA = RecordSchema(
    collection="users",
    fields=("name", "email", "password", "avatar", "created_at", "modified_at", "deleted_at"),
    hidden=("password",),
    hooks=UserHooks(),
)

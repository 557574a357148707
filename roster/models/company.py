"""Company record schema."""

from roster.models.record import RecordSchema

COMPANY_SCHEMA = RecordSchema(
    collection="companies",
    fields=("name", "since", "created_at", "modified_at", "deleted_at"),
)

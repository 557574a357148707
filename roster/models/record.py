"""Record schema descriptions used by the generic repository."""

from dataclasses import dataclass, field
from typing import Any

from roster.models.mixins import SoftDeleteMixin, TimestampMixin
from roster.models.patch import Patch


class RecordHooks(TimestampMixin, SoftDeleteMixin):
    """Per-type hooks applied to values before they are written.

    The default implementation writes values unchanged.
    """

    def prepare(self, values: dict[str, Any]) -> dict[str, Any]:
        return dict(values)

    def prepare_patch(self, patch: Patch) -> Patch:
        return Patch(self.prepare(patch.values), patch.cleared)


@dataclass(frozen=True)
class RecordSchema:
    """Describes one resource type stored as documents in a collection."""

    collection: str
    fields: tuple[str, ...]
    searchable: str = "name"
    hidden: tuple[str, ...] = ()
    hooks: RecordHooks = field(default_factory=RecordHooks)

    def document_id(self, key: str) -> str:
        """Collection-qualified identifier for a key."""
        return f"{self.collection}/{key}"

    def projection(self) -> dict[str, bool] | None:
        """Read projection that strips hidden fields, if there are any."""
        if not self.hidden:
            return None
        return {name: False for name in self.hidden}

    def to_record(self, document: dict[str, Any]) -> dict[str, Any]:
        """Turn a stored document into its public representation."""
        record = {name: value for name, value in document.items() if name not in self.hidden}
        key = str(record.pop("_id"))
        record["key"] = key
        record["id"] = self.document_id(key)
        record["rev"] = record.pop("_rev", None)
        return record

    def writable(self, values: dict[str, Any]) -> dict[str, Any]:
        """Drop values for fields the schema does not declare."""
        return {name: value for name, value in values.items() if name in self.fields}

    def restrict(self, patch: Patch) -> Patch:
        """Limit a patch to the declared fields."""
        return Patch(self.writable(patch.values), patch.cleared.intersection(self.fields))

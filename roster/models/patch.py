"""Tri-state partial updates."""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel


class Patch:
    """A partial update: fields to set and fields to remove.

    Fields named in neither are left as stored. A cleared field is removed
    from the document rather than set to null.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, cleared: Iterable[str] = ()):
        self.values: dict[str, Any] = dict(values or {})
        self.cleared: set[str] = set(cleared)
        overlap = self.cleared.intersection(self.values)
        if overlap:
            raise ValueError(f"Fields both set and cleared: {sorted(overlap)}")

    @classmethod
    def from_model(cls, model: BaseModel) -> "Patch":
        """Build a patch from the fields explicitly supplied to a model.

        An explicit None clears the field; fields never supplied stay untouched.
        """
        values = {}
        cleared = []
        for name in model.model_fields_set:
            value = getattr(model, name)
            if value is None:
                cleared.append(name)
            else:
                values[name] = value
        return cls(values, cleared)

    def with_values(self, **values: Any) -> "Patch":
        """Return a copy with extra fields set."""
        merged = {**self.values, **values}
        return Patch(merged, self.cleared - merged.keys())

    def to_update(self) -> dict[str, dict[str, Any]]:
        """Render as a MongoDB update document, omitting empty operators."""
        update: dict[str, dict[str, Any]] = {}
        if self.values:
            update["$set"] = dict(self.values)
        if self.cleared:
            update["$unset"] = {name: "" for name in sorted(self.cleared)}
        return update

    def __bool__(self) -> bool:
        return bool(self.values or self.cleared)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Patch):
            return NotImplemented
        return self.values == other.values and self.cleared == other.cleared

    def __repr__(self) -> str:
        return f"Patch(values={self.values!r}, cleared={sorted(self.cleared)!r})"

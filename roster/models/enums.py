"""Enums for request parameters."""

from enum import Enum


class SortField(str, Enum):
    """Fields a listing may be sorted by."""

    NAME = "name"
    SINCE = "since"


class DeleteMode(str, Enum):
    """What a DELETE request does to a record."""

    ERASE = "erase"
    TRASH = "trash"
    RESTORE = "restore"

    def is_soft(self) -> bool:
        """Check if this mode keeps the document in storage."""
        return self != DeleteMode.ERASE

"""Domain errors raised by validation, repositories and uploads."""

from fastapi import status


class RosterError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


class FieldValidationError(RosterError):
    """Input failed validation; carries field name -> list of reasons."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation failed"

    def __init__(self, errors: dict[str, list[str]], detail: str | None = None):
        super().__init__(detail)
        self.errors = errors


class MalformedUploadError(FieldValidationError):
    """A multipart part could not be decoded."""


class NotFoundError(RosterError):
    status_code = status.HTTP_404_NOT_FOUND
    detail = "Record not found"


class ConflictError(RosterError):
    status_code = status.HTTP_409_CONFLICT
    detail = "Record conflicts with an existing one"


class TransientError(RosterError):
    """The database could not be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Database unavailable"


class StorageError(RosterError):
    """An uploaded file could not be written."""

    detail = "Failed to store uploaded file"

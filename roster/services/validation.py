"""Turn raw request parameters into validated models."""

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from roster.errors import FieldValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def error_map(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by field name."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def validate_params(model: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """Validate a mapping against a schema.

    Raises FieldValidationError with field-level reasons on failure.
    """
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        raise FieldValidationError(error_map(e)) from None

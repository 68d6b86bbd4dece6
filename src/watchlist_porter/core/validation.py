"""Structural validation of inbound records and requests.

Unlike the normalizers, everything here is strict: malformed input raises
:class:`SchemaValidationError` with one :class:`FieldError` per problem.
"""

from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..utils.exceptions import FieldError, SchemaValidationError
from .models import BulkImportRequest, ExportResponse, PreviewItem, RawRow

ModelT = TypeVar("ModelT", bound=BaseModel)


def field_errors(error: ValidationError) -> List[FieldError]:
    """Convert a pydantic validation error into field errors.

    Args:
        error: Pydantic validation error.

    Returns:
        One field error per reported problem, with dotted field paths
        such as ``items.0.rating``.
    """
    return [
        FieldError(
            path=".".join(str(part) for part in detail["loc"]),
            message=detail["msg"],
        )
        for detail in error.errors()
    ]


def validate_model(model_cls: Type[ModelT], data: Any) -> ModelT:
    """Validate data against a schema.

    Args:
        model_cls: Schema model class.
        data: Input data (mapping or model instance).

    Returns:
        Validated model instance.

    Raises:
        SchemaValidationError: If the data does not satisfy the schema.
    """
    if isinstance(data, model_cls):
        return data

    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError(model_cls.__name__, field_errors(e)) from e


def validate_raw_row(data: Any) -> RawRow:
    """Validate a single import row."""
    return validate_model(RawRow, data)


def validate_preview_item(data: Any) -> PreviewItem:
    """Validate a preview item."""
    return validate_model(PreviewItem, data)


def validate_bulk_import_request(data: Any) -> BulkImportRequest:
    """Validate a bulk import request.

    Also accepts a bare list of preview items, which is wrapped in a request
    with default options.
    """
    if isinstance(data, list):
        data = {"items": data}
    return validate_model(BulkImportRequest, data)


def validate_export_response(data: Any) -> ExportResponse:
    """Validate an export envelope."""
    return validate_model(ExportResponse, data)

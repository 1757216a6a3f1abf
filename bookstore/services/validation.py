"""Payload validation for book create and update requests.

``BOOK_SCHEMA`` describes the field contract; the strict pydantic models in
``bookstore.models.book_model`` enforce it. ``validate`` never raises for a
rejected payload, it returns a ``ValidationResult`` listing one message per
offending field.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from pydantic import ValidationError

from bookstore.models.book_model import BookCreate, BookUpdate


class FieldSpec(NamedTuple):
    type: type
    required: bool = True


BOOK_SCHEMA: Dict[str, FieldSpec] = {
    "isbn": FieldSpec(str),
    "amazon_url": FieldSpec(str),
    "author": FieldSpec(str),
    "language": FieldSpec(str),
    "pages": FieldSpec(int),
    "publisher": FieldSpec(str),
    "title": FieldSpec(str),
    "year": FieldSpec(int),
}

TYPE_NAMES = {str: "string", int: "integer"}


class ValidationMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"


@dataclass
class ValidationResult:
    book: Optional[Dict[str, Any]] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _describe(error: dict) -> str:
    name = ".".join(str(part) for part in error["loc"]) or "payload"
    kind = error["type"]
    field_spec = BOOK_SCHEMA.get(name)

    if kind == "missing":
        return f"{name} is required"
    if kind == "extra_forbidden":
        return f"{name} is not allowed"
    if kind.endswith("_type") and field_spec is not None:
        return f"{name} must be of type {TYPE_NAMES[field_spec.type]}"
    if kind == "greater_than":
        return f"{name} must be greater than {error['ctx']['gt']}"
    if kind == "greater_than_equal":
        return f"{name} must be greater than or equal to {error['ctx']['ge']}"
    if kind == "less_than_equal":
        return f"{name} must be less than or equal to {error['ctx']['le']}"
    if kind == "string_pattern_mismatch":
        return f"{name} must not contain NUL characters"
    if kind == "string_too_short":
        return f"{name} must not be empty"
    return f"{name}: {error['msg']}"


def validate(payload: Any, mode: ValidationMode) -> ValidationResult:
    """Check a decoded JSON payload against the book schema.

    In update mode any ``isbn`` in the body is dropped; the isbn from the
    route identifies the book.
    """
    if not isinstance(payload, dict):
        return ValidationResult(errors=["payload must be of type object"])

    data = dict(payload)
    if mode == ValidationMode.UPDATE:
        data.pop("isbn", None)
        model = BookUpdate
    else:
        model = BookCreate

    try:
        book = model.model_validate(data)
    except ValidationError as exc:
        return ValidationResult(errors=[_describe(error) for error in exc.errors()])
    return ValidationResult(book=book.model_dump())

"""
Record validator.

``validate`` turns a loosely typed JSON object into ``StudentFields``.
Required fields are checked one by one in ``REQUIRED_FIELDS`` order and
the first absent field is reported, so a body missing both ``name`` and
``age`` always fails on ``name``.  Text fields are absent when blank
after trimming; numeric fields only when missing or null, so ``0`` is a
valid age or score.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ..core.exceptions import InvalidFieldError, MissingFieldError, RecordValidationError
from ..schemas.student import StudentFields

REQUIRED_FIELDS = ("name", "age", "gender", "midterm", "final")
TEXT_FIELDS = frozenset({"name", "gender"})


def _is_missing(field: str, value: Any) -> bool:
    if value is None:
        return True
    if field in TEXT_FIELDS and isinstance(value, str):
        return not value.strip()
    return False


def validate(candidate: Any) -> StudentFields:
    """Validate a submitted record and return its coerced fields.

    Raises
    ------
    MissingFieldError
        For the first required field that is absent.
    InvalidFieldError
        When a present value cannot be coerced to the field's type.
    RecordValidationError
        When ``candidate`` is not a JSON object at all.
    """
    if not isinstance(candidate, Mapping):
        raise RecordValidationError("Request body must be a JSON object")

    for field in REQUIRED_FIELDS:
        if _is_missing(field, candidate.get(field)):
            raise MissingFieldError(field)

    # Booleans are ints in Python; a checkbox value is never a valid score.
    for field in REQUIRED_FIELDS:
        if isinstance(candidate[field], bool):
            raise InvalidFieldError(field, "expected a number or text, got a boolean")

    try:
        return StudentFields(**{field: candidate[field] for field in REQUIRED_FIELDS})
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = first.get("loc") or ("record",)
        raise InvalidFieldError(str(loc[0]), first.get("msg", "invalid value")) from exc

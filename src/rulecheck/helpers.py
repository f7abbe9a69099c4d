"""Small conveniences around records and errors."""

from collections.abc import Mapping
from typing import Any

from .predicates import is_zero
from .resolver import get_field, is_record, record_field_names


def is_record_zero(record: Any) -> bool:
    """Return True when every field of a record holds its zero value.

    Nested records are zero when all of their own fields are.

    Raises:
        TypeError: If record is not a dataclass or pydantic model instance
    """
    if record is None or isinstance(record, Mapping) or not is_record(record):
        raise TypeError("record must be a dataclass or pydantic model instance")

    for name in record_field_names(type(record)):
        value = get_field(record, name)
        if is_record(value) and not isinstance(value, Mapping):
            if not is_record_zero(value):
                return False
        elif not is_zero(value):
            return False
    return True


def is_validation_error(err: Any) -> bool:
    """Check whether an error carries the validation error marker."""
    marker = getattr(err, "is_validation_error", None)
    return callable(marker) and bool(marker())

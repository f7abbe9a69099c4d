"""Copy violations onto an arbitrary error record by field name.

The target is an ErrorTarget: a mutable holder whose ``value`` is either None
or an instance of ``record_type`` (a dataclass or pydantic model class).
Violation messages land on fields annotated ``list[str]``; violation causes
land on fields annotated as a list of exceptions (optionally ``| None``).
Groups whose field is missing or differently typed are skipped.
"""

import dataclasses
import logging
import types
import typing
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import TargetShapeError
from .models import Violation
from .resolver import record_field_names

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ErrorTarget(Generic[T]):
    """Holder for an optional error record.

    Attributes:
        record_type: Dataclass or pydantic model class to materialize
        value: Current record, None when absent
    """
    record_type: type[T]
    value: T | None = None


class SlotKind(str, Enum):
    """What a target field can receive."""
    MESSAGES = "messages"
    CAUSES = "causes"


def _is_record_type(record_type: Any) -> bool:
    if not isinstance(record_type, type):
        return False
    return issubclass(record_type, BaseModel) or dataclasses.is_dataclass(record_type)


def _new_record(record_type: type) -> Any:
    try:
        return record_type()
    except (TypeError, ValidationError) as e:
        raise TargetShapeError("record_type must be constructible without arguments") from e


def check_target(target: Any) -> None:
    """Fail fast on a target that cannot receive violations."""
    if not isinstance(target, ErrorTarget):
        raise TargetShapeError(f"target must be an ErrorTarget, got {type(target).__name__}")
    if not _is_record_type(target.record_type):
        raise TargetShapeError("target record_type must be a dataclass or pydantic model class")
    if target.value is not None and not isinstance(target.value, target.record_type):
        raise TargetShapeError(
            f"target value must be a {target.record_type.__name__} or None, "
            f"got {type(target.value).__name__}"
        )
    if target.value is None:
        _new_record(target.record_type)


def _slot_kind_of(hint: Any) -> SlotKind | None:
    if typing.get_origin(hint) is not list:
        return None
    args = typing.get_args(hint)
    if len(args) != 1:
        return None

    item = args[0]
    if item is str:
        return SlotKind.MESSAGES

    if typing.get_origin(item) in (typing.Union, types.UnionType):
        members = [a for a in typing.get_args(item) if a is not type(None)]
        if len(members) != 1:
            return None
        item = members[0]

    if isinstance(item, type) and issubclass(item, BaseException):
        return SlotKind.CAUSES
    return None


@lru_cache(maxsize=256)
def slot_kinds(record_type: type) -> dict[str, SlotKind]:
    """Assignable fields of a record type and what each accepts."""
    if issubclass(record_type, BaseModel):
        hints = {name: info.annotation for name, info in record_type.model_fields.items()}
    else:
        try:
            hints = typing.get_type_hints(record_type)
        except (NameError, TypeError) as e:
            logger.debug(f"Cannot resolve annotations of {record_type.__name__}: {e}")
            return {}

    kinds = {}
    for name in record_field_names(record_type):
        kind = _slot_kind_of(hints.get(name))
        if kind is not None:
            kinds[name] = kind
    return kinds


def group_violations(violations: Iterable[Violation]) -> tuple[dict[str, list[str]], dict[str, list[BaseException | None]]]:
    """Group messages and causes by field, keeping violation order in each group."""
    messages: dict[str, list[str]] = {}
    causes: dict[str, list[BaseException | None]] = {}
    for violation in violations:
        messages.setdefault(violation.field, []).append(violation.message)
        causes.setdefault(violation.field, []).append(violation.cause)
    return messages, causes


def apply(violations: Iterable[Violation] | None, target: ErrorTarget) -> None:
    """Assign grouped violations to matching fields of the target record.

    An absent target value is replaced by a fresh ``record_type()`` first.
    Fields without a violated counterpart are left untouched.
    """
    check_target(target)
    messages, causes = group_violations(violations or ())

    if target.value is None:
        target.value = _new_record(target.record_type)
    record = target.value
    kinds = slot_kinds(target.record_type)

    for groups, kind in ((messages, SlotKind.MESSAGES), (causes, SlotKind.CAUSES)):
        for field, group in groups.items():
            if kinds.get(field) is kind:
                setattr(record, field, group)
            else:
                logger.debug(f"Skipping {kind.value} for '{field}': no matching field on {target.record_type.__name__}")


def apply_and_clear(violations: Iterable[Violation] | None, target: ErrorTarget) -> None:
    """Like apply, but an empty violation set leaves the target absent."""
    check_target(target)
    violations = list(violations or ())
    if not violations:
        target.value = None
        return
    apply(violations, target)

"""Primitive predicates evaluated against single field values.

A predicate is a callable ``(value, param) -> bool`` returning True when the
value satisfies the constraint. The primitive checks are pydantic validators:
bounds are ``annotated_types`` constraints, formats are pydantic types
(``EmailStr``, ``AnyUrl``, ``IPvAnyAddress``, ``UUID``) and character classes
are ``StringConstraints`` patterns, each wrapped in a cached ``TypeAdapter``.

``check`` runs a whole constraint spec against one value and reports the first
failing constraint; ``check_pair`` compares two values directly for the
cross-field constraints.

Sized values (strings, bytes, collections) are measured by length, real
numbers by value. Parameters that cannot be read as numbers raise
InvalidConstraintError.
"""

import operator
import re
from collections.abc import Callable, Mapping, Sized
from datetime import date, datetime, time, timedelta
from functools import lru_cache
from numbers import Real
from typing import Annotated, Any, Literal, NamedTuple
from uuid import UUID

from annotated_types import Ge, Gt, Interval, Le, Lt
from pydantic import (
    AnyUrl,
    EmailStr,
    IPvAnyAddress,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

from .errors import InvalidConstraintError
from .tags import parse_token, split_tag

Predicate = Callable[[Any, str], bool]

OMITEMPTY = "omitempty"


class PredicateFailure(NamedTuple):
    """A failed constraint and the parameter it was evaluated with."""
    tag: str
    param: str


def is_zero(value: Any) -> bool:
    """Check whether a value is the zero value of its kind."""
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, Real):
        return value == 0
    if isinstance(value, str | bytes | bytearray | Sized):
        return len(value) == 0
    return False


def _conforms(adapter: TypeAdapter, value: Any) -> bool:
    try:
        adapter.validate_python(value)
    except ValidationError:
        return False
    return True


_NUMBER = TypeAdapter(int | float)


def _number(tag: str, param: str) -> int | float:
    try:
        return _NUMBER.validate_python(param)
    except ValidationError:
        raise InvalidConstraintError(tag, f"bad parameter '{param}'") from None


def _measure(tag: str, value: Any) -> int | float:
    if isinstance(value, bool) or value is None:
        raise InvalidConstraintError(tag, f"bad field type {type(value).__name__}")
    if isinstance(value, Real):
        return value
    if isinstance(value, str | bytes | bytearray | Sized):
        return len(value)
    raise InvalidConstraintError(tag, f"bad field type {type(value).__name__}")


_LIMITS: Mapping[str, Callable[[int | float], Any]] = {
    "len": lambda limit: Interval(ge=limit, le=limit),
    "eq": lambda limit: Interval(ge=limit, le=limit),
    "min": Ge,
    "max": Le,
    "lt": Lt,
    "lte": Le,
    "gt": Gt,
    "gte": Ge,
}


@lru_cache(maxsize=512)
def _bound_adapter(tag: str, param: str) -> TypeAdapter:
    return TypeAdapter(Annotated[float, _LIMITS[tag](_number(tag, param))])


def _bound(tag: str) -> Predicate:
    def predicate(value: Any, param: str) -> bool:
        return _conforms(_bound_adapter(tag, param), _measure(tag, value))
    return predicate


def has_value(value: Any, param: str = "") -> bool:
    return not is_zero(value)


def strict_required(value: Any, param: str = "") -> bool:
    """Non-blank after trimming whitespace."""
    if value is None:
        return False
    return str(value).strip() != ""


def _equals(value: Any, param: str) -> bool:
    if isinstance(value, str):
        return value == param
    if isinstance(value, bool):
        return str(value).lower() == param.lower()
    return _conforms(_bound_adapter("eq", param), _measure("eq", value))


def _not_equals(value: Any, param: str) -> bool:
    return not _equals(value, param)


@lru_cache(maxsize=256)
def _choice_adapter(param: str, numeric: bool) -> TypeAdapter:
    choices = param.split()
    if numeric:
        choices = [_number("oneof", choice) for choice in choices]
    return TypeAdapter(Literal[tuple(choices)])


def _one_of(value: Any, param: str) -> bool:
    if not param.split():
        return False
    if isinstance(value, str):
        return _conforms(_choice_adapter(param, False), value)
    if isinstance(value, Real) and not isinstance(value, bool):
        return _conforms(_choice_adapter(param, True), value)
    raise InvalidConstraintError("oneof", f"bad field type {type(value).__name__}")


def pattern_predicate(pattern: str | re.Pattern) -> Predicate:
    """Build a predicate searching string values with a Python regular expression."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def predicate(value: Any, param: str) -> bool:
        return isinstance(value, str) and compiled.search(value) is not None
    return predicate


def _string_format(adapter: TypeAdapter, accept: Callable[[Any], bool] | None = None) -> Predicate:
    def predicate(value: Any, param: str) -> bool:
        if not isinstance(value, str):
            return False
        try:
            parsed = adapter.validate_python(value)
        except ValidationError:
            return False
        return accept is None or accept(parsed)
    return predicate


def _characters(pattern: str) -> TypeAdapter:
    return TypeAdapter(Annotated[str, StringConstraints(strict=True, pattern=pattern)])


_IP_ADDRESS = TypeAdapter(IPvAnyAddress)


def _substring(test: Callable[[str, str], bool]) -> Predicate:
    def predicate(value: Any, param: str) -> bool:
        return isinstance(value, str) and test(value, param)
    return predicate


PRIMITIVES: Mapping[str, Predicate] = {
    "required": has_value,
    "len": _bound("len"),
    "min": _bound("min"),
    "max": _bound("max"),
    "eq": _equals,
    "ne": _not_equals,
    "lt": _bound("lt"),
    "lte": _bound("lte"),
    "gt": _bound("gt"),
    "gte": _bound("gte"),
    "oneof": _one_of,
    "email": _string_format(TypeAdapter(EmailStr)),
    "url": _string_format(TypeAdapter(AnyUrl)),
    "ip": _string_format(_IP_ADDRESS),
    "ipv4": _string_format(_IP_ADDRESS, lambda address: address.version == 4),
    "ipv6": _string_format(_IP_ADDRESS, lambda address: address.version == 6),
    "uuid": _string_format(TypeAdapter(UUID)),
    "numeric": _string_format(_characters(r"^[-+]?[0-9]+(\.[0-9]+)?$")),
    "number": _string_format(_characters(r"^[0-9]+$")),
    "alpha": _string_format(_characters(r"^[a-zA-Z]+$")),
    "alphanum": _string_format(_characters(r"^[a-zA-Z0-9]+$")),
    "contains": _substring(lambda value, param: param in value),
    "excludes": _substring(lambda value, param: param not in value),
    "startswith": _substring(str.startswith),
    "endswith": _substring(str.endswith),
}


_ORDERED = (date, datetime, time, timedelta)


def _pair_operands(a: Any, b: Any) -> tuple[Any, Any] | None:
    if isinstance(a, Real) and isinstance(b, Real) and not isinstance(a, bool) and not isinstance(b, bool):
        return a, b
    if isinstance(a, _ORDERED) and type(a) is type(b):
        return a, b
    if isinstance(a, str | bytes | bytearray | Sized) and isinstance(b, str | bytes | bytearray | Sized):
        return len(a), len(b)
    return None


def _pair(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def predicate(a: Any, b: Any) -> bool:
        operands = _pair_operands(a, b)
        if operands is None:
            return False
        return compare(*operands)
    return predicate


CROSS_FIELD: Mapping[str, Callable[[Any, Any], bool]] = {
    "eqfield": operator.eq,
    "nefield": operator.ne,
    "gtfield": _pair(operator.gt),
    "gtefield": _pair(operator.ge),
    "ltfield": _pair(operator.lt),
    "ltefield": _pair(operator.le),
}


def is_cross_field(name: str) -> bool:
    return name in CROSS_FIELD


def check_pair(value: Any, other: Any, tag: str) -> bool:
    """Compare a field value against another field's value.

    Args:
        value: Value of the rule's own field
        other: Value of the referenced field
        tag: Cross-field constraint name, e.g. ``eqfield``

    Returns:
        True when the constraint holds
    """
    compare = CROSS_FIELD.get(tag)
    if compare is None:
        raise InvalidConstraintError(tag, "undefined cross-field constraint")
    return compare(value, other)


def check(value: Any, tag: str, predicates: Mapping[str, Predicate]) -> list[PredicateFailure]:
    """Evaluate a constraint spec against one value.

    Every token is checked for a registered predicate before anything runs.
    Evaluation stops at the first failing token; ``omitempty`` skips the rest
    of the chain for zero values.

    Args:
        value: Field value to check
        tag: Comma-separated constraint spec
        predicates: Registered predicates by constraint name

    Returns:
        The failing constraint, or an empty list

    Raises:
        InvalidConstraintError: If a token has no registered predicate or a bad parameter
    """
    if tag == "":
        return []

    tokens = [parse_token(token) for token in split_tag(tag)]
    for name, _ in tokens:
        if name != OMITEMPTY and name not in predicates:
            raise InvalidConstraintError(name, "undefined validation")

    for name, param in tokens:
        if name == OMITEMPTY:
            if is_zero(value):
                return []
            continue

        if not predicates[name](value, param):
            return [PredicateFailure(name, param)]

    return []

"""Nested field resolution with optional alternate naming.

Records are dataclass instances, pydantic models or mappings. A dotted path is
walked one segment at a time; a missing field, a non-record intermediate value
or a ``None`` value at any depth makes the path unreachable, signalled by the
MISSING marker. Whether that is fatal is the caller's decision.

Alternate names come from a naming scheme (e.g. ``json``). For a given record
type and field the external name is looked up in an explicit AliasTable first,
then in the field declaration itself: dataclass ``field(metadata={scheme: ...})``
or pydantic ``Field(json_schema_extra={scheme: ...})``; the ``alias`` scheme
also picks up pydantic's own serialization alias. Only the first
comma-separated component is used and ``-`` means "keep the original name".
"""

import dataclasses
import logging
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from pydantic import BaseModel

from .tags import TAG_IGNORE, split_tag

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "."
ALIAS_SCHEME = "alias"


class _Missing:
    """Marker for an unreachable field."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


class AliasTable:
    """Explicit external names per record type and naming scheme.

    Registered names take precedence over names declared on the fields.
    """

    def __init__(self):
        self._names: dict[tuple[type, str], dict[str, str]] = {}

    def register(self, record_type: type, scheme: str, names: Mapping[str, str]) -> None:
        """Register ``field name -> external name`` pairs for a record type.

        Pairs for the same type and scheme are merged, a repeated field name
        replaces the earlier external name.
        """
        if not scheme:
            raise ValueError("naming scheme can not be empty")
        self._names.setdefault((record_type, scheme), {}).update(names)
        logger.debug(f"Registered {len(names)} '{scheme}' aliases for {record_type.__name__}")

    def lookup(self, record_type: type, name: str, scheme: str) -> str | None:
        """Return the registered tag text, or None when nothing is registered."""
        return self._names.get((record_type, scheme), {}).get(name)

    def copy(self) -> "AliasTable":
        table = AliasTable()
        table._names = {key: dict(names) for key, names in self._names.items()}
        return table

    def __len__(self) -> int:
        return sum(len(names) for names in self._names.values())


def is_record(value: Any) -> bool:
    """Check whether a value can be walked by field name."""
    if isinstance(value, BaseModel | Mapping):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


@lru_cache(maxsize=512)
def record_field_names(record_type: type) -> frozenset[str]:
    """Declared field names of a dataclass or pydantic model type."""
    if issubclass(record_type, BaseModel):
        return frozenset(record_type.model_fields)
    if dataclasses.is_dataclass(record_type):
        return frozenset(f.name for f in dataclasses.fields(record_type))
    return frozenset()


@lru_cache(maxsize=512)
def _declared_tag(record_type: type, name: str, scheme: str) -> str:
    if issubclass(record_type, BaseModel):
        info = record_type.model_fields.get(name)
        if info is None:
            return ""
        extra = info.json_schema_extra
        if isinstance(extra, dict) and scheme in extra:
            return str(extra[scheme])
        if scheme == ALIAS_SCHEME:
            return info.serialization_alias or info.alias or ""
        return ""

    if dataclasses.is_dataclass(record_type):
        for f in dataclasses.fields(record_type):
            if f.name == name:
                return str(f.metadata.get(scheme, ""))
    return ""


def alternate_name(record: Any, name: str, scheme: str, aliases: AliasTable | None = None) -> str:
    """Return the external name of a field under a naming scheme.

    Returns "" if the scheme is empty, the record is a mapping, nothing is
    declared, or the declared name is the ignore marker.
    """
    if not scheme or isinstance(record, Mapping):
        return ""

    record_type = type(record)
    tag = aliases.lookup(record_type, name, scheme) if aliases is not None else None
    if tag is None:
        tag = _declared_tag(record_type, name, scheme)

    if not tag or tag == TAG_IGNORE:
        return ""
    return split_tag(tag)[0]


def get_field(record: Any, name: str) -> Any:
    """Read one field from a record, MISSING if the record has no such field."""
    if isinstance(record, Mapping):
        return record[name] if name in record else MISSING
    if name in record_field_names(type(record)):
        return getattr(record, name)
    return MISSING


def resolve(root: Any, path: str, scheme: str = "", aliases: AliasTable | None = None) -> tuple[Any, str]:
    """Walk a dotted path from a root record.

    Args:
        root: Record to start from
        path: Dot-separated field path
        scheme: Optional naming scheme used to build the renamed path
        aliases: Explicit alias registrations consulted before declared names

    Returns:
        ``(value, renamed_path)``; ``(MISSING, "")`` when the path is unreachable.
        A ``None`` value anywhere on the path, the leaf included, is unreachable.
    """
    value = root
    names: list[str] = []

    for name in path.split(PATH_SEPARATOR):
        if value is MISSING or value is None or not is_record(value):
            return MISSING, ""

        names.append(alternate_name(value, name, scheme, aliases) or name)
        value = get_field(value, name)

    if value is MISSING or value is None:
        return MISSING, ""

    return value, PATH_SEPARATOR.join(names)

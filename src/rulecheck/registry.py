"""Predicate, inclusion, template and alias registration.

A Registry is the mutable builder: register everything, then call ``build()``
to get an immutable Validator. Later registrations do not affect validators
that were already built. A Registry itself is not thread-safe; finish all
registration before sharing the built Validator across threads.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from .errors import EmptyParameterNameError
from .predicates import PRIMITIVES, Predicate, pattern_predicate, strict_required
from .resolver import AliasTable
from .templates import check_templates
from .validator import Validator

if TYPE_CHECKING:
    from .config import RulecheckConfig

logger = logging.getLogger(__name__)

INCLUSION = "inclusion"

ZIPCODE_JP_PATTERN = r"^\d{3}-\d{4}$"
SIMPLE_EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+$"


def inclusion_predicate(inclusions: Mapping[str, tuple]) -> Predicate:
    """Membership in the list registered under the constraint's parameter.

    An unregistered parameter fails for every value.
    """
    def predicate(value: Any, param: str) -> bool:
        return value in inclusions.get(param, ())
    return predicate


class Registry:
    """Builder for Validator instances, seeded with the built-in predicates."""

    def __init__(self, naming_scheme: str = ""):
        self.naming_scheme = naming_scheme
        self._predicates: dict[str, Predicate] = dict(PRIMITIVES)
        self._inclusions: dict[str, tuple] = {}
        self._templates: dict[str, str] = {}
        self._aliases = AliasTable()

        self._inclusion = inclusion_predicate(self._inclusions)
        self._predicates[INCLUSION] = self._inclusion
        self.register_pattern("zipcode_jp", ZIPCODE_JP_PATTERN)
        self.register_pattern("simple_email", SIMPLE_EMAIL_PATTERN)
        self.register("strict_required", strict_required)

    @classmethod
    def from_config(cls, config: "RulecheckConfig") -> "Registry":
        """Create a registry with the patterns, inclusions and templates of a config."""
        registry = cls(naming_scheme=config.naming_scheme)
        for name, pattern in config.patterns.items():
            registry.register_pattern(name, pattern)
        for param, allowed in config.inclusions.items():
            registry.register_inclusion(param, allowed)
        if config.templates:
            registry.register_templates(config.templates)
        return registry

    def register(self, name: str, fn: Predicate) -> None:
        """Register a predicate under a constraint name.

        An existing predicate with the same name is replaced.
        """
        if not name:
            raise ValueError("constraint name can not be empty")
        self._predicates[name] = fn
        logger.debug(f"Registered predicate '{name}'")

    def register_pattern(self, name: str, pattern: str) -> None:
        """Register a predicate matching string values against a regular expression.

        The pattern is compiled once; ``re.error`` propagates for a bad pattern.
        """
        self.register(name, pattern_predicate(re.compile(pattern)))

    def register_inclusion(self, param: str, allowed: Iterable[Any]) -> None:
        """Register the allowed values for ``inclusion=<param>``.

        Registering the same param again replaces the earlier list.

        Raises:
            EmptyParameterNameError: If param is empty
            TypeError: If allowed is not a list-like collection
        """
        if not param:
            raise EmptyParameterNameError()
        if isinstance(allowed, str | bytes | Mapping) or not isinstance(allowed, Iterable):
            raise TypeError("allowed values must be a list-like collection")

        self._inclusions[param] = tuple(allowed)
        logger.debug(f"Registered {len(self._inclusions[param])} inclusion values for '{param}'")

    def register_templates(self, templates: Mapping[str, str]) -> None:
        """Replace the custom template table.

        Every entry is rendered with dummy values first; on failure the
        previously registered table stays active.

        Raises:
            TemplateError: If any entry is malformed
        """
        check_templates(templates)
        self._templates = dict(templates)
        logger.debug(f"Registered {len(self._templates)} custom templates")

    def register_aliases(self, record_type: type, scheme: str, names: Mapping[str, str]) -> None:
        """Register external field names of a record type for a naming scheme."""
        self._aliases.register(record_type, scheme, names)

    @property
    def templates(self) -> Mapping[str, str]:
        return MappingProxyType(self._templates)

    def build(self) -> Validator:
        """Snapshot the registrations into an immutable Validator."""
        inclusions = MappingProxyType(dict(self._inclusions))
        predicates = dict(self._predicates)
        if predicates.get(INCLUSION) is self._inclusion:
            predicates[INCLUSION] = inclusion_predicate(inclusions)

        logger.debug(
            f"Building validator with {len(predicates)} predicates, "
            f"{len(inclusions)} inclusion lists, {len(self._templates)} custom templates"
        )
        return Validator(
            predicates=MappingProxyType(predicates),
            templates=MappingProxyType(dict(self._templates)),
            aliases=self._aliases.copy(),
            naming_scheme=self.naming_scheme,
        )

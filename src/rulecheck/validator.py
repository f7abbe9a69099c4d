"""Rule evaluation against records.

A Validator applies a list of rules to one record. For each rule the field is
resolved first; each constraint token of the rule is then either a cross-field
token, compared immediately against another resolved field, or a direct token,
buffered and evaluated once against the registered predicates after all tokens
of the rule were classified.

An evaluation either completes, returning every violation in rule order, or
aborts on the first fatal condition and returns nothing.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .errors import (
    DataShapeError,
    FieldResolutionError,
    InvalidConstraintError,
    RulecheckError,
    ViolationsError,
)
from .materializer import ErrorTarget, apply, apply_and_clear, check_target
from .models import MessageMap, Rule, Violation, Violations
from .predicates import Predicate, check, check_pair, is_cross_field
from .resolver import MISSING, AliasTable, is_record, resolve
from .tags import join_tokens, split_tag, tag_after, tag_before
from .templates import render, to_map
from .wire import ValidationErrorPayload, to_wire

logger = logging.getLogger(__name__)


class Validator:
    """Immutable rule evaluator. Build one through Registry.build()."""

    def __init__(
        self,
        predicates: Mapping[str, Predicate],
        templates: Mapping[str, str],
        aliases: AliasTable,
        naming_scheme: str = "",
    ):
        self._predicates = predicates
        self._templates = templates
        self._aliases = aliases
        self._naming_scheme = naming_scheme

    @classmethod
    def default(cls) -> "Validator":
        """A validator with only the built-in predicates and templates."""
        from .registry import Registry
        return Registry().build()

    @property
    def naming_scheme(self) -> str:
        return self._naming_scheme

    @property
    def templates(self) -> Mapping[str, str]:
        return self._templates

    def has_predicate(self, name: str) -> bool:
        return name in self._predicates

    def validate(self, data: Any, rules: Iterable[Rule] | None, naming: str | None = None) -> Violations | None:
        """Evaluate rules against a record.

        Args:
            data: Dataclass instance, pydantic model or mapping
            rules: Rules to apply, in order
            naming: Naming scheme for reported field paths; defaults to the
                    validator's scheme, "" reports the original names

        Returns:
            The violations, or None when no rule was violated

        Raises:
            DataShapeError: If data is not a record
            FieldResolutionError: If a rule's field or cross-field operand is unreachable
            InvalidConstraintError: If a constraint has no registered predicate
        """
        if not is_record(data):
            raise DataShapeError(type(data))

        scheme = self._naming_scheme if naming is None else naming
        violations = Violations()
        try:
            for rule in rules or ():
                self._apply_rule(data, rule, scheme, violations)
        except RulecheckError as e:
            logger.debug(f"Evaluation aborted: {e}")
            raise

        if not violations:
            return None
        return violations

    def _apply_rule(self, data: Any, rule: Rule, scheme: str, violations: Violations) -> None:
        value, field_name = resolve(data, rule.field, scheme, self._aliases)
        if value is MISSING:
            raise FieldResolutionError(rule.field)

        direct: list[str] = []
        for token in split_tag(rule.tag):
            name = tag_before(token)
            if not is_cross_field(name):
                direct.append(token)
                continue

            other, _ = resolve(data, tag_after(token))
            if other is MISSING:
                raise FieldResolutionError(rule.field)
            if not check_pair(value, other, name):
                violations.append(self._violation(rule, field_name, name, ""))

        if direct:
            for failure in check(value, join_tokens(direct), self._predicates):
                violations.append(self._violation(rule, field_name, failure.tag, failure.param))

    @staticmethod
    def _violation(rule: Rule, field_name: str, tag: str, param: str) -> Violation:
        return Violation(
            field=field_name,
            tag=tag,
            param=param,
            code=rule.code,
            message=rule.message,
            cause=rule.cause,
        )

    def check(self, data: Any, rules: Iterable[Rule] | None, naming: str | None = None) -> None:
        """Like validate, but raise ViolationsError when anything was violated."""
        violations = self.validate(data, rules, naming)
        if violations:
            raise ViolationsError(violations)

    def is_valid(self, value: Any, tag: str) -> bool:
        """Check a single value against a constraint spec.

        An invalid spec counts as not valid.
        """
        try:
            return not check(value, tag, self._predicates)
        except InvalidConstraintError:
            return False

    def render(self, violation: Violation) -> str:
        """Render one violation with the registered custom templates."""
        return render(violation, self._templates)

    def validate_to_map(self, data: Any, rules: Iterable[Rule] | None, naming: str | None = None) -> MessageMap:
        """Evaluate and render messages with the registered custom templates."""
        return to_map(self.validate(data, rules, naming), self._templates)

    def validate_to_wire(
        self, data: Any, rules: Iterable[Rule] | None, humanize: bool = False
    ) -> ValidationErrorPayload | None:
        return to_wire(self.validate(data, rules), humanize=humanize, templates=self._templates)

    def validate_to(self, data: Any, rules: Iterable[Rule] | None, target: ErrorTarget) -> None:
        """Evaluate and copy violations onto the target record.

        Raises:
            TargetShapeError: Before evaluation, if the target cannot receive violations
        """
        check_target(target)
        apply(self.validate(data, rules), target)

    def validate_to_and_clear(self, data: Any, rules: Iterable[Rule] | None, target: ErrorTarget) -> None:
        """Like validate_to, but leave the target absent when nothing was violated."""
        check_target(target)
        apply_and_clear(self.validate(data, rules), target)

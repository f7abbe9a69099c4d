"""Tests for wire-format validation error payloads."""

from dataclasses import dataclass, field

from rulecheck.helpers import is_validation_error
from rulecheck.models import Rule, Violation
from rulecheck.wire import (
    HTTP_UNPROCESSABLE_ENTITY,
    FieldViolation,
    ValidationErrorPayload,
    WireValidationError,
    to_wire,
)


@dataclass
class Address:
    city: str = ""


@dataclass
class User:
    name: str = ""
    age: int = 0
    address: Address = field(default_factory=Address)


USER_RULES = [
    Rule("name", "required", code="1-required", message="Name required"),
    Rule("age", "min=20", code="2-min", message="Age < 20"),
    Rule("address.city", "required", code="1-required", message="Address.City required"),
]


class TestToWire:
    """Test translating violations into payloads."""

    def test_user_rules(self, validator):
        payload = validator.validate_to_wire(User(), USER_RULES)

        assert payload == ValidationErrorPayload(field_violations=[
            FieldViolation(field="name", code="1-required", msg="Name required"),
            FieldViolation(field="age", code="2-min", param="20", msg="Age < 20"),
            FieldViolation(field="address.city", code="1-required", msg="Address.City required"),
        ])

    def test_no_violations(self, validator):
        assert validator.validate_to_wire(User(name="n", age=30, address=Address(city="c")), USER_RULES) is None
        assert to_wire(None) is None
        assert to_wire([]) is None

    def test_humanize(self):
        payload = to_wire([Violation(field="age", tag="min", param="20", code="2-min")], humanize=True)
        assert payload.field_violations[0].hmsg == "is too small, minimum is 20"

    def test_humanize_with_custom_templates(self):
        payload = to_wire(
            [Violation(field="age", tag="min", param="20")],
            humanize=True,
            templates={"min": "at least {{Param}}"},
        )
        assert payload.field_violations[0].hmsg == "at least 20"

    def test_serialized_with_aliases(self):
        payload = to_wire([Violation(field="name", tag="required", code="1-required")])
        assert payload.model_dump(by_alias=True, exclude_defaults=True) == {
            "fieldViolations": [{"field": "name", "code": "1-required"}],
        }


class TestPromotion:
    """Test promotion of a lone field violation."""

    def test_single_violation_promotes_code(self):
        payload = ValidationErrorPayload(field_violations=[FieldViolation(field="name", code="invalid")])

        promoted = payload.promoted()
        assert promoted.code == "invalid"
        assert payload.code == ""

    def test_single_violation_promotes_hmsg(self):
        payload = ValidationErrorPayload(
            field_violations=[FieldViolation(field="name", code="invalid", hmsg="human")]
        )
        assert payload.promoted().hmsg == "human"

    def test_existing_hmsg_is_kept(self):
        payload = ValidationErrorPayload(
            hmsg="top",
            field_violations=[FieldViolation(field="name", code="invalid", hmsg="human")],
        )
        promoted = payload.promoted()
        assert promoted.code == "invalid"
        assert promoted.hmsg == "top"

    def test_existing_code_blocks_promotion(self):
        payload = ValidationErrorPayload(
            code="top",
            field_violations=[FieldViolation(field="name", code="invalid", hmsg="human")],
        )
        promoted = payload.promoted()
        assert promoted.code == "top"
        assert promoted.hmsg == ""

    def test_multiple_violations_are_not_promoted(self):
        payload = ValidationErrorPayload(field_violations=[
            FieldViolation(field="name", code="invalid"),
            FieldViolation(field="age", code="min"),
        ])
        assert payload.promoted().code == ""

    def test_populate_by_alias(self):
        payload = ValidationErrorPayload(fieldViolations=[{"field": "name"}])
        assert payload.field_violations == [FieldViolation(field="name")]


class TestWireValidationError:
    """Test the exception carrying a payload."""

    def test_error(self):
        payload = ValidationErrorPayload(field_violations=[FieldViolation(field="name", code="invalid")])
        err = WireValidationError(payload)

        assert str(err) == "validation error"
        assert err.http_status_code == HTTP_UNPROCESSABLE_ENTITY == 422
        assert err.message().code == "invalid"
        assert err.payload.code == ""
        assert is_validation_error(err)

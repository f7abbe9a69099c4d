"""Tests for the registry builder."""

import re

import pytest

from rulecheck.errors import EmptyParameterNameError, TemplateError
from rulecheck.models import Rule
from rulecheck.registry import Registry
from rulecheck.validator import Validator


class TestRegister:
    """Test predicate and pattern registration."""

    def test_builtins_are_seeded(self, validator):
        for name in ["required", "lte", "inclusion", "zipcode_jp", "simple_email", "strict_required"]:
            assert validator.has_predicate(name)

    def test_custom_predicate(self, registry):
        registry.register("even", lambda value, param: value % 2 == 0)
        validator = registry.build()

        assert validator.is_valid(4, "even")
        assert not validator.is_valid(3, "even")

    def test_replacing_builtin(self, registry):
        registry.register("required", lambda value, param: True)
        assert registry.build().validate({"name": ""}, [Rule("name", "required")]) is None

    def test_empty_name(self, registry):
        with pytest.raises(ValueError):
            registry.register("", lambda value, param: True)

    def test_register_pattern(self, registry):
        registry.register_pattern("phone", r"^\d{0,5}-\d{0,5}-\d{0,5}$")
        validator = registry.build()

        assert validator.validate_to_map({"phone": "----"}, [Rule("phone", "phone")]) == {
            "phone": ["validation failed with phone"],
        }
        assert validator.is_valid("03-1234-5678", "phone")

    def test_bad_pattern(self, registry):
        with pytest.raises(re.error):
            registry.register_pattern("broken", "(")

    def test_simple_email(self, validator):
        assert validator.is_valid("a@b", "simple_email")
        assert not validator.is_valid("a b@c", "simple_email")

    def test_build_snapshot(self, registry):
        validator = registry.build()
        registry.register("late", lambda value, param: True)

        assert not validator.has_predicate("late")
        assert registry.build().has_predicate("late")

    def test_default_validator(self):
        validator = Validator.default()
        assert validator.naming_scheme == ""
        assert validator.templates == {}


class TestRegisterInclusion:
    """Test inclusion list registration."""

    def test_empty_param(self, registry):
        with pytest.raises(EmptyParameterNameError, match="param can not be empty"):
            registry.register_inclusion("", ["U"])

    @pytest.mark.parametrize("allowed", ["UMF", b"UMF", {"U": 1}, 42])
    def test_non_list_values(self, registry, allowed):
        with pytest.raises(TypeError):
            registry.register_inclusion("gender", allowed)

    def test_generator_is_materialized(self, registry):
        registry.register_inclusion("digit", (str(i) for i in range(3)))
        validator = registry.build()

        assert validator.is_valid("0", "inclusion=digit")
        assert validator.is_valid("2", "inclusion=digit")
        assert not validator.is_valid("3", "inclusion=digit")

    def test_overridden_inclusion_predicate(self, registry):
        registry.register("inclusion", lambda value, param: value == param)
        registry.register_inclusion("color", ["blue"])
        validator = registry.build()

        assert validator.is_valid("color", "inclusion=color")
        assert not validator.is_valid("blue", "inclusion=color")


class TestRegisterTemplates:
    """Test custom template registration."""

    def test_register(self, registry):
        registry.register_templates({"required": "must be present"})
        assert registry.templates == {"required": "must be present"}

    def test_replaces_previous_table(self, registry):
        registry.register_templates({"required": "must be present"})
        registry.register_templates({"lte": "at most {{Param}}"})
        assert registry.templates == {"lte": "at most {{Param}}"}

    def test_failure_keeps_previous_table(self, registry):
        registry.register_templates({"required": "must be present"})

        with pytest.raises(TemplateError):
            registry.register_templates({"lte": "at most {{Max}}", "gte": "at least {{Param}}"})
        assert registry.templates == {"required": "must be present"}

    def test_unparsable_template(self, registry):
        with pytest.raises(TemplateError):
            registry.register_templates({"lte": "at most {{Param"})

    def test_empty_tag(self, registry):
        with pytest.raises(TemplateError):
            registry.register_templates({"": "message"})

    def test_templates_view_is_read_only(self, registry):
        with pytest.raises(TypeError):
            registry.templates["required"] = "x"

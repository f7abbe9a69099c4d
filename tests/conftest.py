"""Shared fixtures for rulecheck tests."""

import pytest

from rulecheck.registry import Registry
from rulecheck.validator import Validator


@pytest.fixture
def registry() -> Registry:
    """Fresh registry seeded with the built-in predicates."""
    return Registry()


@pytest.fixture
def validator(registry: Registry) -> Validator:
    """Validator built from a fresh registry."""
    return registry.build()

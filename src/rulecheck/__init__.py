"""rulecheck - declarative rule validation for records.

rulecheck validates dataclasses, pydantic models and mappings against lists of
rules such as ``Rule("Address.City", "required,lte=20")`` and reports the
violations as structured objects, rendered messages, error records or wire
payloads.
"""

__version__ = "0.1.0"
__author__ = "rulecheck"
__description__ = "Declarative rule validation for records"

from rulecheck.errors import (
    DataShapeError,
    EmptyParameterNameError,
    FieldResolutionError,
    InvalidConstraintError,
    RulecheckError,
    TargetShapeError,
    TemplateError,
    ViolationsError,
)
from rulecheck.helpers import is_record_zero, is_validation_error
from rulecheck.materializer import ErrorTarget, apply, apply_and_clear
from rulecheck.models import MessageMap, Rule, Violation, Violations
from rulecheck.registry import Registry
from rulecheck.templates import DEFAULT_TEMPLATES, render, to_map
from rulecheck.validator import Validator
from rulecheck.wire import FieldViolation, ValidationErrorPayload, WireValidationError, to_wire

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "Registry",
    "Validator",
    "Rule",
    "Violation",
    "Violations",
    "MessageMap",
    "ErrorTarget",
    "apply",
    "apply_and_clear",
    "render",
    "to_map",
    "DEFAULT_TEMPLATES",
    "to_wire",
    "FieldViolation",
    "ValidationErrorPayload",
    "WireValidationError",
    "is_record_zero",
    "is_validation_error",
    "RulecheckError",
    "DataShapeError",
    "EmptyParameterNameError",
    "FieldResolutionError",
    "InvalidConstraintError",
    "TargetShapeError",
    "TemplateError",
    "ViolationsError",
]

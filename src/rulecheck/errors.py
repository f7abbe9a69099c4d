"""Error taxonomy for rulecheck.

Every fatal condition raised by the evaluator, the renderer or the registry
derives from RulecheckError. A field failing a predicate is not an error; it is
reported as a Violation.
"""


class RulecheckError(Exception):
    """Base class for rulecheck errors."""


class ViolationsError(RulecheckError):
    """Raised by Validator.check when at least one rule was violated."""

    def __init__(self, violations):
        self.violations = violations
        super().__init__(str(violations))

    def is_validation_error(self) -> bool:
        return True


class FieldResolutionError(RulecheckError):
    """A rule's field path (or a cross-field operand) could not be reached."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"get value from {field} field failed")


class InvalidConstraintError(RulecheckError):
    """A constraint token names no registered predicate or carries a bad parameter."""

    def __init__(self, tag: str, detail: str = ""):
        self.tag = tag
        self.detail = detail
        message = f"invalid constraint '{tag}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class DataShapeError(RulecheckError):
    """The validated data is not a record."""

    def __init__(self, data_type: type):
        self.data_type = data_type
        super().__init__(
            f"data should be a dataclass, a pydantic model or a mapping, got {data_type.__name__}"
        )


class TargetShapeError(RulecheckError, TypeError):
    """The materialization target is not an ErrorTarget holding a record type."""

    def __init__(self, detail: str = "target must be an ErrorTarget of a record type"):
        super().__init__(detail)


class EmptyParameterNameError(RulecheckError, ValueError):
    """An inclusion list was registered under an empty parameter name."""

    def __init__(self):
        super().__init__("param can not be empty")


class TemplateError(RulecheckError):
    """A message template is malformed or references an unknown variable."""

    def __init__(self, tag: str, detail: str):
        self.tag = tag
        self.detail = detail
        super().__init__(f"template for '{tag}' invalid: {detail}")

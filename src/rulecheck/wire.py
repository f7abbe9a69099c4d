"""Wire-format validation error payloads.

The payload mirrors the API error message consumed by clients: a top-level
code and messages plus one entry per field violation. Serialize with
``model_dump(by_alias=True, exclude_defaults=True)`` for JSON bodies.
"""

import logging
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import RulecheckError
from .models import Violation
from .templates import render

logger = logging.getLogger(__name__)

HTTP_UNPROCESSABLE_ENTITY = 422


class FieldViolation(BaseModel):
    """A single bad field of a request."""
    field: str = ""
    code: str = ""
    param: str = ""
    msg: str = ""
    hmsg: str = ""  # human readable message


class ValidationErrorPayload(BaseModel):
    """All field violations of a request."""
    code: str = ""
    msg: str = ""
    hmsg: str = ""
    field_violations: list[FieldViolation] = Field(alias="fieldViolations", default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def promoted(self) -> "ValidationErrorPayload":
        """Copy of the payload with a lone field violation's code promoted.

        When exactly one field violation exists and no top-level code is set,
        the top-level code (and an unset human message) are taken from it.
        """
        if len(self.field_violations) != 1 or self.code:
            return self.model_copy(deep=True)

        only = self.field_violations[0]
        update = {"code": only.code}
        if not self.hmsg:
            update["hmsg"] = only.hmsg
        return self.model_copy(update=update, deep=True)


class WireValidationError(RulecheckError):
    """Exception carrying a wire payload, mapped to HTTP 422 by API layers."""

    http_status_code = HTTP_UNPROCESSABLE_ENTITY

    def __init__(self, payload: ValidationErrorPayload):
        self.payload = payload
        super().__init__("validation error")

    def message(self) -> ValidationErrorPayload:
        return self.payload.promoted()

    def is_validation_error(self) -> bool:
        return True


def to_wire(
    violations: Iterable[Violation] | None,
    humanize: bool = False,
    templates: Mapping[str, str] | None = None,
) -> ValidationErrorPayload | None:
    """Translate violations into a wire payload.

    Args:
        violations: Violations from an evaluation, None when nothing was violated
        humanize: Also render each violation's template into ``hmsg``
        templates: Custom template table used when humanizing

    Returns:
        Payload with one entry per violation, or None when there are none
    """
    entries = [
        FieldViolation(
            field=violation.field,
            code=violation.code,
            param=violation.param,
            msg=violation.message,
            hmsg=render(violation, templates) if humanize else "",
        )
        for violation in violations or ()
    ]
    if not entries:
        return None

    logger.debug(f"Built wire payload with {len(entries)} field violations")
    return ValidationErrorPayload(field_violations=entries)

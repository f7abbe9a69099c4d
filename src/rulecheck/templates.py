"""Message templates for violations.

Templates are jinja2 strings with two variables: ``Tag`` (the constraint name)
and ``Param`` (its parameter). For example, a violation of ``max=100`` rendered
with ``is too large, maximum is {{Param}}`` gives ``is too large, maximum is 100``.

Lookup order for a constraint name: the caller's custom table, the default
table, then the default table's generic ``default`` entry. Empty entries are
skipped. Unknown variables are errors, not blanks.
"""

import logging
from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType

from jinja2 import Environment, StrictUndefined, Template
from jinja2 import TemplateError as JinjaTemplateError

from .errors import TemplateError
from .models import MessageMap, Violation

logger = logging.getLogger(__name__)

FALLBACK_TAG = "default"

DEFAULT_TEMPLATES: Mapping[str, str] = MappingProxyType({
    "required": "can not be blank",
    "lte": "is too long, maximum length is {{Param}}",
    "gte": "is too short, minimum length is {{Param}}",
    "max": "is too large, maximum is {{Param}}",
    "min": "is too small, minimum is {{Param}}",
    "zipcode_jp": "invalid zipcode format, format is 123-1234",
    "inclusion": "invalid {{Param}} value",
    "simple_email": "invalid email format",
    FALLBACK_TAG: "validation failed with {{Tag}}{% if Param %}={{Param}}{% endif %}",
})

# Substituted when a custom table is checked at registration time
CHECK_TAG = "check tag"
CHECK_PARAM = "check param"

_env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=True)


@lru_cache(maxsize=256)
def _compile(source: str) -> Template:
    return _env.from_string(source)


def template_for(tag: str, custom: Mapping[str, str] | None = None) -> str:
    """Pick the template text for a constraint name."""
    if custom and custom.get(tag):
        return custom[tag]
    if DEFAULT_TEMPLATES.get(tag):
        return DEFAULT_TEMPLATES[tag]
    return DEFAULT_TEMPLATES[FALLBACK_TAG]


def render_template(source: str, tag: str, param: str) -> str:
    """Substitute ``Tag`` and ``Param`` into one template.

    Raises:
        TemplateError: If the template does not parse or does not render
    """
    try:
        return _compile(source).render(Tag=tag, Param=param)
    except (JinjaTemplateError, TypeError) as e:
        raise TemplateError(tag, str(e)) from e


def render(violation: Violation, custom: Mapping[str, str] | None = None) -> str:
    return render_template(template_for(violation.tag, custom), violation.tag, violation.param)


def check_templates(table: Mapping[str, str]) -> None:
    """Validate every entry of a custom table with dummy values.

    Raises:
        TemplateError: On an empty constraint name or a template that fails to render
    """
    for tag, source in table.items():
        if not tag:
            raise TemplateError(tag, "tag of the template table can not be empty")
        try:
            _compile(source).render(Tag=CHECK_TAG, Param=CHECK_PARAM)
        except (JinjaTemplateError, TypeError) as e:
            raise TemplateError(tag, str(e)) from e
    logger.debug(f"Checked {len(table)} custom templates")


def to_map(violations: Iterable[Violation] | None, custom: Mapping[str, str] | None = None) -> MessageMap:
    """Render violations into messages grouped by field.

    The whole call fails on the first template error; no partial map is returned.
    """
    messages = MessageMap()
    for violation in violations or ():
        messages.add(violation.field, render(violation, custom))
    return messages

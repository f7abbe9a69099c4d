"""Rules, violations and rendered message maps."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rule:
    """One declarative constraint binding applied to one field path.

    Attributes:
        field: Dot-separated field path, e.g. ``Address.City``
        tag: Comma-separated constraint tokens, e.g. ``required,lte=20``
        code: Opaque code copied onto every violation of this rule
        message: Message copied onto every violation of this rule
        cause: Optional exception copied onto every violation of this rule
    """
    field: str
    tag: str
    code: str = ""
    message: str = ""
    cause: BaseException | None = None


@dataclass(frozen=True)
class Violation:
    """The failure of one constraint token against one resolved field value."""
    field: str
    tag: str
    param: str = ""
    code: str = ""
    message: str = ""
    cause: BaseException | None = None

    def __str__(self) -> str:
        text = f"{self.tag}={self.param}" if self.param else self.tag
        text += f" of {self.field}"
        if self.message:
            text += f": {self.message}"
        return text


class Violations(list[Violation]):
    """Ordered violations: rule order, then token order within a rule."""

    def __str__(self) -> str:
        if not self:
            return ""
        return "validation failed: " + "; ".join(str(v) for v in self)

    def fields(self) -> list[str]:
        """Distinct violated field paths in first-seen order."""
        seen: dict[str, None] = {}
        for violation in self:
            seen.setdefault(violation.field, None)
        return list(seen)


def _format_messages(messages: list[str]) -> str:
    if not messages:
        return ""
    return '["' + '", "'.join(messages) + '"]'


class MessageMap(dict[str, list[str]]):
    """Rendered messages grouped by (renamed) field path."""

    def add(self, field: str, message: str) -> None:
        self.setdefault(field, []).append(message)

    def __str__(self) -> str:
        return " ".join(f"{field}:{_format_messages(messages)}" for field, messages in self.items())

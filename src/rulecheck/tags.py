"""Constraint tag parsing.

A tag is a comma-separated list of constraint tokens such as ``required,lte=20``.
No escaping is supported: names and parameters must not contain ``,`` or ``=``
beyond the first separator.
"""

TAG_SEPARATOR = ","
TAG_KEY_SEPARATOR = "="
TAG_IGNORE = "-"


def split_tag(tag: str) -> list[str]:
    """Split a tag into its raw tokens. Always returns at least one token."""
    return tag.split(TAG_SEPARATOR)


def tag_before(token: str) -> str:
    """Return the constraint name of a token, e.g. ``lte`` for ``lte=20``."""
    return token.split(TAG_KEY_SEPARATOR, 1)[0]


def tag_after(token: str) -> str:
    """Return the parameter of a token, e.g. ``20`` for ``lte=20``.

    A token without ``=`` is its own parameter.
    """
    parts = token.split(TAG_KEY_SEPARATOR, 1)
    if len(parts) > 1:
        return parts[1]
    return parts[0]


def parse_token(token: str) -> tuple[str, str]:
    """Split a token into ``(name, param)``; ``param`` is empty when there is no ``=``."""
    if TAG_KEY_SEPARATOR not in token:
        return token, ""
    return tag_before(token), tag_after(token)


def join_tokens(tokens: list[str]) -> str:
    return TAG_SEPARATOR.join(tokens)

"""Identifier case conversion shared by the parser and the code printer."""

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")


def to_snake_case(name: str) -> str:
    """Convert ``UserProfile`` / ``userID`` style names to ``user_profile`` / ``user_id``.

    Examples:
        >>> to_snake_case("UserID")
        'user_id'
        >>> to_snake_case("HTTPServer")
        'http_server'
        >>> to_snake_case("already_snake")
        'already_snake'
    """
    name = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    name = _WORD_BOUNDARY.sub(r"\1_\2", name)
    return name.lower()


def to_upper_camel_case(name: str) -> str:
    """Convert ``user_profile`` to ``UserProfile``.

    Examples:
        >>> to_upper_camel_case("user_profile")
        'UserProfile'
    """
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)

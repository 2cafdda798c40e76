"""Title normalization used as the comparison key between catalogs."""

import re

_DISALLOWED = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """
    Reduce a title to its comparison key.

    Lowercases, drops every character outside ``[a-z0-9]`` and whitespace,
    collapses whitespace runs to one space and trims. Idempotent.

    Example:
        >>> normalize_title("Marvel's Spider-Man 2™")
        'marvels spiderman 2'
    """
    key = _DISALLOWED.sub("", title.lower())
    return _WHITESPACE.sub(" ", key).strip()

"""
Key matching for running-set and status lookups.

Lookups compare a caller's query against stored keys (position ids or
file paths) either exactly or fuzzily. A fuzzy match succeeds when either
operand occurs inside the other. Both operands are escaped before matching,
so characters such as ``-`` and ``.`` in a path are always literal and never
act as wildcards.
"""

import re
from typing import Iterable, Optional, Tuple, TypeVar

V = TypeVar("V")


def escape_pattern(text: str) -> str:
    """
    Escape every pattern-special character in ``text``.

    Args:
        text: Raw key or query

    Returns:
        A pattern that matches ``text`` literally
    """
    return re.escape(text)


def fuzzy_match(a: str, b: str) -> bool:
    """
    Return True if either string occurs literally inside the other.

    The check is symmetric: ``fuzzy_match(a, b) == fuzzy_match(b, a)``.
    """
    return bool(re.search(escape_pattern(a), b) or re.search(escape_pattern(b), a))


def key_matches(key: str, query: str, fuzzy: bool = False) -> bool:
    """Return True if ``key`` equals ``query``, or fuzzy-matches it when enabled."""
    if key == query:
        return True
    return fuzzy and fuzzy_match(key, query)


def find_first(
    items: Iterable[Tuple[str, V]], query: str, fuzzy: bool = False
) -> Optional[Tuple[str, V]]:
    """
    Return the first ``(key, value)`` pair whose key matches ``query``.

    Iteration order decides ties; callers must not rely on which of several
    fuzzy candidates wins.
    """
    for key, value in items:
        if key_matches(key, query, fuzzy):
            return key, value
    return None

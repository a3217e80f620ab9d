"""
Parsing of adapter-scoped identifiers (``adapter:position``).
"""

from typing import Optional, Tuple

SEPARATOR = ":"


def split_scoped_id(adapter_scoped_id: str) -> Tuple[Optional[str], str]:
    """
    Split an adapter-scoped id at its first separator.

    An id without a separator is malformed; it yields ``None`` as the adapter
    and the whole id as the position.

    Args:
        adapter_scoped_id: Identifier of the form ``adapter:position``

    Returns:
        Tuple of (adapter name or None, position id)
    """
    adapter, sep, position_id = adapter_scoped_id.partition(SEPARATOR)
    if not sep:
        return None, adapter_scoped_id
    return adapter, position_id


def parse_adapter_name(adapter_scoped_id: str) -> Optional[str]:
    """Return the adapter name of a scoped id, or None if it has no separator."""
    return split_scoped_id(adapter_scoped_id)[0]


def parse_position_id(adapter_scoped_id: str) -> str:
    """Return the position id of a scoped id."""
    return split_scoped_id(adapter_scoped_id)[1]


def make_scoped_id(adapter: Optional[str], position_id: str) -> str:
    if adapter is None:
        return position_id
    return f"{adapter}{SEPARATOR}{position_id}"

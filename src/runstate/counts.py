"""
Status count roll-up.
"""

from typing import Dict, Mapping, Tuple

from .models import Status, StatusCount

TOTAL_KEY = "total"


def count_statuses(
    status_table: Mapping[str, Mapping[str, Status]]
) -> Tuple[Dict[str, StatusCount], StatusCount]:
    """
    Rebuild per-path count records from a status table.

    Args:
        status_table: Mapping of file path to ``{test_name: Status}``

    Returns:
        Tuple of (per-path counts, total across all paths)
    """
    counts: Dict[str, StatusCount] = {}
    total = StatusCount()

    for path, tests in status_table.items():
        count = StatusCount()
        for status in tests.values():
            count.increment(status)
        counts[path] = count
        total.add(count)

    return counts, total

"""
Aggregated test run state.

The Aggregator keeps four pieces of state, all owned by one instance:

- the running-set: position id -> RunningEntry for runs in flight
- the status table: file path -> test name -> most recent Status
- the count cache: file path -> StatusCount, plus a total across all paths
- the raw result store: adapter-scoped id -> last results payload

The count cache is rebuilt from the status table after every results payload
and is never patched incrementally.
"""

import logging
import threading
from typing import Any, Dict, List, Mapping, Optional, Union

from .counts import TOTAL_KEY, count_statuses
from .engine import ExecutionEngine
from .exceptions import UnknownStatusError
from .identifiers import make_scoped_id, split_scoped_id
from .matching import find_first
from .models import Position, RunningEntry, Status, StatusCount, StatusSummary
from .notifications import Notifier, NullNotifier

logger = logging.getLogger(__name__)


def _status_of(record: Any) -> Optional[Status]:
    """Extract the status of a result record, or None if it has none usable."""
    if isinstance(record, Mapping):
        raw = record.get("status")
    else:
        raw = getattr(record, "status", None)
    if raw is None:
        return None
    try:
        return Status.parse(raw)
    except UnknownStatusError as e:
        logger.warning("Dropping result with %s", e)
        return None


def _test_name(node: Position) -> str:
    """Name a test inside its file: the id with the ``<path>::`` prefix removed."""
    prefix = f"{node.path}::"
    if node.id.startswith(prefix):
        return node.id[len(prefix):]
    return node.name


class Aggregator:
    """Tracks running positions and aggregates test statuses from engine events."""

    def __init__(self, engine: ExecutionEngine, notifier: Optional[Notifier] = None):
        """
        Initialize the aggregator.

        Args:
            engine: Execution engine used to resolve positions and list adapters
            notifier: Receiver of run-started/results-available notifications
        """
        self.engine = engine
        self.notifier = notifier or NullNotifier()

        # One lock covers mutation, rebuild and snapshot reads
        self._lock = threading.RLock()
        self._running: Dict[str, RunningEntry] = {}
        self._status: Dict[str, Dict[str, Status]] = {}
        self._counts: Dict[str, StatusCount] = {}
        self._total = StatusCount()
        self._raw_results: Dict[str, Mapping[str, Any]] = {}

    # ------------------------------------------------------------------
    # Event handling
    # ------------------------------------------------------------------

    def record_run_started(
        self,
        adapter_name: Optional[str],
        position_id: str,
        adapter_scoped_id: Optional[str] = None,
    ) -> None:
        """
        Record that a position started running.

        A second start for the same position replaces the first entry.

        Args:
            adapter_name: Adapter that started the run (None if unknown)
            position_id: Position being run
            adapter_scoped_id: Scoped id carried in the notification
                (defaults to ``adapter_name:position_id``)
        """
        with self._lock:
            self._running[position_id] = RunningEntry(adapter=adapter_name, position_id=position_id)

        logger.debug("Run started for %s (adapter %s)", position_id, adapter_name)
        if adapter_scoped_id is None:
            adapter_scoped_id = make_scoped_id(adapter_name, position_id)
        self.notifier.run_started(adapter_scoped_id, position_id)

    def record_results(self, adapter_scoped_id: str, results: Mapping[str, Any]) -> bool:
        """
        Record a results payload for an adapter-scoped position.

        The run for the position is removed from the running-set and the
        payload is archived before the position is resolved. When the engine
        cannot resolve the position, statuses and counts are left unchanged.

        Args:
            adapter_scoped_id: Identifier of the form ``adapter:position``
            results: Mapping of position id to result record

        Returns:
            True if results were attributed to tests, False if the position
            could not be resolved
        """
        adapter, position_id = split_scoped_id(adapter_scoped_id)

        with self._lock:
            self._running.pop(position_id, None)
            self._raw_results[adapter_scoped_id] = results

            tree = self.engine.get_position(position_id, adapter=adapter)
            if tree is None:
                logger.warning(
                    "Could not resolve position %s for adapter %s; statuses not updated",
                    position_id,
                    adapter,
                )
                attributed = False
            else:
                recorded = self._attribute(tree, results)
                self._rebuild()
                logger.debug("Recorded %d statuses under %s", recorded, position_id)
                attributed = True

        self.notifier.results_available(adapter_scoped_id, results)
        return attributed

    def _attribute(self, tree: Position, results: Mapping[str, Any]) -> int:
        """Copy statuses for every test in ``tree`` that has a result."""
        recorded = 0
        for node in tree.iter_nodes():
            if not node.is_test:
                continue
            record = results.get(node.id)
            if record is None:
                continue
            status = _status_of(record)
            if status is None:
                continue
            self._status.setdefault(node.path, {})[_test_name(node)] = status
            recorded += 1
        return recorded

    def _rebuild(self) -> None:
        self._counts, self._total = count_statuses(self._status)

    def rebuild_counts(self) -> None:
        """Recompute the count cache from the status table."""
        with self._lock:
            self._rebuild()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query_running(
        self, query: Optional[str] = None, fuzzy: bool = False, as_list: bool = False
    ) -> Union[Dict[str, RunningEntry], List[RunningEntry], RunningEntry, None]:
        """
        Look up runs in flight.

        Args:
            query: Position id to look for. Without one, all runs are returned.
            fuzzy: Match keys that contain the query or are contained in it
            as_list: Without a query, return the entries as a list

        Returns:
            The matching RunningEntry; all entries as a dict (or list when
            ``as_list``); or None when nothing is running or nothing matches
        """
        with self._lock:
            if not query:
                if as_list:
                    return list(self._running.values())
                return dict(self._running) if self._running else None
            match = find_first(self._running.items(), query, fuzzy)
        return match[1] if match else None

    def query_status(
        self,
        query: Optional[str] = None,
        status: Optional[Union[Status, str]] = None,
        fuzzy: bool = False,
        total: bool = False,
    ) -> Union[Dict[str, StatusCount], StatusCount, int, None]:
        """
        Look up status counts.

        Args:
            query: File path to look for
            status: Narrow the answer to the count of a single status
            fuzzy: Match paths that contain the query or are contained in it
            total: Answer with the total across all paths when there is no
                query, or when the query matches nothing

        Returns:
            A StatusCount (or an int when ``status`` is given); the full cache
            keyed by path plus ``"total"`` when neither query nor total is
            given; None when nothing matches

        Raises:
            UnknownStatusError: If ``status`` is not a recognised status
        """
        status_field = Status.parse(status) if status is not None else None

        with self._lock:
            if query:
                match = find_first(self._counts.items(), query, fuzzy)
                if match is not None:
                    record = match[1].copy()
                elif total:
                    record = self._total.copy()
                else:
                    return None
            elif total:
                record = self._total.copy()
            else:
                return self._cache_view()

        if status_field is not None:
            return record.get(status_field)
        return record

    def query_status_count(
        self, query: str, status: Union[Status, str], fuzzy: bool = False
    ) -> int:
        """
        Count tests with one status under a path.

        Returns:
            The count, or 0 if no path matches the query
        """
        if not query:
            return 0
        count = self.query_status(query, status=status, fuzzy=fuzzy)
        return count if count is not None else 0

    def _cache_view(self) -> Dict[str, StatusCount]:
        view = {path: count.copy() for path, count in self._counts.items()}
        view[TOTAL_KEY] = self._total.copy()
        return view

    def summary(self) -> StatusSummary:
        """Take a snapshot of counts, total and running entries."""
        with self._lock:
            return StatusSummary(
                counts={path: count.copy() for path, count in self._counts.items()},
                total=self._total.copy(),
                running=list(self._running.values()),
            )

    def get_raw_results(self) -> Dict[str, Mapping[str, Any]]:
        """Return the last results payload received per adapter-scoped id."""
        with self._lock:
            return dict(self._raw_results)

    def get_adapters(self) -> List[str]:
        """Return the engine's adapters, or an empty list before it has started."""
        if not self.engine.has_started():
            return []
        return list(self.engine.get_adapters())

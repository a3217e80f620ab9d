"""
Execution engine boundary.

The aggregator never runs tests itself. It listens to an engine's events and
reads the engine's test tree through the ExecutionEngine interface.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional

from .models import Position

logger = logging.getLogger(__name__)

RUN_EVENT = "run"
RESULTS_EVENT = "results"


class ExecutionEngine(ABC):
    """Read-only view of a test execution engine plus its event feed."""

    @abstractmethod
    def get_position(self, position_id: str, adapter: Optional[str] = None) -> Optional[Position]:
        """
        Resolve a position id to a node of the test tree.

        Args:
            position_id: Id of a directory, file, namespace or test
            adapter: Restrict the lookup to one adapter (optional)

        Returns:
            The tree rooted at the position, or None if it is not known
        """
        pass

    @abstractmethod
    def get_adapters(self) -> List[str]:
        """
        Get the names of the adapters known to the engine.

        Returns:
            List of adapter names
        """
        pass

    @abstractmethod
    def has_started(self) -> bool:
        """Return True once the engine has finished starting up."""
        pass

    @abstractmethod
    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """
        Register a listener for an engine event.

        Args:
            event: ``"run"`` (called with scoped id and position id) or
                ``"results"`` (called with scoped id and results mapping)
            callback: Listener to call
        """
        pass


class InMemoryEngine(ExecutionEngine):
    """Engine holding position trees in memory and emitting events on demand."""

    def __init__(self) -> None:
        self._trees: Dict[str, List[Position]] = {}
        self._index: Dict[str, Dict[str, Position]] = {}
        self._listeners: Dict[str, List[Callable[..., Any]]] = {
            RUN_EVENT: [],
            RESULTS_EVENT: [],
        }
        self._started = False

    def add_adapter(self, name: str, positions: Optional[List[Position]] = None) -> None:
        """Register an adapter and, optionally, its position trees."""
        self._trees.setdefault(name, [])
        self._index.setdefault(name, {})
        for root in positions or []:
            self.add_tree(name, root)

    def add_tree(self, adapter: str, root: Position) -> None:
        self.add_adapter(adapter)
        self._trees[adapter].append(root)
        index = self._index[adapter]
        for node in root.iter_nodes():
            if node.id in index:
                logger.warning("Duplicate position id %s in adapter %s", node.id, adapter)
            index[node.id] = node

    def start(self) -> None:
        self._started = True

    def has_started(self) -> bool:
        return self._started

    def get_adapters(self) -> List[str]:
        return list(self._trees)

    def get_position(self, position_id: str, adapter: Optional[str] = None) -> Optional[Position]:
        if adapter is not None:
            return self._index.get(adapter, {}).get(position_id)
        for index in self._index.values():
            if position_id in index:
                return index[position_id]
        return None

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        if event not in self._listeners:
            raise ValueError(
                f"Unknown event '{event}'. Available events: {', '.join(self._listeners)}"
            )
        self._listeners[event].append(callback)

    def emit_run(self, adapter_scoped_id: str, position_id: str) -> None:
        """Notify listeners that a position started running."""
        for callback in self._listeners[RUN_EVENT]:
            callback(adapter_scoped_id, position_id)

    def emit_results(self, adapter_scoped_id: str, results: Mapping[str, Any]) -> None:
        """Notify listeners that results are available."""
        for callback in self._listeners[RESULTS_EVENT]:
            callback(adapter_scoped_id, results)

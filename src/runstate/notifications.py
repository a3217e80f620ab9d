"""
Outbound notifications emitted after the aggregated state changes.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping

logger = logging.getLogger(__name__)

RUN_STARTED = "run_started"
RESULTS_AVAILABLE = "results_available"


class Notifier(ABC):
    """Base class for receivers of aggregator notifications."""

    @abstractmethod
    def run_started(self, adapter_scoped_id: str, position_id: str) -> None:
        """
        Called after a run has been added to the running-set.

        Args:
            adapter_scoped_id: ``adapter:position`` identifier of the run
            position_id: Position that started running
        """
        pass

    @abstractmethod
    def results_available(self, adapter_scoped_id: str, results: Mapping[str, Any]) -> None:
        """
        Called after a results payload has been recorded.

        Args:
            adapter_scoped_id: ``adapter:position`` identifier of the run
            results: The payload exactly as received
        """
        pass


class NullNotifier(Notifier):
    """Notifier that discards everything."""

    def run_started(self, adapter_scoped_id: str, position_id: str) -> None:
        pass

    def results_available(self, adapter_scoped_id: str, results: Mapping[str, Any]) -> None:
        pass


class LoggingNotifier(Notifier):
    """Write notifications to the log."""

    def run_started(self, adapter_scoped_id: str, position_id: str) -> None:
        logger.info("Run started: %s (%s)", position_id, adapter_scoped_id)

    def results_available(self, adapter_scoped_id: str, results: Mapping[str, Any]) -> None:
        logger.info("Results available for %s: %d entries", adapter_scoped_id, len(results))


class CallbackNotifier(Notifier):
    """
    Fan notifications out to subscribed callables.

    Subscribers are called in subscription order. A subscriber that raises
    is logged and skipped; the remaining subscribers still run.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callable[..., Any]]] = {
            RUN_STARTED: [],
            RESULTS_AVAILABLE: [],
        }

    def subscribe(self, event: str, callback: Callable[..., Any]) -> None:
        """
        Register a callback for an event.

        Args:
            event: ``"run_started"`` or ``"results_available"``
            callback: Called with the notification's positional arguments

        Raises:
            ValueError: If the event name is not known
        """
        if event not in self._subscribers:
            raise ValueError(
                f"Unknown event '{event}'. Available events: {', '.join(self._subscribers)}"
            )
        self._subscribers[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., Any]) -> None:
        subscribers = self._subscribers.get(event, [])
        if callback in subscribers:
            subscribers.remove(callback)

    def _dispatch(self, event: str, *args: Any) -> None:
        for callback in list(self._subscribers[event]):
            try:
                callback(*args)
            except Exception:
                logger.exception("Subscriber %r failed handling %s", callback, event)

    def run_started(self, adapter_scoped_id: str, position_id: str) -> None:
        self._dispatch(RUN_STARTED, adapter_scoped_id, position_id)

    def results_available(self, adapter_scoped_id: str, results: Mapping[str, Any]) -> None:
        self._dispatch(RESULTS_AVAILABLE, adapter_scoped_id, results)

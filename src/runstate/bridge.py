"""
Bridge from execution engine events to the Aggregator.
"""

import logging
from typing import Any, Mapping

from .aggregator import Aggregator
from .engine import RESULTS_EVENT, RUN_EVENT, ExecutionEngine
from .identifiers import parse_adapter_name

logger = logging.getLogger(__name__)


class EventBridge:
    """Translate engine ``run`` and ``results`` events into Aggregator calls."""

    def __init__(self, aggregator: Aggregator):
        self.aggregator = aggregator

    def attach(self, engine: ExecutionEngine) -> None:
        """Subscribe this bridge to an engine's event feed."""
        engine.subscribe(RUN_EVENT, self.on_run_started)
        engine.subscribe(RESULTS_EVENT, self.on_results_ready)

    def on_run_started(self, adapter_scoped_id: str, position_id: str) -> None:
        adapter_name = parse_adapter_name(adapter_scoped_id)
        if adapter_name is None:
            logger.debug("No adapter in identifier %r", adapter_scoped_id)
        self.aggregator.record_run_started(
            adapter_name, position_id, adapter_scoped_id=adapter_scoped_id
        )

    def on_results_ready(self, adapter_scoped_id: str, results: Mapping[str, Any]) -> None:
        self.aggregator.record_results(adapter_scoped_id, results)

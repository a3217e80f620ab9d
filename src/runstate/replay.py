"""
Replay of recorded event logs.
"""

import logging
from typing import Optional

from .aggregator import Aggregator
from .bridge import EventBridge
from .engine import RUN_EVENT, InMemoryEngine
from .events import EventLog
from .notifications import Notifier

logger = logging.getLogger(__name__)


class EventReplayer:
    """Feeds a recorded event log through an engine, bridge and aggregator."""

    def __init__(self, log: EventLog, notifier: Optional[Notifier] = None):
        self.log = log
        self.notifier = notifier

    def build_engine(self) -> InMemoryEngine:
        """
        Create an engine holding the log's adapters and position trees.

        Returns:
            InMemoryEngine, started unless the log says otherwise
        """
        engine = InMemoryEngine()
        for adapter, positions in self.log.adapters.items():
            engine.add_adapter(adapter, positions)
        if self.log.started:
            engine.start()
        return engine

    def run(self) -> Aggregator:
        """
        Replay every event in order.

        Returns:
            Aggregator holding the resulting state
        """
        engine = self.build_engine()
        aggregator = Aggregator(engine, notifier=self.notifier)
        EventBridge(aggregator).attach(engine)

        logger.info(
            "Replaying %d events across %d adapters",
            len(self.log.events),
            len(self.log.adapters),
        )
        for event in self.log.events:
            if event.kind == RUN_EVENT:
                engine.emit_run(event.adapter_scoped_id, event.position_id or "")
            else:
                engine.emit_results(event.adapter_scoped_id, event.results)

        return aggregator

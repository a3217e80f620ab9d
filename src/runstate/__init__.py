"""
runstate - derived test run state from execution engine events.
"""

from .aggregator import Aggregator
from .bridge import EventBridge
from .engine import ExecutionEngine, InMemoryEngine
from .models import Position, ResultRecord, RunningEntry, Status, StatusCount, StatusSummary
from .notifications import CallbackNotifier, LoggingNotifier, Notifier, NullNotifier

__all__ = [
    "Aggregator",
    "CallbackNotifier",
    "EventBridge",
    "ExecutionEngine",
    "InMemoryEngine",
    "LoggingNotifier",
    "Notifier",
    "NullNotifier",
    "Position",
    "ResultRecord",
    "RunningEntry",
    "Status",
    "StatusCount",
    "StatusSummary",
]

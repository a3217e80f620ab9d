"""
Recorded engine event logs.

An event log describes the test trees known to each adapter and the ordered
``run``/``results`` events an engine emitted. Logs are YAML (or JSON, which
YAML accepts) documents::

    adapters:
      - name: suite1
        positions:
          - id: fileA.test
            type: file
            children:
              - {id: "fileA.test::testOne", type: test}
    events:
      - {event: run, id: "suite1:fileA.test", position: fileA.test}
      - event: results
        id: "suite1:fileA.test"
        results:
          "fileA.test::testOne": {status: passed}
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .engine import RESULTS_EVENT, RUN_EVENT
from .exceptions import EventLogError
from .identifiers import parse_position_id
from .models import Position

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """One recorded engine event."""

    kind: str
    adapter_scoped_id: str
    position_id: Optional[str] = None
    results: Dict[str, Any] = field(default_factory=dict)


@dataclass
class EventLog:
    """Adapters, their position trees and the events to replay."""

    adapters: Dict[str, List[Position]] = field(default_factory=dict)
    events: List[Event] = field(default_factory=list)
    started: bool = True


def _parse_adapters(raw: Any, source: str) -> Dict[str, List[Position]]:
    if raw is None:
        return {}
    if not isinstance(raw, list):
        raise EventLogError(source, "'adapters' must be a list")

    adapters: Dict[str, List[Position]] = {}
    for i, entry in enumerate(raw):
        if isinstance(entry, str):
            adapters[entry] = []
            continue
        if not isinstance(entry, dict) or not entry.get("name"):
            raise EventLogError(source, f"adapter {i} is missing name")
        positions = entry.get("positions") or []
        if not isinstance(positions, list):
            raise EventLogError(source, f"positions of adapter '{entry['name']}' must be a list")
        try:
            adapters[str(entry["name"])] = [Position.from_dict(p) for p in positions]
        except ValueError as e:
            raise EventLogError(source, f"adapter '{entry['name']}': {e}")
    return adapters


def _parse_event(raw: Any, index: int, source: str) -> Event:
    if not isinstance(raw, dict):
        raise EventLogError(source, f"event {index} must be a mapping")

    kind = raw.get("event")
    if kind not in (RUN_EVENT, RESULTS_EVENT):
        raise EventLogError(
            source, f"event {index} has invalid type {kind!r} (expected 'run' or 'results')"
        )

    scoped_id = raw.get("id")
    if not scoped_id:
        raise EventLogError(source, f"event {index} is missing id")
    scoped_id = str(scoped_id)

    if kind == RUN_EVENT:
        position_id = raw.get("position") or parse_position_id(scoped_id)
        return Event(kind=kind, adapter_scoped_id=scoped_id, position_id=str(position_id))

    results = raw.get("results") or {}
    if not isinstance(results, dict):
        raise EventLogError(source, f"results of event {index} must be a mapping")
    return Event(kind=kind, adapter_scoped_id=scoped_id, results=results)


def parse_event_log(data: Any, source: str = "<data>") -> EventLog:
    """
    Build an EventLog from already-parsed data.

    Args:
        data: Mapping with ``adapters``, ``events`` and optional ``started`` keys
        source: Name used in error messages

    Returns:
        EventLog

    Raises:
        EventLogError: If the data is not a valid event log
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise EventLogError(source, "top level must be a mapping")

    raw_events = data.get("events") or []
    if not isinstance(raw_events, list):
        raise EventLogError(source, "'events' must be a list")

    return EventLog(
        adapters=_parse_adapters(data.get("adapters"), source),
        events=[_parse_event(raw, i, source) for i, raw in enumerate(raw_events)],
        started=bool(data.get("started", True)),
    )


def load_event_log(path: str) -> EventLog:
    """
    Load an event log from a YAML or JSON file.

    Args:
        path: Path to the event log

    Returns:
        EventLog

    Raises:
        EventLogError: If the file cannot be read or is invalid
    """
    logger.info("Loading event log from %s", path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise EventLogError(path, f"invalid YAML: {e}")
    except OSError as e:
        raise EventLogError(path, f"unable to read file: {e}")

    log = parse_event_log(data, source=path)
    logger.debug("Loaded %d adapters and %d events", len(log.adapters), len(log.events))
    return log

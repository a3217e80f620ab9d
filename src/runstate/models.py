"""
Data models for runstate.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union

from .exceptions import UnknownStatusError


class Status(Enum):
    """Status of a single test."""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Union["Status", str]) -> "Status":
        """
        Convert a status value into a Status member.

        Args:
            value: A Status member or its string value (case-insensitive)

        Returns:
            The matching Status

        Raises:
            UnknownStatusError: If the value is not a recognised status
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise UnknownStatusError(value)


@dataclass(frozen=True)
class RunningEntry:
    """One in-flight run, keyed by its position id in the running-set."""

    adapter: Optional[str]
    position_id: str


@dataclass
class StatusCount:
    """Tally of tests by status under a single path."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    unknown: int = 0

    @property
    def total(self) -> int:
        """Return the number of tests counted."""
        return self.passed + self.failed + self.skipped + self.unknown

    def get(self, status: Union[Status, str]) -> int:
        """Return the count for one status."""
        return getattr(self, Status.parse(status).value)

    def increment(self, status: Status) -> None:
        field_name = status.value
        setattr(self, field_name, getattr(self, field_name) + 1)

    def add(self, other: "StatusCount") -> None:
        """Add another count record into this one, elementwise."""
        self.passed += other.passed
        self.failed += other.failed
        self.skipped += other.skipped
        self.unknown += other.unknown

    def copy(self) -> "StatusCount":
        return StatusCount(self.passed, self.failed, self.skipped, self.unknown)

    def as_dict(self) -> Dict[str, int]:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "unknown": self.unknown,
        }


@dataclass
class ResultRecord:
    """Result reported by the execution engine for one position."""

    status: Union[Status, str]
    short: str = ""
    errors: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class Position:
    """
    A node in the test tree.

    Directories, files and namespaces carry children; tests are leaves.
    ``path`` is the file the node belongs to, shared by every node below
    a file.
    """

    id: str
    type: str
    name: str
    path: str
    children: List["Position"] = field(default_factory=list)

    def iter_nodes(self) -> Iterator["Position"]:
        """Yield this node, then every descendant depth-first."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()

    @property
    def is_test(self) -> bool:
        return self.type == "test"

    @staticmethod
    def _infer_type(position_id: str, has_children: bool) -> str:
        # Only ids below a file carry "::"
        if "::" not in position_id:
            return "file"
        return "namespace" if has_children else "test"

    @classmethod
    def from_dict(cls, data: Dict[str, Any], parent_path: Optional[str] = None) -> "Position":
        """
        Build a position tree from nested dictionaries.

        Args:
            data: Mapping with ``id`` and optional ``type``, ``name``, ``path``
                and ``children`` keys. Without ``type``, an id with no ``::`` is a
                file, otherwise a namespace if it has children and a test if not
            parent_path: Path inherited from the enclosing node

        Returns:
            Root Position of the tree

        Raises:
            ValueError: If a node has no id or children is not a list
        """
        if not isinstance(data, dict):
            raise ValueError(f"Position must be a mapping, got {type(data).__name__}")
        position_id = data.get("id")
        if not position_id:
            raise ValueError("Position is missing id")
        position_id = str(position_id)

        raw_children = data.get("children") or []
        if not isinstance(raw_children, list):
            raise ValueError(f"Children of position '{position_id}' must be a list")

        node_type = data.get("type") or cls._infer_type(position_id, bool(raw_children))
        if data.get("path"):
            path = str(data["path"])
        elif node_type in ("dir", "file"):
            path = position_id
        else:
            path = parent_path or position_id.split("::", 1)[0]
        name = data.get("name") or position_id.rsplit("::", 1)[-1].rsplit("/", 1)[-1]

        children = [cls.from_dict(child, parent_path=path) for child in raw_children]
        return cls(id=position_id, type=node_type, name=name, path=path, children=children)


@dataclass(frozen=True)
class StatusSummary:
    """Point-in-time snapshot of the aggregated state."""

    counts: Dict[str, StatusCount]
    total: StatusCount
    running: List[RunningEntry]

    @property
    def success(self) -> bool:
        """Return True if no recorded test has failed."""
        return self.total.failed == 0

"""
Base class for report generators.
"""

from abc import ABC, abstractmethod

from ..models import StatusSummary


class ReportGenerator(ABC):
    """Base class for generating status reports."""

    def __init__(self, show_running: bool = True) -> None:
        self.show_running = show_running

    @abstractmethod
    def generate(self, summary: StatusSummary) -> str:
        """
        Generate a report from aggregated state.

        Args:
            summary: StatusSummary snapshot

        Returns:
            Report as a string
        """
        pass

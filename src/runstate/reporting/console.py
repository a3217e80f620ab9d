"""
Console reporter for aggregated state.
"""

import os
import sys

from ..models import StatusCount, StatusSummary
from .base import ReportGenerator


def _supports_color() -> bool:
    """Return True if the output stream likely supports ANSI colours."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    # Non-TTY output (e.g. piped to a file) should not use colour
    if not hasattr(sys.stdout, "isatty") or not sys.stdout.isatty():
        return False
    return sys.platform != "win32"


class ConsoleReporter(ReportGenerator):
    """Generate colored console output for aggregated state."""

    def __init__(self, show_running: bool = True) -> None:
        super().__init__(show_running=show_running)
        color = _supports_color()
        self.GREEN = "\033[92m" if color else ""
        self.RED = "\033[91m" if color else ""
        self.YELLOW = "\033[93m" if color else ""
        self.BLUE = "\033[94m" if color else ""
        self.RESET = "\033[0m" if color else ""
        self.BOLD = "\033[1m" if color else ""

    def format_count(self, count: StatusCount) -> str:
        """Render one count record on a single line."""
        return (
            f"{self.GREEN}{count.passed} passed{self.RESET}, "
            f"{self.RED}{count.failed} failed{self.RESET}, "
            f"{self.YELLOW}{count.skipped} skipped{self.RESET}, "
            f"{count.unknown} unknown"
        )

    def generate(self, summary: StatusSummary) -> str:
        """Generate console report."""
        lines = []

        lines.append(f"\n{self.BOLD}Test Run State{self.RESET}")
        lines.append("=" * 60)

        lines.append(f"\n{self.BOLD}Summary:{self.RESET}")
        lines.append(f"  Total Tests: {summary.total.total}")
        lines.append(f"  {self.GREEN}Passed: {summary.total.passed}{self.RESET}")
        lines.append(f"  {self.RED}Failed: {summary.total.failed}{self.RESET}")
        lines.append(f"  {self.YELLOW}Skipped: {summary.total.skipped}{self.RESET}")
        lines.append(f"  Unknown: {summary.total.unknown}")

        if summary.total.total == 0:
            lines.append(f"\n{self.YELLOW}No results recorded{self.RESET}")
        elif summary.success:
            lines.append(f"\n{self.GREEN}{self.BOLD}✓ NO FAILURES{self.RESET}")
        else:
            lines.append(f"\n{self.RED}{self.BOLD}✗ FAILURES RECORDED{self.RESET}")

        if summary.counts:
            lines.append(f"\n{self.BOLD}Paths:{self.RESET}")
            for path, count in sorted(summary.counts.items()):
                symbol = f"{self.RED}✗{self.RESET}" if count.failed else f"{self.GREEN}✓{self.RESET}"
                lines.append(f"  {symbol} {path}: {self.format_count(count)}")

        if self.show_running:
            lines.append(f"\n{self.BOLD}Running:{self.RESET}")
            if summary.running:
                for entry in summary.running:
                    adapter = entry.adapter or "unknown adapter"
                    lines.append(f"  {self.BLUE}●{self.RESET} {entry.position_id} ({adapter})")
            else:
                lines.append("  (none)")

        lines.append("")  # Empty line at end
        return "\n".join(lines)

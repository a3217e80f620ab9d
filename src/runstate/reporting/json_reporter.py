"""
JSON reporter for aggregated state.
"""

import json

from ..models import StatusSummary
from .base import ReportGenerator


class JSONReporter(ReportGenerator):
    """Generate JSON format for programmatic analysis."""

    def generate(self, summary: StatusSummary) -> str:
        """Generate JSON report."""
        report = {
            "total": summary.total.as_dict(),
            "success": summary.success,
            "paths": {path: count.as_dict() for path, count in sorted(summary.counts.items())},
        }
        if self.show_running:
            report["running"] = [
                {"adapter": entry.adapter, "position_id": entry.position_id}
                for entry in summary.running
            ]

        return json.dumps(report, indent=2)

"""
JSON output formatter for machine-readable results.
"""

import json
from datetime import datetime, timezone
from typing import List

from outrider.core.aggregator import summarize
from outrider.core.findings import Finding, ScanResult


class JSONFormatter:
    """
    Formats scan results as JSON for machine consumption.
    """

    def __init__(self, indent: int = 2, include_stats: bool = False, **_):
        self.indent = indent
        self.include_stats = include_stats

    def format_result(self, result: ScanResult) -> str:
        """Format a complete scan result as JSON."""
        data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "summary": result.summary.to_dict(),
            "files_scanned": result.files_scanned,
            "results": [f.to_dict() for f in result.findings],
            "errors": result.errors,
        }
        if self.include_stats:
            data["stats"] = {path: stats.to_dict() for path, stats in result.file_stats.items()}

        return json.dumps(data, indent=self.indent, default=str)

    def format_findings(self, findings: List[Finding]) -> str:
        """Format a list of findings with their summary as JSON."""
        data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "summary": summarize(findings).to_dict(),
            "results": [f.to_dict() for f in findings],
        }
        return json.dumps(data, indent=self.indent, default=str)

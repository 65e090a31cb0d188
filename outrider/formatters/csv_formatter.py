"""
CSV output formatter: one row per finding.
"""

import csv
import io
from typing import List

from outrider.core.findings import Finding, ScanResult


CSV_HEADERS = [
    "File", "Line", "Column", "Severity", "Type", "Rule",
    "Message", "Suggestion", "Confidence", "Category",
]


class CSVFormatter:
    """
    Formats findings as comma-separated values for spreadsheet import.
    """

    def __init__(self, **_):
        pass

    def format_result(self, result: ScanResult) -> str:
        return self.format_findings(result.findings)

    def format_findings(self, findings: List[Finding]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADERS)

        for finding in findings:
            writer.writerow([
                finding.file,
                finding.line,
                finding.column,
                finding.severity.value,
                finding.type.value,
                finding.rule or "",
                finding.message or "",
                finding.suggestion or "",
                "" if finding.confidence is None else round(finding.confidence * 100),
                finding.category or "",
            ])

        return buffer.getvalue()

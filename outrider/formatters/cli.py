"""
Console output formatter for human-readable results.
"""

import sys
from typing import List

from outrider.core.aggregator import group_by_file
from outrider.core.findings import Finding, ScanResult, Severity


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"


def supports_color() -> bool:
    """Check if the terminal supports color output."""
    if not hasattr(sys.stdout, "isatty"):
        return False
    return sys.stdout.isatty()


class CLIFormatter:
    """
    Formats scan results for the console, grouped by file.
    """

    SEVERITY_COLORS = {
        Severity.ERROR: Colors.RED,
        Severity.WARNING: Colors.YELLOW,
        Severity.INFO: Colors.BLUE,
    }

    def __init__(self, use_color: bool = True, include_suggestions: bool = True,
                 include_stats: bool = False):
        self.use_color = use_color and supports_color()
        self.include_suggestions = include_suggestions
        self.include_stats = include_stats

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors are enabled."""
        if self.use_color:
            return f"{color}{text}{Colors.RESET}"
        return text

    def _severity_label(self, severity: Severity) -> str:
        return self._color(severity.value.upper(), self.SEVERITY_COLORS.get(severity, ""))

    def format_result(self, result: ScanResult) -> str:
        """Format a complete scan result."""
        lines = [self.format_findings(result.findings)]

        if self.include_stats and result.file_stats:
            lines.append(self._color("File Statistics:", Colors.BOLD))
            for path, stats in result.file_stats.items():
                lines.append(
                    f"  {path}: {stats.total_lines} lines "
                    f"({stats.code_lines} code, {stats.comment_lines} comment, {stats.blank_lines} blank), "
                    f"{stats.functions} functions, {stats.classes} classes"
                )
            lines.append("")

        summary = result.summary
        lines.append(self._color("Analysis Summary:", Colors.BLUE))
        lines.append(self._color(f"  Files analyzed: {result.files_scanned}", Colors.GREEN))
        lines.append(self._color(f"  Warnings found: {summary.warnings}", Colors.YELLOW))
        lines.append(self._color(f"  Errors found: {summary.errors}", Colors.RED))
        lines.append(self._color(f"  Risk score: {summary.risk_score}/100", Colors.BLUE))

        if result.errors:
            lines.append("")
            lines.append(self._color("Errors:", Colors.RED))
            for error in result.errors:
                lines.append(f"  - {error}")

        return "\n".join(lines)

    def format_findings(self, findings: List[Finding]) -> str:
        """Format findings grouped by file."""
        if not findings:
            return self._color("No issues found! Your code looks great.", Colors.GREEN) + "\n"

        lines = ["", self._color("Analysis Results:", Colors.BLUE)]

        for file_path, file_findings in group_by_file(findings).items():
            lines.append("")
            lines.append(self._color(f"{file_path}:", Colors.CYAN))
            for finding in file_findings:
                lines.extend(self._format_finding(finding))
                lines.append("")

        return "\n".join(lines)

    def _format_finding(self, finding: Finding) -> List[str]:
        lines = [
            f"  {self._severity_label(finding.severity)} Line {finding.line}:{finding.column}",
            f"     {finding.message}",
        ]
        if finding.rule:
            lines.append(f"     Rule: {self._color(finding.rule, Colors.DIM)}")
        if finding.suggestion and self.include_suggestions:
            lines.append(f"     {finding.suggestion}")
        if finding.confidence is not None:
            lines.append(f"     Confidence: {round(finding.confidence * 100)}%")
        return lines

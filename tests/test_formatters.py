"""
Tests for output formatters.
"""

import csv
import io
import json
import os
import sys

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from outrider.core.aggregator import summarize
from outrider.core.findings import FileStats, Finding, ScanResult
from outrider.formatters import CLIFormatter, CSVFormatter, JSONFormatter, get_formatter


@pytest.fixture
def result():
    findings = [
        Finding(
            type="rule",
            severity="warning",
            file="src/app.js",
            line=1,
            column=1,
            message="Console.log statements should be removed in production",
            rule="no-console-log",
            code="console.log(",
            suggestion="Remove console.log statement or use a proper logging library",
        ),
        Finding(
            type="ml",
            severity="warning",
            file="src/app.js",
            line=3,
            column=5,
            message="setInterval called but no clearInterval visible",
            rule="memory-leak-setinterval-no-clear",
            suggestion="Store interval ID and call clearInterval when appropriate",
            confidence=0.8,
            category="memory-leak",
        ),
        Finding(
            type="rule",
            severity="error",
            file="src/other.js",
            line=2,
            column=3,
            message="Eval can be dangerous, avoid it",
            rule="no-eval",
        ),
    ]
    return ScanResult(
        findings=findings,
        files_scanned=2,
        scan_time_seconds=0.01,
        file_stats={"src/app.js": FileStats(total_lines=4, code_lines=3, blank_lines=1, functions=1)},
    )


class TestGetFormatter:
    """Tests for formatter lookup."""

    def test_known_formats(self):
        assert isinstance(get_formatter("console"), CLIFormatter)
        assert isinstance(get_formatter("json"), JSONFormatter)
        assert isinstance(get_formatter("CSV"), CSVFormatter)

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            get_formatter("xml")


class TestCLIFormatter:
    """Tests for console output."""

    def test_format_result(self, result):
        output = CLIFormatter(use_color=False).format_result(result)

        assert "src/app.js:" in output
        assert "src/other.js:" in output
        assert "WARNING Line 1:1" in output
        assert "ERROR Line 2:3" in output
        assert "Rule: no-console-log" in output
        assert "Confidence: 80%" in output
        assert "Remove console.log statement" in output
        assert "Files analyzed: 2" in output
        assert "Risk score: 33/100" in output
        assert "\033[" not in output

    def test_groups_by_file(self, result):
        output = CLIFormatter(use_color=False).format_result(result)
        assert output.index("src/app.js:") < output.index("src/other.js:")

    def test_suggestions_can_be_hidden(self, result):
        output = CLIFormatter(use_color=False, include_suggestions=False).format_result(result)
        assert "Remove console.log statement" not in output

    def test_stats(self, result):
        output = CLIFormatter(use_color=False, include_stats=True).format_result(result)
        assert "src/app.js: 4 lines" in output

    def test_no_findings(self):
        output = CLIFormatter(use_color=False).format_result(ScanResult([], 1, 0.0))

        assert "No issues found" in output
        assert "Risk score: 0/100" in output


class TestJSONFormatter:
    """Tests for JSON output."""

    def test_structure(self, result):
        data = json.loads(JSONFormatter().format_result(result))

        assert "timestamp" in data
        assert data["summary"] == summarize(result.findings).to_dict()
        assert data["summary"]["risk_score"] == 33
        assert len(data["results"]) == 3
        assert data["results"][1]["confidence"] == 0.8
        assert "stats" not in data

    def test_stats(self, result):
        data = json.loads(JSONFormatter(include_stats=True).format_result(result))
        assert data["stats"]["src/app.js"]["total_lines"] == 4

    def test_format_findings(self, result):
        data = json.loads(JSONFormatter().format_findings(result.findings))
        assert data["summary"]["total"] == 3


class TestCSVFormatter:
    """Tests for CSV output."""

    def test_header(self, result):
        output = CSVFormatter().format_result(result)
        assert output.splitlines()[0] == (
            "File,Line,Column,Severity,Type,Rule,Message,Suggestion,Confidence,Category"
        )

    def test_rows(self, result):
        rows = list(csv.reader(io.StringIO(CSVFormatter().format_result(result))))

        assert len(rows) == 4
        assert rows[1][:6] == ["src/app.js", "1", "1", "warning", "rule", "no-console-log"]
        assert rows[1][8] == ""
        assert rows[2][8] == "80"
        assert rows[2][9] == "memory-leak"
        # commas inside fields are quoted
        assert rows[3][6] == "Eval can be dangerous, avoid it"

"""
Tests for finding aggregation and the risk score.
"""

import os
import sys

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from outrider.core.aggregator import (
    aggregate,
    cap_per_file,
    group_by_file,
    risk_score,
    round_half_up,
    summarize,
)
from outrider.core.findings import Finding, FindingType, Severity


def make_finding(severity="warning", file="a.js", line=1, rule="no-var", type="rule", category=None):
    return Finding(
        type=type,
        severity=severity,
        file=file,
        line=line,
        column=1,
        message="message",
        rule=rule,
        category=category,
    )


class TestRiskScore:
    """Tests for the severity-weighted risk score."""

    def test_empty(self):
        assert risk_score([]) == 0

    def test_two_errors(self):
        assert risk_score([make_finding("error"), make_finding("error")]) == 60

    def test_single_error(self):
        assert risk_score([make_finding("error")]) == 60

    def test_one_warning(self):
        assert risk_score([make_finding("warning")]) == 20

    def test_ten_warnings(self):
        assert risk_score([make_finding("warning")] * 10) == 20

    def test_info_only(self):
        assert risk_score([make_finding("info"), make_finding("info")]) == 0

    def test_mixed(self):
        assert risk_score([make_finding("error"), make_finding("warning")]) == 40
        assert risk_score([make_finding("error"), make_finding("warning"), make_finding("info")]) == 27

    def test_density_not_volume(self):
        """Ten errors score the same as two."""
        assert risk_score([make_finding("error")] * 10) == 60

    def test_half_rounds_up(self):
        findings = [make_finding("warning")] + [make_finding("info")] * 7
        assert risk_score(findings) == 3

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2
        assert round_half_up(0) == 0


class TestGrouping:
    """Tests for per-file grouping and capping."""

    def test_group_by_file_keeps_order(self):
        findings = [
            make_finding(file="b.js", line=1),
            make_finding(file="a.js", line=1),
            make_finding(file="b.js", line=2),
        ]
        grouped = group_by_file(findings)

        assert list(grouped) == ["b.js", "a.js"]
        assert [f.line for f in grouped["b.js"]] == [1, 2]

    def test_cap_per_file(self):
        findings = [make_finding(file=name, line=i) for i, name in enumerate("ababa", start=1)]
        capped = cap_per_file(findings, 2)

        assert [(f.file, f.line) for f in capped] == [("a", 1), ("b", 2), ("a", 3), ("b", 4)]

    def test_no_cap(self):
        findings = [make_finding(line=i) for i in range(1, 6)]
        assert cap_per_file(findings, None) == findings


class TestSummary:
    """Tests for summary counts."""

    def test_empty(self):
        summary = summarize([])

        assert summary.total == 0
        assert summary.errors == 0
        assert summary.warnings == 0
        assert summary.risk_score == 0

    def test_counts(self):
        findings = [
            make_finding("error", rule="no-eval"),
            make_finding("warning"),
            make_finding("warning", type="ml", rule="type-safety-loose-equality", category="type-safety"),
            make_finding("info"),
        ]
        summary = summarize(findings)

        assert summary.total == 4
        assert summary.errors == 1
        assert summary.warnings == 2
        assert summary.by_type == {"rule": 3, "ml": 1}
        assert summary.by_category == {"type-safety": 1}
        assert summary.to_dict()["risk_score"] == summary.risk_score

    def test_aggregate_summarizes_capped_findings(self):
        findings = [make_finding("error", line=i) for i in range(1, 4)] + [make_finding("warning", file="b.js")]
        result = aggregate(findings, max_per_file=1)

        assert len(result.findings) == 2
        assert result.summary.total == 2
        assert result.summary.errors == 1


class TestFinding:
    """Tests for the finding record."""

    def test_string_coercion(self):
        finding = make_finding("error", type="ml")
        assert finding.severity == Severity.ERROR
        assert finding.type == FindingType.ML

    def test_invalid_position(self):
        with pytest.raises(ValueError):
            Finding(type="rule", severity="warning", file="a.js", line=0, column=1,
                    message="m", rule="r")

    def test_missing_file(self):
        with pytest.raises(ValueError):
            Finding(type="rule", severity="warning", file="", line=1, column=1,
                    message="m", rule="r")

    def test_severity_ordering(self):
        assert Severity.INFO < Severity.WARNING < Severity.ERROR
        assert Severity.ERROR.weight == 3
        assert Severity.WARNING.weight == 1
        assert Severity.INFO.weight == 0

    def test_from_dict(self):
        finding = make_finding("warning", type="ml", category="memory-leak")
        assert Finding.from_dict(finding.to_dict()) == finding

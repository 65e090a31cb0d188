"""
Aggregation of findings from both engines into per-file groups, summary
counts and a 0-100 risk score.

Aggregation only reads findings; their relative order is never changed.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from outrider.core.findings import Finding, Severity

RISK_SCALE = 20
MAX_RISK_SCORE = 100


def group_by_file(findings: Iterable[Finding]) -> Dict[str, List[Finding]]:
    """Stable group-by on the file path, keyed in first-seen order."""
    grouped: Dict[str, List[Finding]] = {}
    for finding in findings:
        grouped.setdefault(finding.file, []).append(finding)
    return grouped


def cap_per_file(findings: Sequence[Finding], limit: Optional[int]) -> List[Finding]:
    """Keep at most ``limit`` findings per file, preserving the original order."""
    if limit is None:
        return list(findings)
    seen: Counter = Counter()
    kept = []
    for finding in findings:
        if seen[finding.file] < limit:
            kept.append(finding)
        seen[finding.file] += 1
    return kept


def risk_score(findings: Sequence[Finding]) -> int:
    """
    Severity-weighted density of a finding set, 0 to 100.

    Each error weighs 3, each warning 1, anything else 0; the mean weight
    is scaled by 20. Two errors score the same as ten errors.
    """
    if not findings:
        return 0
    weighted = sum(f.severity.weight for f in findings)
    return min(MAX_RISK_SCORE, round_half_up(weighted / len(findings) * RISK_SCALE))


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; .5 must round up here.
    return int(value + 0.5)


@dataclass
class Summary:
    """Summary statistics for a set of findings."""
    total: int = 0
    errors: int = 0
    warnings: int = 0
    by_severity: Dict[str, int] = field(default_factory=dict)
    by_type: Dict[str, int] = field(default_factory=dict)
    by_category: Dict[str, int] = field(default_factory=dict)
    risk_score: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "total": self.total,
            "errors": self.errors,
            "warnings": self.warnings,
            "by_severity": dict(self.by_severity),
            "by_type": dict(self.by_type),
            "by_category": dict(self.by_category),
            "risk_score": self.risk_score,
        }


def summarize(findings: Sequence[Finding]) -> Summary:
    """Count findings by severity, origin and category and score them."""
    summary = Summary(total=len(findings))

    for finding in findings:
        severity = finding.severity.value
        summary.by_severity[severity] = summary.by_severity.get(severity, 0) + 1
        origin = finding.type.value
        summary.by_type[origin] = summary.by_type.get(origin, 0) + 1
        if finding.category:
            summary.by_category[finding.category] = summary.by_category.get(finding.category, 0) + 1

    summary.errors = summary.by_severity.get(Severity.ERROR.value, 0)
    summary.warnings = summary.by_severity.get(Severity.WARNING.value, 0)
    summary.risk_score = risk_score(findings)
    return summary


@dataclass
class AggregateResult:
    """Findings after capping, with their summary."""
    findings: List[Finding]
    summary: Summary


def aggregate(findings: Sequence[Finding], max_per_file: Optional[int] = None) -> AggregateResult:
    """Merge findings from both engines into the reportable result."""
    kept = cap_per_file(findings, max_per_file)
    return AggregateResult(
        findings=kept,
        summary=summarize(kept),
    )

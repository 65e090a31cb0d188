"""
Finding data structures for outrider.

This module defines the value records produced by the rule and heuristic
engines, plus the per-file statistics and the result of a complete scan.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, List, Dict, Any


class Severity(Enum):
    """Severity levels for findings."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def __lt__(self, other):
        order = [Severity.INFO, Severity.WARNING, Severity.ERROR]
        return order.index(self) < order.index(other)

    def __le__(self, other):
        return self == other or self < other

    @property
    def weight(self) -> int:
        """Contribution of one finding of this severity to the risk score."""
        return SEVERITY_WEIGHTS.get(self, 0)


SEVERITY_WEIGHTS: Dict[Severity, int] = {
    Severity.ERROR: 3,
    Severity.WARNING: 1,
}


class FindingType(Enum):
    """Which engine produced a finding."""
    RULE = "rule"
    ML = "ml"
    # Reserved for the synthetic finding reported when a file cannot be analyzed.
    ERROR = "error"


# Rule identifier carried by the synthetic per-file failure finding.
FILE_ERROR_RULE = "file-parsing-error"


@dataclass(frozen=True)
class Finding:
    """
    One reported issue instance.

    Rule findings carry the trimmed matched ``code`` and no confidence;
    heuristic (``ml``) findings carry a confidence in [0, 1] and the
    category they belong to.
    """
    type: FindingType
    severity: Severity
    file: str
    line: int
    column: int
    message: str
    rule: str
    code: Optional[str] = None
    suggestion: Optional[str] = None
    confidence: Optional[float] = None
    category: Optional[str] = None

    def __post_init__(self):
        """Validate and normalize the finding."""
        if isinstance(self.severity, str):
            object.__setattr__(self, "severity", Severity(self.severity))
        if isinstance(self.type, str):
            object.__setattr__(self, "type", FindingType(self.type))
        if not self.file:
            raise ValueError("Finding requires a file path")
        if self.line < 1 or self.column < 1:
            raise ValueError(
                f"Finding position must be 1-based, got {self.line}:{self.column}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert finding to a dictionary."""
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "rule": self.rule,
            "code": self.code,
            "suggestion": self.suggestion,
            "confidence": self.confidence,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Finding":
        """Create a Finding from a dictionary."""
        known_fields = {f for f in cls.__dataclass_fields__}
        return cls(**{k: v for k, v in data.items() if k in known_fields})


def file_error_finding(file_path: str, reason: str) -> Finding:
    """Build the single finding that stands in for a file that failed analysis."""
    return Finding(
        type=FindingType.ERROR,
        severity=Severity.ERROR,
        file=file_path,
        line=1,
        column=1,
        message=f"Failed to analyze file: {reason}",
        rule=FILE_ERROR_RULE,
    )


@dataclass
class FileStats:
    """Line and structure counts for one analyzed file."""
    total_lines: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0
    functions: int = 0
    classes: int = 0
    imports: int = 0
    exports: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class ScanResult:
    """Results from a complete scan."""
    findings: List[Finding]
    files_scanned: int
    scan_time_seconds: float
    file_stats: Dict[str, FileStats] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def summary(self) -> "Summary":
        from outrider.core.aggregator import summarize
        return summarize(self.findings)

"""Core analysis engines and data structures."""

from outrider.core.findings import Finding, FindingType, Severity, FileStats, ScanResult
from outrider.core.errors import OutriderError, ConfigurationError, PatternError
from outrider.core.position import Match, Position, resolve_position, scan
from outrider.core.rules import Rule, RuleEngine, DEFAULT_RULES
from outrider.core.heuristics import (
    Category, Detector, HeuristicConfig, HeuristicEngine, DEFAULT_CATEGORIES
)
from outrider.core.aggregator import Summary, aggregate, group_by_file, risk_score, summarize

__all__ = [
    "Finding",
    "FindingType",
    "Severity",
    "FileStats",
    "ScanResult",
    "OutriderError",
    "ConfigurationError",
    "PatternError",
    "Match",
    "Position",
    "resolve_position",
    "scan",
    "Rule",
    "RuleEngine",
    "DEFAULT_RULES",
    "Category",
    "Detector",
    "HeuristicConfig",
    "HeuristicEngine",
    "DEFAULT_CATEGORIES",
    "Summary",
    "aggregate",
    "group_by_file",
    "risk_score",
    "summarize",
]

"""
Outrider

Predictive code analysis for JavaScript and TypeScript: a deterministic
rule engine and a confidence-scored heuristic engine over the same source
text, with a severity-weighted risk score.
"""

__version__ = "1.0.0"

from outrider.core.engine import ScanEngine
from outrider.core.findings import Finding, Severity, FindingType
from outrider.core.rules import RuleEngine
from outrider.core.heuristics import HeuristicEngine
from outrider.config import ScanConfig

__all__ = [
    "ScanEngine",
    "Finding",
    "Severity",
    "FindingType",
    "RuleEngine",
    "HeuristicEngine",
    "ScanConfig",
]

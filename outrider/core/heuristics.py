"""
Heuristic engine for confidence-scored bug patterns.

Categories group detectors; every detector is an independent regular
expression scanned over the whole file. There is no control-flow or
data-flow analysis: detectors such as "no removal visible" are purely
textual and will both over- and under-report.

Known precision limitation: the deep property access and array access
detectors match any ``a.b.c`` or ``a[b]`` token shape, including access
that is already guarded by a null or bounds check.
"""

from dataclasses import dataclass, field, replace
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
import logging
import re

from outrider.core.errors import ConfigurationError, PatternError
from outrider.core.findings import Finding, FindingType, Severity
from outrider.core.position import Match, compile_pattern, scan
from outrider.core.rules import parse_severity
from outrider.core.suppression import is_suppressed, line_text

logger = logging.getLogger(__name__)


BASE_CONFIDENCE = 0.5
LENGTH_BONUS = 0.2
LENGTH_BONUS_MIN_CHARS = 20
SUPPRESSION_PENALTY = 0.3
SIGNAL_BONUS = 0.1
# Substrings that point at resource-cleanup omissions.
HIGH_SIGNAL_SUBSTRINGS = ("setInterval", "addEventListener")

GENERIC_ML_SUGGESTION = "Review and optimize according to best practices"

ML_SUGGESTIONS: Dict[Tuple[str, str], str] = {
    ("race-condition", "async-await-misuse"): "Wrap await calls in try-catch blocks",
    ("race-condition", "promise-chain-missing-catch"): "Add .catch() to handle promise rejections",
    ("memory-leak", "event-listener-no-removal"): "Store reference to listener and remove it when no longer needed",
    ("memory-leak", "setinterval-no-clear"): "Store interval ID and call clearInterval when appropriate",
    ("null-access", "optional-chaining-missing"): "Use optional chaining (?.) or add null checks",
    ("null-access", "array-access-no-bounds-check"): "Check array bounds before accessing elements",
    ("type-safety", "loose-equality"): "Replace == with === for strict equality comparison",
    ("type-safety", "loose-inequality"): "Replace != with !== for strict inequality comparison",
    ("performance", "nested-loops"): "Consider using more efficient algorithms or data structures",
    ("performance", "string-concatenation-in-loop"): "Use array.push() and array.join() instead of string concatenation",
}

CATEGORY_FIELDS = frozenset({"enabled", "severity", "description", "confidence", "patterns"})
DETECTOR_FIELDS = frozenset({"type", "pattern", "flags", "message", "suggestion"})


@dataclass(frozen=True)
class Detector:
    """A sub-pattern of a category; borrows the category's severity."""
    type: str
    pattern: re.Pattern
    message: str
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class Category:
    """A named group of detectors sharing a severity and base confidence."""
    name: str
    description: str
    severity: Severity
    confidence: float
    detectors: Tuple[Detector, ...] = field(default_factory=tuple)
    enabled: bool = True

    def suggestion_for(self, detector: Detector) -> str:
        if detector.suggestion:
            return detector.suggestion
        return ML_SUGGESTIONS.get((self.name, detector.type), GENERIC_ML_SUGGESTION)


def _detector(category: str, type_: str, pattern: str, message: str, flags: str = "") -> Detector:
    return Detector(
        type=type_,
        pattern=compile_pattern(f"{category}-{type_}", pattern, flags),
        message=message,
    )


DEFAULT_CATEGORIES: Dict[str, Category] = {
    category.name: category
    for category in (
        Category(
            name="race-condition",
            description="Potential race condition detected",
            severity=Severity.WARNING,
            confidence=0.8,
            detectors=(
                _detector(
                    "race-condition", "async-await-misuse",
                    r"async\s+function\s*\w*\s*\([^)]*\)\s*\{\s*[^}]*await\s+[^;]+;\s*[^}]*\}",
                    "Async function with await but no proper error handling",
                    "s",
                ),
                _detector(
                    "race-condition", "promise-chain-missing-catch",
                    r"\.then\s*\([^)]*\)\s*(?!\.catch)",
                    "Promise chain missing error handling (.catch)",
                ),
            ),
        ),
        Category(
            name="memory-leak",
            description="Potential memory leak detected",
            severity=Severity.WARNING,
            confidence=0.75,
            detectors=(
                _detector(
                    "memory-leak", "event-listener-no-removal",
                    r"addEventListener\s*\([^)]*\)\s*(?!.*removeEventListener)",
                    "Event listener added but no removal mechanism visible",
                ),
                _detector(
                    "memory-leak", "setinterval-no-clear",
                    r"setInterval\s*\([^)]*\)\s*(?!.*clearInterval)",
                    "setInterval called but no clearInterval visible",
                ),
            ),
        ),
        Category(
            name="null-access",
            description="Potential null/undefined access",
            severity=Severity.WARNING,
            confidence=0.85,
            detectors=(
                _detector(
                    "null-access", "optional-chaining-missing",
                    r"(\w+\.\w+\.\w+)",
                    "Deep property access without null checks",
                ),
                _detector(
                    "null-access", "array-access-no-bounds-check",
                    r"(\w+)\[(\w+)\]",
                    "Array access without bounds checking",
                ),
            ),
        ),
        Category(
            name="type-safety",
            description="Potential type safety issue",
            severity=Severity.WARNING,
            confidence=0.8,
            detectors=(
                _detector(
                    "type-safety", "loose-equality",
                    r"==\s*[^=]",
                    "Use strict equality (===) instead of loose equality (==)",
                ),
                _detector(
                    "type-safety", "loose-inequality",
                    r"!=\s*[^=]",
                    "Use strict inequality (!==) instead of loose inequality (!=)",
                ),
            ),
        ),
        Category(
            name="performance",
            description="Performance anti-pattern detected",
            severity=Severity.WARNING,
            confidence=0.7,
            detectors=(
                _detector(
                    "performance", "nested-loops",
                    r"for\s*\([^)]*\)\s*\{[^}]*for\s*\([^)]*\)",
                    "Nested loops detected - consider optimization",
                ),
                _detector(
                    "performance", "string-concatenation-in-loop",
                    r"for\s*\([^)]*\)\s*\{[^}]*\+\s*=",
                    "String concatenation in loop - consider using array.join()",
                ),
            ),
        ),
    )
}


def check_suggestions(categories: Mapping[str, Category]) -> None:
    """
    Verify every detector has a suggestion, either inline or in ML_SUGGESTIONS.

    Raises:
        ConfigurationError: naming the first detector without one.
    """
    for category in categories.values():
        for detector in category.detectors:
            if not detector.suggestion and (category.name, detector.type) not in ML_SUGGESTIONS:
                raise ConfigurationError(
                    f"No suggestion for detector {category.name}-{detector.type}"
                )


check_suggestions(DEFAULT_CATEGORIES)


def compute_confidence(matched: str, line: str) -> float:
    """
    Score a heuristic match.

    Starts from BASE_CONFIDENCE, rewards long matches and high-signal
    substrings, penalizes suppressed lines, and clamps to [0, 1].
    """
    confidence = BASE_CONFIDENCE

    if len(matched) > LENGTH_BONUS_MIN_CHARS:
        confidence += LENGTH_BONUS

    if is_suppressed(line):
        confidence -= SUPPRESSION_PENALTY

    if any(signal in matched for signal in HIGH_SIGNAL_SUBSTRINGS):
        confidence += SIGNAL_BONUS

    return round(max(0.0, min(1.0, confidence)), 2)


def _check_number(name: str, value: Any, integer: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    if integer and int(value) != value:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class HeuristicConfig:
    """Engine-wide settings for the heuristic engine."""
    enabled: bool = True
    confidence_threshold: float = 0.7
    max_warnings_per_file: int = 10

    def __post_init__(self):
        if not isinstance(self.enabled, bool):
            raise ConfigurationError(f"enabled must be a boolean, got {self.enabled!r}")
        _check_number("confidence_threshold", self.confidence_threshold)
        _check_number("max_warnings_per_file", self.max_warnings_per_file, integer=True)
        if self.max_warnings_per_file < 0:
            raise ConfigurationError("max_warnings_per_file must not be negative")


def _detector_from_config(category: str, entry: Mapping[str, Any]) -> Detector:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Detectors of category {category!r} must be mappings")
    unknown = set(entry) - DETECTOR_FIELDS
    if unknown:
        raise ConfigurationError(
            f"Unknown field(s) for a detector of {category!r}: {', '.join(sorted(unknown))}"
        )
    if not entry.get("type") or not entry.get("pattern"):
        raise ConfigurationError(f"Detectors of category {category!r} need a type and a pattern")
    type_ = str(entry["type"])
    return Detector(
        type=type_,
        pattern=compile_pattern(f"{category}-{type_}", entry["pattern"], entry.get("flags", "")),
        message=str(entry.get("message", type_)),
        suggestion=entry.get("suggestion"),
    )


def category_from_config(name: str, entry: Mapping[str, Any], base: Optional[Category] = None) -> Category:
    """
    Build a Category from a configuration entry, merged over ``base`` if given.

    Raises:
        ConfigurationError: for unknown fields or invalid values.
        PatternError: if a detector pattern does not compile.
    """
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Category {name!r} must be a mapping")
    unknown = set(entry) - CATEGORY_FIELDS
    if unknown:
        raise ConfigurationError(
            f"Unknown field(s) for category {name!r}: {', '.join(sorted(unknown))}"
        )

    changes: Dict[str, Any] = {}
    if "enabled" in entry:
        if not isinstance(entry["enabled"], bool):
            raise ConfigurationError(f"Category {name!r}: enabled must be a boolean")
        changes["enabled"] = entry["enabled"]
    if "severity" in entry:
        changes["severity"] = parse_severity(entry["severity"], f"category {name!r}")
    if "description" in entry:
        changes["description"] = str(entry["description"])
    if "confidence" in entry:
        _check_number(f"Category {name!r} confidence", entry["confidence"])
        changes["confidence"] = float(entry["confidence"])
    if "patterns" in entry:
        changes["detectors"] = tuple(_detector_from_config(name, d) for d in entry["patterns"])

    if base is not None:
        return replace(base, **changes)

    if not changes.get("detectors"):
        raise ConfigurationError(f"Custom category {name!r} needs at least one pattern")
    changes.setdefault("severity", Severity.WARNING)
    changes.setdefault("description", name)
    changes.setdefault("confidence", BASE_CONFIDENCE)
    return Category(name=name, **changes)


def build_categories(
    overrides: Optional[Mapping[str, Union[Category, Mapping[str, Any]]]] = None,
) -> Tuple[Dict[str, Category], List[str]]:
    """
    Merge configured categories over the built-in ones.

    A category whose detector pattern fails to compile is skipped and
    reported in the returned error list.
    """
    categories: Dict[str, Category] = dict(DEFAULT_CATEGORIES)
    errors: List[str] = []
    for name, entry in (overrides or {}).items():
        if isinstance(entry, Category):
            categories[name] = entry
            continue
        try:
            categories[name] = category_from_config(name, entry, categories.get(name))
        except PatternError as e:
            logger.warning("Skipping category %r: %s", name, e)
            errors.append(str(e))
            categories.pop(name, None)
    return categories, errors


class HeuristicEngine:
    """
    Confidence-scored pattern analysis.

    Matches scoring below ``confidence_threshold`` are discarded; the
    remaining findings are head-truncated to ``max_warnings_per_file`` in
    category, detector, occurrence order.
    """

    def __init__(
        self,
        categories: Optional[Mapping[str, Union[Category, Mapping[str, Any]]]] = None,
        config: Optional[Union[HeuristicConfig, Mapping[str, Any]]] = None,
    ):
        if config is None:
            config = HeuristicConfig()
        elif isinstance(config, Mapping):
            try:
                config = HeuristicConfig(**config)
            except TypeError as e:
                raise ConfigurationError(f"Invalid heuristic configuration: {e}") from e
        self.config = config
        self.categories, self.errors = build_categories(categories)

    @property
    def enabled_categories(self) -> List[Category]:
        return [c for c in self.categories.values() if c.enabled]

    def analyze(self, text: str, file_path: str) -> List[Finding]:
        """Analyze text with every enabled category."""
        if not self.config.enabled:
            return []

        lines = text.split("\n")
        findings: List[Finding] = []

        for category in self.enabled_categories:
            for detector in category.detectors:
                for match in scan(detector.pattern, text):
                    confidence = compute_confidence(match.text, line_text(lines, match.line))
                    if confidence < self.config.confidence_threshold:
                        continue
                    findings.append(self.create_finding(category, detector, match, confidence, file_path))

        limit = int(self.config.max_warnings_per_file)
        if len(findings) > limit:
            logger.debug("%s: truncating %d heuristic finding(s) to %d", file_path, len(findings), limit)
        return findings[:limit]

    def create_finding(
        self,
        category: Category,
        detector: Detector,
        match: Match,
        confidence: float,
        file_path: str,
    ) -> Finding:
        return Finding(
            type=FindingType.ML,
            severity=category.severity,
            file=file_path,
            line=match.line,
            column=match.column,
            message=detector.message,
            rule=f"{category.name}-{detector.type}",
            suggestion=category.suggestion_for(detector),
            confidence=confidence,
            category=category.name,
        )

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "type": "heuristic",
            "enabled": self.config.enabled,
            "confidence_threshold": self.config.confidence_threshold,
            "max_warnings_per_file": self.config.max_warnings_per_file,
            "categories": [c.name for c in self.enabled_categories],
        }

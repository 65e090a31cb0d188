"""
Rule engine for deterministic pattern checks.

Each rule pairs a regular expression with a fixed severity, a description
and a canned suggestion. The built-in catalog can be extended or overridden
by configuration; overrides are merged field by field over the catalog entry
of the same name.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union
import logging
import re

from outrider.core.errors import ConfigurationError, PatternError
from outrider.core.findings import Finding, FindingType, Severity
from outrider.core.position import Match, compile_pattern, scan
from outrider.core.suppression import is_suppressed, line_text

logger = logging.getLogger(__name__)


GENERIC_RULE_SUGGESTION = "Review and fix according to rule description"

RULE_SUGGESTIONS: Dict[str, str] = {
    "no-console-log": "Remove console.log statement or use a proper logging library",
    "no-debugger": "Remove debugger statement",
    "no-eval": "Use alternative approaches like JSON.parse or Function constructor",
    "no-var": "Replace with const or let",
    "prefer-const": "Change let to const if variable is never reassigned",
    "no-empty-blocks": "Add content to block or remove if unnecessary",
    "no-multiple-empty-lines": "Reduce to maximum of one empty line",
    "no-trailing-spaces": "Remove trailing spaces",
    "no-mixed-spaces-and-tabs": "Use consistent indentation (spaces or tabs)",
}

# Keys accepted in a rule entry of the configuration file.
RULE_FIELDS = frozenset({
    "name", "enabled", "severity", "description", "pattern", "flags",
    "suggestion", "exclude",
})


@dataclass(frozen=True)
class Rule:
    """A named, deterministic pattern check."""
    name: str
    severity: Severity
    description: str
    pattern: Optional[re.Pattern] = None
    enabled: bool = True
    suggestion: Optional[str] = None
    exclude: Tuple[re.Pattern, ...] = field(default_factory=tuple)

    def is_excluded(self, line: str) -> bool:
        """Check the rule-specific exclusion patterns against a line."""
        return any(pattern.search(line) for pattern in self.exclude)

    def get_suggestion(self) -> str:
        if self.suggestion:
            return self.suggestion
        return RULE_SUGGESTIONS.get(self.name, GENERIC_RULE_SUGGESTION)

    def create_finding(self, match: Match, file_path: str) -> Finding:
        """Create a finding using the rule's metadata."""
        return Finding(
            type=FindingType.RULE,
            severity=self.severity,
            file=file_path,
            line=match.line,
            column=match.column,
            message=self.description,
            rule=self.name,
            code=match.text.strip(),
            suggestion=self.get_suggestion(),
        )


def _builtin(name: str, severity: str, description: str, pattern: str,
             flags: str = "", enabled: bool = True) -> Rule:
    return Rule(
        name=name,
        severity=Severity(severity),
        description=description,
        pattern=compile_pattern(name, pattern, flags),
        enabled=enabled,
    )


DEFAULT_RULES: Dict[str, Rule] = {
    rule.name: rule
    for rule in (
        _builtin(
            "no-unused-variables", "warning",
            "Variables that are declared but never used",
            r"const\s+(\w+)\s*=\s*[^;]+;?(?:\s*//.*)?(?=\r?$)", "m",
            enabled=False,
        ),
        _builtin(
            "no-console-log", "warning",
            "Console.log statements should be removed in production",
            r"console\.(log|warn|error|info)\(",
        ),
        _builtin(
            "no-debugger", "error",
            "Debugger statements should not be in production code",
            r"debugger\s*;?",
        ),
        _builtin(
            "no-eval", "error",
            "Eval can be dangerous and should be avoided",
            r"eval\s*\(",
        ),
        _builtin(
            "no-var", "warning",
            "Use const or let instead of var",
            r"\bvar\s+\w+",
        ),
        _builtin(
            "prefer-const", "warning",
            "Use const for variables that are never reassigned",
            r"let\s+(\w+)\s*=\s*([^;]+);(?:\s*//.*)?(?=\r?$)", "m",
        ),
        _builtin(
            "no-empty-blocks", "warning",
            "Empty blocks should be avoided",
            r"\{\s*\}",
        ),
        _builtin(
            "no-multiple-empty-lines", "warning",
            "Multiple consecutive empty lines should be avoided",
            r"\n\s*\n\s*\n",
        ),
        _builtin(
            "no-trailing-spaces", "warning",
            "Trailing spaces should be removed",
            r"[ \t]+(?=\r?$)", "m",
        ),
        _builtin(
            "no-mixed-spaces-and-tabs", "warning",
            "Mixed spaces and tabs should be avoided",
            r"^[ \t]*\t[ \t]*[^ \t]", "m",
        ),
    )
}


def parse_severity(value: Any, owner: str) -> Severity:
    """Convert a configured severity, rejecting unknown levels."""
    if isinstance(value, Severity):
        return value
    try:
        return Severity(str(value).lower())
    except ValueError:
        raise ConfigurationError(
            f"Invalid severity {value!r} for {owner}: "
            f"expected one of {', '.join(s.value for s in Severity)}"
        )


def _check_fields(name: str, entry: Mapping[str, Any]) -> None:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Rule {name!r} must be a mapping, got {type(entry).__name__}")
    unknown = set(entry) - RULE_FIELDS
    if unknown:
        raise ConfigurationError(
            f"Unknown field(s) for rule {name!r}: {', '.join(sorted(unknown))}"
        )
    if "enabled" in entry and not isinstance(entry["enabled"], bool):
        raise ConfigurationError(f"Rule {name!r}: enabled must be a boolean")
    exclude = entry.get("exclude")
    if exclude is not None and not isinstance(exclude, (list, tuple)):
        raise ConfigurationError(f"Rule {name!r}: exclude must be a list of patterns")


def rule_from_config(name: str, entry: Mapping[str, Any], base: Optional[Rule] = None) -> Rule:
    """
    Build a Rule from a configuration entry, merged over ``base`` if given.

    Raises:
        ConfigurationError: for unknown fields or invalid values.
        PatternError: if the pattern or an exclusion pattern does not compile.
    """
    _check_fields(name, entry)
    flags = entry.get("flags", "")

    changes: Dict[str, Any] = {}
    if "enabled" in entry:
        changes["enabled"] = entry["enabled"]
    if "severity" in entry:
        changes["severity"] = parse_severity(entry["severity"], f"rule {name!r}")
    if "description" in entry:
        changes["description"] = str(entry["description"])
    if "suggestion" in entry:
        changes["suggestion"] = entry["suggestion"]
    if entry.get("pattern") is not None:
        changes["pattern"] = compile_pattern(name, entry["pattern"], flags)
    if "exclude" in entry:
        changes["exclude"] = tuple(
            compile_pattern(f"{name} (exclude)", p) for p in entry["exclude"] or ()
        )

    if base is not None:
        return replace(base, **changes)

    changes.setdefault("severity", Severity.WARNING)
    changes.setdefault("description", name)
    return Rule(name=name, **changes)


def build_rule_set(
    overrides: Optional[Mapping[str, Union[Rule, Mapping[str, Any]]]] = None,
    defaults: Optional[Mapping[str, Rule]] = None,
) -> Tuple[Dict[str, Rule], List[str]]:
    """
    Merge configured rules over the built-in catalog.

    Returns the complete rule mapping (catalog order first, then new rules in
    configuration order) and a list of messages for custom rules that were
    skipped because their pattern failed to compile.
    """
    rules: Dict[str, Rule] = dict(DEFAULT_RULES if defaults is None else defaults)
    errors: List[str] = []

    for name, entry in (overrides or {}).items():
        if isinstance(entry, Rule):
            rules[name] = entry
            continue

        base = rules.get(name)
        if base is None and (not isinstance(entry, Mapping) or not entry.get("pattern")):
            _check_fields(name, entry)
            logger.warning("Ignoring rule %r: not a built-in rule and no pattern given", name)
            continue

        try:
            rules[name] = rule_from_config(name, entry, base)
        except PatternError as e:
            logger.warning("Skipping rule %r: %s", name, e)
            errors.append(str(e))
            rules.pop(name, None)

    return rules, errors


class RuleEngine:
    """
    Applies the enabled rules to raw file text.

    Disabled rules are removed from the active set at construction time, so
    they never contribute findings regardless of the text scanned.
    """

    def __init__(self, rules: Optional[Mapping[str, Union[Rule, Mapping[str, Any]]]] = None):
        self.rules, self.errors = build_rule_set(rules)
        self.enabled_rules: List[Rule] = [r for r in self.rules.values() if r.enabled]

    def analyze(self, text: str, file_path: str) -> List[Finding]:
        """
        Analyze text with every enabled rule.

        Findings are ordered rule by rule, and by ascending offset within
        each rule.
        """
        lines = text.split("\n")
        findings: List[Finding] = []

        for rule in self.enabled_rules:
            findings.extend(self.apply_rule(rule, text, lines, file_path))

        logger.debug("%s: %d rule finding(s)", file_path, len(findings))
        return findings

    def apply_rule(self, rule: Rule, text: str, lines: List[str], file_path: str) -> Iterable[Finding]:
        """Yield a finding for every unsuppressed, unexcluded match of a rule."""
        for match in scan(rule.pattern, text):
            line = line_text(lines, match.line)
            if is_suppressed(line) or rule.is_excluded(line):
                continue
            yield rule.create_finding(match, file_path)

    def get_rule(self, name: str) -> Optional[Rule]:
        return self.rules.get(name)

    @property
    def rule_names(self) -> List[str]:
        return list(self.rules)

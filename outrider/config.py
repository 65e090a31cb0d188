"""
Configuration system for outrider.

Supports YAML and JSON configuration files for customizing rules, the
heuristic engine, output and quality thresholds. Configuration is validated
when it is loaded; the engines assume validated input.
"""

import json
from dataclasses import dataclass, field, asdict
from numbers import Real
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from outrider.core.errors import ConfigurationError
from outrider.core.findings import Severity
from outrider.core.heuristics import CATEGORY_FIELDS, DEFAULT_CATEGORIES, HeuristicConfig
from outrider.core.rules import DEFAULT_RULES, RULE_FIELDS


# Default configuration file names to search for
CONFIG_FILE_NAMES = [
    ".outrider.yaml",
    ".outrider.yml",
    ".outrider.json",
    "outrider.yaml",
    "outrider.yml",
    "outrider.json",
]

OUTPUT_FORMATS = ("console", "json", "csv")

DEFAULT_FILE_TYPES = ["js", "ts", "jsx", "tsx"]

DEFAULT_IGNORE_PATTERNS = [
    "node_modules/**",
    "dist/**",
    "build/**",
    ".git/**",
    "*.min.js",
    "*.bundle.js",
]

TOP_LEVEL_KEYS = frozenset({
    "version", "file_types", "ignore_patterns", "max_workers",
    "rules", "ml", "output", "thresholds",
})


def _require_int(name: str, value: Any, minimum: int = 0) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigurationError(f"Invalid configuration: {name} must be an integer >= {minimum}")
    return value


def _require_bool(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"Invalid configuration: {name} must be a boolean")
    return value


def _known_fields(section: str, cls, data: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Invalid configuration: {section} must be a mapping")
    known = set(cls.__dataclass_fields__)
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(
            f"Invalid configuration: unknown key(s) in {section}: {', '.join(sorted(unknown))}"
        )
    return dict(data)


@dataclass
class MLConfig:
    """Configuration for the heuristic engine."""
    enabled: bool = True
    confidence_threshold: float = 0.7
    max_warnings_per_file: int = 10
    categories: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def validate(self):
        _require_bool("ml.enabled", self.enabled)
        threshold = self.confidence_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, Real) or not 0 <= threshold <= 1:
            raise ConfigurationError(
                "Invalid configuration: ml.confidence_threshold must be between 0 and 1"
            )
        _require_int("ml.max_warnings_per_file", self.max_warnings_per_file)
        if not isinstance(self.categories, Mapping):
            raise ConfigurationError("Invalid configuration: ml.categories must be a mapping")
        for name, entry in self.categories.items():
            if not isinstance(entry, Mapping):
                raise ConfigurationError(f"Invalid configuration: category {name!r} must be a mapping")
            unknown = set(entry) - CATEGORY_FIELDS
            if unknown:
                raise ConfigurationError(
                    f"Invalid configuration: unknown key(s) for category {name!r}: "
                    f"{', '.join(sorted(unknown))}"
                )

    def to_heuristic_config(self) -> HeuristicConfig:
        return HeuristicConfig(
            enabled=self.enabled,
            confidence_threshold=self.confidence_threshold,
            max_warnings_per_file=self.max_warnings_per_file,
        )


@dataclass
class OutputConfig:
    """Configuration for output formatting."""
    format: str = "console"
    include_stats: bool = True
    include_suggestions: bool = True
    max_issues_per_file: int = 50
    color: bool = True

    def validate(self):
        if self.format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"Invalid configuration: output.format must be one of {', '.join(OUTPUT_FORMATS)}"
            )
        _require_bool("output.include_stats", self.include_stats)
        _require_bool("output.include_suggestions", self.include_suggestions)
        _require_bool("output.color", self.color)
        _require_int("output.max_issues_per_file", self.max_issues_per_file, minimum=1)


@dataclass
class ThresholdConfig:
    """Quality gates applied to a finished scan."""
    max_warnings: int = 100
    max_errors: int = 10

    def validate(self):
        _require_int("thresholds.max_warnings", self.max_warnings)
        _require_int("thresholds.max_errors", self.max_errors)


@dataclass
class ScanConfig:
    """
    Main configuration for outrider.

    Example YAML config:

    ```yaml
    file_types: [js, ts, jsx, tsx]
    ignore_patterns:
      - "node_modules/**"
    rules:
      no-console-log:
        enabled: false
      no-todo:
        pattern: "TODO"
        severity: info
        description: "Unresolved TODO"
    ml:
      enabled: true
      confidence_threshold: 0.7
      max_warnings_per_file: 10
      categories:
        performance:
          enabled: false
    output:
      format: console
    thresholds:
      max_warnings: 100
      max_errors: 10
    ```
    """
    version: str = "1.0.0"
    file_types: List[str] = field(default_factory=lambda: list(DEFAULT_FILE_TYPES))
    ignore_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    max_workers: int = 4
    rules: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    ml: MLConfig = field(default_factory=MLConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def validate(self) -> "ScanConfig":
        """
        Validate the configuration.

        Raises:
            ConfigurationError: describing the first invalid field.
        """
        if not isinstance(self.version, str):
            raise ConfigurationError("Invalid configuration: version must be a string")
        if (not isinstance(self.file_types, list) or not self.file_types
                or not all(isinstance(t, str) for t in self.file_types)):
            raise ConfigurationError("Invalid configuration: file_types must be a non-empty list")
        if not isinstance(self.ignore_patterns, list):
            raise ConfigurationError("Invalid configuration: ignore_patterns must be a list")
        _require_int("max_workers", self.max_workers, minimum=1)

        if not isinstance(self.rules, Mapping):
            raise ConfigurationError("Invalid configuration: rules must be a mapping")
        for name, entry in self.rules.items():
            if not isinstance(entry, Mapping):
                raise ConfigurationError(f"Invalid configuration: rule {name!r} must be a mapping")
            unknown = set(entry) - RULE_FIELDS
            if unknown:
                raise ConfigurationError(
                    f"Invalid configuration: unknown key(s) for rule {name!r}: "
                    f"{', '.join(sorted(unknown))}"
                )
            if "severity" in entry and str(entry["severity"]).lower() not in {s.value for s in Severity}:
                raise ConfigurationError(
                    f"Invalid configuration: rule {name!r} has unknown severity {entry['severity']!r}"
                )

        self.ml.validate()
        self.output.validate()
        self.thresholds.validate()
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScanConfig":
        """Create and validate a config from a dictionary."""
        if not isinstance(data, Mapping):
            raise ConfigurationError("Invalid configuration: expected a mapping at the top level")
        unknown = set(data) - TOP_LEVEL_KEYS
        if unknown:
            raise ConfigurationError(
                f"Invalid configuration: unknown key(s): {', '.join(sorted(unknown))}"
            )

        data = dict(data)
        if "ml" in data:
            data["ml"] = MLConfig(**_known_fields("ml", MLConfig, data["ml"] or {}))
        if "output" in data:
            data["output"] = OutputConfig(**_known_fields("output", OutputConfig, data["output"] or {}))
        if "thresholds" in data:
            data["thresholds"] = ThresholdConfig(
                **_known_fields("thresholds", ThresholdConfig, data["thresholds"] or {})
            )
        if data.get("rules") is None:
            data.pop("rules", None)

        return cls(**data).validate()


def load_config(path: str) -> Dict[str, Any]:
    """
    Load raw configuration data from a file.

    Supports YAML and JSON formats.
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    content = path.read_text(encoding="utf-8")

    try:
        if path.suffix == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to parse configuration file {path}: {e}") from e

    return data or {}


def find_config(start_path: str = ".") -> Optional[str]:
    """
    Find a configuration file by searching up the directory tree.

    Returns the path to the first config file found, or None.
    """
    current = Path(start_path).resolve()
    if current.is_file():
        current = current.parent

    while True:
        for name in CONFIG_FILE_NAMES:
            config_path = current / name
            if config_path.is_file():
                return str(config_path)
        if current == current.parent:
            return None
        current = current.parent


def load_scan_config(path: Optional[str] = None, start_dir: str = ".") -> ScanConfig:
    """
    Load a ScanConfig from a file or create a default one.

    If path is None, searches for a config file starting from start_dir.
    """
    if path is None:
        path = find_config(start_dir)

    if path is None:
        return ScanConfig()

    return ScanConfig.from_dict(load_config(path))


def default_config_data() -> Dict[str, Any]:
    """The default configuration, spelled out for ``outrider init``."""
    return {
        "version": "1.0.0",
        "file_types": list(DEFAULT_FILE_TYPES),
        "ignore_patterns": list(DEFAULT_IGNORE_PATTERNS),
        "max_workers": 4,
        "rules": {
            name: {"enabled": rule.enabled, "severity": rule.severity.value}
            for name, rule in DEFAULT_RULES.items()
        },
        "ml": {
            "enabled": True,
            "confidence_threshold": 0.7,
            "max_warnings_per_file": 10,
            "categories": {
                name: {"enabled": category.enabled, "severity": category.severity.value}
                for name, category in DEFAULT_CATEGORIES.items()
            },
        },
        "output": asdict(OutputConfig()),
        "thresholds": asdict(ThresholdConfig()),
    }


def create_default_config() -> str:
    """Create the default configuration file content (YAML)."""
    return yaml.safe_dump(default_config_data(), default_flow_style=False, sort_keys=False)

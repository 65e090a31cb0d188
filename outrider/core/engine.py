"""
Main scanning engine for outrider.

This module orchestrates a scan: it discovers files, reads them, runs the
rule and heuristic engines on each, and aggregates the findings.
"""

import fnmatch
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from outrider.config import ScanConfig
from outrider.core.aggregator import aggregate
from outrider.core.findings import FileStats, Finding, ScanResult, file_error_finding
from outrider.core.heuristics import HeuristicEngine
from outrider.core.rules import RuleEngine
from outrider.parsers import extract_file_stats, get_parser

logger = logging.getLogger(__name__)


@dataclass
class FileAnalysis:
    """Everything produced for a single file."""
    file_path: str
    findings: List[Finding]
    stats: Optional[FileStats] = None
    error: Optional[str] = None


class ScanEngine:
    """
    Orchestrates the analysis process.

    The engine:
    1. Discovers files in the target directory
    2. Runs the rule engine, then the heuristic engine, on each file
    3. Turns a file that cannot be analyzed into a single error finding
    4. Aggregates findings with the per-file cap
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()
        self.rule_engine = RuleEngine(self.config.rules)
        self.heuristic_engine = HeuristicEngine(
            self.config.ml.categories,
            self.config.ml.to_heuristic_config(),
        )
        self.errors: List[str] = list(self.rule_engine.errors) + list(self.heuristic_engine.errors)
        self.extensions = {"." + ext.lower().lstrip(".") for ext in self.config.file_types}

    def should_ignore(self, file_path: str, base_path: str) -> bool:
        """Check if a path should be ignored based on patterns."""
        rel_path = os.path.relpath(file_path, base_path).replace(os.sep, "/")
        name = os.path.basename(file_path)

        for pattern in self.config.ignore_patterns:
            if fnmatch.fnmatch(rel_path, pattern) or fnmatch.fnmatch(name, pattern):
                return True
            # "dir/**" also matches the directory itself
            if pattern.endswith("/**") and fnmatch.fnmatch(rel_path, pattern[:-3]):
                return True
            if pattern.startswith("**/") and fnmatch.fnmatch(name, pattern[3:]):
                return True
        return False

    def is_supported(self, file_path: str) -> bool:
        return os.path.splitext(file_path)[1].lower() in self.extensions

    def discover_files(self, target_path: str) -> Iterator[str]:
        """Discover all files to scan in the target path, in sorted order."""
        target = Path(target_path)

        if target.is_file():
            yield str(target)
            return

        if not target.is_dir():
            raise FileNotFoundError(f"Target not found: {target_path}")

        for root, dirs, files in os.walk(target):
            dirs[:] = sorted(d for d in dirs if not self.should_ignore(os.path.join(root, d), target_path))

            for file in sorted(files):
                file_path = os.path.join(root, file)
                if self.is_supported(file_path) and not self.should_ignore(file_path, target_path):
                    yield file_path

    def read_file(self, file_path: str) -> str:
        # newline="" keeps CRLF line endings as they are on disk
        with open(file_path, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def analyze_text(self, text: str, file_path: str = "<stdin>") -> List[Finding]:
        """
        Run both engines on text directly without reading from a file.

        Useful for editor integrations and testing.
        """
        findings = self.rule_engine.analyze(text, file_path)
        findings.extend(self.heuristic_engine.analyze(text, file_path))
        return findings

    def analyze_file(self, file_path: str) -> FileAnalysis:
        """
        Analyze a single file.

        Any failure while reading or analyzing the file is reported as one
        synthetic error finding instead of being raised.
        """
        try:
            content = self.read_file(file_path)
            parser = get_parser(os.path.splitext(file_path)[1])
            tree = parser.parse(content, file_path) if parser else None
            findings = self.analyze_text(content, file_path)
            stats = extract_file_stats(content, tree)
        except Exception as e:
            logger.warning("Failed to analyze %s: %s", file_path, e)
            return FileAnalysis(
                file_path=file_path,
                findings=[file_error_finding(file_path, str(e))],
                error=f"Error analyzing {file_path}: {e}",
            )

        logger.debug("Analyzed %s: %d finding(s)", file_path, len(findings))
        return FileAnalysis(file_path=file_path, findings=findings, stats=stats)

    def _analyze_all(self, files: List[str]) -> List[FileAnalysis]:
        if len(files) > 1 and self.config.max_workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                # map() keeps discovery order
                return list(executor.map(self.analyze_file, files))
        return [self.analyze_file(f) for f in files]

    def scan(self, target_path: str, cap: bool = True) -> ScanResult:
        """
        Scan a target path and return results.

        Args:
            target_path: Path to a file or directory to scan.
            cap: Apply the per-file report cap (``output.max_issues_per_file``).
                Fixing needs every finding, so it scans with ``cap=False``.

        Returns:
            ScanResult containing the findings and per-file statistics.
        """
        start_time = time.time()
        files = list(self.discover_files(target_path))
        logger.debug("Found %d file(s) to analyze under %s", len(files), target_path)

        all_findings: List[Finding] = []
        file_stats = {}
        errors = list(self.errors)

        for analysis in self._analyze_all(files):
            all_findings.extend(analysis.findings)
            if analysis.stats is not None:
                file_stats[analysis.file_path] = analysis.stats
            if analysis.error:
                errors.append(analysis.error)

        limit = self.config.output.max_issues_per_file if cap else None
        result = aggregate(all_findings, limit)

        return ScanResult(
            findings=result.findings,
            files_scanned=len(files),
            scan_time_seconds=round(time.time() - start_time, 3),
            file_stats=file_stats,
            errors=errors,
        )


def create_engine(config_path: Optional[str] = None, start_dir: str = ".") -> Tuple[ScanEngine, ScanConfig]:
    """
    Create a scan engine from a configuration file, or the discovered one.
    """
    from outrider.config import load_scan_config

    config = load_scan_config(config_path, start_dir)
    return ScanEngine(config), config

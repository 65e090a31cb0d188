"""
Remediation engine for applying automatic fixes.

This module provides:
- Per-file fix plans built from scan findings
- Before/after diff visualization
- Fix application with dry-run and backup support
"""

import difflib
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from outrider.core.aggregator import group_by_file
from outrider.core.findings import Finding
from outrider.remediation.fixers import get_fixer

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".outrider-backup"


@dataclass
class FixResult:
    """Fixes proposed (and possibly applied) for one file."""
    file_path: str
    original_content: str = ""
    fixed_content: str = ""
    fixed: List[Finding] = field(default_factory=list)
    skipped: List[Finding] = field(default_factory=list)
    diff: str = ""
    error_message: Optional[str] = None
    applied: bool = False
    backup_path: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.error_message is None and self.fixed_content != self.original_content


@dataclass
class RemediationPlan:
    """A plan for fixing findings in a codebase."""
    fixes: List[FixResult]
    total_findings: int
    fixable_count: int

    @property
    def total_fixed(self) -> int:
        return sum(len(f.fixed) for f in self.fixes)

    @property
    def files_changed(self) -> int:
        return sum(1 for f in self.fixes if f.changed)


class RemediationEngine:
    """
    Engine for generating and applying fixes.

    The remediation engine:
    1. Selects findings whose rule has a registered fixer
    2. Applies the fixers of each file in order to the evolving content
    3. Creates before/after diffs
    4. Writes the files, with a backup, unless in dry-run mode
    """

    def __init__(self, dry_run: bool = False, backup: bool = True):
        self.dry_run = dry_run
        self.backup = backup

    def plan(self, findings: List[Finding]) -> RemediationPlan:
        """
        Build a remediation plan for the given findings.

        Args:
            findings: Findings from a scan, any rules.

        Returns:
            A RemediationPlan with one FixResult per file that has fixable findings.
        """
        fixable = [f for f in findings if get_fixer(f.rule) is not None]
        fixes = [
            self.fix_file(file_path, file_findings)
            for file_path, file_findings in group_by_file(fixable).items()
        ]

        return RemediationPlan(
            fixes=fixes,
            total_findings=len(findings),
            fixable_count=len(fixable),
        )

    def fix_file(self, file_path: str, findings: List[Finding]) -> FixResult:
        """Apply fixes for one file in memory."""
        try:
            with open(file_path, "r", encoding="utf-8", newline="") as f:
                content = f.read()
        except OSError as e:
            logger.warning("Could not read %s: %s", file_path, e)
            return FixResult(file_path=file_path, skipped=list(findings),
                             error_message=f"Could not read source file: {e}")

        result = FixResult(file_path=file_path, original_content=content)

        for finding in sorted(findings, key=lambda f: get_fixer(f.rule).whole_file):
            updated = get_fixer(finding.rule).fix(content, finding)
            if updated != content:
                content = updated
                result.fixed.append(finding)
            else:
                result.skipped.append(finding)

        result.fixed_content = content
        result.diff = self._generate_diff(result.original_content, content, file_path)
        return result

    def apply(self, plan: RemediationPlan, dry_run: Optional[bool] = None) -> RemediationPlan:
        """
        Write the fixed content of every changed file.

        Args:
            plan: The plan to apply.
            dry_run: If True, don't modify files. Overrides the instance setting.
        """
        if dry_run is None:
            dry_run = self.dry_run

        if dry_run:
            return plan

        for fix in plan.fixes:
            if not fix.changed:
                continue
            try:
                if self.backup:
                    fix.backup_path = fix.file_path + BACKUP_SUFFIX
                    with open(fix.backup_path, "w", encoding="utf-8", newline="") as f:
                        f.write(fix.original_content)

                with open(fix.file_path, "w", encoding="utf-8", newline="") as f:
                    f.write(fix.fixed_content)
                fix.applied = True
                logger.debug("Fixed %d issue(s) in %s", len(fix.fixed), fix.file_path)
            except OSError as e:
                fix.error_message = f"Error modifying file: {e}"
                logger.warning("Could not write %s: %s", fix.file_path, e)

        return plan

    def _generate_diff(self, original: str, fixed: str, file_path: str) -> str:
        """Generate a unified diff between original and fixed content."""
        diff = difflib.unified_diff(
            original.splitlines(keepends=True),
            fixed.splitlines(keepends=True),
            fromfile=f"a/{file_path}",
            tofile=f"b/{file_path}",
        )
        return "".join(diff)

    def format_report(self, plan: RemediationPlan, show_diff: bool = True) -> str:
        """
        Format a remediation plan as a human-readable report.
        """
        lines = [
            "=" * 60,
            "FIX REPORT",
            "=" * 60,
            "",
            f"Total findings: {plan.total_findings}",
            f"Fixable: {plan.fixable_count}",
            f"Fixed: {plan.total_fixed}",
            f"Files changed: {plan.files_changed}",
            "",
        ]

        for rule, count in summarize_by_rule(plan).items():
            lines.append(f"  {rule}: {count}")
        if plan.total_fixed:
            lines.append("")

        for fix in plan.fixes:
            lines.append("-" * 60)
            lines.append(fix.file_path)

            if fix.error_message:
                lines.append(f"    Error: {fix.error_message}")
            for finding in fix.fixed:
                lines.append(f"    Fixed: {finding.message} (Line {finding.line})")
            if fix.backup_path and fix.applied:
                lines.append(f"    Backup created: {fix.backup_path}")

            if show_diff and fix.diff:
                lines.append("")
                for line in fix.diff.splitlines():
                    lines.append(f"    {line}")
            lines.append("")

        if self.dry_run:
            lines.append("This was a dry run - no files were modified")
        lines.append("=" * 60)

        return "\n".join(lines)


def summarize_by_rule(plan: RemediationPlan) -> Dict[str, int]:
    """Count fixed findings per rule."""
    counts: Dict[str, int] = {}
    for fix in plan.fixes:
        for finding in fix.fixed:
            counts[finding.rule] = counts.get(finding.rule, 0) + 1
    return counts

"""
Fixers for automatically correcting whitespace issues.

Each fixer handles one rule and rewrites the whole file content, so that
several fixes can be applied one after another to the evolving text.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from outrider.core.findings import Finding


class BaseFixer(ABC):
    """Base class for code fixers."""

    description = "No description available"
    # Whole-file fixers can move lines, so they run after line-scoped ones.
    whole_file = False

    @property
    @abstractmethod
    def supported_rules(self) -> list:
        """Return the rule names this fixer can handle."""
        pass

    @abstractmethod
    def fix(self, content: str, finding: Finding) -> str:
        """
        Apply a fix to the file content.

        Args:
            content: The current content of the file.
            finding: The finding that triggered this fix.

        Returns:
            The fixed content, unchanged if nothing applied.
        """
        pass


# Registry of fixers
_fixers: Dict[str, BaseFixer] = {}


def register_fixer(fixer: BaseFixer):
    """Register a fixer instance."""
    for rule in fixer.supported_rules:
        _fixers[rule] = fixer


def get_fixer(rule: Optional[str]) -> Optional[BaseFixer]:
    """Get a fixer for a rule name."""
    return _fixers.get(rule)


def is_fixable(rule: Optional[str]) -> bool:
    return rule in _fixers


def fixable_rules() -> List[str]:
    return list(_fixers)


def fix_description(rule: str) -> str:
    fixer = _fixers.get(rule)
    return fixer.description if fixer else BaseFixer.description


def _replace_line(content: str, line_number: int, transform) -> str:
    lines = content.split("\n")
    if 1 <= line_number <= len(lines):
        lines[line_number - 1] = transform(lines[line_number - 1])
    return "\n".join(lines)


class TrailingSpacesFixer(BaseFixer):
    """Strips trailing spaces and tabs from the finding's line."""

    description = "Removes trailing spaces and tabs from lines"

    @property
    def supported_rules(self) -> list:
        return ["no-trailing-spaces"]

    def fix(self, content: str, finding: Finding) -> str:
        return _replace_line(content, finding.line, self._strip_line)

    def _strip_line(self, line: str) -> str:
        # Keep the carriage return of a CRLF line ending
        body = line[:-1] if line.endswith("\r") else line
        return body.rstrip(" \t") + line[len(body):]


class MultipleEmptyLinesFixer(BaseFixer):
    """Collapses runs of blank lines to a single empty line across the file."""

    description = "Reduces multiple consecutive empty lines to a single empty line"
    whole_file = True

    PATTERN = re.compile(r"(\r?\n)\s*\n\s*\n")

    @property
    def supported_rules(self) -> list:
        return ["no-multiple-empty-lines"]

    def fix(self, content: str, finding: Finding) -> str:
        return self.PATTERN.sub(r"\1\1", content)


class MixedSpacesAndTabsFixer(BaseFixer):
    """Converts leading whitespace to spaces, two per tab."""

    description = "Converts tabs to spaces for consistent indentation"

    TAB_WIDTH = 2

    @property
    def supported_rules(self) -> list:
        return ["no-mixed-spaces-and-tabs"]

    def fix(self, content: str, finding: Finding) -> str:
        return _replace_line(content, finding.line, self._fix_line)

    def _fix_line(self, line: str) -> str:
        first = re.search(r"\S", line)
        if first is None or first.start() == 0:
            return line

        leading = line[:first.start()]
        tabs = leading.count("\t")
        if not tabs:
            return line

        return " " * (leading.count(" ") + tabs * self.TAB_WIDTH) + line[first.start():]


# Register default fixers
register_fixer(TrailingSpacesFixer())
register_fixer(MultipleEmptyLinesFixer())
register_fixer(MixedSpacesAndTabsFixer())

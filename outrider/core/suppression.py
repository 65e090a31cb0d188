"""
Inline suppression markers.

A line carrying one of the disable markers is skipped entirely by the rule
engine and has its confidence reduced by the heuristic engine.
"""

from typing import List, Sequence


SUPPRESSION_MARKERS = (
    "// eslint-disable",
    "// outrider-disable",
)


def is_suppressed(line: str, markers: Sequence[str] = SUPPRESSION_MARKERS) -> bool:
    """Check if a line contains a recognized disable marker."""
    return any(marker in line for marker in markers)


def line_text(lines: List[str], line_number: int) -> str:
    """Return the text of a 1-based line, or an empty string past the end."""
    if 1 <= line_number <= len(lines):
        return lines[line_number - 1]
    return ""

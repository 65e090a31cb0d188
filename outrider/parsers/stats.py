"""
Per-file statistics.
"""

from typing import Optional

from outrider.core.findings import FileStats
from outrider.parsers.base import ASTNode

COMMENT_PREFIXES = ("//", "/*", "*")


def extract_file_stats(content: str, tree: Optional[ASTNode] = None) -> FileStats:
    """
    Count lines by kind and, when a syntax tree is available, its
    functions, classes, imports and exports.
    """
    lines = content.split("\n")
    stats = FileStats(total_lines=len(lines))

    stats.blank_lines = sum(1 for line in lines if not line.strip())
    stats.comment_lines = sum(1 for line in lines if line.strip().startswith(COMMENT_PREFIXES))
    stats.code_lines = stats.total_lines - stats.blank_lines - stats.comment_lines

    if tree is not None:
        stats.functions = tree.count("function_definition")
        stats.classes = tree.count("class_definition")
        stats.imports = tree.count("import")
        stats.exports = tree.count("export")

    return stats

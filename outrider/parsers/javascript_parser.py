"""
JavaScript/TypeScript parser.

Regex based; it recognizes top-level shapes (functions, classes, imports,
exports) well enough for file statistics, not for semantic analysis.
"""

import re
from typing import Iterator, Optional, Tuple

from outrider.parsers.base import BaseParser, ASTNode
from outrider.parsers import register_parser


FUNCTION_PATTERNS = (
    # function name(args) / async function name(args) / function (args)
    re.compile(r"\b(async\s+)?function\s*\*?\s*(\w*)\s*\(([^)]*)\)"),
    # (args) => / x =>
    re.compile(r"(async\s+)?(?:\(([^()]*)\)|\b(\w+))\s*=>"),
)

CLASS_PATTERN = re.compile(r"\bclass\s+(\w+)(?:\s+extends\s+([\w.]+))?\s*\{")

IMPORT_PATTERNS = (
    re.compile(r"^\s*import\s+(?:[\w*{}\s,]+\s+from\s+)?['\"]([^'\"]+)['\"]", re.MULTILINE),
    re.compile(r"\brequire\s*\(\s*['\"]([^'\"]+)['\"]\s*\)"),
)

EXPORT_PATTERN = re.compile(
    r"^\s*export\s+(default\b|\*|\{|(?:async\s+)?function\b|class\b|const\b|let\b|var\b)",
    re.MULTILINE,
)

# Comments are blanked before matching so that commented-out code is not counted.
COMMENT_PATTERN = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)


def _blank_comments(source: str) -> str:
    return COMMENT_PATTERN.sub(lambda m: re.sub(r"[^\n]", " ", m.group()), source)


def _line_of(source: str, offset: int) -> int:
    return source.count("\n", 0, offset) + 1


@register_parser(".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx")
class JavaScriptParser(BaseParser):
    """
    Parser for JavaScript/TypeScript source code.

    Produces a flat ``module`` node whose children are
    ``function_definition``, ``class_definition``, ``import`` and ``export``
    nodes in source order.
    """

    def __init__(self):
        self._language = "javascript"

    @property
    def language(self) -> str:
        return self._language

    def parse(self, source: str, file_path: str = "<unknown>") -> Optional[ASTNode]:
        """Parse JavaScript source code into a normalized tree."""
        if file_path.endswith((".ts", ".tsx")):
            self._language = "typescript"
        else:
            self._language = "javascript"

        try:
            return self._build_ast(source)
        except (re.error, RecursionError):
            return None

    def _build_ast(self, source: str) -> ASTNode:
        code = _blank_comments(source)
        root = ASTNode(
            type="module",
            start_line=1,
            end_line=source.count("\n") + 1,
            attributes={"language": self._language},
        )

        nodes = []
        nodes.extend(self._parse_functions(code))
        nodes.extend(self._parse_classes(code))
        nodes.extend(self._parse_imports(code))
        nodes.extend(self._parse_exports(code))

        root.children = [node for _, node in sorted(nodes, key=lambda item: item[0])]
        return root

    def _parse_functions(self, code: str) -> Iterator[Tuple[int, ASTNode]]:
        for pattern in FUNCTION_PATTERNS:
            for match in pattern.finditer(code):
                groups = match.groups()
                name = groups[1] if pattern is FUNCTION_PATTERNS[0] else ""
                line = _line_of(code, match.start())
                yield match.start(), ASTNode(
                    type="function_definition",
                    value=name or None,
                    start_line=line,
                    end_line=line,
                    attributes={
                        "is_async": bool(groups[0]),
                        "is_arrow": pattern is FUNCTION_PATTERNS[1],
                    },
                )

    def _parse_classes(self, code: str) -> Iterator[Tuple[int, ASTNode]]:
        for match in CLASS_PATTERN.finditer(code):
            line = _line_of(code, match.start())
            yield match.start(), ASTNode(
                type="class_definition",
                value=match.group(1),
                start_line=line,
                end_line=line,
                attributes={"extends": match.group(2)},
            )

    def _parse_imports(self, code: str) -> Iterator[Tuple[int, ASTNode]]:
        for pattern in IMPORT_PATTERNS:
            for match in pattern.finditer(code):
                line = _line_of(code, match.start())
                yield match.start(), ASTNode(
                    type="import",
                    value=match.group(1),
                    start_line=line,
                    end_line=line,
                    attributes={"is_require": pattern is IMPORT_PATTERNS[1]},
                )

    def _parse_exports(self, code: str) -> Iterator[Tuple[int, ASTNode]]:
        for match in EXPORT_PATTERN.finditer(code):
            line = _line_of(code, match.start())
            yield match.start(), ASTNode(
                type="export",
                value=match.group(1).strip(),
                start_line=line,
                end_line=line,
            )

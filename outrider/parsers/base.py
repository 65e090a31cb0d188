"""
Base parser class and the generic syntax tree node.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class ASTNode:
    """
    Generic syntax tree node.

    The tree is an auxiliary input used for file statistics only; the
    rule and heuristic engines work on raw text.
    """
    type: str
    value: Optional[str] = None
    start_line: int = 0
    end_line: int = 0
    children: List["ASTNode"] = field(default_factory=list)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"ASTNode(type={self.type!r}, value={self.value!r}, line={self.start_line})"

    def find_all(self, node_type: str) -> Iterator["ASTNode"]:
        """Find all descendant nodes of a given type."""
        if self.type == node_type:
            yield self
        for child in self.children:
            yield from child.find_all(node_type)

    def count(self, node_type: str) -> int:
        return sum(1 for _ in self.find_all(node_type))


class BaseParser(ABC):
    """Turns source text into an ASTNode tree."""

    @property
    @abstractmethod
    def language(self) -> str:
        """Return the language this parser handles."""
        pass

    @abstractmethod
    def parse(self, source: str, file_path: str = "<unknown>") -> Optional[ASTNode]:
        """
        Parse source code into a tree.

        Returns:
            The root ASTNode or None if parsing fails.
        """
        pass

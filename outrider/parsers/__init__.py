"""
Optional syntax tree parsers, keyed by file extension.
"""

from typing import Dict, Optional, Type

from outrider.parsers.base import ASTNode, BaseParser

# Registry of available parsers
_parsers: Dict[str, Type[BaseParser]] = {}


def register_parser(*extensions: str):
    """Decorator to register a parser for one or more file extensions."""
    def decorator(cls: Type[BaseParser]) -> Type[BaseParser]:
        for ext in extensions:
            _parsers[ext.lower().lstrip(".")] = cls
        return cls
    return decorator


def get_parser(extension: str) -> Optional[BaseParser]:
    """Get a parser instance for a file extension such as ``.js`` or ``tsx``."""
    parser_class = _parsers.get(extension.lower().lstrip("."))
    if parser_class is None:
        return None
    return parser_class()


def supported_extensions() -> list:
    return sorted(_parsers)


# Import parsers to register them
from outrider.parsers.javascript_parser import JavaScriptParser  # noqa: E402
from outrider.parsers.stats import extract_file_stats  # noqa: E402

__all__ = [
    "ASTNode",
    "BaseParser",
    "JavaScriptParser",
    "extract_file_stats",
    "get_parser",
    "register_parser",
    "supported_extensions",
]

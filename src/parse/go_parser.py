"""Tree-sitter access for Go source files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tree_sitter import Language, Node, Parser, Tree
from tree_sitter_go import language as get_go_language

from contract.artifacts import normalize_expr
from errors import FileParseError

if TYPE_CHECKING:
    from pathlib import Path

_PARSER: Parser | None = None


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with the Go language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_go_language())
        _PARSER = Parser(lang)

    return _PARSER


def node_text(source_bytes: bytes, node: Node | None) -> str:
    if node is None:
        return ""
    return source_bytes[node.start_byte : node.end_byte].decode(
        "utf8", errors="replace"
    )


def expr_text(source_bytes: bytes, node: Node | None) -> str:
    """Render an expression or type as single-line text."""
    return normalize_expr(node_text(source_bytes, node))


def start_line(node: Node) -> int:
    return node.start_point[0] + 1


def end_line(node: Node) -> int:
    return node.end_point[0] + 1


def parse_source(source_bytes: bytes) -> Tree:
    """Parse Go source bytes without any error checking."""
    return _get_parser().parse(source_bytes)


def parse_go_file(file_path: Path) -> tuple[bytes, Tree]:
    """Read and parse a Go file.

    Raises:
        FileParseError: If the file cannot be read or the tree has syntax
            errors.
    """
    try:
        source_bytes = file_path.read_bytes()
    except OSError as exc:
        raise FileParseError(str(file_path), f"unreadable: {exc}") from exc

    tree = parse_source(source_bytes)
    if tree.root_node.has_error:
        raise FileParseError(str(file_path), _describe_first_error(tree.root_node))
    return source_bytes, tree


def _describe_first_error(root: Node) -> str:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_missing:
            return f"missing {node.type} at line {start_line(node)}"
        if node.type == "ERROR":
            return f"syntax error at line {start_line(node)}"
        stack.extend(reversed(node.children))
    return "syntax error"


def package_name(source_bytes: bytes, root: Node) -> str:
    """Return the name declared by the ``package`` clause, or ``""``."""
    for child in root.children:
        if child.type != "package_clause":
            continue
        for sub in child.named_children:
            if sub.type in ("package_identifier", "identifier"):
                return node_text(source_bytes, sub)
    return ""


__all__ = [
    "end_line",
    "expr_text",
    "node_text",
    "package_name",
    "parse_go_file",
    "parse_source",
    "start_line",
]

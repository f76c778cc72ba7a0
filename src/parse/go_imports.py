"""Per-file import tables for Go sources."""

from __future__ import annotations

from typing import TYPE_CHECKING

from parse.go_parser import node_text

if TYPE_CHECKING:
    from tree_sitter import Node

# alias -> import path
ImportTable = dict[str, str]


def default_alias(import_path: str) -> str:
    """Alias used when an import spec names none: the last path segment.

    Examples:
        >>> default_alias("github.com/spf13/cobra")
        'cobra'
        >>> default_alias("fmt")
        'fmt'
    """
    return import_path.rstrip("/").rsplit("/", 1)[-1]


def _unquote(literal: str) -> str:
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "\"`":
        return literal[1:-1]
    return literal


def _add_import_spec(source_bytes: bytes, spec: Node, table: ImportTable) -> None:
    path_node = spec.child_by_field_name("path")
    if path_node is None:
        return
    import_path = _unquote(node_text(source_bytes, path_node))
    if not import_path:
        return

    name_node = spec.child_by_field_name("name")
    alias = node_text(source_bytes, name_node) if name_node is not None else ""
    table[alias or default_alias(import_path)] = import_path


def build_import_table(source_bytes: bytes, root: Node) -> ImportTable:
    """Map every import alias of a parsed file to its import path.

    Handles single imports, grouped ``import ( ... )`` blocks, explicit
    aliases, and blank or dot imports (kept under ``_`` and ``.``).
    """
    table: ImportTable = {}
    for decl in root.children:
        if decl.type != "import_declaration":
            continue
        for child in decl.named_children:
            if child.type == "import_spec":
                _add_import_spec(source_bytes, child, table)
            elif child.type == "import_spec_list":
                for spec in child.named_children:
                    if spec.type == "import_spec":
                        _add_import_spec(source_bytes, spec, table)
    return table


__all__ = ["ImportTable", "build_import_table", "default_alias"]

"""Tree-sitter based function and method extraction for Go files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from index.descriptors import FunctionDescriptor, Parameter, normalize_receiver
from parse.go_parser import end_line, expr_text, node_text, start_line

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node

FUNCTION_NODE_TYPES = ("function_declaration", "method_declaration")

_PARAMETER_NODE_TYPES = ("parameter_declaration", "variadic_parameter_declaration")


def iter_function_nodes(root: Node) -> Iterator[Node]:
    """Yield top-level function and method declarations in source order."""
    for child in root.children:
        if child.type in FUNCTION_NODE_TYPES:
            yield child


def receiver_type(source_bytes: bytes, node: Node) -> str:
    """Return the normalized receiver type of a method declaration, or ``""``."""
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return ""
    for param in receiver.named_children:
        if param.type in _PARAMETER_NODE_TYPES:
            type_node = param.child_by_field_name("type")
            return normalize_receiver(node_text(source_bytes, type_node))
    return ""


def declaration_name(source_bytes: bytes, node: Node) -> str:
    return node_text(source_bytes, node.child_by_field_name("name"))


def _parameter_type(source_bytes: bytes, param: Node) -> str:
    type_text = expr_text(source_bytes, param.child_by_field_name("type"))
    if param.type == "variadic_parameter_declaration":
        return f"...{type_text}"
    return type_text


def extract_parameters(source_bytes: bytes, params: Node | None) -> list[Parameter]:
    """Flatten a parameter list into one ``Parameter`` per declared name."""
    if params is None:
        return []

    out: list[Parameter] = []
    for param in params.named_children:
        if param.type not in _PARAMETER_NODE_TYPES:
            continue
        type_text = _parameter_type(source_bytes, param)
        names = [
            node_text(source_bytes, name)
            for name in param.children_by_field_name("name")
        ]
        if not names:
            out.append(Parameter(name="", type=type_text))
            continue
        out.extend(Parameter(name=name, type=type_text) for name in names)
    return out


def extract_returns(source_bytes: bytes, result: Node | None) -> list[str]:
    """Return the result types of a signature, one entry per result value."""
    if result is None:
        return []
    if result.type != "parameter_list":
        return [expr_text(source_bytes, result)]
    return [param.type for param in extract_parameters(source_bytes, result)]


def extract_functions(
    source_bytes: bytes,
    root: Node,
    *,
    path: str,
    rel_path: str,
    package: str,
    package_path: str,
) -> list[FunctionDescriptor]:
    """Build one descriptor per function or method declared in a parsed file.

    Args:
        source_bytes: Raw file contents
        root: Root node of the parsed file
        path: File path as discovered on disk
        rel_path: POSIX path relative to the module root
        package: Package name from the ``package`` clause
        package_path: Import path of the file's directory

    Returns:
        Descriptors in declaration order.
    """
    descriptors: list[FunctionDescriptor] = []
    for node in iter_function_nodes(root):
        name = declaration_name(source_bytes, node)
        if not name:
            continue
        descriptors.append(
            FunctionDescriptor(
                package=package,
                receiver=receiver_type(source_bytes, node),
                name=name,
                path=path,
                rel_path=rel_path,
                start_line=start_line(node),
                end_line=end_line(node),
                package_path=package_path,
                parameters=extract_parameters(
                    source_bytes, node.child_by_field_name("parameters")
                ),
                returns=extract_returns(
                    source_bytes, node.child_by_field_name("result")
                ),
                has_body=node.child_by_field_name("body") is not None,
            )
        )
    return descriptors


__all__ = [
    "FUNCTION_NODE_TYPES",
    "declaration_name",
    "extract_functions",
    "extract_parameters",
    "extract_returns",
    "iter_function_nodes",
    "receiver_type",
]

"""Call-site extraction and classification for Go function bodies.

Resolution is purely lexical. The import table decides whether ``X.Y`` is a
package-qualified call or a call through a value, and the frozen function
registry decides whether a name belongs to the project.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from errors import FileParseError, FunctionReparseError
from index.descriptors import ExternalReference
from parse.go_functions import declaration_name, iter_function_nodes, receiver_type
from parse.go_imports import build_import_table, default_alias
from parse.go_parser import expr_text, node_text, parse_go_file, start_line
from resolve.models import (
    CallSite,
    CrossModuleCall,
    ExternalCall,
    LiteralInvocation,
    LocalCall,
    MethodCall,
    iter_call_sites,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from index.descriptors import FunctionDescriptor
    from index.registry import FunctionRegistry
    from parse.go_imports import ImportTable
    from resolve.models import CallTarget, InvocationKind

logger = logging.getLogger(__name__)

BUILTIN_FUNCTIONS = frozenset(
    {
        "append",
        "cap",
        "clear",
        "close",
        "complex",
        "copy",
        "delete",
        "imag",
        "len",
        "make",
        "max",
        "min",
        "new",
        "panic",
        "print",
        "println",
        "real",
        "recover",
    }
)

# Calling a predeclared type is a conversion, not a function call.
PREDECLARED_TYPES = frozenset(
    {
        "any",
        "bool",
        "byte",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)

_TYPE_EXPRESSIONS = frozenset(
    {
        "array_type",
        "channel_type",
        "function_type",
        "interface_type",
        "map_type",
        "pointer_type",
        "slice_type",
        "struct_type",
    }
)

_DEFERRED_STATEMENTS: dict[str, InvocationKind] = {
    "defer_statement": "defer",
    "go_statement": "go",
}


@dataclass(frozen=True)
class _Context:
    package: str
    module_path: str
    registry: FunctionRegistry
    import_table: ImportTable
    source_bytes: bytes


def is_internal_import(import_path: str, module_path: str) -> bool:
    """True when an import path lies inside the project's own module."""
    if not module_path:
        return False
    return import_path == module_path or import_path.startswith(f"{module_path}/")


def _unwrap_parens(node: Node | None) -> Node | None:
    while node is not None and node.type == "parenthesized_expression":
        inner = [child for child in node.named_children if child.type != "comment"]
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def _classify_identifier(ctx: _Context, node: Node) -> CallTarget | None:
    name = node_text(ctx.source_bytes, node)
    if name in BUILTIN_FUNCTIONS or name in PREDECLARED_TYPES:
        return None
    descriptor = ctx.registry.lookup(ctx.package, name)
    if descriptor is not None:
        return LocalCall(key=descriptor.key)
    return ExternalCall(name=name)


def _classify_selector(ctx: _Context, node: Node) -> CallTarget:
    operand = node.child_by_field_name("operand")
    name = node_text(ctx.source_bytes, node.child_by_field_name("field"))

    if operand is not None and operand.type == "identifier":
        alias = node_text(ctx.source_bytes, operand)
        import_path = ctx.import_table.get(alias)
        if import_path is not None:
            return _classify_package_call(ctx, alias, import_path, name)

    return MethodCall(receiver=expr_text(ctx.source_bytes, operand), name=name)


def _classify_package_call(
    ctx: _Context, alias: str, import_path: str, name: str
) -> CallTarget:
    if not is_internal_import(import_path, ctx.module_path):
        return ExternalCall(
            name=name, alias=alias, import_path=import_path, origin="imported"
        )

    package = ctx.registry.package_name_for(import_path) or default_alias(import_path)
    descriptor = ctx.registry.lookup(package, name)
    if descriptor is not None:
        return CrossModuleCall(
            key=descriptor.key, import_path=import_path, alias=alias
        )

    logger.debug("No indexed function %s.%s for %s", package, name, import_path)
    return ExternalCall(
        name=name, alias=alias, import_path=import_path, origin="missing"
    )


def _classify_instantiation(ctx: _Context, node: Node) -> CallTarget:
    """Handle ``F[T](x)`` where the grammar reports an index or generic type."""
    field = "operand" if node.type == "index_expression" else "type"
    base = node.child_by_field_name(field)
    if base is not None and base.type == "identifier":
        target = _classify_identifier(ctx, base)
        if isinstance(target, LocalCall):
            return target
    elif base is not None and base.type == "selector_expression":
        target = _classify_selector(ctx, base)
        if not isinstance(target, MethodCall):
            return target
    return ExternalCall(name=expr_text(ctx.source_bytes, node))


def classify_target(ctx: _Context, function_node: Node | None) -> CallTarget | None:
    """Classify the callee of a call expression.

    Returns None for built-ins and type conversions, which are not recorded.
    """
    node = _unwrap_parens(function_node)
    if node is None:
        return ExternalCall(name="<unknown>")

    if node.type == "identifier":
        return _classify_identifier(ctx, node)
    if node.type == "selector_expression":
        return _classify_selector(ctx, node)
    if node.type == "func_literal":
        return LiteralInvocation(column=node.start_point[1] + 1)
    if node.type in _TYPE_EXPRESSIONS:
        return None
    if node.type in ("index_expression", "generic_type"):
        return _classify_instantiation(ctx, node)
    return ExternalCall(name=expr_text(ctx.source_bytes, node))


def _call_arguments(call: Node) -> list[Node]:
    args = call.child_by_field_name("arguments")
    if args is None:
        return []
    return [arg for arg in args.named_children if arg.type != "comment"]


def _build_call_sites(
    ctx: _Context,
    call: Node,
    invocation: InvocationKind,
    line: int,
) -> list[CallSite]:
    arguments = _call_arguments(call)

    nested: list[CallSite] = []
    for argument in arguments:
        nested.extend(collect_calls(ctx, argument))

    function_node = call.child_by_field_name("function")
    target = classify_target(ctx, function_node)
    if target is None:
        # Built-in or conversion: the calls inside its arguments move up a level.
        return nested

    if isinstance(target, LiteralInvocation):
        literal = _unwrap_parens(function_node)
        body = literal.child_by_field_name("body") if literal is not None else None
        if body is not None:
            nested = collect_calls(ctx, body) + nested

    return [
        CallSite(
            target=target,
            line=line,
            expr=expr_text(ctx.source_bytes, call),
            arguments=tuple(expr_text(ctx.source_bytes, arg) for arg in arguments),
            nested=tuple(nested),
            invocation=invocation,
        )
    ]


def collect_calls(ctx: _Context, node: Node | None) -> list[CallSite]:
    """Collect the call sites under ``node`` in source order.

    Descent stops at each call expression; its arguments are scanned by
    ``_build_call_sites`` and its callee is never rescanned. The walk keeps
    its own stack, so deep expression trees do not exhaust the interpreter's.
    """
    sites: list[CallSite] = []
    if node is None:
        return sites

    # (node, invocation, line of the enclosing defer/go statement)
    stack: list[tuple[Node, InvocationKind, int | None]] = [(node, "direct", None)]
    while stack:
        current, invocation, line = stack.pop()
        if current.type == "call_expression":
            sites.extend(
                _build_call_sites(
                    ctx,
                    current,
                    invocation,
                    line if line is not None else start_line(current),
                )
            )
            continue

        deferred = _DEFERRED_STATEMENTS.get(current.type)
        if deferred is not None:
            statement_line = start_line(current)
            stack.extend(
                (child, deferred, statement_line)
                for child in reversed(current.named_children)
            )
            continue

        stack.extend((child, "direct", None) for child in reversed(current.children))
    return sites


def resolve_function(
    descriptor: FunctionDescriptor,
    registry: FunctionRegistry,
    import_table: ImportTable,
    declaration: Node,
    source_bytes: bytes,
) -> list[CallSite]:
    """Extract and classify every call site in one function body."""
    ctx = _Context(
        package=descriptor.package,
        module_path=registry.module_path,
        registry=registry,
        import_table=import_table,
        source_bytes=source_bytes,
    )
    return collect_calls(ctx, declaration.child_by_field_name("body"))


def _declaration_index(
    source_bytes: bytes, root: Node
) -> dict[tuple[int, str, str], Node]:
    index: dict[tuple[int, str, str], Node] = {}
    for node in iter_function_nodes(root):
        key = (
            start_line(node),
            receiver_type(source_bytes, node),
            declaration_name(source_bytes, node),
        )
        index.setdefault(key, node)
    return index


def _resolve_file(
    path: str,
    descriptors: list[FunctionDescriptor],
    registry: FunctionRegistry,
    import_table: ImportTable | None,
) -> dict[str, list[CallSite]]:
    out: dict[str, list[CallSite]] = {}
    try:
        source_bytes, tree = parse_go_file(Path(path))
    except FileParseError as exc:
        for descriptor in descriptors:
            error = FunctionReparseError(descriptor.key, exc.reason)
            logger.warning("Skipping call sites of %s", error)
            out[descriptor.key] = []
        return out

    if import_table is None:
        import_table = build_import_table(source_bytes, tree.root_node)
    declarations = _declaration_index(source_bytes, tree.root_node)

    for descriptor in descriptors:
        declaration = declarations.get(
            (descriptor.start_line, descriptor.receiver, descriptor.name)
        )
        if declaration is None:
            error = FunctionReparseError(
                descriptor.key,
                f"no declaration at {descriptor.rel_path}:{descriptor.start_line}",
            )
            logger.warning("Skipping call sites of %s", error)
            out[descriptor.key] = []
            continue
        try:
            out[descriptor.key] = resolve_function(
                descriptor, registry, import_table, declaration, source_bytes
            )
        except RecursionError:
            # Call expressions nested inside arguments still recurse.
            error = FunctionReparseError(descriptor.key, "call nesting too deep")
            logger.warning("Skipping call sites of %s", error)
            out[descriptor.key] = []
    return out


def resolve_calls(
    registry: FunctionRegistry,
    import_tables: dict[str, ImportTable] | None = None,
    *,
    workers: int = 1,
) -> dict[str, list[CallSite]]:
    """Resolve call sites for every function in a frozen registry.

    Each file is re-parsed once. Files are independent, so with
    ``workers > 1`` they are resolved on a thread pool; the registry is only
    read.

    Args:
        registry: Frozen registry produced by indexing
        import_tables: Optional file path -> import table map from indexing;
            tables are rebuilt for files that are missing from it
        workers: Thread pool size

    Returns:
        Canonical identity -> ordered call sites, in registry order.
    """
    tables = import_tables or {}
    groups = list(registry.by_file().items())

    def run(
        group: tuple[str, list[FunctionDescriptor]],
    ) -> dict[str, list[CallSite]]:
        path, descriptors = group
        return _resolve_file(path, descriptors, registry, tables.get(path))

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            partials = list(pool.map(run, groups))
    else:
        partials = [run(group) for group in groups]

    merged: dict[str, list[CallSite]] = {}
    for partial in partials:
        merged.update(partial)
    return {key: merged.get(key, []) for key in registry}


def apply_call_sites(
    registry: FunctionRegistry,
    call_sites: dict[str, list[CallSite]],
) -> None:
    """Store resolved internal calls and external references on descriptors."""
    for key, descriptor in registry.items():
        internal: list[CallSite] = []
        externals: list[ExternalReference] = []
        for site in iter_call_sites(call_sites.get(key, [])):
            target = site.target
            if isinstance(target, (LocalCall, CrossModuleCall)):
                internal.append(site)
            elif isinstance(target, ExternalCall):
                externals.append(
                    ExternalReference(
                        name=target.name,
                        alias=target.alias,
                        import_path=target.import_path,
                        origin=target.origin,
                    )
                )
        descriptor.calls = internal
        descriptor.externals = externals


__all__ = [
    "BUILTIN_FUNCTIONS",
    "PREDECLARED_TYPES",
    "apply_call_sites",
    "classify_target",
    "collect_calls",
    "is_internal_import",
    "resolve_calls",
    "resolve_function",
]

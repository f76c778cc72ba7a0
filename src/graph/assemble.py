"""Fold descriptors and resolved call sites into one call graph."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

from graph.callgraph import CallGraph
from resolve.models import (
    CrossModuleCall,
    ExternalCall,
    LiteralInvocation,
    LocalCall,
    MethodCall,
    iter_call_sites,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    from index.descriptors import FunctionDescriptor
    from resolve.models import CallSite, CallTarget


def _split_key(key: str) -> tuple[str, str, str]:
    """Invert ``canonical_key``: ``pkg/Recv.name`` or ``pkg.name``."""
    package, _, rest = key.partition("/")
    if rest:
        receiver, _, name = rest.rpartition(".")
        return package, receiver, name
    package, _, name = key.partition(".")
    return package, "", name


def external_node_id(target: ExternalCall) -> str:
    qualifier = target.import_path or target.alias
    name = f"{qualifier}.{target.name}" if qualifier else target.name
    prefix = "missing" if target.origin == "missing" else "ext"
    return f"{prefix}:{name}"


def method_node_id(target: MethodCall) -> str:
    return f"method:{target.receiver}.{target.name}"


def literal_node_id(caller: str, line: int, column: int = 0) -> str:
    node_id = f"literal:{caller}@L{line}"
    return f"{node_id}:C{column}" if column else node_id


def _add_function_node(graph: CallGraph, descriptor: FunctionDescriptor) -> None:
    graph.ensure_node(
        descriptor.key,
        "function",
        label=descriptor.display_name,
        package=descriptor.package,
        receiver=descriptor.receiver,
        path=descriptor.rel_path,
        line=descriptor.start_line,
    )


def _ensure_unindexed(graph: CallGraph, key: str) -> None:
    if key in graph:
        return
    package, receiver, name = _split_key(key)
    graph.ensure_node(
        key,
        "unindexed",
        label=f"{receiver}.{name}" if receiver else name,
        package=package,
        receiver=receiver,
    )


def target_node_id(caller: str, site: CallSite) -> str:
    """Graph identity of a call site's callee."""
    target: CallTarget = site.target
    if isinstance(target, (LocalCall, CrossModuleCall)):
        return target.key
    if isinstance(target, MethodCall):
        return method_node_id(target)
    if isinstance(target, ExternalCall):
        return external_node_id(target)
    if isinstance(target, LiteralInvocation):
        return literal_node_id(caller, site.line, target.column)
    assert_never(target)


def _ensure_target(graph: CallGraph, caller: str, site: CallSite) -> str:
    node_id = target_node_id(caller, site)
    target = site.target
    if isinstance(target, (LocalCall, CrossModuleCall)):
        _ensure_unindexed(graph, node_id)
    elif isinstance(target, MethodCall):
        graph.ensure_node(node_id, "method", label=f"{target.receiver}.{target.name}")
    elif isinstance(target, ExternalCall):
        kind = "missing" if target.origin == "missing" else "external"
        graph.ensure_node(
            node_id,
            kind,
            label=node_id.split(":", 1)[1],
            package=target.import_path,
        )
    else:
        graph.ensure_node(node_id, "literal", label=f"func literal (L{site.line})")
    return node_id


def assemble_graph(
    registry: Mapping[str, FunctionDescriptor],
    call_sites: Mapping[str, list[CallSite]],
) -> CallGraph:
    """Build the call graph.

    Every descriptor becomes a ``function`` node. Resolved calls to
    functions missing from ``registry`` create ``unindexed`` nodes;
    method, external, missing and literal targets get synthetic nodes whose
    identities carry a prefix, so they never merge with internal nodes.
    Nested call sites are edges of the enclosing function.
    """
    graph = CallGraph()

    for key in sorted(registry):
        _add_function_node(graph, registry[key])

    for caller in sorted(call_sites):
        _ensure_unindexed(graph, caller)
        for site in iter_call_sites(call_sites[caller]):
            graph.add_edge(caller, _ensure_target(graph, caller, site))

    return graph


__all__ = [
    "assemble_graph",
    "external_node_id",
    "literal_node_id",
    "method_node_id",
    "target_node_id",
]

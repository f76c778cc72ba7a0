from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from graph.assemble import assemble_graph, target_node_id
from graph.callgraph import CallGraph
from index.descriptors import FunctionDescriptor
from index.indexer import build_index
from resolve.calls import resolve_calls
from resolve.models import (
    CallSite,
    CrossModuleCall,
    ExternalCall,
    LiteralInvocation,
    LocalCall,
    MethodCall,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def _descriptor(package: str, name: str, receiver: str = "") -> FunctionDescriptor:
    return FunctionDescriptor(
        package=package,
        receiver=receiver,
        name=name,
        path=f"/src/{package}.go",
        rel_path=f"{package}.go",
        start_line=1,
        end_line=3,
    )


def _site(target: object, line: int = 1, *nested: CallSite) -> CallSite:
    return CallSite(target=target, line=line, expr="", nested=tuple(nested))


def test_functions_without_calls_give_nodes_only() -> None:
    descriptors = [_descriptor("main", name) for name in ("a", "b", "c")]
    registry = {d.key: d for d in descriptors}

    graph = assemble_graph(registry, {key: [] for key in registry})

    assert len(graph) == 3
    assert graph.edge_count == 0
    assert {node.kind for node in graph.iter_nodes()} == {"function"}


@pytest.mark.parametrize("order", [("a.go", "b.go"), ("b.go", "a.go")])
def test_cross_file_call_gives_one_edge(
    go_module: Callable[..., Path], order: tuple[str, str]
) -> None:
    caller_file, callee_file = order
    root = go_module(
        {
            caller_file: "package main\n\nfunc A() { B() }\n",
            callee_file: "package main\n\nfunc B() {}\n",
        }
    )
    result = build_index(root)

    graph = assemble_graph(
        result.registry, resolve_calls(result.registry, result.import_tables)
    )

    assert graph.edges() == [("main.A", "main.B")]
    assert graph.callers("main.B") == ["main.A"]


def test_synthetic_targets_use_prefixed_identities() -> None:
    caller = _descriptor("main", "run")
    sites = [
        _site(MethodCall(receiver="s.mu", name="Lock"), 2),
        _site(
            ExternalCall(
                name="Println", alias="fmt", import_path="fmt", origin="imported"
            ),
            3,
        ),
        _site(
            ExternalCall(
                name="Gone",
                alias="store",
                import_path="example.com/app/store",
                origin="missing",
            ),
            4,
        ),
        _site(ExternalCall(name="callback"), 5),
        _site(LiteralInvocation(), 6, _site(LocalCall(key="main.run"), 7)),
    ]

    graph = assemble_graph({caller.key: caller}, {caller.key: sites})

    assert graph.callees("main.run") == [
        "ext:callback",
        "ext:fmt.Println",
        "literal:main.run@L6",
        "main.run",
        "method:s.mu.Lock",
        "missing:example.com/app/store.Gone",
    ]
    assert graph.node("ext:fmt.Println").kind == "external"
    assert graph.node("ext:fmt.Println").package == "fmt"
    assert graph.node("missing:example.com/app/store.Gone").kind == "missing"
    assert graph.node("method:s.mu.Lock").kind == "method"
    assert graph.node("literal:main.run@L6").kind == "literal"


def test_resolved_call_to_unknown_key_creates_unindexed_node() -> None:
    caller = _descriptor("main", "run")
    site = _site(
        CrossModuleCall(key="store/Store.Put", import_path="x/store", alias="store")
    )

    graph = assemble_graph({caller.key: caller}, {caller.key: [site]})

    node = graph.node("store/Store.Put")
    assert node.kind == "unindexed"
    assert (node.package, node.receiver, node.label) == ("store", "Store", "Store.Put")
    assert node.is_internal


def test_repeated_calls_collapse_to_one_edge() -> None:
    caller = _descriptor("main", "run")
    callee = _descriptor("main", "helper")
    sites = [_site(LocalCall(key="main.helper"), line) for line in (2, 3, 4)]

    graph = assemble_graph(
        {caller.key: caller, callee.key: callee}, {caller.key: sites}
    )

    assert graph.edges() == [("main.run", "main.helper")]


def test_nested_sites_are_edges_of_the_enclosing_function() -> None:
    caller = _descriptor("main", "run")
    inner = _site(LocalCall(key="main.inner"))
    outer = _site(LocalCall(key="main.outer"), 1, inner)

    graph = assemble_graph({caller.key: caller}, {caller.key: [outer]})

    assert graph.callees("main.run") == ["main.inner", "main.outer"]
    assert graph.callees("main.outer") == []


def test_target_node_id_of_literal_uses_caller_and_line() -> None:
    site = _site(LiteralInvocation(), 24)

    assert target_node_id("main.run", site) == "literal:main.run@L24"


def test_literals_on_the_same_line_get_distinct_nodes() -> None:
    caller = _descriptor("main", "run")
    sites = [
        _site(LiteralInvocation(column=9), 24),
        _site(LiteralInvocation(column=36), 24),
    ]

    graph = assemble_graph({caller.key: caller}, {caller.key: sites})

    assert graph.callees("main.run") == [
        "literal:main.run@L24:C36",
        "literal:main.run@L24:C9",
    ]


def test_reachability_follows_both_directions() -> None:
    graph = CallGraph()
    for node_id in ("a", "b", "c", "d"):
        graph.ensure_node(node_id, "function")
    graph.add_edge("a", "b")
    graph.add_edge("b", "c")
    graph.add_edge("d", "c")

    assert graph.reachable_from("a") == {"b", "c"}
    assert graph.reachable_from("c", upstream=True) == {"a", "b", "d"}
    assert graph.reachable_from("c") == set()


def test_duplicate_edge_is_reported() -> None:
    graph = CallGraph()
    graph.ensure_node("a", "function")
    graph.ensure_node("b", "function")

    assert graph.add_edge("a", "b") is True
    assert graph.add_edge("a", "b") is False
    assert graph.edge_count == 1


def test_adjacency_can_exclude_synthetic_nodes() -> None:
    graph = CallGraph()
    graph.ensure_node("main.a", "function")
    graph.ensure_node("ext:fmt.Println", "external")
    graph.add_edge("main.a", "ext:fmt.Println")

    assert graph.adjacency() == {
        "main.a": {"ext:fmt.Println"},
        "ext:fmt.Println": set(),
    }
    assert graph.adjacency(internal_only=True) == {"main.a": set()}


def test_mini_module_graph(mini_module: Path) -> None:
    result = build_index(mini_module)
    graph = assemble_graph(
        result.registry, resolve_calls(result.registry, result.import_tables)
    )

    assert "main.cleanup" in graph.callees("main.run")
    assert "strutil.Upper" in graph.reachable_from("main.main")
    assert graph.callers("main.fact") == ["main.fact"]
    assert "method:s.mu.Lock" in graph.callees("store/Store.Put")

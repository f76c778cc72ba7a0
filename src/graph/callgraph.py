"""Call graph stored as a flat node table with index-pair edges."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Iterator

NodeKind = Literal["function", "unindexed", "method", "external", "missing", "literal"]

INTERNAL_KINDS: frozenset[str] = frozenset({"function", "unindexed"})


@dataclass
class GraphNode:
    """One node of the call graph.

    ``calls`` and ``called_by`` hold indices into ``CallGraph.nodes``. For
    external and missing nodes ``package`` holds the import path, if any.
    """

    id: str
    kind: NodeKind
    label: str
    package: str = ""
    receiver: str = ""
    path: str = ""
    line: int = 0
    calls: set[int] = field(default_factory=set)
    called_by: set[int] = field(default_factory=set)

    @property
    def is_internal(self) -> bool:
        return self.kind in INTERNAL_KINDS


class CallGraph:
    """Directed call graph.

    Nodes are interned by identity string; edges are ``(source, target)``
    index pairs. Inserting an edge updates both adjacency sets, so upstream
    and downstream traversal need no second pass. Cycles (recursion) are
    ordinary edges.
    """

    def __init__(self) -> None:
        self.nodes: list[GraphNode] = []
        self._index: dict[str, int] = {}
        self._edges: set[tuple[int, int]] = set()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._index

    def __len__(self) -> int:
        return len(self.nodes)

    def ensure_node(
        self,
        node_id: str,
        kind: NodeKind,
        label: str | None = None,
        *,
        package: str = "",
        receiver: str = "",
        path: str = "",
        line: int = 0,
    ) -> int:
        """Return the index of ``node_id``, creating the node on first use."""
        existing = self._index.get(node_id)
        if existing is not None:
            return existing
        self.nodes.append(
            GraphNode(
                id=node_id,
                kind=kind,
                label=label or node_id,
                package=package,
                receiver=receiver,
                path=path,
                line=line,
            )
        )
        self._index[node_id] = len(self.nodes) - 1
        return self._index[node_id]

    def node(self, node_id: str) -> GraphNode:
        return self.nodes[self._index[node_id]]

    def add_edge(self, source: str, target: str) -> bool:
        """Record ``source -> target``; both nodes must already exist.

        Returns False when the edge was already present.
        """
        src = self._index[source]
        dst = self._index[target]
        if (src, dst) in self._edges:
            return False
        self._edges.add((src, dst))
        self.nodes[src].calls.add(dst)
        self.nodes[dst].called_by.add(src)
        return True

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def edges(self) -> list[tuple[str, str]]:
        """All edges as identity pairs, sorted."""
        return sorted(
            (self.nodes[src].id, self.nodes[dst].id) for src, dst in self._edges
        )

    def callees(self, node_id: str) -> list[str]:
        return sorted(self.nodes[i].id for i in self.node(node_id).calls)

    def callers(self, node_id: str) -> list[str]:
        return sorted(self.nodes[i].id for i in self.node(node_id).called_by)

    def iter_nodes(self, *kinds: NodeKind) -> Iterator[GraphNode]:
        for node in self.nodes:
            if not kinds or node.kind in kinds:
                yield node

    def adjacency(self, *, internal_only: bool = False) -> dict[str, set[str]]:
        """Identity adjacency map, optionally restricted to internal nodes."""
        graph: dict[str, set[str]] = {}
        for node in self.nodes:
            if internal_only and not node.is_internal:
                continue
            graph[node.id] = {
                self.nodes[i].id
                for i in node.calls
                if not internal_only or self.nodes[i].is_internal
            }
        return graph

    def reachable_from(self, node_id: str, *, upstream: bool = False) -> set[str]:
        """Identities reachable from a node along calls (or callers)."""
        start = self._index[node_id]
        seen = {start}
        stack = [start]
        while stack:
            current = self.nodes[stack.pop()]
            for neighbour in current.called_by if upstream else current.calls:
                if neighbour not in seen:
                    seen.add(neighbour)
                    stack.append(neighbour)
        seen.discard(start)
        return {self.nodes[i].id for i in seen}


__all__ = ["INTERNAL_KINDS", "CallGraph", "GraphNode", "NodeKind"]

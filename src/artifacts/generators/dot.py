"""Graphviz rendering of the call graph: callgraph.dot."""

from __future__ import annotations

import re
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Any

from contract.artifacts import CALLGRAPH_DOT
from resolve.models import is_stdlib_path
from rules.config import DotConfig

if TYPE_CHECKING:
    from artifacts.analysis import Analysis
    from graph.callgraph import CallGraph, GraphNode

PACKAGE_COLOR = "#AED6F1"
RECEIVER_COLOR = "#F9E79F"

_NODE_STYLES: dict[str, str] = {
    "function": 'shape=box, style=filled, fillcolor="white"',
    "unindexed": 'shape=box, style="dashed"',
    "method": 'shape=ellipse, style=filled, fillcolor="#E8DAEF"',
    "external": 'shape=oval, style=filled, fillcolor="lightgray"',
    "missing": 'shape=octagon, style=filled, fillcolor="#F5B7B1"',
    "literal": 'shape=diamond, style=filled, fillcolor="#D5F5E3"',
}

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_]")


def escape_dot(text: str) -> str:
    """Escape text for a double-quoted DOT string; carriage returns are dropped."""
    text = text.replace("\\", "\\\\")
    text = text.replace('"', '\\"')
    text = text.replace("\n", "\\n")
    return text.replace("\r", "")


def sanitize_identifier(name: str) -> str:
    """Reduce ``name`` to a DOT identifier, suffixed with its original length."""
    return f"{_NON_IDENTIFIER.sub('_', name)}_{len(name)}"


def _node_line(node: GraphNode, indent: str) -> str:
    return (
        f'{indent}"{escape_dot(node.id)}" '
        f'[label="{escape_dot(node.label)}", {_NODE_STYLES[node.kind]}];'
    )


def _is_visible(node: GraphNode, config: DotConfig) -> bool:
    if node.is_internal:
        return True
    if not config.include_external:
        return False
    if node.kind == "external" and not config.include_stdlib:
        return not is_stdlib_path(node.package)
    return True


def render_dot(graph: CallGraph, config: DotConfig | None = None) -> str:
    """Render the call graph as a DOT digraph.

    Internal nodes are grouped into one cluster per package, with methods
    nested in a cluster per receiver type. Output order is fully sorted.
    """
    config = config or DotConfig()
    visible = [node for node in graph.nodes if _is_visible(node, config)]
    visible_ids = {node.id for node in visible}

    packages: dict[str, dict[str, list[GraphNode]]] = {}
    others: list[GraphNode] = []
    for node in visible:
        if node.is_internal:
            packages.setdefault(node.package, {}).setdefault(
                node.receiver, []
            ).append(node)
        else:
            others.append(node)

    lines = [
        "digraph G {",
        f"    rankdir={config.rankdir};",
        "    node [fontname=Helvetica];",
        "    edge [color=gray50];",
    ]

    for package in sorted(packages):
        lines.append(f"    subgraph cluster_pkg_{sanitize_identifier(package)} {{")
        lines.append("        style=filled;")
        lines.append(f'        color="{PACKAGE_COLOR}";')
        lines.append(f'        label="Package: {escape_dot(package)}";')
        receivers = packages[package]
        for receiver in sorted(receivers):
            nodes = sorted(receivers[receiver], key=lambda n: n.id)
            if not receiver:
                lines.extend(_node_line(node, "        ") for node in nodes)
                continue
            cluster = sanitize_identifier(f"{package}.{receiver}")
            lines.append(f"        subgraph cluster_recv_{cluster} {{")
            lines.append("            style=filled;")
            lines.append(f'            color="{RECEIVER_COLOR}";')
            lines.append(f'            label="Type: {escape_dot(receiver)}";')
            lines.extend(_node_line(node, "            ") for node in nodes)
            lines.append("        }")
        lines.append("    }")

    others.sort(key=lambda n: n.id)
    lines.extend(_node_line(node, "    ") for node in others)

    for source, target in graph.edges():
        if source in visible_ids and target in visible_ids:
            lines.append(f'    "{escape_dot(source)}" -> "{escape_dot(target)}";')

    lines.append("}")
    return "\n".join(lines) + "\n"


class DotGenerator:
    """Generator for the Graphviz call graph."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "dot"

    def generate(
        self,
        analysis: Analysis,
        out_dir: Path,
        **kwargs: Any,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate callgraph.dot."""
        del kwargs
        out_dir.mkdir(parents=True, exist_ok=True)

        text = render_dot(analysis.graph, analysis.config.dot)
        (out_dir / CALLGRAPH_DOT).write_text(text, encoding="utf-8")

        return [], {"dot_lines": text.count("\n")}


__all__ = ["DotGenerator", "escape_dot", "render_dot", "sanitize_identifier"]

"""Call-graph summary generator: graph_summary.json."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.summary import GraphSummary, SkippedFileRecord
from artifacts.summaries.builders import compute_fan_stats, count_by, top_by_count
from artifacts.utils import _write_json
from contract.artifacts import GRAPH_SUMMARY_JSON
from resolve.models import iter_call_sites

if TYPE_CHECKING:
    from artifacts.analysis import Analysis


def build_summary(analysis: Analysis, *, top_n: int = 10) -> GraphSummary:
    """Node, edge and call counts plus recursion and fan statistics."""
    graph = analysis.graph
    edges = graph.edges()
    fan_in, fan_out = compute_fan_stats(edges)

    call_kinds = count_by(
        site.kind
        for sites in analysis.call_sites.values()
        for site in iter_call_sites(sites)
    )

    return GraphSummary(
        module_path=analysis.module_path,
        file_count=analysis.index.file_count,
        function_count=len(analysis.registry),
        node_count=len(graph),
        edge_count=graph.edge_count,
        node_kinds=count_by(node.kind for node in graph.nodes),
        call_kinds=call_kinds,
        cycles=analysis.cycles,
        fan_in=dict(sorted(fan_in.items())),
        fan_out=dict(sorted(fan_out.items())),
        top_callees=top_by_count(fan_in, top_n),
        collisions=sorted(set(analysis.registry.collisions)),
        repeated_declarations=count_by(analysis.registry.repeated),
        skipped_files=[
            SkippedFileRecord(path=skipped.path, reason=skipped.reason)
            for skipped in analysis.index.skipped
        ],
        untested_count=(
            len(analysis.untested) if analysis.coverage is not None else None
        ),
    )


class SummaryGenerator:
    """Generator for the call-graph summary."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "summary"

    def generate(
        self,
        analysis: Analysis,
        out_dir: Path,
        **kwargs: Any,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate graph_summary.json."""
        top_n: int = kwargs.get("top_n", 10)
        out_dir.mkdir(parents=True, exist_ok=True)

        summary = build_summary(analysis, top_n=top_n)
        _write_json(out_dir / GRAPH_SUMMARY_JSON, summary)

        return [], summary.model_dump()


__all__ = ["SummaryGenerator", "build_summary"]

"""End-to-end analysis: index, resolve, assemble and optionally overlay coverage."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cover.analyzer import coverage_results
from cover.profile import parse_profile
from errors import CoverageProfileOpenError
from graph.algos import recursion_groups
from graph.assemble import assemble_graph
from index.indexer import build_index
from resolve.calls import apply_call_sites, resolve_calls
from rules.config import load_config

if TYPE_CHECKING:
    from cover.analyzer import CoverageResult
    from graph.callgraph import CallGraph
    from index.indexer import IndexResult
    from index.registry import FunctionRegistry
    from resolve.models import CallSite
    from rules.config import GoCallMapConfig

logger = logging.getLogger(__name__)


@dataclass
class Analysis:
    """Everything one run learns about a module."""

    root: Path
    config: GoCallMapConfig
    index: IndexResult
    call_sites: dict[str, list[CallSite]]
    graph: CallGraph
    cycles: list[list[str]] = field(default_factory=list)
    coverage: list[CoverageResult] | None = None
    coverage_error: str | None = None

    @property
    def registry(self) -> FunctionRegistry:
        return self.index.registry

    @property
    def module_path(self) -> str:
        return self.index.module_path

    @property
    def untested(self) -> list[CoverageResult]:
        if self.coverage is None:
            return []
        return [result for result in self.coverage if not result.covered]


def run_analysis(
    root: Path,
    *,
    config: GoCallMapConfig | None = None,
    coverage_profile: Path | None = None,
    output_dir: str = "",
) -> Analysis:
    """Analyse the Go module containing ``root``.

    An unreadable coverage profile only disables the coverage overlay; the
    reason is kept on ``Analysis.coverage_error``.

    Args:
        root: Directory to analyse
        config: Optional configuration; read from ``root`` when omitted
        coverage_profile: Optional ``go test -coverprofile`` output
        output_dir: Name of an artifacts directory inside root to skip

    Raises:
        ManifestNotFound: If no go.mod is found.
        ConfigError: If the configuration file is invalid.
    """
    root = Path(root)
    if config is None:
        config = load_config(root)

    index = build_index(root, config=config, output_dir=output_dir)
    call_sites = resolve_calls(
        index.registry, index.import_tables, workers=config.workers
    )
    apply_call_sites(index.registry, call_sites)

    graph = assemble_graph(index.registry, call_sites)
    cycles = recursion_groups(graph)
    logger.info(
        "Call graph has %d nodes, %d edges and %d recursion groups",
        len(graph),
        graph.edge_count,
        len(cycles),
    )

    coverage = None
    coverage_error = None
    if coverage_profile is not None:
        try:
            data = parse_profile(Path(coverage_profile))
        except CoverageProfileOpenError as exc:
            logger.warning("Skipping coverage overlay: %s", exc)
            coverage_error = str(exc)
        else:
            coverage = coverage_results(index.registry, data, index.module_path)

    return Analysis(
        root=root,
        config=config,
        index=index,
        call_sites=call_sites,
        graph=graph,
        cycles=cycles,
        coverage=coverage,
        coverage_error=coverage_error,
    )


__all__ = ["Analysis", "run_analysis"]

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from artifacts.analysis import run_analysis
from artifacts.generators import (
    CallsGenerator,
    DotGenerator,
    FunctionsGenerator,
    SummaryGenerator,
    UntestedGenerator,
)
from artifacts.utils import _get_output_dir_name
from contract.artifacts import (
    CALLGRAPH_DOT,
    CALLS_JSONL,
    FUNCTIONS_CSV,
    FUNCTIONS_JSONL,
    GRAPH_SUMMARY_JSON,
    UNTESTED_JSONL,
)
from rules.config import load_config, resolve_output_dir

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import GoCallMapConfig

logger = logging.getLogger(__name__)


def generate_all_artifacts(
    *,
    root: Path,
    out_dir: Path | None = None,
    config: GoCallMapConfig | None = None,
    coverage_profile: Path | None = None,
) -> dict[str, object]:
    """Analyse a Go module and write every artifact.

    Args:
        root: Directory of the module to analyze
        out_dir: Optional output directory for generated artifacts
        config: Optional configuration; read from root when omitted
        coverage_profile: Optional coverage profile for untested.jsonl

    Returns:
        Dictionary with counts and list of generated artifact paths.
    """
    if config is None:
        config = load_config(root)

    if out_dir is None:
        out_dir = resolve_output_dir(root, config.output_dir)

    analysis = run_analysis(
        root,
        config=config,
        coverage_profile=coverage_profile,
        output_dir=_get_output_dir_name(out_dir.resolve(), root.resolve()),
    )

    functions, _ = FunctionsGenerator().generate(analysis, out_dir)
    calls, _ = CallsGenerator().generate(analysis, out_dir)
    DotGenerator().generate(analysis, out_dir)
    _, summary = SummaryGenerator().generate(analysis, out_dir)
    untested, _ = UntestedGenerator().generate(analysis, out_dir)

    artifacts_list = [
        FUNCTIONS_JSONL,
        FUNCTIONS_CSV,
        CALLS_JSONL,
        CALLGRAPH_DOT,
        GRAPH_SUMMARY_JSON,
    ]
    stale_untested = out_dir / UNTESTED_JSONL
    if analysis.coverage is not None:
        artifacts_list.append(UNTESTED_JSONL)
    elif stale_untested.exists():
        # Left over from an earlier run with a profile.
        stale_untested.unlink()

    logger.info("Wrote %d artifacts to %s", len(artifacts_list), out_dir)
    return {
        "module_path": analysis.module_path,
        "function_count": len(functions),
        "call_count": len(calls),
        "node_count": summary["node_count"],
        "edge_count": summary["edge_count"],
        "cycle_count": len(analysis.cycles),
        "skipped_count": len(analysis.index.skipped),
        "untested_count": (
            len(untested) if analysis.coverage is not None else None
        ),
        "coverage_error": analysis.coverage_error,
        "artifacts": [str(out_dir / name) for name in artifacts_list],
    }

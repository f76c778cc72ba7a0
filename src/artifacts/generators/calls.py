"""Resolved calls artifact generator."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.calls import CallRecord
from artifacts.utils import _write_jsonl
from contract.artifacts import CALLS_JSONL
from graph.assemble import target_node_id
from resolve.models import CrossModuleCall, ExternalCall

if TYPE_CHECKING:
    from collections.abc import Iterator

    from artifacts.analysis import Analysis
    from resolve.models import CallSite


def _walk_with_depth(
    sites: list[CallSite] | tuple[CallSite, ...], depth: int = 0
) -> Iterator[tuple[CallSite, int]]:
    for site in sites:
        yield site, depth
        yield from _walk_with_depth(site.nested, depth + 1)


def call_records(analysis: Analysis) -> list[CallRecord]:
    """One record per call site, in caller identity then source order."""
    records: list[CallRecord] = []
    for caller in sorted(analysis.call_sites):
        descriptor = analysis.registry.get(caller)
        file = descriptor.rel_path if descriptor is not None else ""
        for site, depth in _walk_with_depth(analysis.call_sites[caller]):
            target = site.target
            import_path = (
                target.import_path
                if isinstance(target, (CrossModuleCall, ExternalCall))
                else ""
            )
            records.append(
                CallRecord(
                    caller=caller,
                    file=file,
                    line=site.line,
                    kind=site.kind,
                    target=target_node_id(caller, site),
                    expr=site.expr,
                    arguments=list(site.arguments),
                    invocation=site.invocation,
                    depth=depth,
                    import_path=import_path or None,
                )
            )
    return records


class CallsGenerator:
    """Generates calls.jsonl from resolved call sites."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "calls"

    def generate(
        self,
        analysis: Analysis,
        out_dir: Path,
        **kwargs: Any,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate calls artifact."""
        del kwargs
        out_dir.mkdir(parents=True, exist_ok=True)

        records = call_records(analysis)
        _write_jsonl(out_dir / CALLS_JSONL, records)

        return [r.model_dump() for r in records], {"call_count": len(records)}


__all__ = ["CallsGenerator", "call_records"]

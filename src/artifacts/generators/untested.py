"""Untested functions generator: untested.jsonl."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.untested import UntestedRecord
from artifacts.utils import _write_jsonl
from contract.artifacts import UNTESTED_JSONL

if TYPE_CHECKING:
    from artifacts.analysis import Analysis


def untested_records(analysis: Analysis) -> list[UntestedRecord]:
    """Records for functions no executed block overlaps, by file then line."""
    records: list[UntestedRecord] = []
    for result in analysis.untested:
        descriptor = analysis.registry[result.key]
        records.append(
            UntestedRecord(
                key=result.key,
                file=descriptor.rel_path,
                name=descriptor.display_name,
                start_line=descriptor.start_line,
                end_line=descriptor.end_line,
                parameters=[p.render() for p in descriptor.parameters],
                has_body=descriptor.has_body,
                profiled=result.profiled,
                total_blocks=result.total_blocks,
            )
        )
    records.sort(key=lambda r: (r.file, r.start_line, r.key))
    return records


class UntestedGenerator:
    """Generator for the coverage overlay; a no-op without a profile."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "untested"

    def generate(
        self,
        analysis: Analysis,
        out_dir: Path,
        **kwargs: Any,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate untested.jsonl when coverage data is present."""
        del kwargs
        if analysis.coverage is None:
            return [], {}

        out_dir.mkdir(parents=True, exist_ok=True)
        records = untested_records(analysis)
        _write_jsonl(out_dir / UNTESTED_JSONL, records)

        return [r.model_dump() for r in records], {"untested_count": len(records)}


__all__ = ["UntestedGenerator", "untested_records"]

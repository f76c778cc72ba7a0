"""Function inventory generator: functions.jsonl and functions.csv."""

from __future__ import annotations

import csv
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Any

from artifacts.models.artifacts.functions import (
    ExternalRecord,
    FunctionRecord,
    ParameterRecord,
)
from artifacts.utils import _write_jsonl
from contract.artifacts import FUNCTIONS_CSV, FUNCTIONS_CSV_HEADER, FUNCTIONS_JSONL

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from artifacts.analysis import Analysis
    from index.descriptors import FunctionDescriptor

_EMPTY = "None"


def _unique(items: Iterable[Any]) -> list[Any]:
    return list(dict.fromkeys(items))


def function_record(descriptor: FunctionDescriptor) -> FunctionRecord:
    """Project a resolved descriptor onto its artifact record."""
    return FunctionRecord(
        key=descriptor.key,
        package=descriptor.package,
        package_path=descriptor.package_path,
        receiver=descriptor.receiver or None,
        name=descriptor.name,
        file=descriptor.rel_path,
        start_line=descriptor.start_line,
        end_line=descriptor.end_line,
        has_body=descriptor.has_body,
        parameters=[
            ParameterRecord(name=p.name, type=p.type) for p in descriptor.parameters
        ],
        returns=list(descriptor.returns),
        calls=_unique(site.target.key for site in descriptor.calls),
        externals=[
            ExternalRecord(
                name=ext.name,
                alias=ext.alias,
                import_path=ext.import_path,
                origin=ext.origin,
            )
            for ext in _unique(descriptor.externals)
        ],
    )


def function_records(
    registry: Mapping[str, FunctionDescriptor],
) -> list[FunctionRecord]:
    """Records for every function, ordered by file then line."""
    records = [function_record(descriptor) for descriptor in registry.values()]
    records.sort(key=lambda r: (r.file, r.start_line, r.key))
    return records


def _join(values: list[str], separator: str) -> str:
    return separator.join(values) if values else _EMPTY


def display_columns(record: FunctionRecord, separator: str = "; ") -> list[str]:
    """Row values for the CSV export and the terminal table."""
    name = f"{record.receiver}.{record.name}" if record.receiver else record.name
    parameters = [f"{p.name} {p.type}" if p.name else p.type for p in record.parameters]
    externals = [
        f"{ext.import_path or ext.alias}.{ext.name}"
        if ext.import_path or ext.alias
        else ext.name
        for ext in record.externals
    ]
    return [
        record.file,
        name,
        str(record.start_line),
        _join(parameters, separator),
        _join(record.returns, separator),
        _join(externals, separator),
        _join(record.calls, separator),
    ]


def write_functions_csv(path: Path, records: list[FunctionRecord]) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.writer(handle, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(FUNCTIONS_CSV_HEADER)
        for record in records:
            writer.writerow(display_columns(record))


class FunctionsGenerator:
    """Generator for the function inventory artifacts."""

    @property
    def name(self) -> str:
        """Generator name for logging and identification."""
        return "functions"

    def generate(
        self,
        analysis: Analysis,
        out_dir: Path,
        **kwargs: Any,
    ) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Generate functions.jsonl and functions.csv."""
        del kwargs
        out_dir.mkdir(parents=True, exist_ok=True)

        records = function_records(analysis.registry)
        _write_jsonl(out_dir / FUNCTIONS_JSONL, records)
        write_functions_csv(out_dir / FUNCTIONS_CSV, records)

        return [r.model_dump() for r in records], {"function_count": len(records)}


__all__ = [
    "FunctionsGenerator",
    "display_columns",
    "function_record",
    "function_records",
    "write_functions_csv",
]

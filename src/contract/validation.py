"""Validation helpers for gocallmap artifacts."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

import orjson
from pydantic import ValidationError

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    FUNCTIONS_CSV_HEADER,
)
from contract.models import CallRecord, FunctionRecord, GraphSummary, UntestedRecord

if TYPE_CHECKING:
    from pathlib import Path


class _SchemaModel(Protocol):
    schema_version: int

    @classmethod
    def model_validate(cls, obj: Any) -> _SchemaModel: ...


_JSONL_MODELS: dict[str, type[_SchemaModel]] = {
    "functions": FunctionRecord,
    "calls": CallRecord,
    "untested": UntestedRecord,
}


@dataclass(frozen=True)
class ValidationMessage:
    artifact: str
    path: Path
    message: str
    line: int | None = None

    def location(self) -> str:
        if self.line is None:
            return str(self.path)
        return f"{self.path}:{self.line}"

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact": self.artifact,
            "path": str(self.path),
            "line": self.line,
            "message": self.message,
        }


@dataclass
class ValidationResult:
    errors: list[ValidationMessage] = field(default_factory=list)
    warnings: list[ValidationMessage] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_artifacts(
    artifacts_dir: Path, *, strict_schema_version: bool = False
) -> ValidationResult:
    result = ValidationResult()

    if not artifacts_dir.exists():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts directory does not exist.",
            )
        )
        return result

    if not artifacts_dir.is_dir():
        result.errors.append(
            ValidationMessage(
                artifact="artifacts_dir",
                path=artifacts_dir,
                message="Artifacts path is not a directory.",
            )
        )
        return result

    for artifact_name, spec in ARTIFACT_SPECS.items():
        path = artifacts_dir / spec.filename
        if not path.exists():
            if spec.required:
                result.errors.append(
                    ValidationMessage(
                        artifact=artifact_name,
                        path=path,
                        message="Required artifact file is missing.",
                    )
                )
            continue

        if spec.format == "jsonl":
            _validate_jsonl(
                artifact_name,
                path,
                _JSONL_MODELS[artifact_name],
                result,
                strict_schema_version=strict_schema_version,
            )
        elif spec.format == "json":
            _validate_graph_summary(
                artifact_name,
                path,
                result,
                strict_schema_version=strict_schema_version,
            )
        elif spec.format == "csv":
            _validate_csv(artifact_name, path, result)
        elif spec.format == "dot":
            _validate_dot(artifact_name, path, result)
        else:
            result.errors.append(
                ValidationMessage(
                    artifact=artifact_name,
                    path=path,
                    message=f"Unsupported artifact format: {spec.format}.",
                )
            )

    return result


def _error(
    result: ValidationResult,
    artifact_name: str,
    path: Path,
    message: str,
    line: int | None = None,
) -> None:
    result.errors.append(
        ValidationMessage(artifact=artifact_name, path=path, message=message, line=line)
    )


def _validate_jsonl(
    artifact_name: str,
    path: Path,
    model: type[_SchemaModel],
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> None:
    try:
        lines = path.read_bytes().splitlines()
    except OSError as exc:
        _error(result, artifact_name, path, f"Failed to read file: {exc}.")
        return

    schema_reported = False
    for line_number, raw_line in enumerate(lines, 1):
        line = raw_line.strip()
        if not line:
            continue
        try:
            data = orjson.loads(line)
        except orjson.JSONDecodeError as exc:
            _error(result, artifact_name, path, f"Invalid JSON: {exc}.", line_number)
            continue

        try:
            record = model.model_validate(data)
        except ValidationError as exc:
            _error(
                result,
                artifact_name,
                path,
                f"Schema validation failed: {exc}.",
                line_number,
            )
            continue

        # One schema message per file is enough.
        if schema_reported:
            continue
        schema_present = isinstance(data, dict) and "schema_version" in data
        if not schema_present or record.schema_version != ARTIFACT_SCHEMA_VERSION:
            _check_schema_version(
                artifact_name,
                path,
                line_number,
                schema_present,
                record.schema_version,
                result,
                strict_schema_version=strict_schema_version,
            )
            schema_reported = True


def _validate_graph_summary(
    artifact_name: str,
    path: Path,
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> None:
    try:
        raw = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        _error(result, artifact_name, path, f"Invalid JSON: {exc}.")
        return

    if not isinstance(raw, dict):
        _error(result, artifact_name, path, "Expected a JSON object.")
        return

    try:
        summary = GraphSummary.model_validate(raw)
    except ValidationError as exc:
        _error(result, artifact_name, path, f"Schema validation failed: {exc}.")
        return

    _check_schema_version(
        artifact_name,
        path,
        None,
        "schema_version" in raw,
        summary.schema_version,
        result,
        strict_schema_version=strict_schema_version,
    )


def _validate_csv(artifact_name: str, path: Path, result: ValidationResult) -> None:
    try:
        with path.open(encoding="utf-8", newline="") as handle:
            rows = list(csv.reader(handle))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        _error(result, artifact_name, path, f"Failed to read file: {exc}.")
        return

    if not rows or tuple(rows[0]) != FUNCTIONS_CSV_HEADER:
        _error(
            result,
            artifact_name,
            path,
            f"Expected header {','.join(FUNCTIONS_CSV_HEADER)}.",
            1,
        )
        return

    width = len(FUNCTIONS_CSV_HEADER)
    for line_number, row in enumerate(rows[1:], 2):
        if len(row) != width:
            _error(
                result,
                artifact_name,
                path,
                f"Expected {width} columns, found {len(row)}.",
                line_number,
            )


def _validate_dot(artifact_name: str, path: Path, result: ValidationResult) -> None:
    try:
        text = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as exc:
        _error(result, artifact_name, path, f"Failed to read file: {exc}.")
        return

    if not text.startswith("digraph") or not text.endswith("}"):
        _error(
            result,
            artifact_name,
            path,
            "Malformed DOT file (expected a single 'digraph { ... }').",
        )


def _check_schema_version(
    artifact_name: str,
    path: Path,
    line: int | None,
    schema_present: bool,
    schema_version: int,
    result: ValidationResult,
    *,
    strict_schema_version: bool,
) -> None:
    if schema_present and schema_version != ARTIFACT_SCHEMA_VERSION:
        _error(
            result,
            artifact_name,
            path,
            "Schema version mismatch: "
            f"expected {ARTIFACT_SCHEMA_VERSION}, got {schema_version}.",
            line,
        )
        return

    if not schema_present:
        message = f"Missing schema_version; defaulted to {ARTIFACT_SCHEMA_VERSION}."
        if strict_schema_version:
            _error(result, artifact_name, path, message, line)
        else:
            result.warnings.append(
                ValidationMessage(
                    artifact=artifact_name, path=path, message=message, line=line
                )
            )


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]

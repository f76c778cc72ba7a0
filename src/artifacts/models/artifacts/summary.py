"""Graph summary models.

This module contains models for call-graph metrics and indexing diagnostics.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class SkippedFileRecord(BaseModel):
    """A source file left out of the index."""

    path: str
    reason: str


class GraphSummary(BaseModel):
    """Summary of call-graph metrics."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    module_path: str
    file_count: int
    function_count: int
    node_count: int
    edge_count: int
    node_kinds: dict[str, int] = Field(default_factory=dict)
    call_kinds: dict[str, int] = Field(default_factory=dict)
    cycles: list[list[str]] = Field(default_factory=list)
    fan_in: dict[str, int] = Field(default_factory=dict)
    fan_out: dict[str, int] = Field(default_factory=dict)
    top_callees: list[str] = Field(default_factory=list)
    collisions: list[str] = Field(default_factory=list)
    repeated_declarations: dict[str, int] = Field(default_factory=dict)
    skipped_files: list[SkippedFileRecord] = Field(default_factory=list)
    untested_count: int | None = None


__all__ = ["GraphSummary", "SkippedFileRecord"]

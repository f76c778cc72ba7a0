"""Call record models for resolved call sites."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION

CallKind = Literal["local", "cross_module", "method", "external", "literal"]
Invocation = Literal["direct", "defer", "go"]


class CallRecord(BaseModel):
    """Schema for calls.jsonl records.

    ``target`` is the call-graph node identity of the callee. ``depth`` is 0
    for a call written directly in the body and grows by one per enclosing
    argument list or invoked literal.
    """

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    caller: str
    file: str
    line: int
    kind: CallKind
    target: str
    expr: str
    arguments: list[str] = Field(default_factory=list)
    invocation: Invocation = "direct"
    depth: int = 0
    import_path: str | None = None


__all__ = ["CallKind", "CallRecord", "Invocation"]

"""Function models for indexed Go declarations.

One ``FunctionRecord`` per function or method in the registry, carrying its
signature and the resolved internal and external calls of its body.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION

ExternalOrigin = Literal["unknown", "imported", "missing"]


class ParameterRecord(BaseModel):
    """A declared parameter; ``name`` is empty when unnamed."""

    name: str
    type: str


class ExternalRecord(BaseModel):
    """A call target that is not an indexed function."""

    name: str
    alias: str = ""
    import_path: str = ""
    origin: ExternalOrigin = "unknown"


class FunctionRecord(BaseModel):
    """Schema for functions.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    key: str
    package: str
    package_path: str
    receiver: str | None = None
    name: str
    file: str
    start_line: int
    end_line: int
    has_body: bool = True
    parameters: list[ParameterRecord] = Field(default_factory=list)
    returns: list[str] = Field(default_factory=list)
    calls: list[str] = Field(
        default_factory=list, description="Identities of called indexed functions"
    )
    externals: list[ExternalRecord] = Field(default_factory=list)


__all__ = ["ExternalOrigin", "ExternalRecord", "FunctionRecord", "ParameterRecord"]

"""Untested function models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from contract.artifacts import ARTIFACT_SCHEMA_VERSION


class UntestedRecord(BaseModel):
    """Schema for untested.jsonl records."""

    schema_version: int = Field(default=ARTIFACT_SCHEMA_VERSION)
    key: str
    file: str
    name: str
    start_line: int
    end_line: int
    parameters: list[str] = Field(default_factory=list)
    has_body: bool = True
    profiled: bool = Field(
        default=False, description="Whether the profile has entries for the file"
    )
    total_blocks: int = 0


__all__ = ["UntestedRecord"]

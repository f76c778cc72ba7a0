"""Artifact contract definitions.

Filenames, formats and the schema version of everything ``gocallmap analyze``
writes. Downstream tooling should depend on these names only.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

ARTIFACT_SCHEMA_VERSION = 1

FUNCTIONS_JSONL = "functions.jsonl"
FUNCTIONS_CSV = "functions.csv"
CALLS_JSONL = "calls.jsonl"
CALLGRAPH_DOT = "callgraph.dot"
GRAPH_SUMMARY_JSON = "graph_summary.json"
UNTESTED_JSONL = "untested.jsonl"

FUNCTIONS_CSV_HEADER = (
    "File",
    "Function",
    "Line",
    "Parameters",
    "Returns",
    "Externals",
    "FunctionCalls",
)


@dataclass(frozen=True)
class ArtifactSpec:
    """Filename and format of one artifact.

    ``required`` artifacts are written on every run; the others depend on
    run options (``untested.jsonl`` needs a coverage profile).
    """

    filename: str
    format: str
    required_fields_note: str
    required: bool = True


_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_expr(raw_expr: str) -> str:
    """Normalize an expression string for artifacts.

    Rules:
    - Strip leading/trailing whitespace.
    - Collapse internal whitespace runs to a single space.
    - Preserve selectors (e.g. ``a.b.c``).
    """
    return _WHITESPACE_RUN.sub(" ", raw_expr.strip())


ARTIFACT_SPECS: dict[str, ArtifactSpec] = {
    "functions": ArtifactSpec(
        filename=FUNCTIONS_JSONL,
        format="jsonl",
        required_fields_note="FunctionRecord fields required by contract.",
    ),
    "functions_csv": ArtifactSpec(
        filename=FUNCTIONS_CSV,
        format="csv",
        required_fields_note="Header row followed by one row per function.",
    ),
    "calls": ArtifactSpec(
        filename=CALLS_JSONL,
        format="jsonl",
        required_fields_note="CallRecord fields required by contract.",
    ),
    "callgraph": ArtifactSpec(
        filename=CALLGRAPH_DOT,
        format="dot",
        required_fields_note="A single Graphviz digraph.",
    ),
    "graph_summary": ArtifactSpec(
        filename=GRAPH_SUMMARY_JSON,
        format="json",
        required_fields_note="GraphSummary fields required by contract.",
    ),
    "untested": ArtifactSpec(
        filename=UNTESTED_JSONL,
        format="jsonl",
        required_fields_note="UntestedRecord fields required by contract.",
        required=False,
    ),
}


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "ARTIFACT_SPECS",
    "CALLGRAPH_DOT",
    "CALLS_JSONL",
    "FUNCTIONS_CSV",
    "FUNCTIONS_CSV_HEADER",
    "FUNCTIONS_JSONL",
    "GRAPH_SUMMARY_JSON",
    "UNTESTED_JSONL",
    "ArtifactSpec",
    "normalize_expr",
]

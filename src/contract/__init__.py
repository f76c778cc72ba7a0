"""Stable artifact contract surface for gocallmap.

Filenames, formats and record models that consumers of the artifacts
directory may rely on.
"""

from contract.artifacts import (
    ARTIFACT_SCHEMA_VERSION,
    ARTIFACT_SPECS,
    CALLGRAPH_DOT,
    CALLS_JSONL,
    FUNCTIONS_CSV,
    FUNCTIONS_JSONL,
    GRAPH_SUMMARY_JSON,
    UNTESTED_JSONL,
    ArtifactSpec,
)


def __getattr__(name: str) -> object:
    if name in {"CallRecord", "FunctionRecord", "GraphSummary", "UntestedRecord"}:
        from contract.models import (
            CallRecord,
            FunctionRecord,
            GraphSummary,
            UntestedRecord,
        )

        return {
            "CallRecord": CallRecord,
            "FunctionRecord": FunctionRecord,
            "GraphSummary": GraphSummary,
            "UntestedRecord": UntestedRecord,
        }[name]

    if name in {"ValidationMessage", "ValidationResult", "validate_artifacts"}:
        from contract.validation import (
            ValidationMessage,
            ValidationResult,
            validate_artifacts,
        )

        return {
            "ValidationMessage": ValidationMessage,
            "ValidationResult": ValidationResult,
            "validate_artifacts": validate_artifacts,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "ARTIFACT_SCHEMA_VERSION",
    "ARTIFACT_SPECS",
    "CALLGRAPH_DOT",
    "CALLS_JSONL",
    "FUNCTIONS_CSV",
    "FUNCTIONS_JSONL",
    "GRAPH_SUMMARY_JSON",
    "UNTESTED_JSONL",
    "ArtifactSpec",
    "CallRecord",
    "FunctionRecord",
    "GraphSummary",
    "UntestedRecord",
    "ValidationMessage",
    "ValidationResult",
    "validate_artifacts",
]

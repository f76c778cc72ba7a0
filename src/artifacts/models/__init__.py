"""Model namespace for gocallmap artifact schemas."""

from artifacts.models.artifacts.calls import CallRecord
from artifacts.models.artifacts.functions import (
    ExternalRecord,
    FunctionRecord,
    ParameterRecord,
)
from artifacts.models.artifacts.summary import GraphSummary, SkippedFileRecord
from artifacts.models.artifacts.untested import UntestedRecord

__all__ = [
    "CallRecord",
    "ExternalRecord",
    "FunctionRecord",
    "GraphSummary",
    "ParameterRecord",
    "SkippedFileRecord",
    "UntestedRecord",
]

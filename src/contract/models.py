"""Artifact record models exposed at the contract boundary."""

from artifacts.models.artifacts.calls import CallRecord
from artifacts.models.artifacts.functions import FunctionRecord
from artifacts.models.artifacts.summary import GraphSummary
from artifacts.models.artifacts.untested import UntestedRecord

__all__ = ["CallRecord", "FunctionRecord", "GraphSummary", "UntestedRecord"]

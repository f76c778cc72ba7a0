"""Artifact generators for gocallmap."""

from artifacts.generators.calls import CallsGenerator
from artifacts.generators.dot import DotGenerator
from artifacts.generators.functions import FunctionsGenerator
from artifacts.generators.summary import SummaryGenerator
from artifacts.generators.untested import UntestedGenerator

__all__ = [
    "CallsGenerator",
    "DotGenerator",
    "FunctionsGenerator",
    "SummaryGenerator",
    "UntestedGenerator",
]

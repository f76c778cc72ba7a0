"""Per-function coverage overlay."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from cover.profile import parse_profile

if TYPE_CHECKING:
    from collections.abc import Mapping

    from cover.profile import CoverageBlock, CoverageData
    from index.descriptors import FunctionDescriptor


@dataclass(frozen=True)
class CoverageResult:
    """Coverage status of one function."""

    key: str
    covered: bool
    covered_blocks: int
    total_blocks: int
    profiled: bool = False


def _candidate_names(descriptor: FunctionDescriptor, module_path: str) -> list[str]:
    """Names a profile may use for the descriptor's file."""
    names = []
    if module_path:
        names.append(f"{module_path}/{descriptor.rel_path}")
    names.append(descriptor.rel_path)
    names.append(descriptor.path)
    names.append(Path(descriptor.path).resolve().as_posix())
    return names


def blocks_for(
    descriptor: FunctionDescriptor, data: CoverageData, module_path: str = ""
) -> list[CoverageBlock] | None:
    """Profile blocks recorded for the descriptor's file, or None."""
    for name in _candidate_names(descriptor, module_path):
        blocks = data.get(name)
        if blocks is not None:
            return blocks
    return None


def function_coverage(
    descriptor: FunctionDescriptor, data: CoverageData, module_path: str = ""
) -> CoverageResult:
    """Check one function against the profile.

    Only blocks overlapping the function's own line span count. A function
    without a body, or whose file is absent from the profile, is untested.
    """
    blocks = blocks_for(descriptor, data, module_path)
    if blocks is None:
        return CoverageResult(descriptor.key, False, 0, 0)
    if not descriptor.has_body:
        return CoverageResult(descriptor.key, False, 0, 0, profiled=True)

    inside = [
        block
        for block in blocks
        if block.overlaps(descriptor.start_line, descriptor.end_line)
    ]
    covered = sum(1 for block in inside if block.count > 0)
    return CoverageResult(
        descriptor.key, covered > 0, covered, len(inside), profiled=True
    )


def coverage_results(
    registry: Mapping[str, FunctionDescriptor],
    data: CoverageData,
    module_path: str = "",
) -> list[CoverageResult]:
    """Coverage result for every function, sorted by identity."""
    return [
        function_coverage(registry[key], data, module_path) for key in sorted(registry)
    ]


def analyze_coverage(
    profile_path: Path, registry: Mapping[str, FunctionDescriptor]
) -> set[str]:
    """Identities of functions no executed profile block overlaps.

    Raises:
        CoverageProfileOpenError: If the profile cannot be read.
    """
    data = parse_profile(Path(profile_path))
    module_path = getattr(registry, "module_path", "")
    return {
        result.key
        for result in coverage_results(registry, data, module_path)
        if not result.covered
    }


__all__ = [
    "CoverageResult",
    "analyze_coverage",
    "blocks_for",
    "coverage_results",
    "function_coverage",
]

"""Summary builders for artifact generation."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def compute_fan_stats(
    edges: list[tuple[str, str]],
) -> tuple[dict[str, int], dict[str, int]]:
    """Compute fan-in and fan-out statistics from edges."""
    fan_in: dict[str, int] = {}
    fan_out: dict[str, int] = {}

    for source, target in edges:
        fan_out[source] = fan_out.get(source, 0) + 1
        fan_in[target] = fan_in.get(target, 0) + 1

    return fan_in, fan_out


def top_by_count(counts: dict[str, int], limit: int) -> list[str]:
    """Highest counts first, ties broken by name."""
    return sorted(counts, key=lambda name: (-counts[name], name))[:limit]


def count_by(values: Iterable[str]) -> dict[str, int]:
    """Occurrence count per value, sorted by value."""
    return dict(sorted(Counter(values).items()))


__all__ = ["compute_fan_stats", "count_by", "top_by_count"]

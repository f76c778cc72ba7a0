"""Summary helpers for gocallmap artifacts."""

from artifacts.summaries.builders import compute_fan_stats, count_by, top_by_count

__all__ = ["compute_fan_stats", "count_by", "top_by_count"]

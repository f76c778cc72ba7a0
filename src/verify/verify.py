"""Determinism verification for gocallmap artifacts."""

from __future__ import annotations

import filecmp
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from artifacts.write import generate_all_artifacts

if TYPE_CHECKING:
    from rules.config import GoCallMapConfig


@dataclass(frozen=True)
class DeterminismResult:
    ok: bool
    mismatches: tuple[str, ...] = field(default_factory=tuple)
    missing: tuple[str, ...] = field(default_factory=tuple)
    extra: tuple[str, ...] = field(default_factory=tuple)


def _list_relative_files(root: Path) -> set[Path]:
    return {path.relative_to(root) for path in root.rglob("*") if path.is_file()}


def verify_determinism(
    *,
    root: Path,
    artifacts_dir: Path,
    config: GoCallMapConfig | None = None,
    coverage_profile: Path | None = None,
) -> DeterminismResult:
    """Verify that existing artifacts match a fresh analysis.

    The module is analysed again into a temporary directory and every file
    is compared byte for byte, by path relative to each directory. Pass the
    same coverage profile that produced ``untested.jsonl``, if any.

    Args:
        root: Module directory to analyze.
        artifacts_dir: Directory containing existing artifacts to verify.
        config: Optional configuration; read from root when omitted.
        coverage_profile: Optional coverage profile.

    Returns:
        DeterminismResult with ok status and lists of missing, extra, and
        mismatched relative paths.

    Raises:
        FileNotFoundError: If artifacts_dir does not exist.
        NotADirectoryError: If artifacts_dir is not a directory.
    """
    if not artifacts_dir.exists():
        msg = f"Artifacts directory does not exist: {artifacts_dir}"
        raise FileNotFoundError(msg)
    if not artifacts_dir.is_dir():
        msg = f"Artifacts path is not a directory: {artifacts_dir}"
        raise NotADirectoryError(msg)

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        generate_all_artifacts(
            root=root,
            out_dir=temp_path,
            config=config,
            coverage_profile=coverage_profile,
        )

        original_files = _list_relative_files(artifacts_dir)
        regenerated_files = _list_relative_files(temp_path)

        missing = sorted(str(path) for path in original_files - regenerated_files)
        extra = sorted(str(path) for path in regenerated_files - original_files)
        mismatches = [
            str(path)
            for path in sorted(original_files & regenerated_files)
            if not filecmp.cmp(artifacts_dir / path, temp_path / path, shallow=False)
        ]

    return DeterminismResult(
        ok=not missing and not extra and not mismatches,
        mismatches=tuple(mismatches),
        missing=tuple(missing),
        extra=tuple(extra),
    )


__all__ = ["DeterminismResult", "verify_determinism"]

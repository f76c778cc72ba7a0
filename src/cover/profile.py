"""Reader for ``go test -coverprofile`` output."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from errors import CoverageProfileOpenError, MalformedCoverageLine

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# file:startLine.startCol,endLine.endCol
_BLOCK_RE = re.compile(
    r"^(?P<file>.+):(?P<sl>\d+)\.(?P<sc>\d+),(?P<el>\d+)\.(?P<ec>\d+)$"
)


@dataclass(frozen=True)
class CoverageBlock:
    """One profiled statement block and its execution count."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    statements: int
    count: int

    def overlaps(self, start_line: int, end_line: int) -> bool:
        return self.start_line <= end_line and self.end_line >= start_line


CoverageData = dict[str, list[CoverageBlock]]


def parse_line(line: str, line_no: int = 0) -> CoverageBlock:
    """Parse one profile data line.

    Both ``<range> <statements> <count>`` and ``<range> <count>`` are
    accepted; the short form records zero statements.

    Raises:
        MalformedCoverageLine: If the line does not have either shape.
    """
    fields = line.split()
    if len(fields) not in (2, 3):
        raise MalformedCoverageLine(line_no, line)

    match = _BLOCK_RE.match(fields[0])
    if match is None:
        raise MalformedCoverageLine(line_no, line)

    try:
        count = int(fields[-1])
        statements = int(fields[1]) if len(fields) == 3 else 0
    except ValueError as exc:
        raise MalformedCoverageLine(line_no, line) from exc

    return CoverageBlock(
        file=match["file"],
        start_line=int(match["sl"]),
        start_col=int(match["sc"]),
        end_line=int(match["el"]),
        end_col=int(match["ec"]),
        statements=statements,
        count=count,
    )


def parse_profile(path: Path) -> CoverageData:
    """Read a coverage profile into blocks grouped by file.

    ``mode:`` headers and blank lines are ignored. Malformed lines are
    skipped and logged at debug level.

    Raises:
        CoverageProfileOpenError: If the profile cannot be opened or read.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Cannot read coverage profile {path}: {exc}"
        raise CoverageProfileOpenError(msg) from exc

    data: CoverageData = {}
    skipped = 0
    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("mode:"):
            continue
        try:
            block = parse_line(line, line_no)
        except MalformedCoverageLine as exc:
            logger.debug("Skipping malformed coverage line %s", exc)
            skipped += 1
            continue
        data.setdefault(block.file, []).append(block)

    logger.info(
        "Read %d coverage blocks for %d files from %s (%d malformed lines)",
        sum(len(blocks) for blocks in data.values()),
        len(data),
        path,
        skipped,
    )
    return data


__all__ = ["CoverageBlock", "CoverageData", "parse_line", "parse_profile"]

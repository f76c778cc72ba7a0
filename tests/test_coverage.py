from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from cover.analyzer import analyze_coverage, coverage_results, function_coverage
from cover.profile import CoverageBlock, parse_line, parse_profile
from errors import CoverageProfileOpenError, MalformedCoverageLine
from index.descriptors import FunctionDescriptor
from index.indexer import build_index

if TYPE_CHECKING:
    from pathlib import Path

MODULE = "example.com/app"


def _descriptor(
    start: int = 10, end: int = 20, *, has_body: bool = True
) -> FunctionDescriptor:
    return FunctionDescriptor(
        package="calc",
        receiver="",
        name="Sum",
        path="/work/app/calc/calc.go",
        rel_path="calc/calc.go",
        start_line=start,
        end_line=end,
        has_body=has_body,
    )


def _block(
    start: int, end: int, count: int, file: str = f"{MODULE}/calc/calc.go"
) -> CoverageBlock:
    return CoverageBlock(file, start, 1, end, 2, 1, count)


def test_parse_line_reads_range_statements_and_count() -> None:
    block = parse_line("example.com/app/calc/calc.go:10.34,12.2 3 7")

    assert block == CoverageBlock("example.com/app/calc/calc.go", 10, 34, 12, 2, 3, 7)


def test_parse_line_accepts_short_form() -> None:
    block = parse_line("calc.go:1.1,2.2 0")

    assert (block.statements, block.count) == (0, 0)


@pytest.mark.parametrize(
    "line",
    [
        "calc.go:10.1,12.2",
        "calc.go 1 1",
        "calc.go:10,12 1 1",
        "calc.go:10.1,12.2 x 1",
        "calc.go:10.1,12.2 1 1 1",
    ],
)
def test_parse_line_rejects_malformed(line: str) -> None:
    with pytest.raises(MalformedCoverageLine):
        parse_line(line, 4)


def test_parse_profile_skips_header_blank_and_malformed(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    profile = tmp_path / "cover.out"
    profile.write_text(
        "mode: count\n"
        "\n"
        "a.go:1.1,3.2 1 0\n"
        "garbage\n"
        "a.go:5.1,7.2 2 4\n"
        "b.go:1.1,2.2 1 1\n",
        encoding="utf-8",
    )

    with caplog.at_level(logging.DEBUG, logger="cover.profile"):
        data = parse_profile(profile)

    assert sorted(data) == ["a.go", "b.go"]
    assert [block.count for block in data["a.go"]] == [0, 4]
    assert "garbage" in caplog.text


def test_parse_profile_missing_file(tmp_path: Path) -> None:
    with pytest.raises(CoverageProfileOpenError):
        parse_profile(tmp_path / "missing.out")


def test_parse_profile_empty_file(tmp_path: Path) -> None:
    profile = tmp_path / "cover.out"
    profile.write_text("mode: set\n", encoding="utf-8")

    assert parse_profile(profile) == {}


def test_executed_block_outside_span_does_not_count() -> None:
    data = {f"{MODULE}/calc/calc.go": [_block(25, 30, 5)]}

    result = function_coverage(_descriptor(10, 20), data, MODULE)

    assert not result.covered
    assert result.profiled
    assert result.total_blocks == 0


@pytest.mark.parametrize(
    ("blocks", "covered"),
    [
        ([_block(12, 14, 1)], True),
        ([_block(8, 10, 1)], True),
        ([_block(20, 22, 3)], True),
        ([_block(12, 14, 0), _block(15, 18, 0)], False),
        ([_block(12, 14, 0), _block(15, 18, 2)], True),
    ],
)
def test_overlapping_blocks(blocks: list[CoverageBlock], covered: bool) -> None:
    data = {f"{MODULE}/calc/calc.go": blocks}

    result = function_coverage(_descriptor(10, 20), data, MODULE)

    assert result.covered is covered
    assert result.total_blocks == len(blocks)


def test_file_absent_from_profile_is_untested() -> None:
    data = {f"{MODULE}/other.go": [_block(1, 100, 9, f"{MODULE}/other.go")]}

    result = function_coverage(_descriptor(), data, MODULE)

    assert not result.covered
    assert not result.profiled


def test_function_without_body_is_untested() -> None:
    data = {f"{MODULE}/calc/calc.go": [_block(1, 100, 9)]}

    result = function_coverage(_descriptor(has_body=False), data, MODULE)

    assert not result.covered
    assert result.profiled


@pytest.mark.parametrize(
    "file",
    [
        f"{MODULE}/calc/calc.go",
        "calc/calc.go",
        "/work/app/calc/calc.go",
    ],
)
def test_profile_file_names_are_matched(file: str) -> None:
    data = {file: [_block(10, 12, 1, file)]}

    assert function_coverage(_descriptor(), data, MODULE).covered


def test_coverage_results_sorted_by_key() -> None:
    first = _descriptor()
    second = FunctionDescriptor(
        package="calc",
        receiver="Acc",
        name="Add",
        path=first.path,
        rel_path=first.rel_path,
        start_line=30,
        end_line=32,
    )
    registry = {first.key: first, second.key: second}

    results = coverage_results(registry, {}, MODULE)

    assert [result.key for result in results] == ["calc.Sum", "calc/Acc.Add"]


def test_analyze_coverage_on_fixture(mini_module: Path, mini_coverage: Path) -> None:
    registry = build_index(mini_module).registry

    untested = analyze_coverage(mini_coverage, registry)

    assert untested == set(registry) - {"strutil.Upper", "strutil.trim"}
    assert "strutil.Join" in untested

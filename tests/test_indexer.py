from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from errors import ManifestNotFound
from index.indexer import build_index, index_project
from rules.config import GoCallMapConfig

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def test_index_project_returns_registry_and_module_path(
    go_module: Callable[..., Path],
) -> None:
    root = go_module(
        {
            "main.go": """
                package main

                func main() { helper() }

                func helper() {}
            """,
            "x/worker.go": """
                package x

                type Worker struct{}

                func (w *Worker) Run() {}
            """,
            "y/worker.go": """
                package y

                type Worker struct{}

                func (w Worker) Run() {}
            """,
        }
    )

    registry, module_path = index_project(root)

    assert module_path == "example.com/app"
    assert sorted(registry) == [
        "main.helper",
        "main.main",
        "x/Worker.Run",
        "y/Worker.Run",
    ]
    run = registry["x/Worker.Run"]
    assert run.rel_path == "x/worker.go"
    assert run.package_path == "example.com/app/x"
    assert registry.package_name_for("example.com/app/y") == "y"


def test_package_name_differs_from_directory(go_module: Callable[..., Path]) -> None:
    root = go_module({"lib/v2/api.go": "package api\n\nfunc Get() {}\n"})

    result = build_index(root)

    assert list(result.registry) == ["api.Get"]
    assert result.registry.package_name_for("example.com/app/lib/v2") == "api"


def test_skips_tests_vendor_and_testdata(go_module: Callable[..., Path]) -> None:
    root = go_module(
        {
            "main.go": "package main\n\nfunc main() {}\n",
            "main_test.go": "package main\n\nfunc TestMain() {}\n",
            "vendor/example.org/dep/dep.go": "package dep\n\nfunc Hidden() {}\n",
            "testdata/sample.go": "package sample\n\nfunc Sample() {}\n",
            "_build/gen.go": "package gen\n\nfunc Gen() {}\n",
        }
    )

    assert list(build_index(root).registry) == ["main.main"]


def test_include_tests_option(go_module: Callable[..., Path]) -> None:
    root = go_module(
        {
            "main.go": "package main\n\nfunc main() {}\n",
            "main_test.go": "package main\n\nfunc TestMain() {}\n",
        }
    )

    result = build_index(root, config=GoCallMapConfig(include_tests=True))

    assert sorted(result.registry) == ["main.TestMain", "main.main"]


def test_syntax_error_skips_file_with_warning(
    go_module: Callable[..., Path], caplog: pytest.LogCaptureFixture
) -> None:
    root = go_module(
        {
            "good.go": "package main\n\nfunc Good() {}\n",
            "bad.go": "package main\n\nfunc Bad( {\n}\n",
        }
    )

    with caplog.at_level(logging.WARNING, logger="index.indexer"):
        result = build_index(root)

    assert list(result.registry) == ["main.Good"]
    assert [skipped.path for skipped in result.skipped] == ["bad.go"]
    assert result.file_count == 2
    assert "Skipping" in caplog.text


def test_duplicate_identity_first_file_wins(go_module: Callable[..., Path]) -> None:
    root = go_module(
        {
            "b.go": "package main\n\nfunc Helper() {}\n",
            "a.go": "package main\n\n\n\nfunc Helper() {}\n",
        }
    )

    result = build_index(root)

    helper = result.registry["main.Helper"]
    assert helper.rel_path == "a.go"
    assert helper.start_line == 5
    assert result.registry.collisions == ("main.Helper",)


def test_parallel_indexing_matches_sequential(mini_module: Path) -> None:
    sequential = build_index(mini_module)
    parallel = build_index(mini_module, config=GoCallMapConfig(workers=4))

    assert list(parallel.registry) == list(sequential.registry)
    assert parallel.skipped == sequential.skipped


def test_missing_manifest_is_fatal(tmp_path: Path) -> None:
    (tmp_path / "main.go").write_text("package main\n", encoding="utf-8")

    with pytest.raises(ManifestNotFound):
        build_index(tmp_path)


def test_root_must_be_a_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"
    with pytest.raises(FileNotFoundError):
        build_index(missing)

    file_root = tmp_path / "file.go"
    file_root.write_text("package main\n", encoding="utf-8")
    with pytest.raises(NotADirectoryError):
        build_index(file_root)


def test_fixture_module_index(mini_module: Path) -> None:
    result = build_index(mini_module)

    assert result.module_path == "example.com/mini"
    assert sorted(result.registry) == [
        "main.cleanup",
        "main.fact",
        "main.main",
        "main.notify",
        "main.run",
        "store.New",
        "store/Store.Get",
        "store/Store.Put",
        "strutil.Join",
        "strutil.Upper",
        "strutil.trim",
    ]
    assert [skipped.path for skipped in result.skipped] == ["broken/broken.go"]

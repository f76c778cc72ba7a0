from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from errors import ManifestNotFound
from parse.manifest import find_module, parse_module_path

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("module example.com/app\n\ngo 1.22\n", "example.com/app"),
        ('module "example.com/quoted"\n', "example.com/quoted"),
        ("// comment\nmodule example.com/c // trailing\n", "example.com/c"),
        ("go 1.22\n", None),
    ],
)
def test_parse_module_path(text: str, expected: str | None) -> None:
    assert parse_module_path(text) == expected


def test_find_module_walks_up_from_subdirectory(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("module example.com/app\n", encoding="utf-8")
    nested = tmp_path / "internal" / "store"
    nested.mkdir(parents=True)

    module = find_module(nested)

    assert module.module_path == "example.com/app"
    assert module.root == tmp_path.resolve()
    assert module.import_path_for(nested) == "example.com/app/internal/store"
    assert module.import_path_for(tmp_path) == "example.com/app"


def test_find_module_missing_manifest(tmp_path: Path) -> None:
    with pytest.raises(ManifestNotFound, match=r"go\.mod not found"):
        find_module(tmp_path)


def test_find_module_without_module_line(tmp_path: Path) -> None:
    (tmp_path / "go.mod").write_text("go 1.22\n", encoding="utf-8")

    with pytest.raises(ManifestNotFound, match="No module declaration"):
        find_module(tmp_path)

from __future__ import annotations

import shutil
import textwrap
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable

MODULE_PATH = "example.com/app"
FIXTURES = Path(__file__).parent / "fixtures"


def write_module(
    root: Path, files: dict[str, str], module_path: str = MODULE_PATH
) -> Path:
    """Write a go.mod plus Go sources; sources are dedented and start at line 1."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "go.mod").write_text(f"module {module_path}\n\ngo 1.22\n", encoding="utf-8")
    for rel_path, text in files.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text).lstrip("\n"), encoding="utf-8")
    return root


@pytest.fixture
def go_module(tmp_path: Path) -> Callable[..., Path]:
    def factory(files: dict[str, str], module_path: str = MODULE_PATH) -> Path:
        return write_module(tmp_path / "mod", files, module_path)

    return factory


@pytest.fixture
def mini_module(tmp_path: Path) -> Path:
    root = tmp_path / "mini_module"
    shutil.copytree(FIXTURES / "mini_module", root)
    return root


@pytest.fixture
def mini_coverage() -> Path:
    return FIXTURES / "mini_coverage.out"

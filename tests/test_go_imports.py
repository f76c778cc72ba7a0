from __future__ import annotations

import pytest

from parse.go_imports import build_import_table, default_alias
from parse.go_parser import parse_source


def _table(source: str) -> dict[str, str]:
    source_bytes = source.encode("utf-8")
    tree = parse_source(source_bytes)
    return build_import_table(source_bytes, tree.root_node)


def test_single_and_grouped_imports() -> None:
    table = _table(
        """package main

import "fmt"

import (
	"net/http"
	"github.com/spf13/cobra"
)
"""
    )

    assert table == {
        "fmt": "fmt",
        "http": "net/http",
        "cobra": "github.com/spf13/cobra",
    }


def test_explicit_alias_wins_over_last_segment() -> None:
    table = _table(
        """package main

import (
	str "strings"
	yaml "gopkg.in/yaml.v3"
)
"""
    )

    assert table == {"str": "strings", "yaml": "gopkg.in/yaml.v3"}


def test_blank_and_dot_imports_kept_under_their_alias() -> None:
    table = _table(
        """package main

import (
	_ "embed"
	. "math"
)
"""
    )

    assert table == {"_": "embed", ".": "math"}


def test_raw_string_import_path() -> None:
    assert _table("package main\n\nimport `os/exec`\n") == {"exec": "os/exec"}


def test_file_without_imports() -> None:
    assert _table("package main\n\nfunc main() {}\n") == {}


@pytest.mark.parametrize(
    ("import_path", "expected"),
    [
        ("fmt", "fmt"),
        ("net/http", "http"),
        ("github.com/spf13/cobra", "cobra"),
        ("gopkg.in/yaml.v3", "yaml.v3"),
    ],
)
def test_default_alias_is_last_segment(import_path: str, expected: str) -> None:
    assert default_alias(import_path) == expected

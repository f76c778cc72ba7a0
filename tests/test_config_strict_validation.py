from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import ConfigError, load_config, resolve_output_dir


def _write_config(module_root: Path, toml_content: str) -> None:
    (module_root / "gocallmap.toml").write_text(toml_content, encoding="utf-8")


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_dot_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[dot]
rankdir = "LR"
colour = "red"
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize("content", ['[dot]\nrankdir = "XY"', "workers = 0"])
def test_out_of_range_values_rejected(tmp_path: Path, content: str) -> None:
    _write_config(tmp_path, content)

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "exclude = [")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
exclude = ["gen/**"]
include_tests = true
workers = 4

[dot]
rankdir = "TB"
include_stdlib = false
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.exclude == ["gen/**"]
    assert config.include_tests is True
    assert config.workers == 4
    assert config.dot.rankdir == "TB"
    assert config.dot.include_stdlib is False
    assert config.dot.include_external is True


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.output_dir == ".gocallmap"
    assert config.vendor_dir == "vendor"
    assert config.include == []
    assert config.exclude == []
    assert config.workers == 1
    assert config.dot.rankdir == "LR"


def test_empty_config_accepted(tmp_path: Path) -> None:
    _write_config(tmp_path, "")

    assert load_config(tmp_path).output_dir == ".gocallmap"


@pytest.mark.parametrize("output_dir", ["", "/tmp/out", "~/out", "../outside"])
def test_output_dir_must_stay_within_root(tmp_path: Path, output_dir: str) -> None:
    with pytest.raises(ConfigError):
        resolve_output_dir(tmp_path, output_dir)


def test_output_dir_resolves_under_root(tmp_path: Path) -> None:
    assert resolve_output_dir(tmp_path, "out/graph") == (
        tmp_path.resolve() / "out" / "graph"
    )

from __future__ import annotations

from pathlib import Path
from typing import Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field

CONFIG_FILENAME = "gocallmap.toml"

RankDir = Literal["LR", "RL", "TB", "BT"]


class DotConfig(BaseModel):
    """Rendering options for callgraph.dot."""

    model_config = ConfigDict(extra="forbid")

    rankdir: RankDir = Field(default="LR", description="Graphviz rank direction")
    include_external: bool = Field(
        default=True,
        description="Draw method, external, missing and literal nodes",
    )
    include_stdlib: bool = Field(
        default=True,
        description="Draw external nodes whose import path is a standard package",
    )


class GoCallMapConfig(BaseModel):
    """Configuration for gocallmap artifact generation."""

    model_config = ConfigDict(extra="forbid")

    output_dir: str = Field(
        default=".gocallmap",
        description="Output directory for generated artifacts",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Go files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    vendor_dir: str = Field(
        default="vendor",
        description="Dependency vendor directory name skipped at any depth",
    )
    include_tests: bool = Field(
        default=False,
        description="Index _test.go files as well",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    workers: int = Field(
        default=1,
        ge=1,
        description="Thread pool size for parsing and call resolution",
    )
    dot: DotConfig = Field(
        default_factory=DotConfig,
        description="callgraph.dot rendering options",
    )


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_output_dir(root: Path, output_dir: str) -> Path:
    """Resolve a config-provided output_dir safely within the analysed root.

    The config output_dir must be a non-empty relative path that remains
    within the root after resolution. Absolute paths and paths that escape
    the root are rejected.
    """
    if not output_dir:
        msg = "output_dir must be a non-empty relative path"
        raise ConfigError(msg)

    if output_dir.startswith("~"):
        msg = "output_dir must be a relative path within the repo root"
        raise ConfigError(msg)

    output_path = Path(output_dir)
    if output_path.is_absolute():
        msg = "output_dir must be a relative path within the repo root"
        raise ConfigError(msg)

    try:
        resolved_root = root.resolve()
        resolved_output = (resolved_root / output_path).resolve()
    except OSError as exc:
        msg = f"Failed to resolve output_dir '{output_dir}': {exc}"
        raise ConfigError(msg) from exc

    try:
        resolved_output.relative_to(resolved_root)
    except ValueError as exc:
        msg = f"output_dir '{output_dir}' escapes the repository root"
        raise ConfigError(msg) from exc

    return resolved_output


def load_config(root: Path) -> GoCallMapConfig:
    """Load configuration from gocallmap.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return GoCallMapConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return GoCallMapConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e

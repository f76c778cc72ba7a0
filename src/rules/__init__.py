"""Configuration for gocallmap."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    DotConfig,
    GoCallMapConfig,
    load_config,
    resolve_output_dir,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DotConfig",
    "GoCallMapConfig",
    "load_config",
    "resolve_output_dir",
]

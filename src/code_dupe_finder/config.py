# Code Dupe Finder - Find duplicate code blocks and suggest refactorings
# Copyright (C) 2025  Jonathan Louis
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Configuration for CDF.

A run is driven by a single immutable DupeConfig that is built once and
handed to every stage. Defaults can be overridden from .cdfrc or .cdf.toml
in the current directory or any parent.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Dict, Any, Mapping, Tuple
import logging

try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # type: ignore
    except ImportError:
        tomllib = None  # type: ignore


logger = logging.getLogger(__name__)

CONFIG_NAMES = [".cdfrc", ".cdf.toml"]
CONFIG_SECTION = "cdf"


class ConfigError(ValueError):
    """Raised when a configuration value is out of range."""


@dataclass(frozen=True)
class DupeConfig:
    """Settings for one analysis run."""

    min_lines: int = 5                 # Baseline for "potential lines to reduce"
    min_tokens: int = 50               # Minimum whitespace-delimited tokens per block
    block_sizes: Tuple[int, ...] = (5, 10, 15, 20)
    max_blocks_per_file: int = 50      # Cap across all block sizes, per file
    extensions: Tuple[str, ...] = (".ts", ".svelte", ".js")
    exclude_dirs: Tuple[str, ...] = (
        "node_modules", ".svelte-kit", "dist", "build", ".git", "static", "stories",
    )
    src_dir: str = "./src"
    report_path: str = "duplication-report.json"
    utils_dir: str = "src/lib/utils"
    top_n: int = 10                    # Groups shown in the console view
    preview_chars: int = 200           # Code preview length stored in the artifact
    console_preview_chars: int = 150
    workers: int = 1                   # >1 reads files on a thread pool

    def __post_init__(self):
        # Lists coming from TOML or click tuples are normalized to tuples
        object.__setattr__(self, "block_sizes", tuple(self.block_sizes))
        object.__setattr__(self, "extensions", tuple(self.extensions))
        object.__setattr__(self, "exclude_dirs", tuple(self.exclude_dirs))

        for name in (
            "min_lines", "min_tokens", "max_blocks_per_file",
            "top_n", "preview_chars", "console_preview_chars", "workers",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")

        if not self.block_sizes:
            raise ConfigError("block_sizes must not be empty")
        for size in self.block_sizes:
            if not isinstance(size, int) or isinstance(size, bool) or size < 1:
                raise ConfigError(f"block_sizes must be positive integers, got {size!r}")

    def replace(self, **changes: Any) -> "DupeConfig":
        """Return a copy with the given fields changed (None values are ignored)."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in changes.items() if v is not None})
        return DupeConfig(**values)


def find_config_file(start_path: Path) -> Optional[Path]:
    """
    Search for .cdfrc or .cdf.toml in start_path and parent directories.

    Args:
        start_path: Directory to start searching from

    Returns:
        Path to config file if found, None otherwise
    """
    current = start_path.resolve()

    while True:
        for name in CONFIG_NAMES:
            config_path = current / name
            if config_path.is_file():
                return config_path

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config(path: Path) -> Dict[str, Any]:
    """
    Load the [cdf] table from the nearest config file.

    Returns an empty dict if no config file is found or it cannot be parsed.

    Example config file (.cdfrc or .cdf.toml):
        [cdf]
        src_dir = "./src"
        block_sizes = [5, 10, 15, 20]
        min_tokens = 50
        max_blocks_per_file = 50
        extensions = [".ts", ".svelte", ".js"]
        exclude_dirs = ["node_modules", "dist"]
        report_path = "duplication-report.json"
        utils_dir = "src/lib/utils"
    """
    if tomllib is None:
        logger.debug("No TOML parser available, ignoring config files")
        return {}

    config_path = find_config_file(path)

    if config_path is None:
        return {}

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
        return {}

    logger.debug(f"Loaded config from {config_path}")
    return data.get(CONFIG_SECTION, {})


def config_from_mapping(values: Mapping[str, Any]) -> DupeConfig:
    """Build a DupeConfig from a config-file mapping, skipping unknown keys."""
    known = {f.name for f in fields(DupeConfig)}
    accepted = {}
    for key, value in values.items():
        if key in known:
            accepted[key] = value
        else:
            logger.debug(f"Ignoring unknown config key: {key}")
    return DupeConfig(**accepted)

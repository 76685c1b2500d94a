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
Code Dupe Finder - Find copy-pasted code blocks worth extracting.

Slides fixed-size windows over source files, fingerprints the normalized
text, groups identical fingerprints, and ranks the groups by how many
duplicated lines they account for. Purely textual, no parsing.
"""

__version__ = "0.3.0"

from .config import DupeConfig, ConfigError, load_config, find_config_file
from .fingerprint import normalize_code, fingerprint_code
from .extractor import BlockExtractor, extract_blocks
from .indexer import index_codebase, find_source_files, SourceRootError
from .grouper import group_blocks
from .classifier import PatternRule, DEFAULT_RULES, classify_code, classify_groups
from .reporter import build_report, report_groups, to_artifact, OutputFormat
from .store import save_report, load_report, ReportNotFoundError
from .suggester import generate_utility_templates, create_utility_files
from .pipeline import run_analysis

__all__ = [
    "__version__",
    "DupeConfig",
    "ConfigError",
    "load_config",
    "find_config_file",
    "normalize_code",
    "fingerprint_code",
    "BlockExtractor",
    "extract_blocks",
    "index_codebase",
    "find_source_files",
    "SourceRootError",
    "group_blocks",
    "PatternRule",
    "DEFAULT_RULES",
    "classify_code",
    "classify_groups",
    "build_report",
    "report_groups",
    "to_artifact",
    "OutputFormat",
    "save_report",
    "load_report",
    "ReportNotFoundError",
    "generate_utility_templates",
    "create_utility_files",
    "run_analysis",
]

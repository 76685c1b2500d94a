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

"""Index, group, classify and report in one call."""

from pathlib import Path
from typing import Optional
import logging

from .classifier import classify_groups
from .config import DupeConfig
from .grouper import group_blocks
from .indexer import ProgressCallback, index_codebase
from .models import AnalysisReport
from .reporter import build_report


logger = logging.getLogger(__name__)


def run_analysis(
    root_path: Path,
    config: Optional[DupeConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> AnalysisReport:
    """Analyze a directory tree for duplicate blocks."""
    config = config or DupeConfig()

    index = index_codebase(root_path, config, on_progress=on_progress)
    groups = group_blocks(index.blocks)
    logger.info(f"Found {len(groups)} duplicate groups")

    classify_groups(groups)

    return build_report(groups, str(root_path), index=index, config=config)

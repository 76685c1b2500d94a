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
Report persistence.

The JSON artifact is the only interface between `cdf analyze` and
`cdf suggest`. It is rewritten from scratch on every analysis run.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .config import DupeConfig
from .models import AnalysisReport
from .reporter import format_artifact


class ReportNotFoundError(FileNotFoundError):
    """No duplication report exists yet; run the analysis first."""


def save_report(
    path: Path,
    report: AnalysisReport,
    config: Optional[DupeConfig] = None,
) -> Path:
    """
    Save the report artifact atomically.

    Writes to a temp file then renames, so a failed run never leaves a
    partial report behind.
    """
    path = Path(path)
    temp_path = path.with_suffix(path.suffix + ".tmp")

    with open(temp_path, "w", encoding="utf-8") as f:
        f.write(format_artifact(report, config))

    temp_path.replace(path)
    return path


def load_report(path: Path) -> Dict[str, Any]:
    """
    Load a report artifact.

    Raises:
        ReportNotFoundError: if the file does not exist
        ValueError: if the file is not a valid report
    """
    path = Path(path)
    if not path.is_file():
        raise ReportNotFoundError(f"No duplication report found at {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or not isinstance(data.get("duplicates"), list):
        raise ValueError(f"{path} is not a duplication report")

    return data


def clear_report(path: Path) -> bool:
    """Delete the report. Returns True if file existed."""
    path = Path(path)
    if path.exists():
        path.unlink()
        return True
    return False

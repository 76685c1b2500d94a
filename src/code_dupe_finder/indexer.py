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
Code indexer - finds source files and extracts candidate blocks from them.

Files are discovered in sorted order and results are always assembled in
that order, so the downstream tie-break on discovery order is stable even
when files are read on a thread pool.
"""

from pathlib import Path
from typing import Callable, Iterable, List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed
import logging
import os

from .config import DupeConfig
from .extractor import BlockExtractor
from .models import FileScan, IndexResult


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class SourceRootError(FileNotFoundError):
    """The directory to scan does not exist or is not a directory."""


def index_codebase(
    root_path: Path,
    config: Optional[DupeConfig] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> IndexResult:
    """
    Scan a directory tree and extract code blocks from every source file.

    Args:
        root_path: Root directory to scan
        config: Run configuration (extensions, excludes, extractor limits)
        on_progress: Called as (processed, total, message) after each file

    Returns:
        IndexResult with one FileScan per discovered file, in file order

    Raises:
        SourceRootError: if root_path is not an existing directory
    """
    config = config or DupeConfig()
    root_path = Path(root_path)

    if not root_path.is_dir():
        raise SourceRootError(f"Source directory not found: {root_path}")

    source_files = find_source_files(root_path, config.extensions, config.exclude_dirs)
    logger.info(f"Found {len(source_files)} files to analyze")

    extractor = BlockExtractor(config)
    total = len(source_files)

    if config.workers <= 1:
        scans = []
        for processed, file_path in enumerate(source_files, start=1):
            scans.append(_process_file(file_path, root_path, extractor))
            if on_progress:
                on_progress(processed, total, "files")
    else:
        scans = _process_parallel(source_files, root_path, extractor, config.workers, on_progress)

    result = IndexResult(files=scans)
    logger.info(f"Extracted {len(result.blocks)} code blocks")
    return result


def _process_parallel(
    source_files: List[Path],
    root_path: Path,
    extractor: BlockExtractor,
    workers: int,
    on_progress: Optional[ProgressCallback],
) -> List[FileScan]:
    """Read files concurrently, returning scans in file-list order."""
    scans: List[Optional[FileScan]] = [None] * len(source_files)
    processed = 0

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(_process_file, file_path, root_path, extractor): idx
            for idx, file_path in enumerate(source_files)
        }

        for future in as_completed(futures):
            scans[futures[future]] = future.result()
            processed += 1
            if on_progress:
                on_progress(processed, len(source_files), "files")

    return scans


def find_source_files(
    root_path: Path,
    extensions: Iterable[str],
    exclude_dirs: Iterable[str],
) -> List[Path]:
    """
    Recursively find source files under root_path.

    Directories whose name is in exclude_dirs are not descended into.
    Output order is sorted and stable across runs.
    """
    extensions = {ext.lower() for ext in extensions}
    excluded = set(exclude_dirs)
    source_files = []

    for dirpath, dirnames, filenames in os.walk(root_path):
        # Prune in place so os.walk skips excluded trees entirely
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)

        for filename in sorted(filenames):
            if os.path.splitext(filename)[1].lower() in extensions:
                source_files.append(Path(dirpath) / filename)

    return source_files


def _process_file(file_path: Path, root_path: Path, extractor: BlockExtractor) -> FileScan:
    """Read one file and extract its blocks. Read failures yield an empty scan."""
    rel_path = file_path.relative_to(root_path).as_posix()

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping {rel_path}: {e}")
        return FileScan(file_path=rel_path, error=str(e))

    scan = extractor.extract(content, rel_path)
    if scan.truncated:
        logger.debug(f"{rel_path}: block limit reached, remaining windows skipped")
    return scan

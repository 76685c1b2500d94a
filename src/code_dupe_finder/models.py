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
Data models for code-dupe-finder.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple


UNKNOWN_CATEGORY = "unknown"


@dataclass(frozen=True)
class CodeBlock:
    """A fixed-size window of source lines extracted from one file."""

    file_path: str           # POSIX path relative to the scanned root
    start_line: int          # Starting line number (1-indexed)
    end_line: int            # Ending line number (inclusive)
    content: str             # The raw lines, joined with newlines
    tokens: int              # Whitespace-delimited words in the trimmed content
    fingerprint: str         # Digest of the normalized content

    @property
    def line_count(self) -> int:
        """Number of lines in this block (the window size)."""
        return self.end_line - self.start_line + 1

    @property
    def location_key(self) -> str:
        """Identity of the block's position, used for distinct-location checks."""
        return f"{self.file_path}:{self.start_line}"

    @property
    def location(self) -> str:
        """Human-readable location string."""
        return f"{self.file_path}:{self.start_line}-{self.end_line}"

    def preview(self, max_chars: int = 200) -> str:
        """Leading slice of the trimmed content."""
        return self.content.strip()[:max_chars]


@dataclass
class FileScan:
    """Blocks extracted from a single file."""

    file_path: str
    blocks: List[CodeBlock] = field(default_factory=list)
    truncated: bool = False          # True if max_blocks_per_file was hit
    error: Optional[str] = None      # Read failure, file contributed nothing


@dataclass
class IndexResult:
    """Everything the indexer produced for one root directory."""

    files: List[FileScan] = field(default_factory=list)

    @property
    def blocks(self) -> List[CodeBlock]:
        """All blocks in file-list order, then in-file scan order."""
        return [block for scan in self.files for block in scan.blocks]

    @property
    def files_scanned(self) -> int:
        return sum(1 for scan in self.files if scan.error is None)

    @property
    def skipped_files(self) -> List[Tuple[str, str]]:
        return [(scan.file_path, scan.error) for scan in self.files if scan.error is not None]

    @property
    def truncated_files(self) -> List[str]:
        return [scan.file_path for scan in self.files if scan.truncated]


@dataclass
class DuplicateGroup:
    """All blocks sharing one fingerprint, found at two or more locations."""

    fingerprint: str
    blocks: List[CodeBlock]                 # Discovery order
    category: str = UNKNOWN_CATEGORY
    suggestion: str = ""

    @property
    def count(self) -> int:
        """Number of member blocks."""
        return len(self.blocks)

    @property
    def representative(self) -> CodeBlock:
        """First discovered member; classification and previews use it."""
        return self.blocks[0]

    @property
    def line_count(self) -> int:
        return self.representative.line_count

    @property
    def token_count(self) -> int:
        return self.representative.tokens

    @property
    def impact(self) -> int:
        """Duplicated lines attributed to this group: members x lines."""
        return self.count * self.line_count

    @property
    def distinct_locations(self) -> int:
        return len({block.location_key for block in self.blocks})

    @property
    def files(self) -> List[str]:
        """Unique files in this group, in discovery order."""
        return list(dict.fromkeys(block.file_path for block in self.blocks))


@dataclass
class CategoryStats:
    """Aggregate for one pattern category."""

    category: str
    count: int = 0
    impact: int = 0


@dataclass
class AnalysisReport:
    """Ranked, classified duplicates for one run."""

    root_path: str
    groups: List[DuplicateGroup] = field(default_factory=list)
    categories: List[CategoryStats] = field(default_factory=list)
    files_scanned: int = 0
    skipped_files: List[Tuple[str, str]] = field(default_factory=list)
    truncated_files: List[str] = field(default_factory=list)
    min_lines: int = 5

    @property
    def total_patterns(self) -> int:
        return len(self.groups)

    @property
    def total_lines(self) -> int:
        """Sum of all group impacts."""
        return sum(group.impact for group in self.groups)

    @property
    def avg_duplication(self) -> float:
        """Average impact per group, rounded to one decimal."""
        if not self.groups:
            return 0.0
        return round(self.total_lines / len(self.groups), 1)

    @property
    def potential_reduction(self) -> int:
        """Lines left over if every group collapsed to a min_lines helper call."""
        return self.total_lines - len(self.groups) * self.min_lines

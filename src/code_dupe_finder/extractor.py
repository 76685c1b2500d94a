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
Block extractor - slides fixed-size windows over a file's lines.

Only the configured window sizes are checked, which keeps the number of
retained blocks bounded on large trees at the cost of missing duplicates
of other sizes.
"""

from typing import List, Optional

from .config import DupeConfig
from .fingerprint import fingerprint_code, is_code_line
from .models import CodeBlock, FileScan


MIN_BLOCK_CHARS = 100       # Cheap pre-filter against near-empty windows
MIN_CODE_LINE_RATIO = 0.5


class BlockExtractor:
    """
    Sliding-window extractor with size, token and code-line filters.

    Windows are emitted size by size (in configured order) and, within a
    size, by ascending start line. Extraction stops for the whole file once
    max_blocks_per_file blocks have been emitted.
    """

    def __init__(self, config: Optional[DupeConfig] = None):
        self.config = config or DupeConfig()

    def extract(self, content: str, file_path: str) -> FileScan:
        """Extract blocks from one file's text."""
        lines = content.split("\n")
        blocks: List[CodeBlock] = []
        truncated = False
        cap = self.config.max_blocks_per_file

        for size in self.config.block_sizes:
            # start < line_count - size: the final window is never checked
            for i in range(len(lines) - size):
                if len(blocks) >= cap:
                    truncated = True
                    break

                block = self._make_block(lines[i:i + size], i, file_path)
                if block is not None:
                    blocks.append(block)

            if truncated:
                break

        return FileScan(file_path=file_path, blocks=blocks, truncated=truncated)

    def _make_block(
        self,
        window: List[str],
        start_idx: int,
        file_path: str,
    ) -> Optional[CodeBlock]:
        """Build a block from a window, or None if any filter rejects it."""
        content = "\n".join(window)
        trimmed = content.strip()

        if len(trimmed) < MIN_BLOCK_CHARS:
            return None

        tokens = count_tokens(trimmed)
        if tokens < self.config.min_tokens:
            return None

        # Skip windows dominated by comments or imports
        code_lines = sum(1 for line in window if is_code_line(line))
        if code_lines < len(window) * MIN_CODE_LINE_RATIO:
            return None

        return CodeBlock(
            file_path=file_path,
            start_line=start_idx + 1,  # 1-indexed
            end_line=start_idx + len(window),
            content=content,
            tokens=tokens,
            fingerprint=fingerprint_code(trimmed),
        )


def count_tokens(text: str) -> int:
    """Whitespace-delimited words in text."""
    return len(text.split())


def extract_blocks(content: str, file_path: str, config: Optional[DupeConfig] = None) -> List[CodeBlock]:
    """Convenience wrapper returning just the blocks."""
    return BlockExtractor(config).extract(content, file_path).blocks

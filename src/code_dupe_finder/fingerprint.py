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
Text normalization and fingerprinting.

Purely textual: comment delimiters are matched anywhere, including inside
string and template literals. Two blocks are duplicates iff their
fingerprints match.
"""

import hashlib
import re


_LINE_COMMENT = re.compile(r"//.*$", re.MULTILINE)
_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_WHITESPACE = re.compile(r"\s+")

# Line prefixes that do not count toward a block's code-line ratio
COMMENT_PREFIXES = ("//", "/*", "*")
IMPORT_PREFIXES = ("import ", "#include ")


def normalize_code(code: str) -> str:
    """Strip comments and collapse all whitespace runs to one space."""
    normalized = _LINE_COMMENT.sub("", code)
    normalized = _BLOCK_COMMENT.sub("", normalized)
    normalized = _WHITESPACE.sub(" ", normalized)
    return normalized.strip()


def fingerprint_code(code: str) -> str:
    """Hex digest of the normalized code."""
    normalized = normalize_code(code)
    return hashlib.md5(normalized.encode("utf-8", errors="surrogatepass")).hexdigest()


def is_comment_line(line: str) -> bool:
    """Line comment, block comment opener or continuation."""
    return line.strip().startswith(COMMENT_PREFIXES)


def is_import_line(line: str) -> bool:
    return line.strip().startswith(IMPORT_PREFIXES)


def is_code_line(line: str) -> bool:
    """Neither a comment nor an import/include statement."""
    return not (is_comment_line(line) or is_import_line(line))

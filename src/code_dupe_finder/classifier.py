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
Pattern classifier - labels duplicate groups with a refactoring category.

Heuristic only: rules are tried in order against the representative
block's raw text and the first match wins, so a block showing several
traits is labelled with the highest-priority one.
"""

from typing import Callable, Iterable, List, NamedTuple, Optional, Sequence, Tuple
import re

from .models import DuplicateGroup, UNKNOWN_CATEGORY


UNKNOWN_SUGGESTION = "Consider extracting to utility function"


class PatternRule(NamedTuple):
    """One classification rule: first rule whose predicate matches wins."""
    predicate: Callable[[str], bool]
    category: str
    suggestion: str


def matches(pattern: str, flags: int = 0) -> Callable[[str], bool]:
    """Predicate that is true when the regex is found anywhere in the code."""
    compiled = re.compile(pattern, flags)

    def predicate(code: str) -> bool:
        return compiled.search(code) is not None

    predicate.__name__ = f"matches({pattern!r})"
    return predicate


DEFAULT_RULES: Tuple[PatternRule, ...] = (
    PatternRule(
        matches(r"async\s+function|async\s+\(|async\s+def\b"),
        "async-function",
        "Extract to async utility function",
    ),
    PatternRule(
        matches(r"\bfetch\(|http_api_get|http_api_post"),
        "api-call",
        "Extract to API service method",
    ),
    PatternRule(
        matches(r"\$effect\(|\$derived"),
        "reactive-state",
        "Extract to reusable reactive store/composition",
    ),
    PatternRule(
        matches(r"console\.(log|error|warn)"),
        "logging",
        "Use centralized logger utility",
    ),
    PatternRule(
        matches(r"new Date\(|\.toISOString|\.toLocaleDateString"),
        "date-manipulation",
        "Extract to date utility function",
    ),
    PatternRule(
        matches(r"\.map\(|\.filter\(|\.reduce\("),
        "array-processing",
        "Extract to data processing utility",
    ),
    # "." does not cross newlines: the condition must sit on one line
    PatternRule(
        matches(r"if\s*\(.*\)\s*\{[\s\S]*\}\s*else"),
        "conditional-logic",
        "Extract to named function for clarity",
    ),
)


def classify_code(
    code: str,
    rules: Sequence[PatternRule] = DEFAULT_RULES,
) -> Tuple[str, str]:
    """
    Classify a piece of code.

    Returns:
        (category, suggestion); ("unknown", generic suggestion) if no rule fires
    """
    for rule in rules:
        if rule.predicate(code):
            return rule.category, rule.suggestion
    return UNKNOWN_CATEGORY, UNKNOWN_SUGGESTION


def classify_group(
    group: DuplicateGroup,
    rules: Sequence[PatternRule] = DEFAULT_RULES,
) -> DuplicateGroup:
    """Set category and suggestion on a group from its representative block."""
    group.category, group.suggestion = classify_code(group.representative.content, rules)
    return group


def classify_groups(
    groups: Iterable[DuplicateGroup],
    rules: Optional[Sequence[PatternRule]] = None,
) -> List[DuplicateGroup]:
    """Classify every group in place, preserving order."""
    rules = DEFAULT_RULES if rules is None else rules
    return [classify_group(group, rules) for group in groups]

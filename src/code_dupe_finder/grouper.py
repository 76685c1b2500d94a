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
Duplicate grouper - buckets code blocks by fingerprint.

Exact-match grouping: a bucket becomes a DuplicateGroup when its blocks
come from at least two distinct file:start_line locations. Groups are
ranked by impact (members x lines), ties keeping the order in which
buckets were first seen.
"""

from typing import Dict, Iterable, List
import logging

from .models import CodeBlock, DuplicateGroup


logger = logging.getLogger(__name__)


def group_blocks(blocks: Iterable[CodeBlock]) -> List[DuplicateGroup]:
    """
    Group blocks with identical fingerprints.

    Args:
        blocks: Code blocks in file order, then in-file scan order

    Returns:
        List of DuplicateGroup objects, sorted by impact (highest first)
    """
    # dicts keep insertion order, which is the tie-break for equal impact
    buckets: Dict[str, List[CodeBlock]] = {}
    for block in blocks:
        buckets.setdefault(block.fingerprint, []).append(block)

    groups = []
    for fingerprint, members in buckets.items():
        if len(members) < 2:
            continue

        group = DuplicateGroup(fingerprint=fingerprint, blocks=members)
        if group.distinct_locations < 2:
            continue

        groups.append(group)

    logger.debug(f"Fingerprint buckets: {len(buckets)}, duplicate groups: {len(groups)}")

    # list.sort is stable
    groups.sort(key=lambda g: g.impact, reverse=True)

    return groups

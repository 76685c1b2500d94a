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
Refactoring suggester - turns a saved duplication report into stub utilities.

Works only from the report artifact, never from the source tree. The
generated TypeScript stubs are placeholders: parameter names are guessed
from identifiers in the code preview and every body throws until someone
does the actual refactor.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import logging
import re


logger = logging.getLogger(__name__)

MAX_PARAMS = 3
SUGGESTIONS_PER_TYPE = 3
STUBS_PER_FILE = 5
TEMPLATE_PREVIEW_CHARS = 500

_IDENTIFIER = re.compile(r"\b([a-z][a-zA-Z0-9]*)\b")
_NOT_PARAMS = {"const", "let", "var", "function", "if", "else", "return"}

FUNCTION_NAMES = {
    "async-function": "runAsyncTask",
    "api-call": "requestApi",
    "reactive-state": "createReactiveState",
    "logging": "logMessage",
    "date-manipulation": "formatDate",
    "array-processing": "transformItems",
    "conditional-logic": "resolveCondition",
}
DEFAULT_FUNCTION_NAME = "utilityFunction"

TARGET_FILES = {
    "async-function": "async-utils.ts",
    "api-call": "api-utils.ts",
    "reactive-state": "reactive-utils.ts",
    "logging": "logger.ts",
    "date-manipulation": "date-utils.ts",
    "array-processing": "array-utils.ts",
    "conditional-logic": "conditional-utils.ts",
}
DEFAULT_TARGET_FILE = "misc-utils.ts"


@dataclass
class UtilityStub:
    """A generated placeholder function for one duplicate group."""
    function_name: str
    params: List[str]
    code: str


def group_by_type(report: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    """Duplicates keyed by pattern type, in first-seen order."""
    by_type: Dict[str, List[Dict[str, Any]]] = {}
    for dup in report.get("duplicates", []):
        by_type.setdefault(dup.get("type", "unknown"), []).append(dup)
    return by_type


def extract_parameters(code: str, limit: int = MAX_PARAMS) -> List[str]:
    """First few distinct lowercase identifiers, as placeholder parameters."""
    variables = []
    for match in _IDENTIFIER.finditer(code):
        name = match.group(1)
        if name not in _NOT_PARAMS and name not in variables:
            variables.append(name)
            if len(variables) >= limit:
                break
    return variables


def generate_function_name(pattern_type: str, index: int) -> str:
    """Base name for the pattern plus a 1-based index."""
    base_name = FUNCTION_NAMES.get(pattern_type, DEFAULT_FUNCTION_NAME)
    return f"{base_name}{index + 1}"


def target_utility_file(pattern_type: str, utils_dir: str = "src/lib/utils") -> str:
    filename = TARGET_FILES.get(pattern_type, DEFAULT_TARGET_FILE)
    return f"{utils_dir.rstrip('/')}/{filename}"


def generate_utility_function(dup: Dict[str, Any], index: int) -> UtilityStub:
    """Build a stub function for one duplicate entry of the report."""
    code = dup.get("code", "")
    function_name = generate_function_name(dup.get("type", "unknown"), index)
    params = extract_parameters(code)

    parts = [f"/**\n * {dup.get('suggestion', '')}\n"]
    parts.append(" * Auto-generated from duplicate code analysis\n")
    parts.append(" * Found in:\n")
    for loc in dup.get("locations", []):
        parts.append(f" *   - {loc['file']}:{loc['startLine']}\n")
    parts.append(" */\n")

    modifier = "async function" if "async " in code else "function"
    parts.append(f"export {modifier} {function_name}({', '.join(params)}) {{\n")
    parts.append("  // TODO: Refactor this code\n")
    parts.append("  // Original code:\n")
    for line in code.split("\n"):
        parts.append(f"  // {line}\n")
    parts.append("\n  throw new Error('Not implemented - refactor needed');\n")
    parts.append("}\n\n")

    return UtilityStub(function_name=function_name, params=params, code="".join(parts))


def generate_utility_templates(
    report: Dict[str, Any],
    generated_at: Optional[datetime] = None,
) -> Dict[str, str]:
    """One template file per pattern type, keyed by file name."""
    generated_at = generated_at or datetime.now()
    templates = {}

    for pattern_type, dups in group_by_type(report).items():
        filename = TARGET_FILES.get(pattern_type, DEFAULT_TARGET_FILE)
        content = f"/**\n * {pattern_type} Utilities\n"
        content += " * Auto-generated utility functions to reduce code duplication\n"
        content += f" * Generated: {generated_at.isoformat()}\n */\n\n"

        for index, dup in enumerate(dups[:STUBS_PER_FILE]):
            content += generate_utility_function(dup, index).code

        # Types without their own file share misc-utils.ts
        templates[filename] = templates.get(filename, "") + content

    return templates


def format_suggestions(
    report: Dict[str, Any],
    utils_dir: str = "src/lib/utils",
    templates: Optional[Dict[str, str]] = None,
) -> str:
    """Console view of suggested utilities, grouped by pattern type."""
    rule = "=" * 80
    lines = ["", rule, "🔧 REFACTORING SUGGESTIONS", rule, ""]

    for pattern_type, dups in group_by_type(report).items():
        lines.append("")
        lines.append(f"📁 {pattern_type.upper()}")
        lines.append("-" * 80)
        lines.append(f"Suggested location: {target_utility_file(pattern_type, utils_dir)}")
        lines.append("")

        for index, dup in enumerate(dups[:SUGGESTIONS_PER_TYPE]):
            stub = generate_utility_function(dup, index)
            lines.append(f"Function: {stub.function_name}({', '.join(stub.params)})")
            lines.append(f"Impact: {dup.get('impact', 0)} lines")
            lines.append(f"Occurrences: {dup.get('count', 0)}")
            lines.append("")

    if templates is None:
        templates = generate_utility_templates(report)

    lines.extend(["", rule, "📝 UTILITY FILE TEMPLATES", rule, ""])
    for filename, content in templates.items():
        lines.append("")
        lines.append(f"🗂️  {filename}")
        lines.append("-" * 80)
        lines.append(content[:TEMPLATE_PREVIEW_CHARS])
        lines.append("...")
        lines.append("")
        lines.append(f"💾 Would create: {Path(utils_dir) / filename}")
        lines.append("")

    return "\n".join(lines)


def create_utility_files(
    templates: Dict[str, str],
    utils_dir: Path,
    dry_run: bool = True,
) -> List[Tuple[Path, str]]:
    """
    Write template files into utils_dir. Existing files are never overwritten.

    Returns:
        (path, status) pairs; status is "created", "would create" or "exists"
    """
    utils_dir = Path(utils_dir)
    results = []

    if not utils_dir.exists() and not dry_run:
        logger.info(f"Creating directory: {utils_dir}")
        utils_dir.mkdir(parents=True, exist_ok=True)

    for filename, content in templates.items():
        target_path = utils_dir / filename

        if target_path.exists():
            logger.warning(f"File exists: {target_path} (skipping)")
            results.append((target_path, "exists"))
        elif dry_run:
            results.append((target_path, "would create"))
        else:
            target_path.write_text(content, encoding="utf-8")
            results.append((target_path, "created"))

    return results

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
Report generator - aggregates duplicate groups and formats them for output.

Supports text, markdown, and json output formats. The JSON form is also the
persisted artifact read back by the suggester, so it carries no timestamps
and is byte-identical across runs over the same tree.
"""

from typing import Any, Dict, List, Optional, Sequence
from enum import Enum
import json

from .config import DupeConfig
from .models import AnalysisReport, CategoryStats, DuplicateGroup, IndexResult


class OutputFormat(Enum):
    TEXT = "text"
    MARKDOWN = "markdown"
    JSON = "json"


def build_report(
    groups: Sequence[DuplicateGroup],
    root_path: str,
    index: Optional[IndexResult] = None,
    config: Optional[DupeConfig] = None,
) -> AnalysisReport:
    """
    Assemble the final report from ranked, classified groups.

    Args:
        groups: Duplicate groups, already sorted by impact
        root_path: Scanned root (for display only)
        index: Indexer output, for file-level statistics
        config: Run configuration
    """
    config = config or DupeConfig()
    report = AnalysisReport(
        root_path=str(root_path),
        groups=list(groups),
        categories=category_stats(groups),
        min_lines=config.min_lines,
    )

    if index is not None:
        report.files_scanned = index.files_scanned
        report.skipped_files = index.skipped_files
        report.truncated_files = index.truncated_files

    return report


def category_stats(groups: Sequence[DuplicateGroup]) -> List[CategoryStats]:
    """Per-category count and impact, by impact descending (stable)."""
    stats: Dict[str, CategoryStats] = {}
    for group in groups:
        entry = stats.setdefault(group.category, CategoryStats(category=group.category))
        entry.count += 1
        entry.impact += group.impact

    return sorted(stats.values(), key=lambda s: s.impact, reverse=True)


def report_groups(
    report: AnalysisReport,
    output_format: OutputFormat = OutputFormat.TEXT,
    config: Optional[DupeConfig] = None,
) -> str:
    """
    Render a report.

    Args:
        report: AnalysisReport to render
        output_format: Desired output format
        config: Supplies top_n and preview lengths

    Returns:
        Formatted report string
    """
    config = config or DupeConfig()

    if output_format == OutputFormat.TEXT:
        return _format_text(report, config)
    elif output_format == OutputFormat.MARKDOWN:
        return _format_markdown(report, config)
    elif output_format == OutputFormat.JSON:
        return format_artifact(report, config)
    else:
        raise ValueError(f"Unknown format: {output_format}")


def _format_text(report: AnalysisReport, config: DupeConfig) -> str:
    """Console view: summary, top groups in full, category priorities."""
    lines = []
    rule = "=" * 80

    lines.append("")
    lines.append(rule)
    lines.append("📊 DUPLICATE CODE ANALYSIS REPORT")
    lines.append(rule)
    lines.append("")

    if not report.groups:
        lines.append("✅ No significant code duplication found!")
        lines.append("")
        lines.extend(_truncation_notes(report))
        return "\n".join(lines)

    lines.append(f"Found {report.total_patterns} duplicate code patterns")
    lines.append("")

    lines.append("📈 Summary:")
    lines.append(f"   Files scanned: {report.files_scanned}")
    lines.append(f"   Total duplicated lines: {report.total_lines}")
    lines.append(f"   Average duplication per pattern: {report.avg_duplication:.1f} lines")
    lines.append(f"   Potential lines to reduce: {report.potential_reduction}")
    lines.append("")

    lines.append(f"🔝 Top {config.top_n} Duplication Issues (by impact):")
    lines.append("")

    for index, group in enumerate(report.groups[:config.top_n], start=1):
        lines.append(f"{index}. {group.category.upper()}")
        lines.append(
            f"   Impact: {group.count} occurrences × {group.line_count} lines"
            f" = {group.impact} total lines"
        )
        lines.append(f"   Suggestion: {group.suggestion}")
        lines.append("   Locations:")
        for block in group.blocks:
            lines.append(f"     - {block.location}")

        lines.append("   Code preview:")
        preview = group.representative.preview(config.console_preview_chars)
        lines.append("     " + preview.replace("\n", "\n     ") + "...")
        lines.append("")

    lines.append("🎯 Refactoring Priorities by Pattern:")
    lines.append("")
    for stats in report.categories:
        lines.append(f"   {stats.category}: {stats.count} patterns, {stats.impact} line impact")
    lines.append("")

    lines.extend(_truncation_notes(report))

    lines.append(rule)
    lines.append("💡 Next Steps:")
    lines.append("   1. Review the top duplicates above")
    lines.append(f"   2. Create utility functions in {config.utils_dir}/")
    lines.append("   3. Extract common patterns to reusable modules (cdf suggest)")
    lines.append("   4. Run this analysis again to verify improvements")
    lines.append(rule)

    return "\n".join(lines)


def _truncation_notes(report: AnalysisReport) -> List[str]:
    lines = []
    if report.skipped_files:
        lines.append(f"⚠️  {len(report.skipped_files)} files could not be read:")
        for path, error in report.skipped_files:
            lines.append(f"     - {path}: {error}")
        lines.append("")
    if report.truncated_files:
        lines.append(f"⚠️  Block limit reached in {len(report.truncated_files)} files (partial scan):")
        for path in report.truncated_files:
            lines.append(f"     - {path}")
        lines.append("")
    return lines


def _format_markdown(report: AnalysisReport, config: DupeConfig) -> str:
    """Markdown format for documentation."""
    lines = []

    lines.append("# Duplicate Code Report")
    lines.append("")
    lines.append(f"**Path:** `{report.root_path}`  ")
    lines.append(f"**Files Scanned:** {report.files_scanned}  ")
    lines.append(f"**Patterns Found:** {report.total_patterns}  ")
    lines.append(f"**Total Duplicated Lines:** {report.total_lines}  ")
    lines.append(f"**Average Duplication:** {report.avg_duplication:.1f} lines")
    lines.append("")

    if report.categories:
        lines.append("## Priorities by Pattern")
        lines.append("")
        lines.append("| Pattern | Groups | Line Impact |")
        lines.append("|---------|--------|-------------|")
        for stats in report.categories:
            lines.append(f"| {stats.category} | {stats.count} | {stats.impact} |")
        lines.append("")

    if report.truncated_files:
        lines.append("## Partially Scanned Files")
        lines.append("")
        for path in report.truncated_files:
            lines.append(f"- `{path}`")
        lines.append("")

    lines.append("---")
    lines.append("")

    for index, group in enumerate(report.groups, start=1):
        lines.append(f"## {index}. {group.category} ({group.impact} lines)")
        lines.append("")
        lines.append(
            f"**{group.count} occurrences** × **{group.line_count} lines** "
            f"across **{len(group.files)} files**"
        )
        lines.append("")
        lines.append(f"**Suggestion:** {group.suggestion}")
        lines.append("")

        lines.append("| File | Lines |")
        lines.append("|------|-------|")
        for block in group.blocks:
            lines.append(f"| `{block.file_path}` | {block.start_line}-{block.end_line} |")
        lines.append("")

        lines.append("```")
        lines.append(group.representative.preview(config.preview_chars))
        lines.append("```")
        lines.append("")

    return "\n".join(lines)


def to_artifact(report: AnalysisReport, config: Optional[DupeConfig] = None) -> Dict[str, Any]:
    """Structured report: every group, with the code preview capped."""
    config = config or DupeConfig()
    return {
        "summary": {
            "totalPatterns": report.total_patterns,
            "totalLines": report.total_lines,
            "avgDuplication": report.avg_duplication,
            "filesScanned": report.files_scanned,
            "filesSkipped": len(report.skipped_files),
        },
        "categories": [
            {"type": s.category, "count": s.count, "impact": s.impact}
            for s in report.categories
        ],
        "truncatedFiles": list(report.truncated_files),
        "duplicates": [
            {
                "type": group.category,
                "suggestion": group.suggestion,
                "impact": group.impact,
                "count": group.count,
                "lines": group.line_count,
                "locations": [
                    {
                        "file": block.file_path,
                        "startLine": block.start_line,
                        "endLine": block.end_line,
                    }
                    for block in group.blocks
                ],
                "code": group.representative.preview(config.preview_chars),
            }
            for group in report.groups
        ],
    }


def format_artifact(report: AnalysisReport, config: Optional[DupeConfig] = None) -> str:
    """JSON text of the artifact, stable key order, trailing newline."""
    return json.dumps(to_artifact(report, config), indent=2, ensure_ascii=False) + "\n"


def summary_lines(artifact: Dict[str, Any]) -> List[str]:
    """Short summary of a loaded artifact, for `cdf view`."""
    summary = artifact.get("summary", {})
    lines = [
        f"Total patterns: {summary.get('totalPatterns', 0)}",
        f"Total duplicated lines: {summary.get('totalLines', 0)}",
        f"Average duplication: {summary.get('avgDuplication', 0)} lines",
    ]
    truncated = artifact.get("truncatedFiles") or []
    if truncated:
        lines.append(f"Partially scanned files: {len(truncated)}")
    return lines


def extension_format(suffix: str) -> Optional[OutputFormat]:
    """Map an output file extension to a format."""
    return EXTENSION_FORMAT_MAP.get(suffix.lower())


EXTENSION_FORMAT_MAP = {
    ".md": OutputFormat.MARKDOWN,
    ".txt": OutputFormat.TEXT,
    ".json": OutputFormat.JSON,
}

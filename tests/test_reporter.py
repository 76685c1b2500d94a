"""Tests for report aggregation and rendering."""

import json

import pytest

from code_dupe_finder.config import DupeConfig
from code_dupe_finder.models import CodeBlock, DuplicateGroup, FileScan, IndexResult
from code_dupe_finder.reporter import (
    OutputFormat,
    build_report,
    category_stats,
    extension_format,
    format_artifact,
    report_groups,
    summary_lines,
    to_artifact,
)


def make_group(fp, category, count, size, content="const value = compute(input);"):
    blocks = [
        CodeBlock(f"f{i}.ts", 10 * i + 1, 10 * i + size, content, 60, fp)
        for i in range(count)
    ]
    return DuplicateGroup(fingerprint=fp, blocks=blocks, category=category, suggestion=f"fix {category}")


@pytest.fixture
def groups():
    return [
        make_group("a", "logging", 3, 10),            # 30
        make_group("b", "api-call", 2, 10),           # 20
        make_group("c", "logging", 2, 5),             # 10
        make_group("d", "unknown", 2, 5),             # 10
    ]


class TestAggregates:

    def test_summary(self, groups):
        report = build_report(groups, "src")
        assert report.total_patterns == 4
        assert report.total_lines == 70
        assert report.avg_duplication == 17.5
        assert report.potential_reduction == 70 - 4 * 5

    def test_avg_rounded_to_one_decimal(self):
        report = build_report([make_group("a", "x", 2, 5), make_group("b", "x", 2, 5), make_group("c", "x", 3, 5)], "src")
        assert report.avg_duplication == round(35 / 3, 1)

    def test_empty(self):
        report = build_report([], "src")
        assert report.total_lines == 0
        assert report.avg_duplication == 0.0

    def test_category_stats_sorted_by_impact(self, groups):
        stats = category_stats(groups)
        assert [(s.category, s.count, s.impact) for s in stats] == [
            ("logging", 2, 40),
            ("api-call", 1, 20),
            ("unknown", 1, 10),
        ]

    def test_index_statistics(self, groups):
        index = IndexResult(files=[
            FileScan("a.ts", truncated=True),
            FileScan("b.ts"),
            FileScan("c.ts", error="Permission denied"),
        ])
        report = build_report(groups, "src", index=index)
        assert report.files_scanned == 2
        assert report.truncated_files == ["a.ts"]
        assert report.skipped_files == [("c.ts", "Permission denied")]


class TestArtifact:

    def test_shape(self, groups):
        artifact = to_artifact(build_report(groups, "src"))
        assert artifact["summary"] == {
            "totalPatterns": 4,
            "totalLines": 70,
            "avgDuplication": 17.5,
            "filesScanned": 0,
            "filesSkipped": 0,
        }
        first = artifact["duplicates"][0]
        assert first["type"] == "logging"
        assert first["suggestion"] == "fix logging"
        assert (first["impact"], first["count"], first["lines"]) == (30, 3, 10)
        assert first["locations"][1] == {"file": "f1.ts", "startLine": 11, "endLine": 20}
        assert artifact["categories"][0] == {"type": "logging", "count": 2, "impact": 40}
        assert artifact["truncatedFiles"] == []

    def test_contains_every_group(self):
        many = [make_group(str(i), "unknown", 2, 5) for i in range(25)]
        assert len(to_artifact(build_report(many, "src"))["duplicates"]) == 25

    def test_code_preview_capped(self):
        long_code = "x" * 1000
        report = build_report([make_group("a", "unknown", 2, 5, content=long_code)], "src")
        assert len(to_artifact(report)["duplicates"][0]["code"]) == 200
        config = DupeConfig(preview_chars=50)
        assert len(to_artifact(report, config)["duplicates"][0]["code"]) == 50

    def test_json_is_stable(self, groups):
        text = format_artifact(build_report(groups, "src"))
        assert text == format_artifact(build_report(groups, "src"))
        assert text.endswith("\n")
        assert json.loads(text)["summary"]["totalLines"] == 70


class TestTextReport:

    def test_top_n_only(self):
        many = [make_group(str(i), "unknown", 2, 5) for i in range(15)]
        text = report_groups(build_report(many, "src"), OutputFormat.TEXT)
        assert "10. UNKNOWN" in text
        assert "11. UNKNOWN" not in text

    def test_group_detail(self, groups):
        text = report_groups(build_report(groups, "src"), OutputFormat.TEXT)
        assert "1. LOGGING" in text
        assert "Impact: 3 occurrences × 10 lines = 30 total lines" in text
        assert "     - f2.ts:21-30" in text
        assert "Potential lines to reduce: 50" in text
        assert "logging: 2 patterns, 40 line impact" in text

    def test_empty_message(self):
        text = report_groups(build_report([], "src"), OutputFormat.TEXT)
        assert "No significant code duplication found!" in text

    def test_truncation_is_visible(self, groups):
        index = IndexResult(files=[FileScan("big.ts", truncated=True)])
        text = report_groups(build_report(groups, "src", index=index), OutputFormat.TEXT)
        assert "Block limit reached in 1 files" in text
        assert "big.ts" in text

    def test_markdown(self, groups):
        text = report_groups(build_report(groups, "src"), OutputFormat.MARKDOWN)
        assert text.startswith("# Duplicate Code Report")
        assert "| logging | 2 | 40 |" in text
        assert "| `f0.ts` | 1-10 |" in text


class TestHelpers:

    def test_extension_format(self):
        assert extension_format(".MD") is OutputFormat.MARKDOWN
        assert extension_format(".json") is OutputFormat.JSON
        assert extension_format(".html") is None

    def test_summary_lines(self):
        lines = summary_lines({
            "summary": {"totalPatterns": 2, "totalLines": 30, "avgDuplication": 15.0},
            "truncatedFiles": ["a.ts"],
        })
        assert lines == [
            "Total patterns: 2",
            "Total duplicated lines: 30",
            "Average duplication: 15.0 lines",
            "Partially scanned files: 1",
        ]

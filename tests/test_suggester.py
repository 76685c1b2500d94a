"""Tests for utility stub generation from a saved report."""

from datetime import datetime

import pytest

from code_dupe_finder.suggester import (
    create_utility_files,
    extract_parameters,
    format_suggestions,
    generate_function_name,
    generate_utility_function,
    generate_utility_templates,
    group_by_type,
    target_utility_file,
)


def dup(pattern_type, code, impact=20, locations=None):
    return {
        "type": pattern_type,
        "suggestion": f"Extract {pattern_type}",
        "impact": impact,
        "count": 2,
        "lines": 10,
        "locations": locations or [
            {"file": "a.ts", "startLine": 3, "endLine": 12},
            {"file": "b.ts", "startLine": 40, "endLine": 49},
        ],
        "code": code,
    }


@pytest.fixture
def report():
    return {
        "summary": {"totalPatterns": 3, "totalLines": 60, "avgDuplication": 20.0},
        "duplicates": [
            dup("api-call", "const res = await fetch(url);"),
            dup("logging", "console.log(message);"),
            dup("api-call", "const body = await fetch(endpoint).then(r => r.json());"),
        ],
    }


class TestNaming:

    def test_extract_parameters(self):
        code = "const total = items.reduce((sum, item) => sum + item.price, 0);"
        assert extract_parameters(code) == ["total", "items", "reduce"]

    def test_extract_parameters_skips_keywords_and_duplicates(self):
        assert extract_parameters("if (x) { return x; } else { let y = x; }") == ["x", "y"]

    def test_extract_parameters_ignores_capitalized(self):
        assert extract_parameters("new Date(Value)") == ["new"]

    def test_function_name(self):
        assert generate_function_name("logging", 0) == "logMessage1"
        assert generate_function_name("api-call", 2) == "requestApi3"
        assert generate_function_name("unknown", 0) == "utilityFunction1"

    def test_target_file(self):
        assert target_utility_file("date-manipulation") == "src/lib/utils/date-utils.ts"
        assert target_utility_file("unknown", "lib/") == "lib/misc-utils.ts"


class TestGenerateUtilityFunction:

    def test_stub(self):
        stub = generate_utility_function(dup("logging", "console.log(message);"), 0)
        assert stub.function_name == "logMessage1"
        assert stub.params == ["console", "log", "message"]
        assert "export function logMessage1(console, log, message) {" in stub.code
        assert " *   - a.ts:3\n" in stub.code
        assert " *   - b.ts:40\n" in stub.code
        assert "  // console.log(message);\n" in stub.code
        assert "throw new Error('Not implemented - refactor needed');" in stub.code

    def test_async_modifier(self):
        stub = generate_utility_function(dup("async-function", "const run = async (id) => id;"), 1)
        assert "export async function runAsyncTask2(" in stub.code


class TestTemplates:

    def test_one_file_per_type(self, report):
        templates = generate_utility_templates(report, generated_at=datetime(2025, 1, 2, 3, 4, 5))
        assert list(templates) == ["api-utils.ts", "logger.ts"]
        assert "requestApi1" in templates["api-utils.ts"]
        assert "requestApi2" in templates["api-utils.ts"]
        assert " * Generated: 2025-01-02T03:04:05\n" in templates["logger.ts"]

    def test_at_most_five_stubs_per_file(self):
        many = {"duplicates": [dup("logging", f"console.log(v{i});") for i in range(8)]}
        content = generate_utility_templates(many)["logger.ts"]
        assert "logMessage5(" in content
        assert "logMessage6(" not in content

    def test_group_by_type_keeps_first_seen_order(self, report):
        assert list(group_by_type(report)) == ["api-call", "logging"]

    def test_format_suggestions(self, report):
        text = format_suggestions(report, "src/lib/utils")
        assert "📁 API-CALL" in text
        assert "Suggested location: src/lib/utils/api-utils.ts" in text
        assert "Function: requestApi1(res, await, fetch)" in text
        assert "Occurrences: 2" in text

    def test_empty_report(self):
        assert generate_utility_templates({"duplicates": []}) == {}


class TestCreateUtilityFiles:

    def test_creates_files(self, tmp_path):
        utils = tmp_path / "src" / "lib" / "utils"
        results = create_utility_files({"logger.ts": "// log"}, utils, dry_run=False)
        assert results == [(utils / "logger.ts", "created")]
        assert (utils / "logger.ts").read_text() == "// log"

    def test_never_overwrites(self, tmp_path):
        (tmp_path / "logger.ts").write_text("hand written")
        results = create_utility_files({"logger.ts": "// log", "api-utils.ts": "// api"}, tmp_path, dry_run=False)
        assert results == [(tmp_path / "logger.ts", "exists"), (tmp_path / "api-utils.ts", "created")]
        assert (tmp_path / "logger.ts").read_text() == "hand written"

    def test_dry_run_writes_nothing(self, tmp_path):
        utils = tmp_path / "utils"
        results = create_utility_files({"logger.ts": "// log"}, utils, dry_run=True)
        assert results == [(utils / "logger.ts", "would create")]
        assert not utils.exists()

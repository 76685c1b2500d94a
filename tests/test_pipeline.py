"""End-to-end analysis over a small tree."""

import pytest

from code_dupe_finder.config import DupeConfig
from code_dupe_finder.pipeline import run_analysis
from code_dupe_finder.reporter import format_artifact, to_artifact


SHARED = [
    "export async function loadUser(id) {",
    "  const response = await fetch(`/api/users/${id}`, { method: 'GET' });",
    "  if (!response.ok) throw new Error(`Failed to load user ${id}`);",
    "  const payload = await response.json();",
    "  return { id: payload.id, name: payload.name, email: payload.email };",
    "}",
]


def unique(tag, count):
    return [f"const {tag}{n} = compute('{tag}', {n}) + offset * factor - bias;" for n in range(count)]


@pytest.fixture
def project(tmp_path):
    src = tmp_path / "src"
    (src / "routes").mkdir(parents=True)
    (src / "routes" / "users.ts").write_text("\n".join(unique("u", 4) + SHARED + unique("v", 3)))
    (src / "routes" / "admin.ts").write_text("\n".join(unique("a", 9) + SHARED + unique("b", 2)))
    (src / "lib.js").write_text("\n".join(unique("l", 20)))
    return src


class TestRunAnalysis:

    def test_finds_shared_function(self, project):
        report = run_analysis(project, DupeConfig(block_sizes=(5,), min_tokens=20))
        assert report.files_scanned == 3
        assert report.groups
        files = {block.file_path for group in report.groups for block in group.blocks}
        assert files == {"routes/admin.ts", "routes/users.ts"}
        assert report.groups[0].category == "async-function"

    def test_ranked_by_impact(self, project):
        report = run_analysis(project, DupeConfig(block_sizes=(5,), min_tokens=20))
        impacts = [g.impact for g in report.groups]
        assert impacts == sorted(impacts, reverse=True)

    def test_deterministic(self, project):
        config = DupeConfig(block_sizes=(5,), min_tokens=20, workers=3)
        first = format_artifact(run_analysis(project, config), config)
        second = format_artifact(run_analysis(project, config), config)
        assert first == second

    def test_nothing_found(self, tmp_path):
        (tmp_path / "only.ts").write_text("\n".join(unique("x", 12)))
        artifact = to_artifact(run_analysis(tmp_path))
        assert artifact["duplicates"] == []
        assert artifact["summary"]["totalPatterns"] == 0
        assert artifact["summary"]["avgDuplication"] == 0.0

from __future__ import annotations

from datetime import datetime

from repo_insights.models import DependencySummary, FunFacts, OverviewSummary
from repo_insights.sources.dependencies import collect_dependencies
from repo_insights.sources.fun_facts import derive_fun_facts
from repo_insights.sources.overview import collect_overview


def _overview(**overrides) -> OverviewSummary:
    values = dict(
        project_name="demo",
        first_commit="2024-01-01",
        latest_commit="2024-01-11",
        total_commits=40,
        total_branches=2,
        total_tags=1,
        total_files=10,
        total_source_files=5,
        total_lines_of_code=1_000,
        total_characters=400_000,
        collected_at="2024-01-12T00:00:00+00:00",
    )
    values.update(overrides)
    return OverviewSummary(**values)


def test_collect_overview(fake_history) -> None:
    fake_history.responses.update({
        ("log", "--reverse", "--format=%ad", "--date=short"): "2023-05-01\n2023-05-02\n2024-02-10",
        ("log", "-1", "--format=%ad", "--date=short"): "2024-02-10",
        ("rev-list", "--count", "HEAD"): "3\n",
        ("branch", "-a"): "* main\n  feature/x\n  remotes/origin/main\n",
        ("tag",): "v1.0\n",
        ("ls-files",): "README.md\nsrc/a.py\nsrc/b.py\nsrc/missing.py\n",
    })
    fake_history.files.update({"src/a.py": "print(1)\n", "src/b.py": "x = 1"})

    overview = collect_overview(fake_history)

    assert overview.project_name == "sample-project"
    assert overview.first_commit == "2023-05-01"
    assert overview.latest_commit == "2024-02-10"
    assert overview.total_commits == 3
    assert overview.total_branches == 3
    assert overview.total_tags == 1
    assert overview.total_files == 4
    assert overview.total_source_files == 3
    assert overview.total_source_files <= overview.total_files
    assert overview.total_lines_of_code == 3
    assert overview.total_characters == 14
    assert datetime.fromisoformat(overview.collected_at).tzinfo is not None


def test_project_name_from_manifests(fake_history) -> None:
    fake_history.files["pyproject.toml"] = '[project]\nname = "py-demo"\n'
    assert collect_overview(fake_history).project_name == "py-demo"

    fake_history.files["package.json"] = '{"name": "js-demo"}'
    assert collect_overview(fake_history).project_name == "js-demo"


def test_project_name_ignores_broken_manifest(fake_history) -> None:
    fake_history.files["package.json"] = "{not json"

    assert collect_overview(fake_history).project_name == "sample-project"


def test_fun_facts() -> None:
    facts = derive_fun_facts(_overview())

    assert facts == FunFacts(
        printed_pages=20,
        total_words=80_000,
        novel_equivalent=1.0,
        typing_hours=22,
        avg_commit_size=25,
        lines_per_day=100,
    )


def test_fun_facts_floor_project_age_to_one_day() -> None:
    facts = derive_fun_facts(_overview(latest_commit="2024-01-01", total_commits=0))

    assert facts.lines_per_day == 1_000
    assert facts.avg_commit_size == 0


def test_fun_facts_without_overview() -> None:
    assert derive_fun_facts(None) == FunFacts()
    assert derive_fun_facts(_overview(first_commit="", latest_commit="")).lines_per_day == 1_000


def test_dependencies_from_package_json(fake_history) -> None:
    fake_history.files["package.json"] = (
        '{"dependencies": {"react": "^18", "zod": "3"}, "devDependencies": {"vitest": "1"}}'
    )

    assert collect_dependencies(fake_history) == DependencySummary(
        manifest="package.json",
        production=2,
        dev=1,
        total=3,
        top_deps=("react", "zod"),
        top_dev_deps=("vitest",),
    )


def test_dependencies_from_pyproject(fake_history) -> None:
    fake_history.files["pyproject.toml"] = (
        "[project]\n"
        'dependencies = ["click>=8.1", "PyYAML", "python-dotenv[cli] ; python_version > \'3.8\'"]\n'
        "[project.optional-dependencies]\n"
        'test = ["pytest>=7"]\n'
        'docs = ["mkdocs"]\n'
    )

    summary = collect_dependencies(fake_history)

    assert summary.manifest == "pyproject.toml"
    assert summary.top_deps == ("click", "PyYAML", "python-dotenv")
    assert summary.top_dev_deps == ("pytest", "mkdocs")
    assert summary.total == 5


def test_dependencies_truncate_top_lists(fake_history) -> None:
    deps = ", ".join(f'"dep{i}": "1"' for i in range(25))
    fake_history.files["package.json"] = f'{{"dependencies": {{{deps}}}}}'

    summary = collect_dependencies(fake_history)

    assert summary.production == 25
    assert len(summary.top_deps) == 20


def test_dependencies_without_manifest(fake_history) -> None:
    assert collect_dependencies(fake_history) == DependencySummary()


def test_dependencies_with_broken_manifest(fake_history) -> None:
    fake_history.files["package.json"] = "[1, 2"

    assert collect_dependencies(fake_history) == DependencySummary()


def test_dependencies_with_undecodable_manifest(fake_history, monkeypatch) -> None:
    def read_text(path: str) -> str:
        raise UnicodeDecodeError("utf-8", b"\xe9", 0, 1, "invalid continuation byte")

    monkeypatch.setattr(fake_history, "read_text", read_text)

    assert collect_dependencies(fake_history) == DependencySummary()

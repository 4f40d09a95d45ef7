from __future__ import annotations

import pytest

from repo_insights.models import MessagePattern, Milestone
from repo_insights.sources.messages import (
    classify_message,
    collect_commit_message_patterns,
    collect_milestones,
    compute_message_patterns,
    humanize_branch,
    parse_milestone,
)


@pytest.mark.parametrize(
    ("subject", "label"),
    [
        ("Merge branch 'main' into dev", "Merges"),
        ("Merge: fix the thing", "Merges"),
        ("CR feedback on parser", "Code Review"),
        ("Fixed crash on startup", "Bug Fixes"),
        ("Add new endpoint but fix typo", "Bug Fixes"),
        ("feat: dark mode", "Features"),
        ("Implemented export", "Features"),
        ("Optimize query planner", "Performance"),
        ("perf(db): index users", "Performance"),
        ("Update README wording", "Improvements"),
        ("Refactor session handling", "Refactoring"),
        ("Remove dead code", "Refactoring"),
        ("Validate input payloads", "Security"),
        ("More tests for parser", "Testing"),
        ("docs for config", "Docs"),
        ("bump version to 2.0", "Improvements"),
        ("run prettier formatting", "Improvements"),
        ("wip", "Other"),
    ],
)
def test_classify_message(subject: str, label: str) -> None:
    assert classify_message(subject) == label


def test_message_patterns_scenario() -> None:
    result = compute_message_patterns(["Fix login bug", "Add search feature", "Merge pull request #4"])

    assert {p.type: p.count for p in result} == {"Bug Fixes": 1, "Features": 1, "Merges": 1}
    # equal counts keep the display order
    assert [p.type for p in result] == ["Features", "Bug Fixes", "Merges"]


def test_message_patterns_counts_every_message_once() -> None:
    messages = [
        "Fix a", "fix b", "Add c", "misc", "Merge d", "", "   ",
        "Refactor e", "update deps", "chore: lint", "test: more", "README",
    ]

    result = compute_message_patterns(messages)

    assert sum(p.count for p in result) == len([m for m in messages if m.strip()])
    assert all(p.count > 0 for p in result)
    assert [p.count for p in result] == sorted((p.count for p in result), reverse=True)
    assert result[0] == MessagePattern(type="Bug Fixes", count=2)


def test_collect_commit_message_patterns(fake_history) -> None:
    fake_history.responses[("log", "--format=%s")] = "Fix a\nFix b\nwhatever\n"

    assert collect_commit_message_patterns(fake_history) == (
        MessagePattern("Bug Fixes", 2),
        MessagePattern("Other", 1),
    )


@pytest.mark.parametrize(
    ("branch", "label"),
    [
        ("add-api-v2", "Add API v2"),
        ("fix_cve_scan", "Fix CVE Scan"),
        ("e2e-tests", "E2E Tests"),
        ("ux-polish", "UX Polish"),
        ("aws-s3-upload", "AWS S3 Upload"),
        ("llm-ai-helpers", "LLM AI Helpers"),
        ("Already-Capitalised", "Already Capitalised"),
        ("über-feature", "üBer Feature"),
        ("_wip", " Wip"),
    ],
)
def test_humanize_branch(branch: str, label: str) -> None:
    assert humanize_branch(branch) == label


def test_parse_milestone() -> None:
    line = "2024-03-02\tMerge pull request #42 from octo/search-api"

    assert parse_milestone(line) == Milestone(date="2024-03-02", pr=42, branch="search-api", label="Search API")


def test_parse_milestone_drops_unresolvable_entries() -> None:
    assert parse_milestone("2024-03-02\tMerge branch 'main'") is None
    assert parse_milestone("2024-03-02\tMerge pull request #7") is None
    assert parse_milestone("2024-03-02\tMerge pull request #8 from octo/--") is None


def test_parse_milestone_keeps_label_spacing() -> None:
    line = "2024-03-02\tMerge pull request #9 from octo/_wip"

    assert parse_milestone(line) == Milestone(date="2024-03-02", pr=9, branch="_wip", label=" Wip")


def test_collect_milestones(fake_history) -> None:
    fake_history.responses[("log", "--merges", "--format=%ad%x09%s", "--date=format:%Y-%m-%d")] = (
        "2024-03-05\tMerge pull request #43 from octo/team/ux-refresh\n"
        "2024-03-04\tMerge branch 'release'\n"
        "2024-03-02\tMerge pull request from octo/no-number\n"
    )

    assert collect_milestones(fake_history) == (
        Milestone(date="2024-03-05", pr=43, branch="ux-refresh", label="UX Refresh"),
        Milestone(date="2024-03-02", pr=0, branch="no-number", label="No Number"),
    )

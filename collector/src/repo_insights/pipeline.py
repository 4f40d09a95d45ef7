"""Run every collector against one repository and assemble the report.

Sections run one after another in declaration order. A section that raises
is logged, reported to the observer as ``error`` and left out of the report;
the remaining sections still run. Derivations run last and receive the
results of the sections they name (``None`` for a failed one).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable

from repo_insights.config import Config
from repo_insights.models import AggregateReport
from repo_insights.sources.activity import (
    collect_commits_by_day_of_week,
    collect_commits_by_hour,
    collect_commits_by_month,
    collect_commits_by_week,
    collect_streaks,
    collect_work_patterns,
)
from repo_insights.sources.churn import collect_churn_by_month, collect_code_growth
from repo_insights.sources.contributors import collect_ai_contributions, collect_contributors
from repo_insights.sources.dependencies import collect_dependencies
from repo_insights.sources.files import (
    collect_directory_breakdown,
    collect_file_types,
    collect_hottest_files,
    collect_largest_files,
    collect_test_info,
)
from repo_insights.sources.fun_facts import derive_fun_facts
from repo_insights.sources.git import HistorySource
from repo_insights.sources.messages import collect_commit_message_patterns, collect_milestones
from repo_insights.sources.overview import collect_overview

logger = logging.getLogger(__name__)

START = "start"
DONE = "done"
ERROR = "error"

# observer(section, status, error_message)
ProgressObserver = Callable[[str, str, str | None], None]


@dataclass(frozen=True)
class Section:
    name: str
    collect: Callable[[HistorySource], Any]


@dataclass(frozen=True)
class Derivation:
    name: str
    derive: Callable[..., Any]
    requires: tuple[str, ...]


def build_sections(config: Config | None = None) -> tuple[Section, ...]:
    limits = (config or Config()).limits
    return (
        Section("overview", collect_overview),
        Section("commits_by_month", collect_commits_by_month),
        Section("commits_by_week", collect_commits_by_week),
        Section("commits_by_day_of_week", collect_commits_by_day_of_week),
        Section("commits_by_hour", collect_commits_by_hour),
        Section("contributors", collect_contributors),
        Section("file_types", collect_file_types),
        Section("directory_breakdown", collect_directory_breakdown),
        Section("largest_files", partial(collect_largest_files, limit=limits.largest_files)),
        Section(
            "hottest_files",
            partial(collect_hottest_files, limit=limits.hottest_files, window_days=limits.hottest_window_days),
        ),
        Section("churn_by_month", collect_churn_by_month),
        Section("commit_message_patterns", collect_commit_message_patterns),
        Section("streaks", collect_streaks),
        Section("ai_contributions", collect_ai_contributions),
        Section("milestones", collect_milestones),
        Section("code_growth", collect_code_growth),
        Section("work_patterns", collect_work_patterns),
        Section("test_info", collect_test_info),
        Section("dependencies", collect_dependencies),
    )


DERIVATIONS: tuple[Derivation, ...] = (
    Derivation("fun_facts", derive_fun_facts, requires=("overview",)),
)


def _notify(observer: ProgressObserver | None, name: str, status: str, error: str | None = None) -> None:
    if observer is not None:
        observer(name, status, error)


def _run_step(
    name: str,
    step: Callable[[], Any],
    results: dict[str, Any],
    observer: ProgressObserver | None,
) -> None:
    _notify(observer, name, START)
    try:
        results[name] = step()
    except Exception as exc:
        logger.warning("Section %s failed: %s", name, exc, exc_info=True)
        _notify(observer, name, ERROR, str(exc) or type(exc).__name__)
        return
    _notify(observer, name, DONE)


def run_pipeline(
    history: HistorySource,
    observer: ProgressObserver | None = None,
    sections: tuple[Section, ...] | None = None,
    derivations: tuple[Derivation, ...] = DERIVATIONS,
) -> AggregateReport:
    results: dict[str, Any] = {}

    for section in sections if sections is not None else build_sections():
        _run_step(section.name, partial(section.collect, history), results, observer)

    for derivation in derivations:
        inputs = [results.get(name) for name in derivation.requires]
        _run_step(derivation.name, partial(derivation.derive, *inputs), results, observer)

    return AggregateReport(**results)

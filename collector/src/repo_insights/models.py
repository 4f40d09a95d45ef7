from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class NumstatRecord:
    added: int
    deleted: int
    path: str


@dataclass(frozen=True)
class TaggedNumstat:
    tag: str
    records: tuple[NumstatRecord, ...] = ()


@dataclass(frozen=True)
class OverviewSummary:
    project_name: str
    first_commit: str
    latest_commit: str
    total_commits: int
    total_branches: int
    total_tags: int
    total_files: int
    total_source_files: int
    total_lines_of_code: int
    total_characters: int
    collected_at: str


@dataclass(frozen=True)
class MonthCount:
    month: str
    count: int


@dataclass(frozen=True)
class WeekCount:
    week: str
    count: int


@dataclass(frozen=True)
class DayOfWeekCount:
    day: str
    count: int


@dataclass(frozen=True)
class HourCount:
    hour: str
    count: int


@dataclass(frozen=True)
class Contributor:
    name: str
    email: str
    commits: int


@dataclass(frozen=True)
class ExtensionCount:
    extension: str
    count: int


@dataclass(frozen=True)
class DirectoryCount:
    directory: str
    file_count: int


@dataclass(frozen=True)
class FileSize:
    file: str
    lines: int


@dataclass(frozen=True)
class FileChanges:
    file: str
    changes: int


@dataclass(frozen=True)
class ChurnBucket:
    month: str
    added: int
    deleted: int


@dataclass(frozen=True)
class GrowthPoint:
    month: str
    net_lines: int


@dataclass(frozen=True)
class MessagePattern:
    type: str
    count: int


@dataclass(frozen=True)
class Streak:
    days: int = 0
    start: str = ""
    end: str = ""


@dataclass(frozen=True)
class BusiestDay:
    date: str = ""
    commits: int = 0


@dataclass(frozen=True)
class StreakSummary:
    longest_streak: Streak = field(default_factory=Streak)
    busiest_day: BusiestDay = field(default_factory=BusiestDay)
    active_days: int = 0
    total_days: int = 0
    activity_rate: int = 0


@dataclass(frozen=True)
class SourceCount:
    name: str
    commits: int


@dataclass(frozen=True)
class AttributionSummary:
    total: int
    human: int
    breakdown: tuple[SourceCount, ...] = ()
    co_authored: int = 0


@dataclass(frozen=True)
class Milestone:
    date: str
    pr: int
    branch: str
    label: str


@dataclass(frozen=True)
class WorkPatterns:
    weekday: int = 0
    weekend: int = 0
    weekend_pct: int = 0
    early_bird: int = 0
    business_hours: int = 0
    evening: int = 0
    night_owl: int = 0
    peak_window: str = ""


@dataclass(frozen=True)
class SuiteInventory:
    test_files: int = 0
    total_test_lines: int = 0
    estimated_tests: int = 0
    file_list: tuple[str, ...] = ()


@dataclass(frozen=True)
class DependencySummary:
    manifest: str = ""
    production: int = 0
    dev: int = 0
    total: int = 0
    top_deps: tuple[str, ...] = ()
    top_dev_deps: tuple[str, ...] = ()


@dataclass(frozen=True)
class FunFacts:
    printed_pages: int = 0
    total_words: int = 0
    novel_equivalent: float = 0.0
    typing_hours: int = 0
    avg_commit_size: int = 0
    lines_per_day: int = 0


@dataclass(frozen=True)
class AggregateReport:
    """Root object handed to the renderer; a section left as None failed to collect."""

    overview: OverviewSummary | None = None
    commits_by_month: tuple[MonthCount, ...] | None = None
    commits_by_week: tuple[WeekCount, ...] | None = None
    commits_by_day_of_week: tuple[DayOfWeekCount, ...] | None = None
    commits_by_hour: tuple[HourCount, ...] | None = None
    contributors: tuple[Contributor, ...] | None = None
    file_types: tuple[ExtensionCount, ...] | None = None
    directory_breakdown: tuple[DirectoryCount, ...] | None = None
    largest_files: tuple[FileSize, ...] | None = None
    hottest_files: tuple[FileChanges, ...] | None = None
    churn_by_month: tuple[ChurnBucket, ...] | None = None
    commit_message_patterns: tuple[MessagePattern, ...] | None = None
    streaks: StreakSummary | None = None
    ai_contributions: AttributionSummary | None = None
    milestones: tuple[Milestone, ...] | None = None
    code_growth: tuple[GrowthPoint, ...] | None = None
    work_patterns: WorkPatterns | None = None
    test_info: SuiteInventory | None = None
    dependencies: DependencySummary | None = None
    fun_facts: FunFacts | None = None

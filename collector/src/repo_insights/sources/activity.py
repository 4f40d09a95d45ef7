from __future__ import annotations

from collections import Counter
from datetime import date

from repo_insights.models import (
    BusiestDay,
    DayOfWeekCount,
    HourCount,
    MonthCount,
    Streak,
    StreakSummary,
    WeekCount,
    WorkPatterns,
)
from repo_insights.sources.git import HistorySource
from repo_insights.sources.parsers import parse_int, round_half_up, split_lines

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# (label, first hour, end hour); anything outside these is the night owl window.
WORK_WINDOWS: tuple[tuple[str, int, int], ...] = (
    ("Early Bird (5-9am)", 5, 9),
    ("Business Hours (9-5pm)", 9, 17),
    ("Evening (5-10pm)", 17, 22),
)
NIGHT_OWL = "Night Owl (10pm-5am)"


def _dates(history: HistorySource, fmt: str) -> list[str]:
    return split_lines(history.query("log", "--format=%ad", f"--date=format:{fmt}"))


def collect_commits_by_month(history: HistorySource) -> tuple[MonthCount, ...]:
    counts = Counter(_dates(history, "%Y-%m"))
    return tuple(MonthCount(month=m, count=counts[m]) for m in sorted(counts))


def collect_commits_by_week(history: HistorySource) -> tuple[WeekCount, ...]:
    counts = Counter(_dates(history, "%Y-W%V"))
    return tuple(WeekCount(week=w, count=counts[w]) for w in sorted(counts))


def collect_commits_by_day_of_week(history: HistorySource) -> tuple[DayOfWeekCount, ...]:
    counts: Counter[str] = Counter()
    for line in _dates(history, "%u"):
        iso_day = parse_int(line)
        if 1 <= iso_day <= 7:
            counts[DAY_NAMES[iso_day - 1]] += 1
    return tuple(DayOfWeekCount(day=d, count=counts[d]) for d in DAY_NAMES)


def collect_commits_by_hour(history: HistorySource) -> tuple[HourCount, ...]:
    counts = Counter(_dates(history, "%H"))
    hours = (f"{h:02d}" for h in range(24))
    return tuple(HourCount(hour=h, count=counts[h]) for h in hours)


def _parse_day(text: str) -> date | None:
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def compute_streaks(commit_dates: list[str]) -> StreakSummary:
    """Streak statistics for raw (possibly repeated, unordered) YYYY-MM-DD dates."""
    day_counts = Counter(d for d in commit_dates if _parse_day(d) is not None)
    days = sorted(date.fromisoformat(d) for d in day_counts)
    if not days:
        return StreakSummary()

    longest = 0
    longest_start = longest_end = days[0]
    current = 1
    current_start = days[0]

    for prev, curr in zip(days, days[1:]):
        if (curr - prev).days == 1:
            current += 1
            continue
        if current > longest:
            longest, longest_start, longest_end = current, current_start, prev
        current = 1
        current_start = curr
    # Flush the streak still open at the last day
    if current > longest:
        longest, longest_start, longest_end = current, current_start, days[-1]

    busiest_date, busiest_commits = max(day_counts.items(), key=lambda item: item[1])

    active_days = len(days)
    total_days = (days[-1] - days[0]).days + 1
    return StreakSummary(
        longest_streak=Streak(days=longest, start=longest_start.isoformat(), end=longest_end.isoformat()),
        busiest_day=BusiestDay(date=busiest_date, commits=busiest_commits),
        active_days=active_days,
        total_days=total_days,
        activity_rate=int(round_half_up(active_days / total_days * 100)),
    )


def collect_streaks(history: HistorySource) -> StreakSummary:
    return compute_streaks(_dates(history, "%Y-%m-%d"))


def _work_window(hour: int) -> str:
    for label, start, end in WORK_WINDOWS:
        if start <= hour < end:
            return label
    return NIGHT_OWL


def compute_work_patterns(day_hours: list[str]) -> WorkPatterns:
    """Weekday/weekend split and time-of-day windows for ``<iso weekday>_<hour>`` rows."""
    weekday = weekend = 0
    windows: Counter[str] = Counter({label: 0 for label, _, _ in WORK_WINDOWS})
    windows[NIGHT_OWL] = 0

    for line in day_hours:
        dow, _, hour = line.partition("_")
        if parse_int(dow) >= 6:
            weekend += 1
        else:
            weekday += 1
        windows[_work_window(parse_int(hour))] += 1

    total = weekday + weekend
    # max() keeps the first label on ties, which follows the window order above
    peak = max(windows, key=lambda label: windows[label])
    early, business, evening = (windows[label] for label, _, _ in WORK_WINDOWS)
    return WorkPatterns(
        weekday=weekday,
        weekend=weekend,
        weekend_pct=int(round_half_up(weekend / total * 100)) if total else 0,
        early_bird=early,
        business_hours=business,
        evening=evening,
        night_owl=windows[NIGHT_OWL],
        peak_window=peak,
    )


def collect_work_patterns(history: HistorySource) -> WorkPatterns:
    return compute_work_patterns(_dates(history, "%u_%H"))

from __future__ import annotations

from repo_insights.models import ChurnBucket, GrowthPoint
from repo_insights.sources.git import HistorySource
from repo_insights.sources.parsers import parse_tagged_numstat

MONTH_MARKER = "COMMIT_MONTH:"


def _monthly_totals(raw: str) -> dict[str, tuple[int, int]]:
    totals: dict[str, tuple[int, int]] = {}
    for group in parse_tagged_numstat(raw, MONTH_MARKER):
        added, deleted = totals.get(group.tag, (0, 0))
        for rec in group.records:
            added += rec.added
            deleted += rec.deleted
        totals[group.tag] = (added, deleted)
    return totals


def _query_month_numstat(history: HistorySource) -> str:
    return history.query(
        "log", "--numstat", f"--format={MONTH_MARKER}%ad", "--date=format:%Y-%m"
    )


def compute_churn(raw: str) -> tuple[ChurnBucket, ...]:
    totals = _monthly_totals(raw)
    return tuple(
        ChurnBucket(month=month, added=totals[month][0], deleted=totals[month][1])
        for month in sorted(totals)
    )


def compute_growth(raw: str) -> tuple[GrowthPoint, ...]:
    """Running net line count (added minus deleted) per month, oldest first."""
    points: list[GrowthPoint] = []
    cumulative = 0
    for bucket in compute_churn(raw):
        cumulative += bucket.added - bucket.deleted
        points.append(GrowthPoint(month=bucket.month, net_lines=cumulative))
    return tuple(points)


def collect_churn_by_month(history: HistorySource) -> tuple[ChurnBucket, ...]:
    return compute_churn(_query_month_numstat(history))


def collect_code_growth(history: HistorySource) -> tuple[GrowthPoint, ...]:
    return compute_growth(_query_month_numstat(history))

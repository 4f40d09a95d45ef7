from __future__ import annotations

from datetime import date

from repo_insights.models import FunFacts, OverviewSummary
from repo_insights.sources.parsers import round_half_up

LINES_PER_PAGE = 50
CHARS_PER_WORD = 5
WORDS_PER_NOVEL = 80_000
WORDS_PER_MINUTE = 60


def _project_days(overview: OverviewSummary) -> int:
    try:
        span = (date.fromisoformat(overview.latest_commit) - date.fromisoformat(overview.first_commit)).days
    except ValueError:
        return 1
    return max(span, 1)


def derive_fun_facts(overview: OverviewSummary | None) -> FunFacts:
    """Playful equivalents of the code base size; a missing overview counts as empty."""
    if overview is None:
        return FunFacts()

    total_lines = overview.total_lines_of_code
    total_words = int(round_half_up(overview.total_characters / CHARS_PER_WORD))
    commits = overview.total_commits
    return FunFacts(
        printed_pages=int(round_half_up(total_lines / LINES_PER_PAGE)),
        total_words=total_words,
        novel_equivalent=round_half_up(total_words / WORDS_PER_NOVEL, 1),
        typing_hours=int(round_half_up(total_words / WORDS_PER_MINUTE / 60)),
        avg_commit_size=int(round_half_up(total_lines / commits)) if commits > 0 else 0,
        lines_per_day=int(round_half_up(total_lines / _project_days(overview))),
    )

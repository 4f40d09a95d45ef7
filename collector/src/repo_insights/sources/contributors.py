from __future__ import annotations

from dataclasses import dataclass

from repo_insights.models import AttributionSummary, Contributor, SourceCount
from repo_insights.sources.git import HistorySource
from repo_insights.sources.parsers import parse_int, parse_shortlog, split_lines


@dataclass(frozen=True)
class AutomationIdentity:
    name: str
    author_pattern: str  # passed to git log --author, so it is a regex
    all_branches: bool = False


# Checked in order; a commit matching two patterns is counted under both.
AUTOMATION_IDENTITIES: tuple[AutomationIdentity, ...] = (
    AutomationIdentity("Claude", "Claude"),
    AutomationIdentity("Cursor", "Cursor", all_branches=True),
    AutomationIdentity("Copilot", "copilot"),
    AutomationIdentity("CodeRabbit", "coderabbitai"),
    AutomationIdentity("Dependabot", "dependabot"),
    AutomationIdentity("Renovate", "renovate"),
    AutomationIdentity("GitHub Actions", "github-actions"),
)

CO_AUTHOR_TRAILER = "Co-Authored-By"


def collect_contributors(history: HistorySource) -> tuple[Contributor, ...]:
    contributors = parse_shortlog(history.query("shortlog", "-sne", "--all"))
    # sorted() is stable, so equal counts keep shortlog order
    return tuple(sorted(contributors, key=lambda c: c.commits, reverse=True))


def _count_commits(history: HistorySource, *args: str) -> int:
    return len(split_lines(history.query("log", *args, "--oneline")))


def collect_ai_contributions(
    history: HistorySource,
    identities: tuple[AutomationIdentity, ...] = AUTOMATION_IDENTITIES,
) -> AttributionSummary:
    total = parse_int(history.query("rev-list", "--count", "HEAD"))

    breakdown: list[SourceCount] = []
    for identity in identities:
        scope = ("--all",) if identity.all_branches else ()
        count = _count_commits(history, *scope, f"--author={identity.author_pattern}")
        if count > 0:
            breakdown.append(SourceCount(name=identity.name, commits=count))

    automated = sum(s.commits for s in breakdown)
    co_authored = _count_commits(history, "--all", f"--grep={CO_AUTHOR_TRAILER}")
    return AttributionSummary(
        total=total,
        human=total - automated,
        breakdown=tuple(breakdown),
        co_authored=co_authored,
    )

from __future__ import annotations

import json
import logging
import tomllib
from datetime import datetime, timezone

from repo_insights.models import OverviewSummary
from repo_insights.sources.git import HistorySource
from repo_insights.sources.parsers import is_source_file, line_count, parse_int, split_lines

logger = logging.getLogger(__name__)


def _project_name(history: HistorySource) -> str:
    """package.json name, then pyproject.toml [project].name, then the directory name."""
    try:
        name = json.loads(history.read_text("package.json")).get("name")
        if name:
            return str(name)
    except (OSError, ValueError, AttributeError):
        pass
    try:
        name = tomllib.loads(history.read_text("pyproject.toml")).get("project", {}).get("name")
        if name:
            return str(name)
    except (OSError, ValueError, AttributeError):
        pass
    return history.root.name


def collect_overview(history: HistorySource) -> OverviewSummary:
    first_dates = split_lines(history.query("log", "--reverse", "--format=%ad", "--date=short"))
    latest = history.query("log", "-1", "--format=%ad", "--date=short")
    total_commits = parse_int(history.query("rev-list", "--count", "HEAD"))
    branches = split_lines(history.query("branch", "-a"))
    tags = split_lines(history.query("tag"))

    all_files = split_lines(history.query("ls-files"))
    source_files = [f for f in all_files if is_source_file(f)]

    total_lines = 0
    total_characters = 0
    for path in source_files:
        try:
            content = history.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable source file %s: %s", path, exc)
            continue
        total_lines += line_count(content)
        total_characters += len(content)

    return OverviewSummary(
        project_name=_project_name(history),
        first_commit=first_dates[0] if first_dates else "",
        latest_commit=latest,
        total_commits=total_commits,
        total_branches=len(branches),
        total_tags=len(tags),
        total_files=len(all_files),
        total_source_files=len(source_files),
        total_lines_of_code=total_lines,
        total_characters=total_characters,
        collected_at=datetime.now(timezone.utc).isoformat(),
    )

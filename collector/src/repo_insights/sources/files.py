from __future__ import annotations

import logging
import re
from collections import Counter
from datetime import date, timedelta
from pathlib import PurePosixPath

from repo_insights.models import DirectoryCount, ExtensionCount, FileChanges, FileSize, SuiteInventory
from repo_insights.sources.git import HistorySource
from repo_insights.sources.parsers import is_source_file, line_count, split_lines

logger = logging.getLogger(__name__)

LARGEST_FILES_LIMIT = 25
HOTTEST_FILES_LIMIT = 30
HOTTEST_WINDOW_DAYS = 365

NO_EXTENSION = "(no ext)"

TEST_PATH_PATTERNS = (
    re.compile(r"\.(test|spec)\.\w+$"),
    re.compile(r"[_\-](test|spec)\.\w+$"),
)
TEST_BASENAME_RE = re.compile(r"^test_.*\.\w+$")
TEST_DIR_RE = re.compile(r"\b(e2e|tests?|__tests__)/", re.IGNORECASE)
TEST_CASE_RE = re.compile(r"\b(it|test)\s*\(|def\s+test_|func\s+Test[A-Z]")


def _tracked_files(history: HistorySource) -> list[str]:
    return split_lines(history.query("ls-files"))


def _read_text(history: HistorySource, path: str) -> str | None:
    try:
        return history.read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable file %s: %s", path, exc)
        return None


def collect_file_types(history: HistorySource) -> tuple[ExtensionCount, ...]:
    counts = Counter(PurePosixPath(f).suffix.lstrip(".") or NO_EXTENSION for f in _tracked_files(history))
    return tuple(ExtensionCount(extension=ext, count=n) for ext, n in counts.most_common())


def _directory_key(path: str) -> str:
    parts = path.split("/")
    return "/".join(parts[:2]) if len(parts) > 1 else parts[0]


def collect_directory_breakdown(history: HistorySource) -> tuple[DirectoryCount, ...]:
    counts = Counter(_directory_key(f) for f in _tracked_files(history))
    return tuple(DirectoryCount(directory=d, file_count=n) for d, n in counts.most_common())


def collect_largest_files(history: HistorySource, limit: int = LARGEST_FILES_LIMIT) -> tuple[FileSize, ...]:
    sizes: list[FileSize] = []
    for path in _tracked_files(history):
        if not is_source_file(path):
            continue
        content = _read_text(history, path)
        if content is not None:
            sizes.append(FileSize(file=path, lines=line_count(content)))
    sizes.sort(key=lambda s: s.lines, reverse=True)
    return tuple(sizes[:limit])


def collect_hottest_files(
    history: HistorySource,
    limit: int = HOTTEST_FILES_LIMIT,
    window_days: int = HOTTEST_WINDOW_DAYS,
    today: date | None = None,
) -> tuple[FileChanges, ...]:
    """Files touched by the most commits within the trailing window."""
    since = (today or date.today()) - timedelta(days=window_days)
    raw = history.query("log", f"--since={since.isoformat()}", "--pretty=format:", "--name-only")
    counts = Counter(split_lines(raw))
    return tuple(FileChanges(file=f, changes=n) for f, n in counts.most_common(limit))


def is_test_file(path: str) -> bool:
    lower = path.lower()
    if any(p.search(lower) for p in TEST_PATH_PATTERNS):
        return True
    if TEST_BASENAME_RE.match(PurePosixPath(lower).name):
        return True
    return bool(TEST_DIR_RE.search(path))


def collect_test_info(history: HistorySource) -> SuiteInventory:
    test_files = [f for f in _tracked_files(history) if is_test_file(f)]

    total_lines = 0
    test_count = 0
    for path in test_files:
        content = _read_text(history, path)
        if content is None:
            continue
        total_lines += line_count(content)
        test_count += len(TEST_CASE_RE.findall(content))

    return SuiteInventory(
        test_files=len(test_files),
        total_test_lines=total_lines,
        estimated_tests=test_count,
        file_list=tuple(test_files),
    )

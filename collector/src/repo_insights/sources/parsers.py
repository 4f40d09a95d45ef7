"""Parsing primitives shared by the collectors.

Every function here is pure and tolerant: an empty blob yields an empty
result, blank lines are skipped and malformed numbers count as zero.
"""

from __future__ import annotations

import math
import re
from pathlib import PurePosixPath

from repo_insights.models import Contributor, NumstatRecord, TaggedNumstat

SOURCE_EXTENSIONS = frozenset({
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs",
    ".py", ".rb", ".go", ".rs", ".java",
    ".c", ".cpp", ".h", ".hpp", ".cs",
    ".php", ".swift", ".kt", ".scala",
    ".sh", ".vue", ".svelte",
})

SHORTLOG_RE = re.compile(r"^(\d+)\t(.+?)(?:\s+<(.+)>)?$")


def split_lines(raw: str) -> list[str]:
    return [line.strip() for line in raw.splitlines() if line.strip()]


def parse_int(text: str, default: int = 0) -> int:
    try:
        return int(text.strip())
    except (ValueError, AttributeError):
        return default


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves towards positive infinity.

    ``round()`` uses banker's rounding, which turns 2.5 into 2.
    """
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def line_count(text: str) -> int:
    return text.count("\n") + 1


def is_source_file(path: str) -> bool:
    return PurePosixPath(path).suffix.lower() in SOURCE_EXTENSIONS


def parse_tagged_numstat(raw: str, marker: str) -> list[TaggedNumstat]:
    """Group ``git log --numstat`` rows under the injected ``marker`` lines.

    Binary rows (``-\t-\tpath``) carry no line counts and are dropped.
    """
    groups: list[TaggedNumstat] = []
    tag: str | None = None
    records: list[NumstatRecord] = []

    for line in raw.splitlines():
        if line.startswith(marker):
            if tag is not None:
                groups.append(TaggedNumstat(tag=tag, records=tuple(records)))
            tag = line[len(marker):].strip()
            records = []
            continue
        if not line.strip() or tag is None:
            continue
        parts = line.split("\t")
        if len(parts) != 3 or parts[0] == "-":
            continue
        records.append(
            NumstatRecord(added=parse_int(parts[0]), deleted=parse_int(parts[1]), path=parts[2])
        )

    if tag is not None:
        groups.append(TaggedNumstat(tag=tag, records=tuple(records)))
    return groups


def parse_shortlog(raw: str) -> list[Contributor]:
    contributors: list[Contributor] = []
    for line in split_lines(raw):
        m = SHORTLOG_RE.match(line)
        if not m:
            continue
        contributors.append(
            Contributor(name=m.group(2).strip(), email=m.group(3) or "", commits=int(m.group(1)))
        )
    return contributors

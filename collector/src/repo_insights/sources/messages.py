from __future__ import annotations

import re
from collections import Counter

from repo_insights.models import MessagePattern, Milestone
from repo_insights.sources.git import HistorySource
from repo_insights.sources.parsers import split_lines

MERGES = "Merges"
CODE_REVIEW = "Code Review"
BUG_FIXES = "Bug Fixes"
FEATURES = "Features"
PERFORMANCE = "Performance"
IMPROVEMENTS = "Improvements"
REFACTORING = "Refactoring"
SECURITY = "Security"
TESTING = "Testing"
DOCS = "Docs"
OTHER = "Other"

# Evaluated top to bottom against the lower-cased subject; first match wins.
# Improvements appears twice: the second entry only catches housekeeping
# subjects that none of the more specific rules claimed.
MESSAGE_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    (MERGES, re.compile(r"^merge")),
    (CODE_REVIEW, re.compile(r"^cr\b|^cr\s")),
    (BUG_FIXES, re.compile(
        r"\bfix(ed|es|ing)?\b|\bbug\b|\bresolve[ds]?\b|\bpatch\b|\bcorrect(ed)?\b|\bhotfix\b"
    )),
    (FEATURES, re.compile(
        r"^add(ed|ing|s)?\b|\bcreate[ds]?\b|\bimplement(ed)?\b|\bnew\b|\bintroduc|\bbuilt?\b|^feat[(:]"
    )),
    (PERFORMANCE, re.compile(r"\boptimiz|\bperformance\b|\bspeed\b|\bfast(er)?\b|\bcach(e|ing)\b|^perf[(:]")),
    (IMPROVEMENTS, re.compile(
        r"\bimprov(e|ed|ing|ement)\b|\benhance[ds]?\b|\bredesign|\bstreamline|\bpolish|\bbetter\b"
        r"|\bupgrade[ds]?\b|\bmodularize|\bupdate[ds]?\b"
    )),
    (REFACTORING, re.compile(
        r"\brefactor|\brestructur|\breorganiz|\bclean(ed|up| up)?\b|\bsimplif|\bconsolidat|\bremov(e|ed|ing)\b"
    )),
    (SECURITY, re.compile(r"\bsecur(ity|e)?\b|\bauth\b|\bpermission|\bvalidat")),
    (TESTING, re.compile(r"\btest(s|ing)?\b|\bspec\b|\be2e\b|\buat\b")),
    (DOCS, re.compile(r"\bdoc(s|umentation)?\b|\breadme\b|\bchangelog\b")),
    (IMPROVEMENTS, re.compile(r"\blint\b|\bformat|\bbump\b|\bdepend|\bversion\b")),
)

# Report order; also breaks ties between equal counts.
DISPLAY_ORDER = (
    FEATURES, BUG_FIXES, IMPROVEMENTS, CODE_REVIEW, REFACTORING,
    PERFORMANCE, TESTING, DOCS, SECURITY, MERGES, OTHER,
)

PR_MARKER = "pull request"
BRANCH_RE = re.compile(r"from\s+\S+/(\S+)")
PR_NUMBER_RE = re.compile(r"#(\d+)")

# Applied in order after each word has been capitalised.
LABEL_CORRECTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bV(\d)", re.ASCII), r"v\1"),
    (re.compile(r"\bCve\b", re.ASCII), "CVE"),
    (re.compile(r"\bE2e\b", re.ASCII), "E2E"),
    (re.compile(r"\bUx\b", re.ASCII), "UX"),
    (re.compile(r"\bAws\b", re.ASCII), "AWS"),
    (re.compile(r"\bS3\b", re.ASCII), "S3"),
    (re.compile(r"\bApi\b", re.ASCII), "API"),
    (re.compile(r"\bLlm\b", re.ASCII), "LLM"),
    (re.compile(r"\bAi\b", re.ASCII), "AI"),
)


def classify_message(subject: str) -> str:
    text = subject.lower().strip()
    for label, pattern in MESSAGE_RULES:
        if pattern.search(text):
            return label
    return OTHER


def compute_message_patterns(subjects: list[str]) -> tuple[MessagePattern, ...]:
    counts = Counter(classify_message(s) for s in subjects if s.strip())
    patterns = [MessagePattern(type=label, count=counts[label]) for label in DISPLAY_ORDER if counts[label]]
    return tuple(sorted(patterns, key=lambda p: p.count, reverse=True))


def collect_commit_message_patterns(history: HistorySource) -> tuple[MessagePattern, ...]:
    return compute_message_patterns(split_lines(history.query("log", "--format=%s")))


def humanize_branch(branch: str) -> str:
    """``feat/add-api-v2`` style branch names to a readable title."""
    label = re.sub(r"[-_]", " ", branch)
    label = re.sub(r"\b\w", lambda m: m.group(0).upper(), label, flags=re.ASCII)
    for pattern, replacement in LABEL_CORRECTIONS:
        label = pattern.sub(replacement, label)
    return label


def parse_milestone(line: str) -> Milestone | None:
    merged_on, _, subject = line.partition("\t")
    if PR_MARKER not in subject:
        return None
    branch_match = BRANCH_RE.search(subject)
    pr_match = PR_NUMBER_RE.search(subject)
    branch = branch_match.group(1) if branch_match else ""
    label = humanize_branch(branch)
    if not label.strip():
        return None
    return Milestone(
        date=merged_on,
        pr=int(pr_match.group(1)) if pr_match else 0,
        branch=branch,
        label=label,
    )


def collect_milestones(history: HistorySource) -> tuple[Milestone, ...]:
    raw = history.query("log", "--merges", "--format=%ad%x09%s", "--date=format:%Y-%m-%d")
    milestones = (parse_milestone(line) for line in split_lines(raw))
    return tuple(m for m in milestones if m is not None)

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Protocol

from git import Repo
from git.exc import GitCommandError

logger = logging.getLogger(__name__)

DEFAULT_MAX_OUTPUT_BYTES = 50 * 1024 * 1024
READ_CHUNK_BYTES = 64 * 1024

# Commands that walk commits; they fail outright on a repository without any.
HISTORY_COMMANDS = frozenset({"log", "shortlog", "rev-list"})


class HistoryQueryError(RuntimeError):
    """A history query could not produce text."""


class HistorySource(Protocol):
    """What collectors need from a repository: git queries and work-tree reads."""

    root: Path

    def query(self, *args: str) -> str:
        ...

    def read_text(self, path: str) -> str:
        ...


class GitHistory:
    """Run git queries against one work tree through GitPython."""

    def __init__(self, repo: Repo, max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES) -> None:
        if repo.working_tree_dir is None:
            raise HistoryQueryError("bare repositories have no work tree to inspect")
        self._repo = repo
        self.root = Path(repo.working_tree_dir)
        self.max_output_bytes = max_output_bytes

    @classmethod
    def open(cls, path: str | Path, max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES) -> GitHistory:
        """Open the work tree containing ``path`` (like ``git rev-parse --show-toplevel``)."""
        repo = Repo(str(path), search_parent_directories=True)
        return cls(repo, max_output_bytes=max_output_bytes)

    def has_commits(self) -> bool:
        """False while HEAD is unborn (freshly initialised repository)."""
        return self._repo.head.is_valid()

    def query(self, *args: str) -> str:
        """Stdout of ``git <args>``, stripped.

        Output is read in chunks and the process is killed as soon as it
        passes ``max_output_bytes``. On a repository without commits the
        history-walking commands answer with empty output (``0`` for
        ``rev-list --count``) instead of failing.
        """
        command = " ".join(args)
        if args and args[0] in HISTORY_COMMANDS and not self.has_commits():
            logger.debug("git %s -> no commits yet", command)
            return "0" if "--count" in args else ""

        t0 = time.monotonic()
        try:
            proc = self._repo.git.execute(["git", *args], as_process=True)
            chunks: list[bytes] = []
            size = 0
            while True:
                chunk = proc.stdout.read(READ_CHUNK_BYTES)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_output_bytes:
                    proc.proc.kill()
                    proc.proc.wait()
                    raise HistoryQueryError(
                        f"git {command} produced more than {self.max_output_bytes} bytes "
                        f"(limit {self.max_output_bytes})"
                    )
                chunks.append(chunk)
            proc.wait()
        except GitCommandError as exc:
            raise HistoryQueryError(f"git {command} failed: {exc}") from exc

        logger.debug("git %s -> %d bytes [%.2fs]", command, size, time.monotonic() - t0)
        return b"".join(chunks).decode("utf-8", errors="replace").strip()

    def read_text(self, path: str) -> str:
        # Undecodable bytes are replaced so the file still counts.
        return (self.root / path).read_bytes().decode("utf-8", errors="replace")

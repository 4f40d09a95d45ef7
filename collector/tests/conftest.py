from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest


@dataclass
class FakeHistory:
    """In-memory HistorySource: canned output per git argument tuple, files by path."""

    responses: dict[tuple[str, ...], str | Exception] = field(default_factory=dict)
    files: dict[str, str] = field(default_factory=dict)
    root: Path = Path("/work/sample-project")
    calls: list[tuple[str, ...]] = field(default_factory=list)

    def query(self, *args: str) -> str:
        self.calls.append(args)
        value = self.responses.get(args, "")
        if isinstance(value, Exception):
            raise value
        return value.strip()

    def read_text(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]


@pytest.fixture
def fake_history() -> FakeHistory:
    return FakeHistory()

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

from repo_insights.sources.files import HOTTEST_FILES_LIMIT, HOTTEST_WINDOW_DAYS, LARGEST_FILES_LIMIT
from repo_insights.sources.git import DEFAULT_MAX_OUTPUT_BYTES


class ConfigError(ValueError):
    """The configuration file or an override has an invalid value."""


@dataclass
class RepoConfig:
    path: str = "."


@dataclass
class LimitsConfig:
    largest_files: int = LARGEST_FILES_LIMIT
    hottest_files: int = HOTTEST_FILES_LIMIT
    hottest_window_days: int = HOTTEST_WINDOW_DAYS
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES  # per git query


@dataclass
class OutputConfig:
    json: str = "repo-insights.json"


@dataclass
class Config:
    repo: RepoConfig = field(default_factory=RepoConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def _positive_int(value: object, key: str) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from exc
    if number <= 0:
        raise ConfigError(f"{key} must be positive, got {number}")
    return number


def load_config(config_path: str | Path | None = None) -> Config:
    """Build the config from an optional YAML file, then apply environment overrides.

    Recognised variables (also read from a ``.env`` file):
    ``REPO_INSIGHTS_REPO`` and ``REPO_INSIGHTS_MAX_OUTPUT_BYTES``.
    """
    load_dotenv()

    raw: dict = {}
    base_dir = Path.cwd()
    if config_path is not None:
        config_path = Path(config_path)
        with config_path.open() as f:
            raw = yaml.safe_load(f) or {}
        if not isinstance(raw, dict):
            raise ConfigError(f"{config_path} must contain a mapping")
        base_dir = config_path.parent

    repo_raw = raw.get("repo") or {}
    repo_path = repo_raw.get("path", ".")
    repo = RepoConfig(path=str((base_dir / repo_path).resolve()))

    limits_raw = raw.get("limits") or {}
    limits = LimitsConfig(
        largest_files=_positive_int(limits_raw.get("largest_files", LARGEST_FILES_LIMIT), "limits.largest_files"),
        hottest_files=_positive_int(limits_raw.get("hottest_files", HOTTEST_FILES_LIMIT), "limits.hottest_files"),
        hottest_window_days=_positive_int(
            limits_raw.get("hottest_window_days", HOTTEST_WINDOW_DAYS), "limits.hottest_window_days"
        ),
        max_output_bytes=_positive_int(
            limits_raw.get("max_output_bytes", DEFAULT_MAX_OUTPUT_BYTES), "limits.max_output_bytes"
        ),
    )

    out_raw = raw.get("output") or {}
    output = OutputConfig(json=out_raw.get("json", "repo-insights.json"))

    if os.environ.get("REPO_INSIGHTS_REPO"):
        repo.path = str(Path(os.environ["REPO_INSIGHTS_REPO"]).resolve())
    if os.environ.get("REPO_INSIGHTS_MAX_OUTPUT_BYTES"):
        limits.max_output_bytes = _positive_int(
            os.environ["REPO_INSIGHTS_MAX_OUTPUT_BYTES"], "REPO_INSIGHTS_MAX_OUTPUT_BYTES"
        )

    return Config(repo=repo, limits=limits, output=output)

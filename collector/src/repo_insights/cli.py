from __future__ import annotations

import logging
import time
from pathlib import Path

import click
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from repo_insights.config import ConfigError, load_config
from repo_insights.logging_config import configure_logging
from repo_insights.output import serialize
from repo_insights.pipeline import DONE, ERROR, START, build_sections, run_pipeline
from repo_insights.sources.git import GitHistory, HistoryQueryError


def _echo_progress(section: str, status: str, error: str | None = None) -> None:
    if status == START:
        click.echo(f"    {section}...", nl=False)
    elif status == DONE:
        click.echo(" done")
    elif status == ERROR:
        click.echo(f" ERROR: {error}")


@click.group()
def main() -> None:
    """repo-insights: Analytics from a git repository's history."""


@main.command()
@click.option("--config", "config_path", default=None, help="Path to repo-insights.yaml")
@click.option("--repo", "repo_path", default=None, help="Repository to analyze (default: current directory)")
@click.option("--output", "output_path", default=None, help="Output JSON path")
@click.option("--verbose", is_flag=True, help="Log every git query to stderr")
def collect(config_path: str | None, repo_path: str | None, output_path: str | None, verbose: bool) -> None:
    """Collect history analytics into a JSON document."""
    total_start = time.monotonic()
    configure_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = load_config(config_path)
    except (OSError, ConfigError) as exc:
        raise click.ClickException(str(exc)) from exc

    if repo_path is not None:
        config.repo.path = str(Path(repo_path).resolve())

    try:
        history = GitHistory.open(config.repo.path, max_output_bytes=config.limits.max_output_bytes)
    except (InvalidGitRepositoryError, NoSuchPathError) as exc:
        raise click.ClickException(f"Not a git repository: {config.repo.path}") from exc
    except HistoryQueryError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Collecting data from {history.root}...")
    report = run_pipeline(history, observer=_echo_progress, sections=build_sections(config))

    output = Path(output_path or config.output.json)
    serialize(report, output)
    click.echo(f"Data written to {output}")

    click.echo(f"Total elapsed: {time.monotonic() - total_start:.2f}s")


if __name__ == "__main__":
    main()

from __future__ import annotations

import json
import logging
import re
import tomllib

from repo_insights.models import DependencySummary
from repo_insights.sources.git import HistorySource

logger = logging.getLogger(__name__)

TOP_DEPS = 20
TOP_DEV_DEPS = 15

REQUIREMENT_NAME_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def _requirement_name(requirement: str) -> str | None:
    m = REQUIREMENT_NAME_RE.match(requirement)
    return m.group(1) if m else None


def _from_package_json(text: str) -> tuple[list[str], list[str]]:
    pkg = json.loads(text)
    return list(pkg.get("dependencies") or {}), list(pkg.get("devDependencies") or {})


def _from_pyproject(text: str) -> tuple[list[str], list[str]]:
    project = tomllib.loads(text).get("project", {})
    deps = [_requirement_name(r) for r in project.get("dependencies", [])]
    dev: list[str | None] = []
    for group in (project.get("optional-dependencies") or {}).values():
        dev.extend(_requirement_name(r) for r in group)
    return [d for d in deps if d], [d for d in dev if d]


# First manifest present wins.
MANIFEST_READERS = (
    ("package.json", _from_package_json),
    ("pyproject.toml", _from_pyproject),
)


def collect_dependencies(history: HistorySource) -> DependencySummary:
    for manifest, reader in MANIFEST_READERS:
        try:
            deps, dev = reader(history.read_text(manifest))
        except OSError:
            continue
        except (ValueError, AttributeError, TypeError) as exc:
            logger.warning("Could not parse %s: %s", manifest, exc)
            return DependencySummary()
        return DependencySummary(
            manifest=manifest,
            production=len(deps),
            dev=len(dev),
            total=len(deps) + len(dev),
            top_deps=tuple(deps[:TOP_DEPS]),
            top_dev_deps=tuple(dev[:TOP_DEV_DEPS]),
        )
    return DependencySummary()

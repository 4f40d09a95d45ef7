from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from repo_insights.models import AggregateReport

# Document keys that are not the plain camelCase of the field name.
KEY_ALIASES = {
    "breakdown": "aiBreakdown",
    "business_hours": "businessHrs",
}


def document_key(field_name: str) -> str:
    """``total_lines_of_code`` -> ``totalLinesOfCode``, honouring ``KEY_ALIASES``."""
    if field_name in KEY_ALIASES:
        return KEY_ALIASES[field_name]
    head, *rest = field_name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _document_dict(items: list[tuple[str, Any]]) -> dict[str, Any]:
    return {document_key(key): value for key, value in items if value is not None}


def to_document(report: AggregateReport) -> dict[str, Any]:
    """JSON-ready dict of the report with camelCase keys; sections that failed to collect are omitted."""
    return asdict(report, dict_factory=_document_dict)


def serialize(report: AggregateReport, output_path: str | Path) -> None:
    output_path = Path(output_path)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(to_document(report), f, indent=2)

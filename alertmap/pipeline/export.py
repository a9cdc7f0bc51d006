"""Resolved alert CSV export."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from alertmap.common.fs import write_csv
from alertmap.common.models import ResolvedAlert

RESOLVED_HEADERS = [
    "date",
    "title",
    "location",
    "category",
    "lat",
    "lon",
]


def _serialize_row(alert: ResolvedAlert) -> dict:
    row = alert.to_dict()
    return {key: row[key] for key in RESOLVED_HEADERS}


def write_resolved_csv(path: Path, resolved: Sequence[ResolvedAlert]) -> Path:
    # Input order is kept; it is the order the list view shows.
    write_csv(path, RESOLVED_HEADERS, (_serialize_row(alert) for alert in resolved))
    return path

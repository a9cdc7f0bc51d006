"""Location name -> coordinate reference table."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from types import MappingProxyType
from typing import Any

from alertmap.common.errors import ParseError
from alertmap.common.fs import read_csv_rows
from alertmap.common.logging import log_event
from alertmap.common.models import CoordinateTable

_logger = logging.getLogger(__name__)


def _safe_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(parsed):
        return None
    return parsed


def _valid_lat_lon(lat: float | None, lon: float | None) -> bool:
    if lat is None or lon is None:
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def load_coordinate_table(
    csv_path: Path,
    *,
    key_column: str = "loc",
    lat_column: str = "lat",
    lon_column: str = "long",
    logger: logging.Logger | None = None,
) -> CoordinateTable:
    """Load the reference table once; the result is read-only.

    Rows without a name or with unusable coordinates are skipped. A name that
    appears twice keeps the later row.
    """
    logger = logger or _logger
    if not csv_path.exists():
        raise ParseError(f"Missing coordinate table: {csv_path}")

    header, rows = read_csv_rows(csv_path)
    missing = {key_column, lat_column, lon_column} - set(header)
    if missing:
        raise ParseError(f"Coordinate table {csv_path} lacks columns: {', '.join(sorted(missing))}")

    table: dict[str, tuple[float, float]] = {}
    skipped = 0
    duplicates = 0
    for row in rows:
        name = (row.get(key_column) or "").strip()
        lat = _safe_float(row.get(lat_column))
        lon = _safe_float(row.get(lon_column))
        if not name or not _valid_lat_lon(lat, lon):
            skipped += 1
            continue
        if name in table:
            duplicates += 1
        table[name] = (lat, lon)

    if skipped or duplicates:
        log_event(
            logger,
            f"coordinate table: skipped {skipped} unusable row(s), {duplicates} duplicate name(s)",
            level=logging.WARNING,
            stage="resolve",
            event="COORDINATE_ROW_SKIPPED",
            status="partial",
            rows_in=len(rows),
            rows_out=len(table),
        )
    return MappingProxyType(table)

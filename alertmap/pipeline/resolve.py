"""Resolve raw alerts to geo-located, categorised entries."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from alertmap.common.constants import CATEGORY_ALL, CATEGORY_LABELS, CATEGORY_UNKNOWN, DEFAULT_LIST_LIMIT
from alertmap.common.logging import log_event
from alertmap.common.models import CoordinateTable, RawAlert, ResolvedAlert

_logger = logging.getLogger(__name__)


def category_label(code: Any) -> str:
    if isinstance(code, bool):
        return CATEGORY_UNKNOWN
    if isinstance(code, str):
        try:
            code = int(code.strip())
        except ValueError:
            return CATEGORY_UNKNOWN
    if not isinstance(code, int):
        return CATEGORY_UNKNOWN
    return CATEGORY_LABELS.get(code, CATEGORY_UNKNOWN)


def _resolve_locations(location: str, table: CoordinateTable) -> list[tuple[str, tuple[float, float]]]:
    name = location.strip()
    if name in table:
        return [(name, table[name])]

    matches = []
    for part in location.split(","):
        part = part.strip()
        if part and part in table:
            matches.append((part, table[part]))
    return matches


def resolve_alerts(
    raws: Iterable[RawAlert],
    table: CoordinateTable,
    *,
    logger: logging.Logger | None = None,
) -> list[ResolvedAlert]:
    """Attach coordinates and category labels to each alert.

    A location that is not in ``table`` as a whole is split on commas and each
    part looked up on its own, so one alert may yield several entries. Alerts
    with no resolvable part are dropped.
    """
    logger = logger or _logger
    resolved: list[ResolvedAlert] = []
    rows_in = 0
    dropped = 0

    for raw in raws:
        rows_in += 1
        matches = _resolve_locations(raw.location, table)
        if not matches:
            dropped += 1
            log_event(
                logger,
                f"no coordinates for location {raw.location!r}",
                level=logging.DEBUG,
                stage="resolve",
                event="LOCATION_UNRESOLVED",
                status="skipped",
            )
            continue

        label = category_label(raw.category)
        for name, (lat, lon) in matches:
            resolved.append(
                ResolvedAlert(
                    date=raw.alert_date,
                    title=raw.title,
                    location=name,
                    category=label,
                    lat=lat,
                    lon=lon,
                )
            )

    log_event(
        logger,
        f"resolved {len(resolved)} entries from {rows_in} alerts; {dropped} unresolved",
        stage="resolve",
        event="RESOLVE_DONE",
        status="ok" if dropped == 0 else "partial",
        rows_in=rows_in,
        rows_out=len(resolved),
    )
    return resolved


def filter_by_category(resolved: Sequence[ResolvedAlert], category: str = CATEGORY_ALL) -> list[ResolvedAlert]:
    if category == CATEGORY_ALL:
        return list(resolved)
    return [alert for alert in resolved if alert.category == category]


def list_view(resolved: Sequence[ResolvedAlert], limit: int = DEFAULT_LIST_LIMIT) -> list[ResolvedAlert]:
    return list(resolved[:limit])

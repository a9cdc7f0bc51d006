"""Summary statistics and map layers derived from resolved alerts."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from alertmap.common.constants import DEFAULT_TOP_N
from alertmap.common.deterministic import first_by_key, stable_sorted
from alertmap.common.models import AggregateStats, ResolvedAlert


def compute_stats(resolved: Sequence[ResolvedAlert], top_n: int = DEFAULT_TOP_N) -> AggregateStats:
    by_category = Counter(alert.category for alert in resolved)
    by_location = Counter(alert.location for alert in resolved)

    # Counter keeps first-seen order, so ties rank by first appearance.
    top_locations = stable_sorted(by_location.items(), key=lambda item: item[1], reverse=True)[:top_n]

    first_alert = last_alert = None
    if resolved:
        first_alert = min(alert.date for alert in resolved)
        last_alert = max(alert.date for alert in resolved)

    return AggregateStats(
        total=len(resolved),
        by_category=dict(by_category),
        by_location=dict(by_location),
        top_locations=top_locations,
        first_alert=first_alert,
        last_alert=last_alert,
    )


def compute_heatmap_weights(resolved: Sequence[ResolvedAlert]) -> list[tuple[float, float, int]]:
    weights = Counter((alert.lat, alert.lon) for alert in resolved)
    return [(lat, lon, count) for (lat, lon), count in weights.items()]


def compute_unique_markers(resolved: Sequence[ResolvedAlert]) -> list[ResolvedAlert]:
    return first_by_key(resolved, key=lambda alert: (alert.lat, alert.lon))

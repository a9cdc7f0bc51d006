"""Geometry helpers."""

from __future__ import annotations

from typing import Callable, Sequence, TypeVar

from pyproj import Geod

from alertmap.common.constants import DEFAULT_NEAREST_MAX_DISTANCE_M, EARTH_RADIUS_M

T = TypeVar("T")

_SPHERE = Geod(a=EARTH_RADIUS_M, b=EARTH_RADIUS_M)


def _lat_lon(point) -> tuple[float, float]:
    return point.lat, point.lon


def great_circle_distance_m(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Distance in metres between two ``(lat, lon)`` pairs."""
    _az12, _az21, distance = _SPHERE.inv(a[1], a[0], b[1], b[0])
    return float(distance)


def find_nearest_point(
    click: tuple[float, float],
    points: Sequence[T],
    max_distance_m: float = DEFAULT_NEAREST_MAX_DISTANCE_M,
    *,
    coords: Callable[[T], tuple[float, float]] = _lat_lon,
) -> T | None:
    nearest: T | None = None
    best = float("inf")
    for point in points:
        distance = great_circle_distance_m(click, coords(point))
        # Strict comparison keeps the first point on ties.
        if distance < best:
            best = distance
            nearest = point
    if nearest is None or best > max_distance_m:
        return None
    return nearest

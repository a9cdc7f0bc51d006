"""Helpers for deterministic ordering and serialisation."""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, TypeVar

T = TypeVar("T")


def stable_sorted(items: Iterable[T], key: Callable[[T], object], *, reverse: bool = False) -> list[T]:
    # sorted() is stable in both directions: equal keys keep input order.
    return sorted(items, key=key, reverse=reverse)


def first_by_key(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    seen: dict[Hashable, T] = {}
    for item in items:
        seen.setdefault(key(item), item)
    return list(seen.values())

"""File-backed apartment listing store."""

from __future__ import annotations

import json
import time
from dataclasses import replace
from pathlib import Path
from typing import Callable
from urllib.parse import quote

from alertmap.common.constants import DEFAULT_MAP_CENTER
from alertmap.common.errors import ParseError
from alertmap.common.fs import read_json, write_json
from alertmap.common.models import Apartment
from alertmap.common.schema import parse_apartment


def new_apartment_id() -> str:
    return str(time.time_ns() // 1_000_000)


class ApartmentStore:
    """The whole collection lives under one key of a JSON file.

    It is read once on construction and rewritten after every mutation.
    """

    def __init__(self, path: Path, key: str = "apartments") -> None:
        self.path = path
        self.key = key
        self._apartments: list[Apartment] = self._load()

    def _load(self) -> list[Apartment]:
        if not self.path.exists():
            return []
        try:
            payload = read_json(self.path)
        except (OSError, UnicodeDecodeError) as exc:
            raise ParseError(f"Could not read apartment store {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ParseError(f"Apartment store {self.path} is not valid JSON") from exc
        records = payload.get(self.key, []) if isinstance(payload, dict) else None
        if not isinstance(records, list):
            raise ParseError(f"Apartment store {self.path} has no {self.key!r} list")
        return [parse_apartment(record, index=idx) for idx, record in enumerate(records)]

    def _save(self) -> None:
        write_json(self.path, {self.key: [apartment.to_dict() for apartment in self._apartments]})

    def all(self) -> list[Apartment]:
        return list(self._apartments)

    def get(self, apartment_id: str) -> Apartment:
        for apartment in self._apartments:
            if apartment.id == apartment_id:
                return apartment
        raise KeyError(apartment_id)

    def _update(self, apartment_id: str, change: Callable[[Apartment], Apartment]) -> Apartment:
        for idx, apartment in enumerate(self._apartments):
            if apartment.id == apartment_id:
                updated = change(apartment)
                self._apartments[idx] = updated
                self._save()
                return updated
        raise KeyError(apartment_id)

    def add(self, apartment: Apartment) -> Apartment:
        self._apartments.append(apartment)
        self._save()
        return apartment

    def remove(self, apartment_id: str) -> None:
        self.get(apartment_id)
        self._apartments = [apartment for apartment in self._apartments if apartment.id != apartment_id]
        self._save()

    def add_note(self, apartment_id: str, note: str) -> Apartment:
        return self._update(apartment_id, lambda apartment: replace(apartment, notes=(*apartment.notes, note)))

    def toggle_relevance(self, apartment_id: str) -> Apartment:
        return self._update(
            apartment_id,
            lambda apartment: replace(apartment, is_irrelevant=not apartment.is_irrelevant),
        )


def map_center(apartments: list[Apartment]) -> tuple[float, float]:
    if not apartments:
        return DEFAULT_MAP_CENTER
    latest = apartments[-1]
    return latest.lat, latest.lon


def contact_link(apartment: Apartment, *, base_url: str, template: str) -> str:
    message = quote(template.format(address=apartment.address), safe="")
    return f"{base_url.rstrip('/')}/{apartment.contact_phone}?text={message}"

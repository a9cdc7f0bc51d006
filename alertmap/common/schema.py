"""Minimal strict schemas for YAML config and ingested records."""

from __future__ import annotations

from typing import Any

from alertmap.common.errors import ConfigError, ParseError
from alertmap.common.models import Apartment, RawAlert
from alertmap.common.time_utils import parse_alert_timestamp


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_int(value: Any, ctx: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"{ctx} must be a positive integer, got {value!r}")


def validate_alerts_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"upstream", "coordinates", "aggregation"}
    _assert_required_keys(cfg, top_required, "alerts config")
    _assert_no_unknown_keys(cfg, top_required, "alerts config", allow_unknown)

    _assert_required_keys(
        cfg["upstream"],
        {"endpoint", "lang", "mode", "max_span_days", "headers", "timeout"},
        "upstream",
    )
    _assert_positive_int(cfg["upstream"]["max_span_days"], "upstream.max_span_days")
    _assert_required_keys(cfg["upstream"]["timeout"], {"connect", "read"}, "upstream.timeout")
    if not isinstance(cfg["upstream"]["headers"], dict):
        raise ConfigError("upstream.headers must be a mapping")

    _assert_required_keys(
        cfg["coordinates"],
        {"csv_path", "key_column", "lat_column", "lon_column"},
        "coordinates",
    )
    _assert_required_keys(
        cfg["aggregation"],
        {"top_n", "list_limit", "nearest_max_distance_m"},
        "aggregation",
    )
    _assert_positive_int(cfg["aggregation"]["top_n"], "aggregation.top_n")
    _assert_positive_int(cfg["aggregation"]["list_limit"], "aggregation.list_limit")
    return cfg


def validate_apartments_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"store", "geocoder", "contact"}
    _assert_required_keys(cfg, top_required, "apartments config")
    _assert_no_unknown_keys(cfg, top_required, "apartments config", allow_unknown)

    _assert_required_keys(cfg["store"], {"path", "key"}, "store")
    _assert_required_keys(
        cfg["geocoder"],
        {"endpoint", "accept_language", "min_query_length", "suggestion_limit", "rate_per_sec"},
        "geocoder",
    )
    _assert_required_keys(cfg["contact"], {"whatsapp_base_url", "message_template"}, "contact")
    if "{address}" not in cfg["contact"]["message_template"]:
        raise ConfigError("contact.message_template must contain {address}")
    return cfg


def parse_raw_alert(record: Any, *, index: int = 0) -> RawAlert:
    if not isinstance(record, dict):
        raise ParseError(f"Alert #{index} is not a JSON object")
    location = record.get("data")
    if not isinstance(location, str):
        raise ParseError(f"Alert #{index} has no 'data' location string")
    try:
        alert_date = parse_alert_timestamp(record.get("alertDate"))
    except ParseError as exc:
        raise ParseError(f"Alert #{index}: {exc}") from exc
    title = record.get("title")
    return RawAlert(
        alert_date=alert_date,
        title=title if isinstance(title, str) else "",
        location=location,
        category=record.get("category"),
    )


def parse_raw_alerts(records: Any) -> list[RawAlert]:
    if not isinstance(records, list):
        raise ParseError("Alert payload must be a JSON array")
    return [parse_raw_alert(record, index=idx) for idx, record in enumerate(records)]


def _number(record: dict, key: str, ctx: str, *, cast=float):
    value = record.get(key, 0)
    if isinstance(value, bool):
        raise ParseError(f"{ctx}: {key} must be numeric")
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"{ctx}: {key} must be numeric, got {value!r}") from exc


def parse_apartment(record: Any, *, index: int = 0) -> Apartment:
    ctx = f"Apartment #{index}"
    if not isinstance(record, dict):
        raise ParseError(f"{ctx} is not a JSON object")
    for key in ("id", "address"):
        if not isinstance(record.get(key), str) or not record[key]:
            raise ParseError(f"{ctx} has no {key!r}")
    if record.get("lat") is None or record.get("lng") is None:
        raise ParseError(f"{ctx} has no coordinates")
    notes = record.get("notes") or []
    if not isinstance(notes, list):
        raise ParseError(f"{ctx}: notes must be a list")
    return Apartment(
        id=record["id"],
        address=record["address"],
        contact_name=str(record.get("contactName", "")),
        contact_phone=str(record.get("contactPhone", "")),
        price=_number(record, "price", ctx),
        rooms=_number(record, "rooms", ctx),
        size=_number(record, "size", ctx),
        floor=_number(record, "floor", ctx, cast=int),
        details=str(record.get("details", "")),
        lat=_number(record, "lat", ctx),
        lon=_number(record, "lng", ctx),
        notes=tuple(str(note) for note in notes),
        is_irrelevant=bool(record.get("isIrrelevant", False)),
    )

"""Date helpers for the alert history range and run metadata."""

from __future__ import annotations

from datetime import date, datetime, timezone

from alertmap.common.errors import ParseError, ValidationError

DISPLAY_DATE_FORMAT = "%d.%m.%Y"
UPSTREAM_DATE_FORMAT = "%Y-%m-%d"


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")


def parse_display_date(value: str | None, *, field: str = "date") -> date:
    """Parse a ``DD.MM.YYYY`` calendar date as entered in the dashboard."""
    if not value or not value.strip():
        raise ValidationError(f"{field} is required")
    try:
        return datetime.strptime(value.strip(), DISPLAY_DATE_FORMAT).date()
    except ValueError as exc:
        raise ValidationError(f"{field} must be DD.MM.YYYY, got {value!r}") from exc


def format_display_date(value: date) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def format_upstream_date(value: date) -> str:
    return value.strftime(UPSTREAM_DATE_FORMAT)


def parse_alert_timestamp(value: object) -> datetime:
    """Parse an upstream ``alertDate``, which is naive Israel local time."""
    if not isinstance(value, str) or not value.strip():
        raise ParseError(f"alertDate must be a non-empty string, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError as exc:
        raise ParseError(f"Unrecognised alertDate: {value!r}") from exc
    # Naive and offset-aware values cannot be ordered against each other.
    if parsed.tzinfo is not None:
        raise ParseError(f"alertDate must not carry a UTC offset: {value!r}")
    return parsed

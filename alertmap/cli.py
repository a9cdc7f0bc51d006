"""CLI entrypoint for the alert history map and apartment tracker."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from alertmap.apartments.store import ApartmentStore, contact_link, map_center, new_apartment_id
from alertmap.common.config_loader import ConfigBundle, load_all_configs, resolve_data_path
from alertmap.common.constants import (
    CATEGORY_AIRCRAFT,
    CATEGORY_ALL,
    CATEGORY_ROCKET,
    CATEGORY_UNKNOWN,
    EXIT_HARD_FAIL,
    EXIT_PARTIAL,
    EXIT_SUCCESS,
    STAGES,
)
from alertmap.common.errors import PipelineError, ValidationError
from alertmap.common.geometry import find_nearest_point
from alertmap.common.logging import build_logger, log_event
from alertmap.common.models import Apartment
from alertmap.common.time_utils import generate_run_id, parse_display_date
from alertmap.harvest.alerts_harvest import run_fetch
from alertmap.harvest.geocoder import NominatimGeocoder
from alertmap.pipeline.reports import load_summary_markers, summary_path
from alertmap.pipeline.resolve_stage import run_resolve

APARTMENT_ACTIONS = ("list", "add", "remove", "note", "toggle", "suggest")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all", "nearest", "apartments"])
    parser.add_argument("action", nargs="?", choices=APARTMENT_ACTIONS, default=None)
    parser.add_argument("--from", dest="from_date", default=None, help="DD.MM.YYYY")
    parser.add_argument("--to", dest="to_date", default=None, help="DD.MM.YYYY")
    parser.add_argument("--input", default=None, help="alert JSON file to resolve")
    parser.add_argument(
        "--category",
        default=CATEGORY_ALL,
        choices=[CATEGORY_ALL, CATEGORY_ROCKET, CATEGORY_AIRCRAFT, CATEGORY_UNKNOWN],
    )
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--id", dest="apartment_id", default=None)
    parser.add_argument("--address", default=None, help="address to add, or partial address to suggest")
    parser.add_argument("--contact-name", default="")
    parser.add_argument("--contact-phone", default="")
    parser.add_argument("--price", type=float, default=0)
    parser.add_argument("--rooms", type=float, default=0)
    parser.add_argument("--size", type=float, default=0)
    parser.add_argument("--floor", type=int, default=0)
    parser.add_argument("--details", default="")
    parser.add_argument("--note", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    return parser.parse_args(argv)


def _print_json(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def execute_stage(stage: str, args: argparse.Namespace, bundle: ConfigBundle, data_dir: Path, run_id: str, logger, state: dict):
    if stage == "fetch":
        start = parse_display_date(args.from_date, field="--from")
        end = parse_display_date(args.to_date, field="--to")
        fetched = run_fetch(start, end, bundle.alerts, data_dir, run_id, logger=logger)
        state["fetched_path"] = Path(fetched["path"])
    elif stage == "resolve":
        input_path = Path(args.input) if args.input else state.get("fetched_path")
        run_resolve(
            bundle.alerts,
            data_dir,
            run_id,
            input_path=input_path,
            category=args.category,
            logger=logger,
        )
    else:
        raise ValueError(f"Unknown stage: {stage}")


def run_nearest(args: argparse.Namespace, bundle: ConfigBundle, data_dir: Path) -> int:
    if args.lat is None or args.lon is None:
        raise ValidationError("nearest requires --lat and --lon")
    markers = load_summary_markers(summary_path(data_dir))
    max_distance = float(bundle.alerts["aggregation"]["nearest_max_distance_m"])
    nearest = find_nearest_point((args.lat, args.lon), markers, max_distance)
    _print_json(nearest.to_dict() if nearest is not None else None)
    return EXIT_SUCCESS


def _require(value, flag: str):
    if value in (None, ""):
        raise ValidationError(f"{flag} is required")
    return value


def run_apartments(args: argparse.Namespace, bundle: ConfigBundle, data_dir: Path, geocoder: NominatimGeocoder | None = None) -> int:
    cfg = bundle.apartments
    store = ApartmentStore(resolve_data_path(cfg["store"]["path"], data_dir), key=cfg["store"]["key"])
    action = args.action or "list"

    if action == "list":
        apartments = store.all()
        _print_json(
            {
                "center": list(map_center(apartments)),
                "apartments": [
                    {
                        **apartment.to_dict(),
                        "contactLink": contact_link(
                            apartment,
                            base_url=cfg["contact"]["whatsapp_base_url"],
                            template=cfg["contact"]["message_template"],
                        ),
                    }
                    for apartment in apartments
                ],
            }
        )
    elif action == "add":
        address = _require(args.address, "--address")
        owns_geocoder = geocoder is None
        geocoder = geocoder or NominatimGeocoder(cfg["geocoder"])
        try:
            lat, lon = geocoder.geocode(address)
        finally:
            if owns_geocoder:
                geocoder.close()
        apartment = store.add(
            Apartment(
                id=new_apartment_id(),
                address=address,
                contact_name=args.contact_name,
                contact_phone=args.contact_phone,
                price=args.price,
                rooms=args.rooms,
                size=args.size,
                floor=args.floor,
                details=args.details,
                lat=lat,
                lon=lon,
            )
        )
        _print_json(apartment.to_dict())
    elif action == "remove":
        store.remove(_require(args.apartment_id, "--id"))
    elif action == "note":
        _print_json(store.add_note(_require(args.apartment_id, "--id"), _require(args.note, "--note")).to_dict())
    elif action == "toggle":
        _print_json(store.toggle_relevance(_require(args.apartment_id, "--id")).to_dict())
    elif action == "suggest":
        query = _require(args.address, "--address")
        owns_geocoder = geocoder is None
        geocoder = geocoder or NominatimGeocoder(cfg["geocoder"])
        try:
            _print_json(geocoder.suggest(query))
        finally:
            if owns_geocoder:
                geocoder.close()
    return EXIT_SUCCESS


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    bundle = load_all_configs(config_dir, overlay_config_dir=overlay_config_dir)

    if args.command in ("nearest", "apartments"):
        try:
            if args.command == "nearest":
                return run_nearest(args, bundle, data_dir)
            return run_apartments(args, bundle, data_dir)
        except KeyError as exc:
            log_event(logger, f"unknown apartment id {exc}", level=logging.ERROR, run_id=run_id, event="COMMAND_FAIL", status="error", error_code="NOT_FOUND")
            return EXIT_HARD_FAIL
        except PipelineError as exc:
            log_event(logger, str(exc), level=logging.ERROR, run_id=run_id, event="COMMAND_FAIL", status="error", error_code=exc.error_code)
            return EXIT_HARD_FAIL

    stages = STAGES if args.command == "all" else (args.command,)
    state: dict = {}

    for stage in stages:
        log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
        try:
            execute_stage(stage, args, bundle, data_dir, run_id, logger, state)
        except PipelineError as exc:
            log_event(
                logger,
                f"stage failed: {exc}",
                level=logging.ERROR,
                run_id=run_id,
                stage=stage,
                event="STAGE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            # A failed fetch leaves nothing to resolve in an "all" run.
            if stage == stages[0] or args.command != "all":
                return EXIT_HARD_FAIL
            return EXIT_PARTIAL
        log_event(logger, "stage end", run_id=run_id, stage=stage, event="STAGE_END", status="ok")

    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError:
        return EXIT_HARD_FAIL
    except Exception:
        logging.getLogger("alertmap").exception("unexpected failure")
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())

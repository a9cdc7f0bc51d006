import json
from pathlib import Path
from urllib.parse import unquote

import pytest

from alertmap.apartments.store import ApartmentStore, contact_link, map_center
from alertmap.common.errors import ParseError
from alertmap.common.models import Apartment


def _apartment(apartment_id: str, address: str = "Dizengoff 100", lat: float = 32.08, lon: float = 34.77) -> Apartment:
    return Apartment(
        id=apartment_id,
        address=address,
        contact_name="Dana",
        contact_phone="972500000000",
        price=6500,
        rooms=3,
        size=70,
        floor=2,
        details="balcony",
        lat=lat,
        lon=lon,
    )


def test_store_persists_every_mutation(tmp_path: Path):
    path = tmp_path / "apartments.json"
    store = ApartmentStore(path)

    store.add(_apartment("1"))
    store.add(_apartment("2", address="Allenby 5"))
    store.add_note("1", "call back on Sunday")
    store.toggle_relevance("2")

    reloaded = ApartmentStore(path)
    by_id = {apartment.id: apartment for apartment in reloaded.all()}
    assert by_id["1"].notes == ("call back on Sunday",)
    assert by_id["2"].is_irrelevant is True

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["apartments"][0]["contactName"] == "Dana"
    assert raw["apartments"][0]["lng"] == 34.77


def test_removing_last_apartment_is_persisted(tmp_path: Path):
    path = tmp_path / "apartments.json"
    store = ApartmentStore(path)
    store.add(_apartment("1"))
    store.remove("1")

    assert ApartmentStore(path).all() == []


def test_toggle_relevance_twice_restores(tmp_path: Path):
    store = ApartmentStore(tmp_path / "apartments.json")
    store.add(_apartment("1"))
    store.toggle_relevance("1")
    assert store.toggle_relevance("1").is_irrelevant is False


def test_unknown_id_raises_key_error(tmp_path: Path):
    store = ApartmentStore(tmp_path / "apartments.json")
    with pytest.raises(KeyError):
        store.remove("missing")
    with pytest.raises(KeyError):
        store.add_note("missing", "x")


def test_custom_key_and_malformed_file(tmp_path: Path):
    path = tmp_path / "apartments.json"
    path.write_text(json.dumps({"flats": []}), encoding="utf-8")
    assert ApartmentStore(path, key="flats").all() == []

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ParseError):
        ApartmentStore(path)

    path.write_text(json.dumps({"apartments": {"id": "1"}}), encoding="utf-8")
    with pytest.raises(ParseError):
        ApartmentStore(path)


def test_store_file_with_invalid_utf8_is_parse_error(tmp_path: Path):
    path = tmp_path / "apartments.json"
    path.write_bytes(b'{"apartments": ["\xff"]}')

    with pytest.raises(ParseError):
        ApartmentStore(path)


def test_map_center_uses_latest_apartment():
    assert map_center([]) == (32.0853, 34.7818)
    assert map_center([_apartment("1"), _apartment("2", lat=31.25, lon=34.79)]) == (31.25, 34.79)


def test_contact_link_encodes_message():
    link = contact_link(_apartment("1", address="Allenby 5"), base_url="https://wa.me/", template="Interested in {address}?")

    assert link.startswith("https://wa.me/972500000000?text=")
    assert unquote(link.split("text=")[1]) == "Interested in Allenby 5?"
    assert " " not in link

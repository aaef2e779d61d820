from __future__ import annotations

import pytest

from src.cma.fields import (
    ADDRESS_SOURCES,
    BEDS_SOURCES,
    SQFT_SOURCES,
    first_number,
    first_text,
    get_path,
    optional_number,
    resolve_coordinates,
    resolve_lot_size_acres,
    resolve_photos,
    to_number,
)


def test_lot_size_from_square_feet() -> None:
    assert resolve_lot_size_acres({"lotSizeSquareFeet": 21780}) == pytest.approx(0.5)


def test_generic_lot_size_disambiguated_by_magnitude() -> None:
    assert resolve_lot_size_acres({"lotSize": 150}) == pytest.approx(150 / 43560)
    assert resolve_lot_size_acres({"lotSize": 150}) == pytest.approx(0.00344, abs=1e-5)
    assert resolve_lot_size_acres({"lotSize": 0.5}) == pytest.approx(0.5)


def test_explicit_acres_preferred_over_square_feet() -> None:
    record = {"lotSizeAcres": "1.25", "lotSizeSquareFeet": 43560, "lotSize": 5000}
    assert resolve_lot_size_acres(record) == pytest.approx(1.25)
    assert resolve_lot_size_acres({"lot": {"acres": 2}}) == 2


def test_lot_size_absent_is_none() -> None:
    assert resolve_lot_size_acres({}) is None
    assert resolve_lot_size_acres({"lotSize": "n/a"}) is None


def test_photo_fallback_prefers_image_url() -> None:
    assert resolve_photos({"imageUrl": "a", "photo": "b", "images": ["c"]}) == ["a"]
    assert resolve_photos({"photo": "b", "images": ["c"]}) == ["b"]


def test_photo_fallback_uses_image_list_before_legacy_photos() -> None:
    assert resolve_photos({"images": ["c", "d"], "photos": ["e"]}) == ["c", "d"]


def test_photo_lists_drop_blank_entries() -> None:
    assert resolve_photos({"photos": ["", None, " ", "e", 7]}) == ["e"]


def test_photo_list_with_no_usable_entries_falls_through() -> None:
    record = {"images": ["", "  "], "photos": [], "coverPhoto": "cover.jpg"}
    assert resolve_photos(record) == ["cover.jpg"]


def test_single_photo_fields_in_order() -> None:
    assert resolve_photos({"primaryPhoto": "p", "coverPhoto": "c"}) == ["p"]
    assert resolve_photos({"coverPhoto": "c"}) == ["c"]
    assert resolve_photos({}) == []
    assert resolve_photos({"imageUrl": "   ", "photo": 3}) == []


def test_numeric_strings_are_coerced() -> None:
    assert to_number("1,850") == 1850
    assert to_number("$725,000") == 725000
    assert to_number("2.5 baths") == 2.5
    assert to_number("abc") is None
    assert to_number(True) is None
    assert to_number(float("nan")) is None
    assert to_number({"value": 3}) is None


def test_integers_past_float_range_are_unreadable() -> None:
    assert to_number(10**400) is None
    assert first_number({"sqft": 10**400, "livingArea": 900}, SQFT_SOURCES) == 900
    assert resolve_lot_size_acres({"lotSize": -(10**400)}) is None


def test_first_number_walks_sources_and_defaults_to_zero() -> None:
    assert first_number({"livingArea": "1,200"}, SQFT_SOURCES) == 1200
    assert first_number({"sqft": "abc", "livingArea": 900}, SQFT_SOURCES) == 900
    assert first_number({}, SQFT_SOURCES) == 0
    assert first_number({"bedrooms": "3.7"}, BEDS_SOURCES, integer=True) == 3
    assert isinstance(first_number({"beds": 4.0}, BEDS_SOURCES, integer=True), int)


def test_optional_number_skips_zero_values() -> None:
    record = {"closePrice": 0, "soldPrice": "410000"}
    assert optional_number(record, ("closePrice", "soldPrice")) == 410000
    assert optional_number({}, ("closePrice",)) is None


def test_address_chain_order_and_nested_fallback() -> None:
    assert first_text({"address": "b", "streetAddress": "a"}, ADDRESS_SOURCES) == "a"
    assert first_text({"location": {"address": "nested"}}, ADDRESS_SOURCES) == "nested"
    assert first_text({"unparsedAddress": "  "}, ADDRESS_SOURCES) == ""


def test_get_path_tolerates_non_dict_segments() -> None:
    assert get_path({"map": "not-a-dict"}, "map.lat") is None
    assert get_path({"map": {"lat": 1}}, "map.lat") == 1


@pytest.mark.parametrize(
    "record",
    [
        {"latitude": 30.1, "longitude": -97.2},
        {"lat": 30.1, "lng": -97.2},
        {"map": {"latitude": 30.1, "longitude": -97.2}},
        {"map": {"lat": 30.1, "lng": -97.2}},
        {"coordinates": {"latitude": 30.1, "longitude": -97.2}},
        {"coordinates": {"lat": "30.1", "lng": "-97.2"}},
        {"geo": {"lat": 30.1, "lng": -97.2}},
    ],
)
def test_coordinate_naming_conventions(record: dict[str, object]) -> None:
    assert resolve_coordinates(record) == (pytest.approx(30.1), pytest.approx(-97.2))


def test_coordinates_missing() -> None:
    assert resolve_coordinates({"latitude": 0, "geo": {}}) == (None, None)

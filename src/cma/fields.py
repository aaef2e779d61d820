"""Ordered field-fallback chains for upstream listing records.

Listing payloads reach the CMA presentation from several upstream shapes (the MLS
provider, stored CMA snapshots, older saved records) and the same logical field can
live under different names. Every logical field below is resolved from an explicit,
ordered tuple of sources; the first source that yields a usable value wins and the
documented default applies when none does. Nothing in this module raises on malformed
input.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable
from typing import Any

ACRE_SQUARE_FEET = 43560
# Generic ``lotSize`` values above this are assumed to be square feet, not acres.
LOT_SIZE_SQFT_THRESHOLD = 100

ADDRESS_SOURCES: tuple[str, ...] = (
    "unparsedAddress",
    "streetAddress",
    "address",
    "fullAddress",
    "addressLine1",
    "location.address",
)
CITY_SOURCES: tuple[str, ...] = ("city", "location.city")
SQFT_SOURCES: tuple[str, ...] = ("sqft", "livingArea")
BEDS_SOURCES: tuple[str, ...] = ("bedrooms", "beds", "bedroomsTotal")
BATHS_SOURCES: tuple[str, ...] = ("bathrooms", "baths", "bathroomsTotal")
LIST_PRICE_SOURCES: tuple[str, ...] = ("listPrice", "price", "closePrice")
CLOSE_PRICE_SOURCES: tuple[str, ...] = ("closePrice", "soldPrice")
ORIGINAL_PRICE_SOURCES: tuple[str, ...] = ("originalPrice",)
DAYS_ON_MARKET_SOURCES: tuple[str, ...] = ("daysOnMarket", "dom")
DESCRIPTION_SOURCES: tuple[str, ...] = ("description", "remarks", "publicRemarks")
STATUS_SOURCES: tuple[str, ...] = ("status", "standardStatus")
LATITUDE_SOURCES: tuple[str, ...] = (
    "latitude",
    "lat",
    "map.latitude",
    "map.lat",
    "coordinates.latitude",
    "coordinates.lat",
    "geo.lat",
)
LONGITUDE_SOURCES: tuple[str, ...] = (
    "longitude",
    "lng",
    "map.longitude",
    "map.lng",
    "coordinates.longitude",
    "coordinates.lng",
    "geo.lng",
)
LOT_ACRES_SOURCES: tuple[str, ...] = ("lotSizeAcres", "lot.acres")
# Square feet first, then the generic field whose unit is guessed from its magnitude.
LOT_SIZE_FALLBACK_SOURCES: tuple[str, ...] = ("lotSizeSquareFeet", "lotSize")

_LEADING_NUMBER = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

PhotoAccessor = Callable[[dict[str, Any]], list[str]]


def get_path(record: Any, path: str) -> Any:
    current: Any = record
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        else:
            return None
    return current


def to_number(value: Any) -> float | None:
    """Coerce a number or numeric string, returning None when it cannot be read.

    Strings are read the way ``parseFloat`` reads them (leading numeric prefix) after
    dropping thousands separators and currency signs.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip().replace(",", "").replace("$", "")
        match = _LEADING_NUMBER.match(text)
        if not match:
            return None
        try:
            number = float(match.group(0))
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def tidy_number(number: float) -> int | float:
    if float(number).is_integer():
        return int(number)
    return number


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


def first_text(record: dict[str, Any], sources: Iterable[str], default: str = "") -> str:
    for path in sources:
        text = _text(get_path(record, path))
        if text is not None:
            return text
    return default


def optional_text(record: dict[str, Any], sources: Iterable[str]) -> str | None:
    for path in sources:
        text = _text(get_path(record, path))
        if text is not None:
            return text
    return None


def optional_number(
    record: dict[str, Any], sources: Iterable[str], *, integer: bool = False
) -> int | float | None:
    for path in sources:
        number = to_number(get_path(record, path))
        if not number:
            continue
        if integer:
            return int(number)
        return tidy_number(number)
    return None


def first_number(
    record: dict[str, Any], sources: Iterable[str], *, integer: bool = False
) -> int | float:
    number = optional_number(record, sources, integer=integer)
    return 0 if number is None else number


def resolve_coordinates(record: dict[str, Any]) -> tuple[int | float | None, int | float | None]:
    return optional_number(record, LATITUDE_SOURCES), optional_number(record, LONGITUDE_SOURCES)


def resolve_lot_size_acres(record: dict[str, Any]) -> int | float | None:
    for path in LOT_ACRES_SOURCES:
        acres = to_number(get_path(record, path))
        if acres is not None:
            return tidy_number(acres)
    square_feet_field, generic_field = LOT_SIZE_FALLBACK_SOURCES
    square_feet = to_number(get_path(record, square_feet_field))
    if square_feet:
        return square_feet / ACRE_SQUARE_FEET
    generic = to_number(get_path(record, generic_field))
    if generic is None:
        return None
    if generic > LOT_SIZE_SQFT_THRESHOLD:
        return generic / ACRE_SQUARE_FEET
    return tidy_number(generic)


def _usable_url(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _single_photo(field: str) -> PhotoAccessor:
    def accessor(record: dict[str, Any]) -> list[str]:
        value = record.get(field)
        return [value] if _usable_url(value) else []

    accessor.__name__ = f"single_{field}"
    return accessor


def _photo_list(field: str) -> PhotoAccessor:
    def accessor(record: dict[str, Any]) -> list[str]:
        value = record.get(field)
        if isinstance(value, list):
            return [item for item in value if _usable_url(item)]
        return []

    accessor.__name__ = f"list_{field}"
    return accessor


PHOTO_ACCESSORS: tuple[PhotoAccessor, ...] = (
    _single_photo("imageUrl"),
    _single_photo("photo"),
    _photo_list("images"),
    _photo_list("photos"),
    _single_photo("primaryPhoto"),
    _single_photo("coverPhoto"),
)


def resolve_photos(record: dict[str, Any]) -> list[str]:
    for accessor in PHOTO_ACCESSORS:
        photos = accessor(record)
        if photos:
            return photos
    return []

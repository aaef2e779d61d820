from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from . import fields
from .analysis import calculate_cma_stats
from .metrics import DerivedMetrics, derive_metrics
from .status import ACTIVE, normalize_status

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT_NAME = "Subject Property"

# Raw keys read by the field chains. Their values reappear under canonical keys.
SUBJECT_ALIAS_KEYS = frozenset(
    path.split(".")[0]
    for sources in (
        fields.ADDRESS_SOURCES,
        fields.CITY_SOURCES,
        fields.SQFT_SOURCES,
        fields.BEDS_SOURCES,
        fields.BATHS_SOURCES,
        fields.LIST_PRICE_SOURCES,
        fields.CLOSE_PRICE_SOURCES,
        fields.ORIGINAL_PRICE_SOURCES,
        fields.DAYS_ON_MARKET_SOURCES,
        fields.DESCRIPTION_SOURCES,
        fields.LATITUDE_SOURCES,
        fields.LONGITUDE_SOURCES,
        fields.LOT_ACRES_SOURCES,
        fields.LOT_SIZE_FALLBACK_SOURCES,
    )
    for path in sources
)


@dataclass
class FreshListing:
    """Latest MLS-synced values for one listing, keyed by MLS number in the lookup."""

    latitude: int | float | None
    longitude: int | float | None
    status: str
    last_status: str

    @property
    def has_coordinates(self) -> bool:
        return bool(self.latitude and self.longitude)


@dataclass
class PresentationResult:
    comparables: list[dict[str, Any]]
    subject: dict[str, Any]
    metrics: DerivedMetrics
    stats: dict[str, Any]
    source: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "comparables": self.comparables,
            "subjectProperty": self.subject,
            "metrics": self.metrics.as_dict(),
            "stats": self.stats,
            "source": self.source,
        }


def _as_record(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _mls_number(record: dict[str, Any]) -> str:
    return fields.first_text(record, ("mlsNumber",))


def build_freshness_lookup(comparable_properties: Sequence[Any]) -> dict[str, FreshListing]:
    lookup: dict[str, FreshListing] = {}
    for item in comparable_properties:
        record = _as_record(item)
        mls_number = _mls_number(record)
        if not mls_number:
            continue
        latitude, longitude = fields.resolve_coordinates(record)
        lookup[mls_number] = FreshListing(
            latitude=latitude,
            longitude=longitude,
            status=fields.first_text(record, fields.STATUS_SOURCES),
            last_status=fields.first_text(record, ("lastStatus",)),
        )
    return lookup


def _coordinate_map(
    latitude: int | float | None, longitude: int | float | None
) -> dict[str, int | float] | None:
    if latitude and longitude:
        return {"latitude": latitude, "longitude": longitude}
    return None


def _property_fields(record: dict[str, Any]) -> dict[str, Any]:
    address = fields.first_text(record, fields.ADDRESS_SOURCES)
    beds = fields.first_number(record, fields.BEDS_SOURCES, integer=True)
    baths = fields.first_number(record, fields.BATHS_SOURCES)
    sqft = fields.first_number(record, fields.SQFT_SOURCES)
    return {
        "mlsNumber": _mls_number(record),
        "unparsedAddress": address,
        "streetAddress": address,
        "address": address,
        "city": fields.first_text(record, fields.CITY_SOURCES),
        "listPrice": fields.first_number(record, fields.LIST_PRICE_SOURCES),
        "closePrice": fields.optional_number(record, fields.CLOSE_PRICE_SOURCES),
        "originalPrice": fields.optional_number(record, fields.ORIGINAL_PRICE_SOURCES),
        "bedroomsTotal": beds,
        "beds": beds,
        "bathroomsTotal": baths,
        "baths": baths,
        "livingArea": sqft,
        "sqft": sqft,
        "lotSizeAcres": fields.resolve_lot_size_acres(record),
        "daysOnMarket": fields.first_number(record, fields.DAYS_ON_MARKET_SOURCES, integer=True),
        "description": fields.optional_text(record, fields.DESCRIPTION_SOURCES),
        "listDate": fields.optional_text(record, ("listDate",)),
        "soldDate": fields.optional_text(record, ("soldDate",)),
        "photos": fields.resolve_photos(record),
    }


def normalize_comparable(
    raw: Any, index: int, lookup: dict[str, FreshListing] | None = None
) -> dict[str, Any]:
    record = _as_record(raw)
    comparable = _property_fields(record)
    mls_number = comparable["mlsNumber"]
    fresh = (lookup or {}).get(mls_number) if mls_number else None

    latitude, longitude = fields.resolve_coordinates(record)
    if (not latitude or not longitude) and fresh is not None and fresh.has_coordinates:
        latitude, longitude = fresh.latitude, fresh.longitude

    status = (fresh.status if fresh else "") or fields.first_text(record, fields.STATUS_SOURCES)
    last_status = (fresh.last_status if fresh else "") or fields.first_text(
        record, ("lastStatus",)
    )
    normalized_status = normalize_status(status, last_status)

    comparable.update(
        {
            "id": mls_number or f"comp-{index}",
            "status": normalized_status,
            "standardStatus": normalized_status,
            "latitude": latitude,
            "longitude": longitude,
            "map": _coordinate_map(latitude, longitude),
        }
    )
    return comparable


def _raw_comparables(record: dict[str, Any]) -> tuple[list[Any], str]:
    properties_data = _as_list(record.get("propertiesData"))
    if properties_data:
        return properties_data, "propertiesData"
    return _as_list(record.get("comparableProperties")), "comparableProperties"


def _free_id(candidate: str, seen_ids: set[str]) -> str:
    suffix = 1
    unique = candidate
    while unique in seen_ids:
        unique = f"{candidate}-{suffix}"
        suffix += 1
    return unique


def normalize_comparables(record: Any) -> list[dict[str, Any]]:
    cma = _as_record(record)
    raw_comparables, _ = _raw_comparables(cma)
    lookup = build_freshness_lookup(_as_list(cma.get("comparableProperties")))
    comparables: list[dict[str, Any]] = []
    seen_ids: set[str] = set()
    for index, raw in enumerate(raw_comparables):
        comparable = normalize_comparable(raw, index, lookup)
        # A listing saved twice keeps its MLS number but not its id.
        if comparable["id"] in seen_ids:
            comparable["id"] = _free_id(f"comp-{index}", seen_ids)
        seen_ids.add(comparable["id"])
        comparables.append(comparable)
    return comparables


def _placeholder_subject(name: str) -> dict[str, Any]:
    return {
        "mlsNumber": "",
        "unparsedAddress": name,
        "streetAddress": name,
        "address": name,
        "city": "",
        "listPrice": 0,
        "closePrice": None,
        "originalPrice": None,
        "bedroomsTotal": 0,
        "beds": 0,
        "bathroomsTotal": 0,
        "baths": 0,
        "livingArea": 0,
        "sqft": 0,
        "lotSizeAcres": None,
        "daysOnMarket": 0,
        "description": None,
        "listDate": None,
        "soldDate": None,
        "status": ACTIVE,
        "standardStatus": ACTIVE,
        "photos": [],
        "latitude": None,
        "longitude": None,
        "map": None,
    }


def build_subject_property(record: Any) -> dict[str, Any]:
    cma = _as_record(record)
    raw_subject = cma.get("subjectProperty")
    if not isinstance(raw_subject, dict) or not raw_subject:
        name = fields.first_text(cma, ("name",), DEFAULT_SUBJECT_NAME)
        return _placeholder_subject(name)

    subject = {
        key: copy.deepcopy(value)
        for key, value in raw_subject.items()
        if key not in SUBJECT_ALIAS_KEYS
    }
    subject.update(_property_fields(raw_subject))
    latitude, longitude = fields.resolve_coordinates(raw_subject)
    normalized_status = normalize_status(
        fields.first_text(raw_subject, ("standardStatus", "status")),
        fields.first_text(raw_subject, ("lastStatus",)),
    )
    subject.update(
        {
            "status": normalized_status,
            "standardStatus": normalized_status,
            "latitude": latitude,
            "longitude": longitude,
            "map": _coordinate_map(latitude, longitude),
        }
    )
    return subject


def normalize_cma_record(record: Any) -> PresentationResult:
    """Build the canonical comparables, subject and summary metrics for one CMA record."""

    cma = _as_record(record)
    _, source = _raw_comparables(cma)
    comparables = normalize_comparables(cma)
    subject = build_subject_property(cma)
    logger.debug(
        "Normalized %d comparables from %s (subject: %s)",
        len(comparables),
        source,
        subject.get("address") or DEFAULT_SUBJECT_NAME,
    )
    return PresentationResult(
        comparables=comparables,
        subject=subject,
        metrics=derive_metrics(comparables),
        stats=calculate_cma_stats(comparables),
        source=source,
    )

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from typing import Any

from .fields import to_number

EARTH_RADIUS_MILES = 3959

SORT_DIRECTIONS = ("asc", "desc")


def _number(comparable: dict[str, Any], key: str) -> float:
    return to_number(comparable.get(key)) or 0.0


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def comparable_price(comparable: dict[str, Any]) -> float:
    """Sale price when closed, otherwise the asking price."""

    return _number(comparable, "closePrice") or _number(comparable, "listPrice")


def price_per_sqft(comparable: dict[str, Any]) -> float:
    sqft = _number(comparable, "sqft")
    return _finite(comparable_price(comparable) / sqft) if sqft > 0 else 0.0


def price_per_acre(comparable: dict[str, Any]) -> float:
    acres = _number(comparable, "lotSizeAcres")
    return _finite(comparable_price(comparable) / acres) if acres > 0 else 0.0


def median_price(comparables: Sequence[dict[str, Any]]) -> float:
    if not comparables:
        return 0.0
    prices = sorted(comparable_price(comp) for comp in comparables)
    mid = len(prices) // 2
    if len(prices) % 2 == 0:
        return _finite((prices[mid - 1] + prices[mid]) / 2)
    return prices[mid]


def price_range(comparables: Sequence[dict[str, Any]]) -> dict[str, float]:
    if not comparables:
        return {"min": 0.0, "max": 0.0}
    prices = [comparable_price(comp) for comp in comparables]
    return {"min": min(prices), "max": max(prices)}


def calculate_cma_stats(comparables: Sequence[dict[str, Any]]) -> dict[str, Any]:
    if not comparables:
        return {
            "averagePrice": 0.0,
            "medianPrice": 0.0,
            "averagePricePerSqft": 0.0,
            "averageDaysOnMarket": 0.0,
            "priceRange": {"min": 0.0, "max": 0.0},
        }
    count = len(comparables)
    return {
        "averagePrice": _finite(sum(comparable_price(comp) for comp in comparables) / count),
        "medianPrice": median_price(comparables),
        "averagePricePerSqft": _finite(sum(price_per_sqft(comp) for comp in comparables) / count),
        "averageDaysOnMarket": _finite(
            sum(_number(comp, "daysOnMarket") for comp in comparables) / count
        ),
        "priceRange": price_range(comparables),
    }


def filter_by_status(
    comparables: Sequence[dict[str, Any]], status: str | None
) -> list[dict[str, Any]]:
    if not status or status.lower() == "all":
        return list(comparables)
    wanted = status.strip().lower()
    return [comp for comp in comparables if str(comp.get("status", "")).lower() == wanted]


SORT_KEYS: dict[str, Callable[[dict[str, Any]], float]] = {
    "price": comparable_price,
    "days_on_market": lambda comp: _number(comp, "daysOnMarket"),
    "price_per_sqft": price_per_sqft,
}


def sort_comparables(
    comparables: Sequence[dict[str, Any]], key: str, direction: str = "desc"
) -> list[dict[str, Any]]:
    if key not in SORT_KEYS:
        raise ValueError(f"Unsupported sort key '{key}'; expected one of {sorted(SORT_KEYS)}")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Unsupported sort direction '{direction}'; expected 'asc' or 'desc'")
    return sorted(comparables, key=SORT_KEYS[key], reverse=direction == "desc")


def distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle (haversine) distance between two points in miles."""

    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def compare_properties(first: dict[str, Any], second: dict[str, Any]) -> dict[str, float]:
    price_a = comparable_price(first)
    price_b = comparable_price(second)
    return {
        "priceDifference": _finite(price_a - price_b),
        "pricePercentDiff": _finite((price_a - price_b) / price_b * 100) if price_b > 0 else 0.0,
        "sqftDifference": _finite(_number(first, "sqft") - _number(second, "sqft")),
        "domDifference": _finite(
            _number(first, "daysOnMarket") - _number(second, "daysOnMarket")
        ),
    }

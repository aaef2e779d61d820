from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from .fields import to_number

DEFAULT_DAYS_ON_MARKET = 30


@dataclass
class DerivedMetrics:
    average_days_on_market: int
    suggested_list_price: int | None
    avg_price_per_acre: int | None

    def as_dict(self) -> dict[str, Any]:
        return {
            "averageDaysOnMarket": self.average_days_on_market,
            "suggestedListPrice": self.suggested_list_price,
            "avgPricePerAcre": self.avg_price_per_acre,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, matching presentation rounding."""

    return int(math.floor(value + 0.5))


def _value(comparable: Any, key: str) -> float:
    if not isinstance(comparable, dict):
        return 0.0
    return to_number(comparable.get(key)) or 0.0


def _first_truthy(comparable: Any, keys: Iterable[str]) -> float:
    for key in keys:
        value = _value(comparable, key)
        if value:
            return value
    return 0.0


def _rounded_mean(values: Sequence[float]) -> int | None:
    mean = sum(values) / len(values)
    # Totals past float range have no usable average.
    if not math.isfinite(mean):
        return None
    return round_half_up(mean)


def average_days_on_market(comparables: Sequence[Any]) -> int:
    if not comparables:
        return DEFAULT_DAYS_ON_MARKET
    average = _rounded_mean([_value(comp, "daysOnMarket") for comp in comparables])
    return DEFAULT_DAYS_ON_MARKET if average is None else average


def suggested_list_price(comparables: Sequence[Any]) -> int | None:
    prices = [
        price
        for price in (_first_truthy(comp, ("listPrice", "closePrice")) for comp in comparables)
        if price
    ]
    if not prices:
        return None
    return _rounded_mean(prices)


def avg_price_per_acre(comparables: Sequence[Any]) -> int | None:
    per_acre: list[float] = []
    for comp in comparables:
        acres = _value(comp, "lotSizeAcres")
        if acres <= 0:
            continue
        per_acre.append(_first_truthy(comp, ("closePrice", "listPrice")) / acres)
    if not per_acre:
        return None
    return _rounded_mean(per_acre)


def derive_metrics(comparables: Sequence[Any]) -> DerivedMetrics:
    return DerivedMetrics(
        average_days_on_market=average_days_on_market(comparables),
        suggested_list_price=suggested_list_price(comparables),
        avg_price_per_acre=avg_price_per_acre(comparables),
    )

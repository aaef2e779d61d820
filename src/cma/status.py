from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

ACTIVE = "Active"
PENDING = "Pending"
CLOSED = "Closed"
LEASING = "Leasing"
OFF_MARKET = "Off Market"

CANONICAL_STATUSES: tuple[str, ...] = (ACTIVE, PENDING, CLOSED, LEASING, OFF_MARKET)

_LAST_STATUS_LEASED = {"lsd", "leased"}
_LAST_STATUS_SOLD = {"sld", "sold", "s"}


def _clean(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def _from_last_status(last_status: str) -> str | None:
    lowered = last_status.lower()
    if lowered in _LAST_STATUS_LEASED or "leas" in lowered:
        return LEASING
    if lowered in _LAST_STATUS_SOLD or "sold" in lowered or "closed" in lowered:
        return CLOSED
    return None


def normalize_status(status: Any, last_status: Any = None) -> str:
    """Map an MLS ``status``/``lastStatus`` pair onto the presentation vocabulary.

    ``lastStatus`` reflects the most recent MLS transition (``Sld`` vs ``Lsd``), so a
    recognized value there wins over ``status``. Unrecognized status codes are returned
    unchanged.
    """

    last = _clean(last_status)
    if last:
        resolved = _from_last_status(last)
        if resolved is not None:
            return resolved

    raw = _clean(status)
    if not raw:
        return ACTIVE
    s = raw.lower()
    if "leas" in s or "rent" in s or s == "lease":
        return LEASING
    if s in {"u", "sc"} or "pending" in s or "contract" in s:
        return PENDING
    if s == "a" or "active" in s:
        return ACTIVE
    if s in {"c", "s"} or "sold" in s or "closed" in s:
        return CLOSED
    if "expired" in s or "withdrawn" in s or "cancel" in s:
        return OFF_MARKET
    logger.warning("Unrecognized listing status %r passed through unchanged", raw)
    return raw


def is_canonical_status(value: Any) -> bool:
    return value in CANONICAL_STATUSES

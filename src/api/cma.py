from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, cast

from fastapi import APIRouter, Body, HTTPException

from ..cma.analysis import filter_by_status, sort_comparables
from ..cma.normalizer import normalize_cma_record
from ..cma.validator import DEFAULT_SCHEMA_PATH, validate_presentation
from ..env_loader import env_path

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cma", tags=["cma"])

DEFAULT_DEMO_RECORD = "samples/cma_record.json"


def _demo_candidates() -> list[Path]:
    candidates: list[Path] = []
    configured = env_path("CMA_DEMO_JSON")
    if configured is not None:
        candidates.append(configured)
    candidates.append(Path(__file__).resolve().parents[2] / DEFAULT_DEMO_RECORD)
    return candidates


def _load_demo_record() -> dict[str, Any]:
    for candidate in _demo_candidates():
        if not candidate.exists():
            logger.warning("Demo CMA record not found at %s", candidate)
            continue
        with candidate.open("r", encoding="utf-8") as handle:
            return cast(dict[str, Any], json.load(handle))
    raise HTTPException(status_code=404, detail="Demo CMA record not available")


def _schema_path() -> Path:
    return cast(Path, env_path("CMA_SCHEMA_PATH", DEFAULT_SCHEMA_PATH))


def _presentation_response(
    record: dict[str, Any],
    status: str | None = None,
    sort: str | None = None,
    direction: str = "desc",
) -> dict[str, Any]:
    presentation = normalize_cma_record(record).as_dict()
    validation = validate_presentation(presentation, _schema_path())
    comparables = filter_by_status(presentation["comparables"], status)
    if sort:
        try:
            comparables = sort_comparables(comparables, sort, direction)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
    presentation["comparables"] = comparables
    return {**presentation, **validation}


@router.post("/presentation")
async def cma_presentation(
    record: dict[str, Any] = Body(...),  # noqa: B008
    status: str | None = None,
    sort: str | None = None,
    direction: str = "desc",
) -> dict[str, Any]:
    return _presentation_response(record, status=status, sort=sort, direction=direction)


@router.get("/demo")
async def cma_demo() -> dict[str, Any]:
    return _presentation_response(_load_demo_record())

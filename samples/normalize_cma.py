"""Normalize a stored CMA record into presentation-ready comparables.

Point it at a CMA record exported from the CMA endpoint (a JSON object with
``comparableProperties`` and an optional ``subjectProperty``) to inspect the
canonical comparables, subject property, summary metrics and validation report
the presentation would render. The input file can also come from the
``CMA_RECORD_FILE`` environment variable.

Run it from the repository root so the ``src`` package resolves::

    python -m samples.normalize_cma --file record.json
"""

from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

from src.cma.normalizer import normalize_cma_record
from src.cma.validator import validate_presentation
from src.env_loader import load_env_file


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Normalize a CMA record for presentation.")
    parser.add_argument(
        "--file",
        default=os.getenv("CMA_RECORD_FILE"),
        help="Path to the CMA record JSON. Defaults to CMA_RECORD_FILE.",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="Indentation for the printed JSON. Defaults to 2.",
    )
    parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Skip schema validation of the normalized output.",
    )
    return parser.parse_args()


def main() -> None:
    load_env_file()
    args = parse_args()

    if not args.file:
        raise SystemExit("Input file is required. Set --file or CMA_RECORD_FILE.")

    record_path = Path(args.file)
    if not record_path.exists():
        raise SystemExit(f"Input file does not exist: {record_path}")

    try:
        with record_path.open("r", encoding="utf-8") as handle:
            record = json.load(handle)
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Input file is not valid JSON: {exc}") from exc

    presentation = normalize_cma_record(record).as_dict()
    if not args.no_validate:
        presentation.update(validate_presentation(presentation))

    print(json.dumps(presentation, indent=args.indent))

    metrics = presentation["metrics"]
    print("--------Summary--------")
    print("Comparables: {}".format(len(presentation["comparables"])))
    print("Average days on market: {}".format(metrics["averageDaysOnMarket"]))
    print("Suggested list price: {}".format(metrics["suggestedListPrice"]))
    print("Average price per acre: {}".format(metrics["avgPricePerAcre"]))


if __name__ == "__main__":
    main()

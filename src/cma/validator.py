from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from jsonschema import Draft202012Validator

from . import SCHEMA_VERSION
from .status import CANONICAL_STATUSES, is_canonical_status

DEFAULT_SCHEMA_PATH = "schema/cma_presentation_v1.json"


@dataclass
class Finding:
    field: str
    message: str
    severity: str
    rule: str

    def as_dict(self) -> dict[str, Any]:
        return {
            "field": self.field,
            "message": self.message,
            "severity": self.severity,
            "rule": self.rule,
        }


def _load_json(path: str | Path) -> dict[str, Any]:
    data_path = Path(path)
    if not data_path.is_absolute():
        base_dir = Path(__file__).resolve().parents[2]
        data_path = base_dir / data_path
    with data_path.open("r", encoding="utf-8") as handle:
        return cast(dict[str, Any], json.load(handle))


def _schema_findings(presentation: dict[str, Any], schema: dict[str, Any]) -> list[Finding]:
    validator = Draft202012Validator(schema)
    findings: list[Finding] = []
    errors = sorted(validator.iter_errors(presentation), key=lambda e: [str(p) for p in e.path])
    for error in errors:
        path = ".".join(str(p) for p in error.path)
        findings.append(
            Finding(
                field=path or "$",
                message=error.message,
                severity="error",
                rule="schema",
            )
        )
    return findings


def _comparables(presentation: dict[str, Any]) -> list[dict[str, Any]]:
    comparables = presentation.get("comparables")
    if not isinstance(comparables, list):
        return []
    return [comp for comp in comparables if isinstance(comp, dict)]


def _unique_id_findings(presentation: dict[str, Any]) -> list[Finding]:
    counts = Counter(comp.get("id") for comp in _comparables(presentation) if comp.get("id"))
    return [
        Finding(
            field="comparables.id",
            message=f"Comparable id '{comp_id}' appears {count} times.",
            severity="error",
            rule="unique_id",
        )
        for comp_id, count in counts.items()
        if count > 1
    ]


def _status_vocabulary_findings(presentation: dict[str, Any]) -> list[Finding]:
    findings: list[Finding] = []
    allowed = ", ".join(CANONICAL_STATUSES)
    for idx, comp in enumerate(_comparables(presentation)):
        status = comp.get("status")
        if status is None or is_canonical_status(status):
            continue
        findings.append(
            Finding(
                field=f"comparables.{idx}.status",
                message=f"Status '{status}' was not recognized; expected one of {allowed}.",
                severity="warn",
                rule="status_vocabulary",
            )
        )
    subject = presentation.get("subjectProperty")
    if isinstance(subject, dict):
        status = subject.get("standardStatus")
        if status is not None and not is_canonical_status(status):
            findings.append(
                Finding(
                    field="subjectProperty.standardStatus",
                    message=f"Status '{status}' was not recognized; expected one of {allowed}.",
                    severity="warn",
                    rule="status_vocabulary",
                )
            )
    return findings


def validate_presentation(
    presentation: dict[str, Any], schema_path: str | Path = DEFAULT_SCHEMA_PATH
) -> dict[str, Any]:
    schema = _load_json(schema_path)
    findings: list[Finding] = []
    findings.extend(_schema_findings(presentation, schema))
    findings.extend(_unique_id_findings(presentation))
    findings.extend(_status_vocabulary_findings(presentation))

    status = "fail" if any(f.severity == "error" for f in findings) else "pass"
    return {
        "status": status,
        "findings": [f.as_dict() for f in findings],
        "schema_version": SCHEMA_VERSION,
    }

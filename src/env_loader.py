from __future__ import annotations

import logging
import os
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]

_QUOTE_CHARS = {"'", '"'}


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in _QUOTE_CHARS:
        return value[1:-1]
    return value


def _parse_line(raw_line: str) -> tuple[str, str] | None:
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    key, value = line.split("=", 1)
    key = key.strip()
    if key.startswith("export "):
        key = key[len("export ") :].strip()
    if not key:
        return None
    raw_value = value.strip()
    quoted = len(raw_value) >= 2 and raw_value[0] == raw_value[-1] and raw_value[0] in _QUOTE_CHARS
    cleaned = _strip_quotes(raw_value)
    # Inline comments only apply to unquoted values.
    if not quoted and " #" in cleaned:
        cleaned = cleaned.split(" #", 1)[0].rstrip()
    return key, cleaned


def load_env_file(path: Path | None = None, *, override: bool = False) -> dict[str, str]:
    """Load key=value pairs from a .env file into ``os.environ``.

    Existing environment variables win unless ``override`` is set. Returns the pairs
    that were applied.
    """

    env_path = path or REPO_ROOT / ".env"
    try:
        content = env_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}

    applied: dict[str, str] = {}
    for raw_line in content.splitlines():
        parsed = _parse_line(raw_line)
        if parsed is None:
            continue
        key, value = parsed
        if not override and key in os.environ:
            continue
        os.environ[key] = value
        applied[key] = value
    return applied


def env_path(name: str, default: str | Path | None = None) -> Path | None:
    """Resolve a path-valued setting, anchoring relative paths at the repository root."""

    raw = os.getenv(name)
    value: str | Path | None = raw if raw else default
    if value is None:
        return None
    resolved = Path(value)
    if not resolved.is_absolute():
        resolved = REPO_ROOT / resolved
    return resolved


def log_level(name: str = "CMA_LOG_LEVEL", default: int = logging.INFO) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

_CATALOG_CACHE: dict[str, Any] | None = None
_CATALOG_PATH = Path(__file__).with_name("interview_catalog.yaml")


def get_catalog() -> dict[str, Any]:
    """Load the interview catalog (categories, vocabulary, limits) and cache it."""
    global _CATALOG_CACHE

    if _CATALOG_CACHE is not None:
        return _CATALOG_CACHE

    if not _CATALOG_PATH.exists():
        raise RuntimeError(
            f"Interview catalog not found at '{_CATALOG_PATH}'. "
            "Expected file: interview_coach/core/interview_catalog.yaml"
        )

    try:
        raw = _CATALOG_PATH.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuntimeError(
            f"Failed to read interview catalog '{_CATALOG_PATH}': {exc}"
        ) from exc

    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise RuntimeError(
            f"Invalid YAML in interview catalog '{_CATALOG_PATH}': {exc}"
        ) from exc

    if not isinstance(parsed, dict):
        raise RuntimeError(
            f"Invalid interview catalog '{_CATALOG_PATH}': expected a top-level mapping."
        )
    if not isinstance(parsed.get("categories"), dict) or "generic" not in parsed["categories"]:
        raise RuntimeError(
            f"Invalid interview catalog '{_CATALOG_PATH}': 'categories' must define 'generic'."
        )

    _CATALOG_CACHE = parsed
    return _CATALOG_CACHE


def get_catalog_value(path: str, default: Any = None) -> Any:
    """Get nested catalog value using dot path notation, e.g. 'limits.max_questions'."""
    if not path:
        return default

    current: Any = get_catalog()
    for key in path.split("."):
        if not isinstance(current, dict):
            return default
        if key not in current:
            return default
        current = current[key]
    return current


def get_category_table(category: str) -> dict[str, Any]:
    categories = get_catalog()["categories"]
    table = categories.get(category)
    if not isinstance(table, dict):
        return categories["generic"]
    return table

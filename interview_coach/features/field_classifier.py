from __future__ import annotations

from typing import Literal, get_args

from interview_coach.core.catalog import get_category_table

Category = Literal["intern", "java", "software", "data", "marketing", "product", "design", "generic"]

# Precedence for overlapping fields ("Marketing Intern" -> intern,
# "Senior Java Backend Engineer" -> java). generic is the catch-all and stays last.
CATEGORY_ORDER: tuple[Category, ...] = get_args(Category)


class InvalidInputError(ValueError):
    """Raised when a caller passes input that violates a documented precondition."""


def normalize_field(field_query: str | None) -> str:
    normalized = " ".join((field_query or "").split())
    if not normalized:
        raise InvalidInputError("field is required")
    return normalized


def keywords_for(category: str) -> tuple[str, ...]:
    raw = get_category_table(category).get("keywords") or []
    return tuple(str(keyword).strip().lower() for keyword in raw if str(keyword).strip())


def classify(field_query: str) -> Category:
    lowered = normalize_field(field_query).lower()
    for category in CATEGORY_ORDER:
        if category == "generic":
            continue
        if any(keyword in lowered for keyword in keywords_for(category)):
            return category
    return "generic"

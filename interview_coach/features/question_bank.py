from __future__ import annotations

import math
import re
from typing import Any

from pydantic import BaseModel, Field

from interview_coach.core.catalog import get_catalog_value, get_category_table
from interview_coach.features.field_classifier import Category, classify, normalize_field
from interview_coach.features.hashing import rank_by_hash

_WHITESPACE_RE = re.compile(r"\s+")


class QuestionSet(BaseModel):
    field: str
    category: Category
    questions: list[str] = Field(default_factory=list)


def _limits() -> tuple[int, int, int]:
    low = int(get_catalog_value("limits.min_questions", 1))
    high = int(get_catalog_value("limits.max_questions", 20))
    default = int(get_catalog_value("limits.default_questions", 7))
    return low, high, default


def clamp_question_count(raw: Any) -> int:
    low, high, default = _limits()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if math.isnan(value) or value == 0:
        return default
    if math.isinf(value):
        return high if value > 0 else low
    return max(low, min(high, int(round(value))))


def normalize_question(text: str) -> str:
    question = _WHITESPACE_RE.sub(" ", (text or "").strip())
    question = question.strip("\"'“”").strip()
    if not question:
        return ""
    if question.endswith("?"):
        return question
    return question.rstrip(".!:;, ") + "?"


def templates_for(category: str, field: str) -> list[str]:
    questions: list[str] = []
    for template in get_category_table(category).get("questions") or []:
        question = normalize_question(str(template).replace("{field}", field))
        if question and question not in questions:
            questions.append(question)
    return questions


def build_question_set(field: str, count: int, *, seed: int | None = None) -> QuestionSet:
    normalized_field = normalize_field(field)
    category = classify(normalized_field)
    available = templates_for(category, normalized_field)
    selection_key = str(seed) if seed is not None else normalized_field.lower()
    ranked = rank_by_hash(available, selection_key)
    return QuestionSet(
        field=normalized_field,
        category=category,
        questions=ranked[: max(0, int(count))],
    )

from __future__ import annotations

import asyncio
import json
import logging

from interview_coach.core.config import settings
from interview_coach.features.field_classifier import classify, normalize_field
from interview_coach.features.question_bank import build_question_set, clamp_question_count
from interview_coach.schemas.interview import QuestionsRequest, QuestionsResponse
from interview_coach.services.interview_llm import generate_questions_llm, llm_enabled

logger = logging.getLogger("interview_coach.questions")


async def _questions_from_llm(field: str, count: int) -> list[str] | None:
    if not llm_enabled():
        return None
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(generate_questions_llm, field, count),
            timeout=settings.ai_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning("questions_llm_timeout timeout_s=%s", settings.ai_timeout_seconds)
        return None


async def generate_questions(payload: QuestionsRequest) -> QuestionsResponse:
    field = normalize_field(payload.field)
    count = clamp_question_count(payload.count)

    ai_questions = None if payload.seed is not None else await _questions_from_llm(field, count)
    if ai_questions:
        response = QuestionsResponse(
            questions=ai_questions,
            category=classify(field),
            field=field,
            ai=True,
            source="ai",
            requested=count,
            generated=len(ai_questions),
        )
    else:
        question_set = build_question_set(field, count, seed=payload.seed)
        response = QuestionsResponse(
            questions=question_set.questions,
            category=question_set.category,
            field=question_set.field,
            ai=False,
            source="templates",
            requested=count,
            generated=len(question_set.questions),
        )

    logger.info(
        json.dumps(
            {
                "event": "questions_generated",
                "category": response.category,
                "source": response.source,
                "requested": response.requested,
                "generated": response.generated,
                "field_len": len(field),
            }
        )
    )
    return response

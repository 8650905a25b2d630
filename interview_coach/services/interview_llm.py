from __future__ import annotations

from io import BytesIO
import json
import logging
import math
import os
import re
import time
from functools import lru_cache
from typing import Any

from openai import OpenAI
from pydantic import ValidationError

from interview_coach.features.question_bank import normalize_question
from interview_coach.schemas.analysis import AnalysisResult
from interview_coach.services.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    QUESTIONS_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_questions_prompt,
)

logger = logging.getLogger(__name__)

_NUMBERED_LINE_RE = re.compile(r"^\d+[.)\-\s]+(.+)")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def llm_enabled() -> bool:
    if not _env_bool("INTERVIEW_LLM_ENABLED", True):
        return False
    provider = (os.getenv("AI_PROVIDER") or "openai").strip().lower()
    if provider != "openai":
        return False
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or None),
        timeout=float(os.getenv("OPENAI_TIMEOUT_S", "20")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
    )


def _model() -> str:
    return (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()


def _log_run(*, task: str, status: str, started: float, **extra: Any) -> None:
    logger.info(
        json.dumps(
            {
                "event": "llm_run",
                "task": task,
                "model": _model(),
                "status": status,
                "latency_ms": int((time.perf_counter() - started) * 1000),
                **extra,
            }
        )
    )


def chat_completion(
    *,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.7,
    max_output_tokens: int = 500,
    json_mode: bool = False,
    task: str = "unknown",
) -> str | None:
    started = time.perf_counter()
    if not llm_enabled():
        _log_run(task=task, status="skipped", started=started)
        return None

    create_kwargs: dict[str, Any] = {
        "model": _model(),
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ],
        "temperature": temperature,
        "max_tokens": max_output_tokens,
    }
    if json_mode:
        create_kwargs["response_format"] = {"type": "json_object"}

    try:
        response = _client().chat.completions.create(**create_kwargs)
        content = response.choices[0].message.content if response.choices else ""
    except Exception as exc:  # noqa: BLE001 - deterministic fallback is expected
        logger.warning("interview_llm_failed task=%s model=%s: %s", task, _model(), exc)
        _log_run(task=task, status="error", started=started)
        return None

    if not content:
        _log_run(task=task, status="empty", started=started)
        return None
    _log_run(task=task, status="success", started=started, response_len=len(content))
    return str(content).strip()


def parse_numbered_questions(text: str) -> list[str]:
    questions: list[str] = []
    for line in (text or "").splitlines():
        match = _NUMBERED_LINE_RE.match(line.strip())
        if not match or len(match.group(1)) <= 10:
            continue
        question = normalize_question(match.group(1))
        if question and question not in questions:
            questions.append(question)
    return questions


def generate_questions_llm(field: str, count: int) -> list[str] | None:
    text = chat_completion(
        system_prompt=QUESTIONS_SYSTEM_PROMPT,
        user_prompt=build_questions_prompt(field, count),
        task="questions",
    )
    if not text:
        return None
    questions = parse_numbered_questions(text)
    if len(questions) < min(3, count):
        logger.warning(
            "interview_llm_questions_short field_len=%s got=%s needed=%s",
            len(field),
            len(questions),
            count,
        )
        return None
    return questions[:count]


def _extract_json_object(text: str) -> dict[str, Any] | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    try:
        parsed = json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_analysis(text: str) -> AnalysisResult | None:
    payload = _extract_json_object(text or "")
    if not payload or not payload.get("mistakes") or not payload.get("tips"):
        return None
    try:
        rating = float(payload.get("rating"))
    except (TypeError, ValueError):
        return None
    if not math.isfinite(rating):
        return None
    payload["rating"] = max(0.0, min(10.0, round(rating * 2) / 2))
    try:
        return AnalysisResult.model_validate(payload)
    except ValidationError as exc:
        logger.warning("interview_llm_analysis_invalid: %s", exc.error_count())
        return None


def analyze_transcript_llm(
    field: str,
    transcript: str,
    segments: list[dict[str, Any]] | None = None,
) -> AnalysisResult | None:
    text = chat_completion(
        system_prompt=ANALYSIS_SYSTEM_PROMPT,
        user_prompt=build_analysis_prompt(field, transcript, segments),
        temperature=0.2,
        max_output_tokens=900,
        json_mode=True,
        task="analysis",
    )
    if not text:
        return None
    return parse_analysis(text)


def transcribe_media(*, content: bytes, filename: str) -> str | None:
    if not llm_enabled():
        return None

    model = (os.getenv("OPENAI_TRANSCRIBE_MODEL") or "whisper-1").strip()
    try:
        file_obj = BytesIO(content)
        file_obj.name = filename
        response = _client().audio.transcriptions.create(
            model=model,
            file=file_obj,
        )
    except Exception as exc:  # noqa: BLE001
        logger.warning("interview_llm_transcribe_failed model=%s file=%s: %s", model, filename, exc)
        return None
    text = getattr(response, "text", None)
    if text is None:
        return None
    return str(text).strip()

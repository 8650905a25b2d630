from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Callable

from interview_coach.core.config import settings
from interview_coach.features.field_classifier import Category, classify
from interview_coach.features.scorer import FileSignal, TextSignal, no_video_result, score
from interview_coach.schemas.analysis import AnalysisResult
from interview_coach.schemas.interview import AnalysisSource, AnalyzeRequest, AnalyzeResponse
from interview_coach.services.interview_llm import analyze_transcript_llm, llm_enabled, transcribe_media

logger = logging.getLogger("interview_coach.analysis")

_DEFAULT_FIELD = "general"


async def _bounded(func: Callable[..., Any], *args: Any, task: str, **kwargs: Any) -> Any:
    """Run a blocking provider call off the event loop; None on timeout."""
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(func, *args, **kwargs),
            timeout=settings.ai_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning("analysis_provider_timeout task=%s timeout_s=%s", task, settings.ai_timeout_seconds)
        return None


def _respond(
    *,
    analysis: AnalysisResult,
    category: Category,
    field: str,
    source: AnalysisSource,
    processed: bool,
    started: float,
    note: str | None = None,
) -> AnalyzeResponse:
    logger.info(
        json.dumps(
            {
                "event": "analysis_complete",
                "category": category,
                "source": source,
                "rating": analysis.rating,
                "mistake_count": len(analysis.mistakes),
                "tip_count": len(analysis.tips),
                "duration_ms": int((time.perf_counter() - started) * 1000),
            }
        )
    )
    return AnalyzeResponse(
        analysis=analysis,
        category=category,
        field=field,
        source=source,
        processed=processed,
        note=note,
    )


async def analyze_transcript(
    field: str,
    transcript: str,
    *,
    segments: list[dict[str, Any]] | None = None,
    seed: int | None = None,
    started: float | None = None,
) -> AnalyzeResponse:
    started = time.perf_counter() if started is None else started
    category = classify(field)

    if seed is None and llm_enabled() and len(transcript.strip()) > 10:
        ai_analysis = await _bounded(analyze_transcript_llm, field, transcript, segments, task="analysis")
        if ai_analysis is not None:
            return _respond(
                analysis=ai_analysis,
                category=category,
                field=field,
                source="ai-analysis",
                processed=True,
                started=started,
            )

    return _respond(
        analysis=score(category, TextSignal(transcript), field=field, seed=seed),
        category=category,
        field=field,
        source="transcript-heuristics",
        processed=True,
        started=started,
    )


async def analyze_request(payload: AnalyzeRequest) -> AnalyzeResponse:
    started = time.perf_counter()
    field = " ".join(payload.field.split()) or _DEFAULT_FIELD

    if payload.transcript is not None:
        segments = [segment.model_dump() for segment in payload.segments] if payload.segments else None
        return await analyze_transcript(
            field,
            payload.transcript,
            segments=segments,
            seed=payload.seed,
            started=started,
        )

    category = classify(field)
    if payload.filename and payload.size is not None:
        return _respond(
            analysis=score(category, FileSignal(payload.filename, payload.size), field=field, seed=payload.seed),
            category=category,
            field=field,
            source="file-identity",
            processed=True,
            started=started,
        )

    if not payload.has_video:
        return _respond(
            analysis=no_video_result(field),
            category=category,
            field=field,
            source="no-video-detected",
            processed=False,
            started=started,
            note="Upload or record a video to enable AI-powered analysis",
        )

    return _respond(
        analysis=score(category, None, field=field, seed=payload.seed),
        category=category,
        field=field,
        source="baseline",
        processed=False,
        started=started,
        note="No transcript or file details were supplied; showing baseline feedback.",
    )


async def analyze_upload(field: str, *, filename: str, content: bytes) -> AnalyzeResponse:
    started = time.perf_counter()
    field = " ".join((field or "").split()) or _DEFAULT_FIELD

    transcript = None
    if llm_enabled():
        transcript = await _bounded(transcribe_media, content=content, filename=filename, task="transcription")

    if transcript is not None:
        logger.info(json.dumps({"event": "transcript_ready", "word_count": len(transcript.split())}))
        return await analyze_transcript(field, transcript, started=started)

    category = classify(field)
    return _respond(
        analysis=score(category, FileSignal(filename, len(content)), field=field),
        category=category,
        field=field,
        source="file-identity",
        processed=True,
        started=started,
        note="Transcription unavailable; feedback is derived from the recording's identity.",
    )

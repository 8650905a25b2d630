"""Deterministic interview scoring.

Every result is a pure function of its inputs. Canned mistakes and tips are
picked by hash-indexed ranking (see ``rank_by_hash``); an explicit ``seed``
only replaces the selection key, it never switches to a different sampling
discipline.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from interview_coach.core.catalog import get_catalog_value, get_category_table
from interview_coach.features.field_classifier import Category
from interview_coach.features.hashing import file_identity_hash, rank_by_hash
from interview_coach.features.transcript_signals import TranscriptSignals, extract_signals
from interview_coach.schemas.analysis import AnalysisResult, Mistake

MIN_RATING = 1.0
MAX_RATING = 9.0
# Nominal answer length used to spread timestamps when no transcript is available.
_NOMINAL_ANSWER_SECONDS = 120
# Field labels quoted inside a mistake are cut to keep the text within Mistake limits.
_MISTAKE_LABEL_CHARS = 80


@dataclass(frozen=True)
class TextSignal:
    text: str


@dataclass(frozen=True)
class FileSignal:
    filename: str
    size: int


ContentSignal = Union[TextSignal, FileSignal, None]


def round_half(value: float) -> float:
    return math.floor(value * 2 + 0.5) / 2


def clamp_rating(value: float, low: float = MIN_RATING, high: float = MAX_RATING) -> float:
    return round_half(max(low, min(high, value)))


def format_timestamp(seconds: float) -> str:
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{min(minutes, 99)}:{secs:02d}"


def rating_band(rating: float) -> str:
    if rating >= 7:
        return "strong"
    if rating >= 6:
        return "good"
    return "developing"


def mistake_count_for(rating: float) -> int:
    if rating >= 8:
        return 1
    if rating >= 6.5:
        return 2
    if rating >= 5:
        return 3
    return 4


def tip_count_for(rating: float) -> int:
    return min(5, mistake_count_for(rating) + 1)


def baseline_rating(category: str) -> float:
    return float(get_category_table(category).get("baseline", 6.0))


def _pool(category: str, kind: str) -> list[str]:
    entries = [str(item) for item in get_category_table(category).get(kind) or []]
    entries.extend(str(item) for item in get_catalog_value(f"delivery.{kind}", []) or [])
    seen: list[str] = []
    for entry in entries:
        if entry not in seen:
            seen.append(entry)
    return seen


def _spread_seconds(index: int, total: int, duration: float) -> float:
    return (index + 1) * duration / (total + 1)


def _merge_tips(preferred: list[str], pool: list[str], limit: int) -> list[str]:
    tips: list[str] = []
    for tip in preferred + pool:
        if tip not in tips:
            tips.append(tip)
        if len(tips) >= limit:
            break
    return tips


def _fixed_result(name: str, *, summary: str, **fmt: object) -> AnalysisResult:
    table = get_catalog_value(f"fixed_results.{name}", {}) or {}
    mistake = str(table.get("mistake", "")).format(**fmt)
    return AnalysisResult(
        rating=float(table.get("rating", 0)),
        mistakes=[Mistake(timestamp="0:00", text=mistake)],
        tips=[str(tip) for tip in table.get("tips") or []],
        summary=summary,
    )


def no_video_result(field: str) -> AnalysisResult:
    return _fixed_result(
        "no_video",
        summary=(
            "Video analysis requires actual video content. Please record or upload a video "
            f"to receive personalized feedback for your {field} interview preparation."
        ),
    )


def _text_adjustment(signals: TranscriptSignals) -> float:
    adjustment = 0.0
    if signals.word_count > 50:
        adjustment += 1
    if signals.word_count > 100:
        adjustment += 0.5
    if signals.technical_count > 2:
        adjustment += 1
    if signals.technical_count > 5:
        adjustment += 0.5
    if signals.confidence_count > 2:
        adjustment += 1
    if signals.metric_count > 0:
        adjustment += 1
    if signals.filler_count < signals.word_count / 20:
        adjustment += 0.5
    return adjustment


def _short_label(label: str, limit: int = _MISTAKE_LABEL_CHARS) -> str:
    label = " ".join(label.split())
    if len(label) <= limit:
        return label
    return label[: limit - 3].rstrip() + "..."


def _signal_mistakes(signals: TranscriptSignals, label: str, seconds_per_word: float) -> list[tuple[float, str]]:
    found: list[tuple[float, str]] = []
    excess_fillers = int(get_catalog_value("limits.excess_filler_count", 5))
    long_sentence = int(get_catalog_value("limits.long_sentence_words", 30))
    low_technical = int(get_catalog_value("limits.low_technical_count", 2))

    if signals.filler_count > excess_fillers:
        found.append(
            (
                (signals.first_filler_word or 0) * seconds_per_word,
                f"Excessive filler words detected ({signals.filler_count} instances) - practice pausing instead",
            )
        )
    if signals.avg_words_per_sentence > long_sentence:
        found.append(
            (
                (signals.first_long_sentence_word or 0) * seconds_per_word,
                f"Very long sentences (avg {signals.avg_words_per_sentence} words) - break into shorter, clearer points",
            )
        )
    if signals.technical_count <= low_technical:
        found.append((0.0, f"Few role-specific terms used - connect your answer to {_short_label(label)} work"))
    if signals.metric_count == 0:
        found.append(
            (
                max(0, signals.word_count - 1) * seconds_per_word,
                "No measurable results mentioned - quantify the impact of your work",
            )
        )
    return found


def _signal_tips(signals: TranscriptSignals) -> list[str]:
    tips: list[str] = []
    if signals.filler_count > 3:
        tips.append('Practice pausing briefly instead of using filler words like "um" and "uh"')
    if signals.avg_words_per_sentence > 25:
        tips.append("Structure your answers with clear, concise sentences")
    if signals.metric_count == 0:
        tips.append("Quantify results with numbers such as percentages, users or time saved")
    return tips


def _score_transcript(category: str, text: str, label: str, seed: int | None) -> AnalysisResult:
    signals = extract_signals(text)
    if signals.word_count == 0:
        return _fixed_result(
            "no_speech",
            summary="Analysis based on 0 words spoken. No speech detected.",
        )
    if signals.word_count < 20:
        return _fixed_result(
            "too_brief",
            words=signals.word_count,
            summary=(
                f"Analysis based on {signals.word_count} words spoken. "
                f"The response was too brief to evaluate for {label}."
            ),
        )

    rating = clamp_rating(baseline_rating(category) + _text_adjustment(signals))
    wpm = float(get_catalog_value("limits.words_per_minute", 150))
    seconds_per_word = 60.0 / wpm if wpm > 0 else 0.4
    duration = signals.word_count * seconds_per_word

    key = str(seed) if seed is not None else " ".join(text.split()).lower()
    wanted = mistake_count_for(rating)
    timed = _signal_mistakes(signals, label, seconds_per_word)[:wanted]
    for index, text_entry in enumerate(rank_by_hash(_pool(category, "mistakes"), key)):
        if len(timed) >= wanted:
            break
        timed.append((_spread_seconds(index, wanted, duration), text_entry))
    timed.sort(key=lambda item: item[0])

    tips = _merge_tips(_signal_tips(signals), rank_by_hash(_pool(category, "tips"), key), tip_count_for(rating))
    return AnalysisResult(
        rating=rating,
        mistakes=[Mistake(timestamp=format_timestamp(seconds), text=entry) for seconds, entry in timed],
        tips=tips,
        summary=(
            f"{rating_band(rating).capitalize()} interview performance for {label} ({rating:g}/10). "
            f"Analysis based on {signals.word_count} words spoken: {signals.technical_count} technical terms, "
            f"{signals.confidence_count} ownership verbs, {signals.filler_count} filler words and "
            f"{signals.metric_count} measurable results."
        ),
    )


def _score_file(category: str, signal: FileSignal, label: str, seed: int | None) -> AnalysisResult:
    identity = file_identity_hash(signal.filename, signal.size)
    rating = clamp_rating(baseline_rating(category) + ((identity % 8) - 4) * 0.25)
    key = str(seed) if seed is not None else str(identity)

    wanted = mistake_count_for(rating)
    chosen = rank_by_hash(_pool(category, "mistakes"), key)[:wanted]
    timed: list[tuple[float, str]] = []
    for index, entry in enumerate(chosen):
        minute = (identity // (index + 1)) % 3
        second = (identity // 7 + index * 13) % 60
        timed.append((minute * 60 + second, entry))
    timed.sort(key=lambda item: item[0])

    size_mb = max(0, int(signal.size)) / (1024 * 1024)
    return AnalysisResult(
        rating=rating,
        mistakes=[Mistake(timestamp=format_timestamp(seconds), text=entry) for seconds, entry in timed],
        tips=rank_by_hash(_pool(category, "tips"), key)[: tip_count_for(rating)],
        summary=(
            f"{rating_band(rating).capitalize()} interview performance for {label} ({rating:g}/10). "
            f"Feedback derived from the uploaded recording ({signal.filename}, {size_mb:.1f} MB)."
        ),
    )


def _score_baseline(category: str, label: str, seed: int | None) -> AnalysisResult:
    rating = clamp_rating(baseline_rating(category))
    key = str(seed) if seed is not None else category
    wanted = mistake_count_for(rating)
    chosen = rank_by_hash(_pool(category, "mistakes"), key)[:wanted]
    return AnalysisResult(
        rating=rating,
        mistakes=[
            Mistake(
                timestamp=format_timestamp(_spread_seconds(index, wanted, _NOMINAL_ANSWER_SECONDS)),
                text=entry,
            )
            for index, entry in enumerate(chosen)
        ],
        tips=rank_by_hash(_pool(category, "tips"), key)[: tip_count_for(rating)],
        summary=(
            f"{rating_band(rating).capitalize()} interview performance for {label} ({rating:g}/10). "
            "Baseline feedback; record or upload an answer for a personalized review."
        ),
    )


def score(
    category: Category,
    signal: ContentSignal,
    *,
    field: str | None = None,
    seed: int | None = None,
) -> AnalysisResult:
    label = (field or "").strip() or category
    if isinstance(signal, TextSignal):
        return _score_transcript(category, signal.text, label, seed)
    if isinstance(signal, FileSignal):
        return _score_file(category, signal, label, seed)
    return _score_baseline(category, label, seed)

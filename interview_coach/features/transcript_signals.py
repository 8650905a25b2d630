from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from interview_coach.core.catalog import get_catalog_value

_TOKEN_RE = re.compile(r"[a-z0-9+#']+")
_SENTENCE_END_RE = re.compile(r"[.!?]+")


@dataclass(frozen=True)
class TranscriptSignals:
    word_count: int
    technical_count: int
    confidence_count: int
    filler_count: int
    metric_count: int
    sentence_count: int
    avg_words_per_sentence: int
    first_filler_word: int | None
    first_long_sentence_word: int | None


def _vocabulary(name: str) -> frozenset[str]:
    raw = get_catalog_value(f"vocabulary.{name}", []) or []
    return frozenset(str(item).strip().lower() for item in raw if str(item).strip())


@lru_cache(maxsize=1)
def _filler_pattern() -> re.Pattern[str]:
    words = sorted(_vocabulary("filler"), key=len, reverse=True)
    alternation = "|".join(re.escape(word) for word in words) or r"(?!x)x"
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


@lru_cache(maxsize=1)
def _metric_pattern() -> re.Pattern[str]:
    units = sorted(_vocabulary("metric_units"), key=len, reverse=True)
    alternation = "|".join(re.escape(unit) for unit in units) or r"(?!x)x"
    return re.compile(
        rf"(?<![\w.])[$€£]?\d+(?:[.,]\d+)?\s*(?:{alternation})(?![a-z])",
        re.IGNORECASE,
    )


def _word_index_at(text: str, offset: int) -> int:
    return len(text[:offset].split())


def extract_signals(text: str) -> TranscriptSignals:
    transcript = text or ""
    word_count = len(transcript.split())
    tokens = _TOKEN_RE.findall(transcript.lower())

    technical = _vocabulary("technical")
    confidence = _vocabulary("confidence")
    technical_count = sum(1 for token in tokens if token in technical)
    confidence_count = sum(1 for token in tokens if token in confidence)

    filler_matches = list(_filler_pattern().finditer(transcript))
    metric_count = len(_metric_pattern().findall(transcript))

    long_sentence_words = int(get_catalog_value("limits.long_sentence_words", 30))
    sentences = [part for part in _SENTENCE_END_RE.split(transcript) if part.strip()]
    sentence_count = max(1, len(sentences))
    avg_words = max(1, round(word_count / sentence_count)) if word_count else 0

    first_long: int | None = None
    position = 0
    for sentence in sentences:
        size = len(sentence.split())
        if size > long_sentence_words:
            first_long = position
            break
        position += size

    return TranscriptSignals(
        word_count=word_count,
        technical_count=technical_count,
        confidence_count=confidence_count,
        filler_count=len(filler_matches),
        metric_count=metric_count,
        sentence_count=sentence_count,
        avg_words_per_sentence=avg_words,
        first_filler_word=_word_index_at(transcript, filler_matches[0].start()) if filler_matches else None,
        first_long_sentence_word=first_long,
    )

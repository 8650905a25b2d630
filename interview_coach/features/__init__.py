from .field_classifier import CATEGORY_ORDER, Category, InvalidInputError, classify, keywords_for, normalize_field
from .question_bank import QuestionSet, build_question_set, clamp_question_count
from .scorer import ContentSignal, FileSignal, TextSignal, no_video_result, score
from .transcript_signals import TranscriptSignals, extract_signals

__all__ = [
    "CATEGORY_ORDER",
    "Category",
    "InvalidInputError",
    "classify",
    "keywords_for",
    "normalize_field",
    "QuestionSet",
    "build_question_set",
    "clamp_question_count",
    "ContentSignal",
    "FileSignal",
    "TextSignal",
    "no_video_result",
    "score",
    "TranscriptSignals",
    "extract_signals",
]

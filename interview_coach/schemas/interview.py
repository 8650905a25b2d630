from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from interview_coach.features.field_classifier import Category
from interview_coach.schemas.analysis import AnalysisResult

QuestionSource = Literal["ai", "templates"]
AnalysisSource = Literal["ai-analysis", "transcript-heuristics", "file-identity", "baseline", "no-video-detected"]


class QuestionsRequest(BaseModel):
    field: str = Field(default="", max_length=200)
    count: float | int | str | None = 7
    seed: int | None = None


class QuestionsResponse(BaseModel):
    questions: list[str]
    category: Category
    field: str
    ai: bool
    source: QuestionSource
    requested: int
    generated: int


class TranscriptSegment(BaseModel):
    start: float = 0.0
    end: float = 0.0
    text: str = ""


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field: str = Field(default="general", max_length=200)
    has_video: bool = Field(default=False, alias="hasVideo")
    transcript: str | None = Field(default=None, max_length=50000)
    segments: list[TranscriptSegment] | None = None
    filename: str | None = Field(default=None, max_length=255)
    size: int | None = Field(default=None, ge=0)
    seed: int | None = None


class AnalyzeResponse(BaseModel):
    analysis: AnalysisResult
    category: Category
    field: str
    source: AnalysisSource
    processed: bool
    note: str | None = None

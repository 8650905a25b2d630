from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TIMESTAMP_RE = re.compile(r"^\d{1,2}:[0-5]\d$")


class Mistake(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: str = Field(default="0:00", max_length=8)
    text: str = Field(min_length=1, max_length=500)

    @field_validator("timestamp")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        value = (value or "").strip() or "0:00"
        if not _TIMESTAMP_RE.match(value):
            raise ValueError("timestamp must look like M:SS or MM:SS")
        return value


class AnalysisResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    rating: float = Field(ge=0.0, le=10.0)
    mistakes: list[Mistake] = Field(default_factory=list, max_length=10)
    tips: list[str] = Field(default_factory=list, max_length=10)
    summary: str = ""

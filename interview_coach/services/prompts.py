from __future__ import annotations

from typing import Any

QUESTIONS_SYSTEM_PROMPT = (
    "You are an experienced hiring manager who writes realistic interview questions. "
    "Reply with a numbered list only."
)

ANALYSIS_SYSTEM_PROMPT = (
    "You are an interview coach reviewing a candidate's spoken answer. "
    "Reply with a single JSON object and nothing else."
)


def build_questions_prompt(field: str, count: int) -> str:
    return f"""I need you to generate exactly {count} diverse, challenging interview questions for {field} positions.

Requirements:
- Each question must be unique and specific to {field}
- Include a mix of: technical skills, problem-solving, behavioral, situational, and experience-based questions
- Questions should be realistic and commonly asked in actual {field} interviews
- Vary question types: "Tell me about...", "How would you...", "Describe a time...", "What is your approach to..."
- Each question should be 10-30 words long
- Focus on real-world scenarios and practical skills

Format the response as a numbered list with exactly {count} questions:

1. [First question here]
2. [Second question here]
...
{count}. [Final question here]"""


def _format_segments(segments: list[dict[str, Any]] | None) -> str:
    if not segments:
        return "No segments available"
    lines = []
    for segment in segments:
        start = segment.get("start", 0)
        end = segment.get("end", 0)
        text = str(segment.get("text", "")).strip()
        lines.append(f'{start}s-{end}s: "{text}"')
    return "\n".join(lines)


def build_analysis_prompt(field: str, transcript: str, segments: list[dict[str, Any]] | None = None) -> str:
    return f"""Analyze this interview response for a {field or 'general'} position.

TRANSCRIPT:
"{transcript}"

SEGMENTS WITH TIMESTAMPS:
{_format_segments(segments)}

Focus on:
- Speech clarity and pace
- Filler words (um, uh, like)
- Answer structure and completeness
- Confidence and professionalism
- Field-specific content quality
- Use of examples and specifics

Return your analysis in this exact JSON format:
{{
  "rating": <number from 1-10>,
  "mistakes": [
    {{"timestamp": "M:SS", "text": "specific issue description"}}
  ],
  "tips": ["specific improvement suggestion"],
  "summary": "brief summary of overall performance"
}}"""

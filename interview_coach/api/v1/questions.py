from fastapi import APIRouter, Request

from interview_coach.core.rate_limit import rate_limit
from interview_coach.schemas.interview import QuestionsRequest, QuestionsResponse
from interview_coach.services.question_service import generate_questions

router = APIRouter()


@router.post("/questions", response_model=QuestionsResponse)
@rate_limit()
async def questions(request: Request, payload: QuestionsRequest):
    _ = request
    return await generate_questions(payload)
